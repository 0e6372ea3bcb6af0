"""Unidirectional path tracing with next-event estimation and multiple importance sampling.

The scene's camera must provide ``width``, ``height`` and
``sample_primary(screen_pos)`` returning a :class:`~lajolla.volume.Ray`.
Materials follow the interface of :mod:`lajolla.materials` and lights that
of :mod:`lajolla.lights`. ``rng`` is any object with a ``random()`` method
returning uniform numbers in [0, 1), such as :class:`random.Random`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .frame import Frame, frame_from_normal
from .lights import PointAndNormal
from .mathutil import (
    INFINITY,
    INV_PI,
    INV_TWO_PI,
    RenderError,
    distance,
    distance_squared,
    dot,
    normalize,
    vec3,
)
from .shape import Sphere, TriangleMesh
from .spectrum import from_rgb, make_zero_spectrum
from .volume import Ray


@dataclass
class PathVertex:
    """A surface hit along a path, carrying what the BSDFs and lights need."""

    position: np.ndarray
    geometry_normal: np.ndarray
    shading_frame: Frame
    uv: np.ndarray = field(default_factory=lambda: np.zeros(2))
    shape_id: int = -1
    primitive_id: int = -1
    material_id: int = -1
    mean_curvature: float = 0.0
    uv_screen_size: float = 0.0


@dataclass
class _RayDifferential:
    """Footprint of a ray: radius at the origin and angular spread."""

    radius: float
    spread: float

    def propagate(self, t):
        self.radius += self.spread * t

    def reflect(self, mean_curvature, roughness):
        # Curvature widens the cone; rough lobes widen it further.
        return max(2 * mean_curvature * self.radius + self.spread, 0.2 * roughness)

    def refract(self, mean_curvature, eta, roughness):
        curved = (eta * 2 * mean_curvature * self.radius + self.spread) / eta
        return max(curved, 0.2 * roughness)


def _init_ray_differential(w, h):
    return _RayDifferential(0.0, 0.25 / max(w, h))


_EPS_DET = 1e-12


def _hit_sphere(sphere, org, direction, tnear, tfar):
    center = np.asarray(sphere.position, dtype=np.float64)
    oc = org - center
    a = dot(direction, direction)
    b = dot(oc, direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    disc = b * b - a * c
    if disc < 0 or a == 0:
        return None
    root = math.sqrt(disc)
    for t in ((-b - root) / a, (-b + root) / a):
        if tnear < t < tfar:
            return t, -1, 0.0, 0.0
    return None


def _hit_triangle(p0, p1, p2, org, direction, tnear, tfar):
    e1 = p1 - p0
    e2 = p2 - p0
    pvec = np.cross(direction, e2)
    det = dot(e1, pvec)
    if abs(det) < _EPS_DET:
        return None
    inv_det = 1.0 / det
    tvec = org - p0
    b1 = dot(tvec, pvec) * inv_det
    if b1 < 0 or b1 > 1:
        return None
    qvec = np.cross(tvec, e1)
    b2 = dot(direction, qvec) * inv_det
    if b2 < 0 or b1 + b2 > 1:
        return None
    t = dot(e2, qvec) * inv_det
    if tnear < t < tfar:
        return t, b1, b2
    return None


def _mesh_triangle(mesh, prim_id):
    i0, i1, i2 = (int(i) for i in mesh.indices[prim_id])
    pos = mesh.positions
    return (
        np.asarray(pos[i0], dtype=np.float64),
        np.asarray(pos[i1], dtype=np.float64),
        np.asarray(pos[i2], dtype=np.float64),
    )


def _hit_shape(shape, org, direction, tnear, tfar):
    """Closest hit of the ray with one shape as (t, primitive, b1, b2), or None."""
    if isinstance(shape, Sphere):
        return _hit_sphere(shape, org, direction, tnear, tfar)
    if isinstance(shape, TriangleMesh):
        best = None
        for prim_id in range(len(shape.indices)):
            p0, p1, p2 = _mesh_triangle(shape, prim_id)
            hit = _hit_triangle(p0, p1, p2, org, direction, tnear, tfar)
            if hit is not None:
                tfar = hit[0]
                best = (hit[0], prim_id, hit[1], hit[2])
        return best
    raise TypeError(f"unsupported shape type {type(shape).__name__}")


def _make_vertex(shape, shape_id, hit, org, direction):
    t, prim_id, b1, b2 = hit
    position = org + t * direction
    if isinstance(shape, Sphere):
        normal = normalize(position - np.asarray(shape.position, dtype=np.float64))
        theta = math.acos(min(max(float(normal[1]), -1.0), 1.0))
        phi = math.atan2(float(normal[2]), float(normal[0]))
        if phi < 0:
            phi += 2 * math.pi
        return PathVertex(
            position=position,
            geometry_normal=normal,
            shading_frame=frame_from_normal(normal),
            uv=np.array([phi * INV_TWO_PI, theta * INV_PI]),
            shape_id=shape_id,
            primitive_id=prim_id,
            material_id=shape.material_id,
            mean_curvature=1.0 / shape.radius,
        )
    p0, p1, p2 = _mesh_triangle(shape, prim_id)
    geometry_normal = normalize(np.cross(p1 - p0, p2 - p0))
    b0 = 1 - b1 - b2
    idx = [int(i) for i in shape.indices[prim_id]]
    if shape.normals:
        ns = [np.asarray(shape.normals[i], dtype=np.float64) for i in idx]
        shading_normal = normalize(b0 * ns[0] + b1 * ns[1] + b2 * ns[2])
    else:
        shading_normal = geometry_normal
    if shape.uvs:
        uvs = [np.asarray(shape.uvs[i], dtype=np.float64) for i in idx]
        uv = b0 * uvs[0] + b1 * uvs[1] + b2 * uvs[2]
    else:
        uv = np.array([b1, b2])
    return PathVertex(
        position=position,
        geometry_normal=geometry_normal,
        shading_frame=frame_from_normal(shading_normal),
        uv=uv,
        shape_id=shape_id,
        primitive_id=prim_id,
        material_id=shape.material_id,
    )


def _intersect(scene, ray, ray_diff=None):
    org = np.asarray(ray.org, dtype=np.float64)
    direction = np.asarray(ray.dir, dtype=np.float64)
    tfar = float(ray.tfar)
    best = None
    for shape_id, shape in enumerate(scene.shapes):
        hit = _hit_shape(shape, org, direction, ray.tnear, tfar)
        if hit is not None:
            tfar = hit[0]
            best = (shape_id, hit)
    if best is None:
        return None
    shape_id, hit = best
    if ray_diff is not None:
        ray_diff.propagate(hit[0])
    vertex = _make_vertex(scene.shapes[shape_id], shape_id, hit, org, direction)
    if ray_diff is not None:
        vertex.uv_screen_size = ray_diff.radius
    return vertex


def _occluded(scene, ray):
    org = np.asarray(ray.org, dtype=np.float64)
    direction = np.asarray(ray.dir, dtype=np.float64)
    return any(
        _hit_shape(shape, org, direction, ray.tnear, ray.tfar) is not None
        for shape in scene.shapes
    )


def _surface_emission(scene, vertex, view_dir):
    light = scene.lights[scene.shapes[vertex.shape_id].area_light_id]
    point = PointAndNormal(vertex.position, vertex.geometry_normal)
    return light.emission(view_dir, vertex.uv_screen_size, point, scene)


def _material(scene, vertex):
    if vertex.material_id < 0:
        raise RenderError(f"shape {vertex.shape_id} has no material")
    return scene.materials[vertex.material_id]


def path_tracing(scene, x, y, rng):
    """Estimate the radiance arriving through pixel (x, y) with one random path."""
    w, h = scene.camera.width, scene.camera.height
    screen_pos = np.array([(x + rng.random()) / w, (y + rng.random()) / h])
    ray = scene.camera.sample_primary(screen_pos)
    ray_diff = _init_ray_differential(w, h)

    vertex = _intersect(scene, ray, ray_diff)
    if vertex is None:
        if scene.has_envmap():
            return scene.get_envmap().emission(
                -np.asarray(ray.dir, dtype=np.float64),
                ray_diff.spread,
                PointAndNormal(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 0.0)),
                scene,
            )
        return make_zero_spectrum()

    radiance = make_zero_spectrum()
    throughput = from_rgb(vec3(1.0, 1.0, 1.0))
    eta_scale = 1.0

    if scene.shapes[vertex.shape_id].is_light():
        radiance = radiance + throughput * _surface_emission(
            scene, vertex, -np.asarray(ray.dir, dtype=np.float64)
        )

    max_depth = scene.options.max_depth
    num_vertices = 3
    while max_depth == -1 or num_vertices <= max_depth + 1:
        mat = _material(scene, vertex)
        dir_view = -np.asarray(ray.dir, dtype=np.float64)

        # Next event estimation: sample a point on a light.
        light_uv = np.array([rng.random(), rng.random()])
        light_w = rng.random()
        shape_w = rng.random()
        light_id = scene.sample_light(light_w)
        light = scene.lights[light_id]
        point_on_light = light.sample_point_on_light(
            vertex.position, light_uv, shape_w, scene
        )

        c1 = make_zero_spectrum()
        w1 = 0.0
        g = 0.0
        if hasattr(light, "shape_id"):
            light_pos = np.asarray(point_on_light.position, dtype=np.float64)
            dir_light = normalize(light_pos - vertex.position)
            eps = scene.shadow_epsilon()
            shadow_ray = Ray(
                vertex.position,
                dir_light,
                eps,
                (1 - eps) * distance(light_pos, vertex.position),
            )
            if not _occluded(scene, shadow_ray):
                g = max(-dot(dir_light, point_on_light.normal), 0.0) / distance_squared(
                    light_pos, vertex.position
                )
        else:
            dir_light = -np.asarray(point_on_light.normal, dtype=np.float64)
            shadow_ray = Ray(
                vertex.position, dir_light, scene.shadow_epsilon(), INFINITY
            )
            if not _occluded(scene, shadow_ray):
                g = 1.0

        p1 = scene.light_pmf(light_id) * light.pdf_point_on_light(
            point_on_light, vertex.position, scene
        )
        if g > 0 and p1 > 0:
            f = mat.eval(dir_view, dir_light, vertex)
            emitted = light.emission(-dir_light, 0.0, point_on_light, scene)
            c1 = g * f * emitted
            p2 = mat.pdf_sample_bsdf(dir_view, dir_light, vertex) * g
            w1 = (p1 * p1) / (p1 * p1 + p2 * p2)
            c1 = c1 / p1
        radiance = radiance + throughput * c1 * w1

        # BSDF sampling.
        bsdf_uv = np.array([rng.random(), rng.random()])
        bsdf_w = rng.random()
        bsdf_sample = mat.sample_bsdf(dir_view, vertex, bsdf_uv, bsdf_w)
        if bsdf_sample is None:
            break
        dir_bsdf = np.asarray(bsdf_sample.dir_out, dtype=np.float64)
        if bsdf_sample.eta == 0:
            ray_diff.spread = ray_diff.reflect(
                vertex.mean_curvature, bsdf_sample.roughness
            )
        else:
            ray_diff.spread = ray_diff.refract(
                vertex.mean_curvature, bsdf_sample.eta, bsdf_sample.roughness
            )
            eta_scale /= bsdf_sample.eta * bsdf_sample.eta

        bsdf_ray = Ray(vertex.position, dir_bsdf, scene.intersection_epsilon(), INFINITY)
        bsdf_vertex = _intersect(scene, bsdf_ray)

        if bsdf_vertex is not None:
            g = abs(dot(dir_bsdf, bsdf_vertex.geometry_normal)) / distance_squared(
                bsdf_vertex.position, vertex.position
            )
        else:
            g = 1.0

        f = mat.eval(dir_view, dir_bsdf, vertex)
        p2 = mat.pdf_sample_bsdf(dir_view, dir_bsdf, vertex)
        if p2 <= 0:
            break
        p2 *= g

        if bsdf_vertex is not None and scene.shapes[bsdf_vertex.shape_id].is_light():
            emitted = _surface_emission(scene, bsdf_vertex, -dir_bsdf)
            c2 = g * f * emitted
            hit_light_id = scene.shapes[bsdf_vertex.shape_id].area_light_id
            hit_light = scene.lights[hit_light_id]
            light_point = PointAndNormal(
                bsdf_vertex.position, bsdf_vertex.geometry_normal
            )
            p1 = scene.light_pmf(hit_light_id) * hit_light.pdf_point_on_light(
                light_point, vertex.position, scene
            )
            w2 = (p2 * p2) / (p1 * p1 + p2 * p2)
            radiance = radiance + throughput * (c2 / p2) * w2
        elif bsdf_vertex is None and scene.has_envmap():
            envmap = scene.get_envmap()
            light_point = PointAndNormal(vec3(0.0, 0.0, 0.0), -dir_bsdf)
            emitted = envmap.emission(-dir_bsdf, ray_diff.spread, light_point, scene)
            c2 = g * f * emitted
            p1 = scene.light_pmf(scene.envmap_light_id) * envmap.pdf_point_on_light(
                light_point, vertex.position, scene
            )
            w2 = (p2 * p2) / (p1 * p1 + p2 * p2)
            radiance = radiance + throughput * (c2 / p2) * w2

        if bsdf_vertex is None:
            break

        rr_prob = 1.0
        if num_vertices - 1 >= scene.options.rr_depth:
            rr_prob = min(float(np.max((1 / eta_scale) * throughput)), 0.95)
            if rng.random() > rr_prob:
                break

        ray = bsdf_ray
        vertex = bsdf_vertex
        throughput = throughput * (g * f) / (p2 * rr_prob)
        num_vertices += 1
    return radiance