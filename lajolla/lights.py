"""Light sources: diffuse area lights and environment maps.

An area light's shape must provide surface_area(),
sample_point_on_shape(ref_point, uv, w) and pdf_point_on_shape(point, ref_point).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .mathutil import INV_PI, INV_TWO_PI, PI, RenderError, dot, modulo, vec3
from .spectrum import luminance, make_zero_spectrum
from .table_dist import TableDist2D, make_table_dist_2d
from .transform import xform_vector


@dataclass
class PointAndNormal:
    """A point together with a surface normal (or a direction for envmaps)."""

    position: np.ndarray
    normal: np.ndarray


@dataclass
class DiffuseAreaLight:
    """A shape that emits constant radiance from its front side."""

    shape_id: int
    intensity: np.ndarray

    def power(self, scene):
        """Total emitted power, used to pick lights proportionally."""
        shape = scene.shapes[self.shape_id]
        return luminance(self.intensity) * shape.surface_area() * PI

    def sample_point_on_light(self, ref_point, rnd_param_uv, rnd_param_w, scene):
        """Sample a point on the emitting shape."""
        shape = scene.shapes[self.shape_id]
        return shape.sample_point_on_shape(ref_point, rnd_param_uv, rnd_param_w)

    def pdf_point_on_light(self, point_on_light, ref_point, scene):
        """Density of sample_point_on_light producing point_on_light."""
        shape = scene.shapes[self.shape_id]
        return shape.pdf_point_on_shape(point_on_light, ref_point)

    def emission(self, view_dir, view_footprint, point_on_light, scene):
        """Emitted radiance towards view_dir; zero behind the surface."""
        if dot(point_on_light.normal, view_dir) <= 0:
            return make_zero_spectrum()
        return np.asarray(self.intensity, dtype=np.float64)

    def init_sampling_dist(self, scene):
        """Area lights keep no sampling tables of their own."""


def _is_image(values):
    return isinstance(values, np.ndarray) and values.ndim == 3


def _bilinear(image, u, v):
    h, w = image.shape[:2]
    x = u * w - 0.5
    y = v * h - 0.5
    x0, y0 = math.floor(x), math.floor(y)
    dx, dy = x - x0, y - y0
    xs = (modulo(x0, w), modulo(x0 + 1, w))
    ys = (modulo(y0, h), modulo(y0 + 1, h))
    return (
        image[ys[0], xs[0]] * ((1 - dx) * (1 - dy))
        + image[ys[0], xs[1]] * (dx * (1 - dy))
        + image[ys[1], xs[0]] * ((1 - dx) * dy)
        + image[ys[1], xs[1]] * (dx * dy)
    )


def _eval_values(values, uv, footprint):
    if _is_image(values):
        return np.asarray(_bilinear(values, uv[0], uv[1]), dtype=np.float64)
    value = values(uv, footprint) if callable(values) else values
    if np.ndim(value) == 0:
        return np.full(3, float(value))
    return np.asarray(value, dtype=np.float64)


def _direction_to_uv(local_dir):
    u = math.atan2(local_dir[0], -local_dir[2]) * INV_TWO_PI
    v = math.acos(min(max(float(local_dir[1]), -1.0), 1.0)) * INV_PI
    # atan2 gives [-pi, pi]; map the negative half to [pi, 2pi].
    if u < 0:
        u += 1
    return np.array([u, v])


@dataclass
class Envmap:
    """Infinitely distant lighting looked up by direction.

    values is an RGB image of shape (height, width, 3), a constant spectrum,
    or a callable taking (uv, footprint). y is the up axis.
    """

    values: object
    to_world: np.ndarray = field(default_factory=lambda: np.eye(4))
    to_local: np.ndarray = field(default_factory=lambda: np.eye(4))
    scale: float = 1.0
    sampling_dist: Optional[TableDist2D] = None

    def _dist(self):
        if self.sampling_dist is None:
            raise RenderError("environment map sampling table is not initialised")
        return self.sampling_dist

    def power(self, scene):
        """Approximate emitted power over the scene's bounding sphere."""
        dist = self._dist()
        r = scene.bounds.radius
        return PI * r * r * dist.total_values / (dist.width * dist.height)

    def sample_point_on_light(self, ref_point, rnd_param_uv, rnd_param_w, scene):
        """Sample a direction; the normal points from the light towards the scene."""
        uv = self._dist().sample(rnd_param_uv)
        azimuth = uv[0] * (2 * PI)
        elevation = uv[1] * PI
        local_dir = vec3(
            math.sin(azimuth) * math.sin(elevation),
            math.cos(elevation),
            -math.cos(azimuth) * math.sin(elevation),
        )
        world_dir = xform_vector(self.to_world, local_dir)
        return PointAndNormal(vec3(0.0, 0.0, 0.0), -world_dir)

    def pdf_point_on_light(self, point_on_light, ref_point, scene):
        """Solid-angle density of sampling the direction stored in point_on_light."""
        world_dir = -np.asarray(point_on_light.normal, dtype=np.float64)
        local_dir = xform_vector(self.to_local, world_dir)
        uv = _direction_to_uv(local_dir)
        cos_elevation = float(local_dir[1])
        sin_elevation = math.sqrt(
            min(max(1 - cos_elevation * cos_elevation, 0.0), 1.0)
        )
        if sin_elevation <= 0:
            return 0.0
        return self._dist().pdf(uv) / (2 * PI * PI * sin_elevation)

    def emission(self, view_dir, view_footprint, point_on_light, scene):
        """Radiance arriving from the direction opposite to view_dir."""
        w = xform_vector(self.to_local, -np.asarray(view_dir, dtype=np.float64))
        uv = _direction_to_uv(w)
        wx, wy, wz = float(w[0]), float(w[1]), float(w[2])
        denom = wx * wx + wz * wz
        if denom > 0:
            dudwx = -wz / denom
            dudwz = wx / denom
            du = math.sqrt(dudwx * dudwx + dudwz * dudwz)
        else:
            du = math.inf
        sin_sq = max(1 - wy * wy, 0.0)
        dvdwy = -1 / math.sqrt(sin_sq) if sin_sq > 0 else -math.inf
        footprint = min(du, dvdwy)
        return _eval_values(self.values, uv, footprint) * self.scale

    def init_sampling_dist(self, scene):
        """Build the importance-sampling table over the map.

        Images get one cell per pixel weighted by luminance and sin(elevation);
        other values get a single cell weighted by the luminance at the centre.
        """
        if _is_image(self.values):
            image = np.asarray(self.values, dtype=np.float64)
            h, w = image.shape[:2]
            lum = image[..., 0] * 0.212671 + image[..., 1] * 0.715160 + image[..., 2] * 0.072169
            sin_elevation = np.sin(PI * (np.arange(h) + 0.5) / h)
            f = lum * sin_elevation[:, None]
            self.sampling_dist = make_table_dist_2d(f.ravel(), w, h)
        else:
            centre = luminance(_eval_values(self.values, np.array([0.5, 0.5]), 0.0))
            self.sampling_dist = make_table_dist_2d([centre], 1, 1)