"""Surface scattering models: Lambertian, rough plastic and rough dielectric."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .frame import Frame, to_local, to_world
from .mathutil import PI, dot, normalize, vec3
from .microfacet import (
    fresnel_dielectric,
    gtr2,
    sample_visible_normals,
    smith_masking_gtr2,
)
from .spectrum import luminance, make_zero_spectrum


class TransportDirection(enum.Enum):
    """Which way quantities flow along a path: radiance towards the light or importance towards the view."""

    TO_LIGHT = "to_light"
    TO_VIEW = "to_view"


@dataclass
class SurfacePoint:
    """The local surface description a BSDF needs at a hit point."""

    geometry_normal: np.ndarray
    shading_frame: Frame
    uv: np.ndarray = field(default_factory=lambda: np.zeros(2))
    uv_screen_size: float = 0.0


@dataclass
class BSDFSampleRecord:
    """A sampled outgoing direction; eta is 0 for reflection, roughness drives ray spread."""

    dir_out: np.ndarray
    eta: float
    roughness: float


def sample_cos_hemisphere(rnd_param):
    """Map two uniform numbers to a cosine-distributed direction around +z."""
    u1, u2 = float(rnd_param[0]), float(rnd_param[1])
    phi = 2 * PI * u1
    r = math.sqrt(max(0.0, 1 - u2))
    return vec3(math.cos(phi) * r, math.sin(phi) * r, math.sqrt(max(0.0, u2)))


def _eval_texture(texture, vertex):
    """A texture is a constant (scalar or RGB) or a callable of (uv, footprint)."""
    value = texture(vertex.uv, vertex.uv_screen_size) if callable(texture) else texture
    if np.ndim(value) == 0:
        return float(value)
    return np.asarray(value, dtype=np.float64)


def _eval_spectrum(texture, vertex):
    value = _eval_texture(texture, vertex)
    if np.ndim(value) == 0:
        return np.full(3, value)
    return value


def _eval_roughness(texture, vertex):
    return min(max(float(_eval_texture(texture, vertex)), 0.01), 1.0)


def _upper_frame(vertex, dir_in):
    frame = vertex.shading_frame
    if dot(frame.n, dir_in) < 0:
        frame = -frame
    return frame


def _two_sided_frame(vertex, dir_in):
    frame = vertex.shading_frame
    if dot(frame.n, dir_in) * dot(vertex.geometry_normal, dir_in) < 0:
        frame = -frame
    return frame


def _below(vertex, direction):
    return dot(vertex.geometry_normal, direction) < 0


def _reflect(dir_in, half_vector):
    return normalize(-dir_in + 2 * dot(dir_in, half_vector) * half_vector)


@dataclass
class Lambertian:
    """An ideal diffuse reflector."""

    reflectance: object

    def eval(self, dir_in, dir_out, vertex, direction=TransportDirection.TO_LIGHT):
        """BSDF times the outgoing cosine."""
        if _below(vertex, dir_in) or _below(vertex, dir_out):
            return make_zero_spectrum()
        frame = _upper_frame(vertex, dir_in)
        return (
            max(dot(frame.n, dir_out), 0.0)
            * _eval_spectrum(self.reflectance, vertex)
            / PI
        )

    def pdf_sample_bsdf(self, dir_in, dir_out, vertex):
        """Solid-angle density of sample_bsdf producing dir_out."""
        if _below(vertex, dir_in) or _below(vertex, dir_out):
            return 0.0
        frame = _upper_frame(vertex, dir_in)
        return max(dot(frame.n, dir_out), 0.0) / PI

    def sample_bsdf(self, dir_in, vertex, rnd_param_uv, rnd_param_w):
        """Cosine-weighted hemisphere sample, or None when dir_in is below the surface."""
        if _below(vertex, dir_in):
            return None
        frame = _upper_frame(vertex, dir_in)
        return BSDFSampleRecord(
            to_world(frame, sample_cos_hemisphere(rnd_param_uv)), 0.0, 1.0
        )


@dataclass
class RoughPlastic:
    """A diffuse base under a rough dielectric coating."""

    diffuse_reflectance: object
    specular_reflectance: object
    roughness: object
    eta: float

    def eval(self, dir_in, dir_out, vertex, direction=TransportDirection.TO_LIGHT):
        """BSDF times the outgoing cosine."""
        if _below(vertex, dir_in) or _below(vertex, dir_out):
            return make_zero_spectrum()
        frame = _upper_frame(vertex, dir_in)
        half_vector = normalize(np.asarray(dir_in) + np.asarray(dir_out))
        n_dot_h = dot(frame.n, half_vector)
        n_dot_in = dot(frame.n, dir_in)
        n_dot_out = dot(frame.n, dir_out)
        if n_dot_out <= 0 or n_dot_h <= 0:
            return make_zero_spectrum()

        kd = _eval_spectrum(self.diffuse_reflectance, vertex)
        ks = _eval_spectrum(self.specular_reflectance, vertex)
        roughness = _eval_roughness(self.roughness, vertex)

        f_o = fresnel_dielectric(dot(half_vector, dir_out), self.eta)
        d = gtr2(n_dot_h, roughness)
        g = smith_masking_gtr2(to_local(frame, dir_in), roughness) * smith_masking_gtr2(
            to_local(frame, dir_out), roughness
        )
        spec_contrib = ks * (g * f_o * d) / (4 * n_dot_in * n_dot_out)

        f_i = fresnel_dielectric(dot(half_vector, dir_in), self.eta)
        diffuse_contrib = kd * (1.0 - f_o) * (1.0 - f_i) / PI
        return (spec_contrib + diffuse_contrib) * n_dot_out

    def pdf_sample_bsdf(self, dir_in, dir_out, vertex):
        """Mixture density of the specular and diffuse sampling lobes."""
        if _below(vertex, dir_in) or _below(vertex, dir_out):
            return 0.0
        frame = _upper_frame(vertex, dir_in)
        half_vector = normalize(np.asarray(dir_in) + np.asarray(dir_out))
        n_dot_in = dot(frame.n, dir_in)
        n_dot_out = dot(frame.n, dir_out)
        n_dot_h = dot(frame.n, half_vector)
        if n_dot_out <= 0 or n_dot_h <= 0:
            return 0.0

        l_s = luminance(_eval_spectrum(self.specular_reflectance, vertex))
        l_r = luminance(_eval_spectrum(self.diffuse_reflectance, vertex))
        if l_s + l_r <= 0:
            return 0.0
        roughness = _eval_roughness(self.roughness, vertex)
        spec_prob = l_s / (l_s + l_r)
        diff_prob = 1 - spec_prob
        g = smith_masking_gtr2(to_local(frame, dir_in), roughness)
        d = gtr2(n_dot_h, roughness)
        spec_prob *= (g * d) / (4 * n_dot_in)
        diff_prob *= n_dot_out / PI
        return spec_prob + diff_prob

    def sample_bsdf(self, dir_in, vertex, rnd_param_uv, rnd_param_w):
        """Choose a lobe by reflectance and sample it; None if nothing can be sampled."""
        if _below(vertex, dir_in):
            return None
        frame = _upper_frame(vertex, dir_in)
        l_s = luminance(_eval_spectrum(self.specular_reflectance, vertex))
        l_r = luminance(_eval_spectrum(self.diffuse_reflectance, vertex))
        if l_s + l_r <= 0:
            return None
        spec_prob = l_s / (l_s + l_r)
        if rnd_param_w < spec_prob:
            roughness = _eval_roughness(self.roughness, vertex)
            alpha = roughness * roughness
            local_micro_normal = sample_visible_normals(
                to_local(frame, dir_in), alpha, rnd_param_uv
            )
            half_vector = to_world(frame, local_micro_normal)
            return BSDFSampleRecord(
                _reflect(np.asarray(dir_in, dtype=np.float64), half_vector),
                0.0,
                roughness,
            )
        return BSDFSampleRecord(
            to_world(frame, sample_cos_hemisphere(rnd_param_uv)), 0.0, 1.0
        )


@dataclass
class RoughDielectric:
    """A rough glass-like interface that both reflects and refracts."""

    specular_reflectance: object
    specular_transmittance: object
    roughness: object
    eta: float

    def _relative_eta(self, vertex, dir_in):
        return self.eta if dot(vertex.geometry_normal, dir_in) > 0 else 1 / self.eta

    def _half_vector(self, dir_in, dir_out, reflect, eta, frame):
        dir_in = np.asarray(dir_in, dtype=np.float64)
        dir_out = np.asarray(dir_out, dtype=np.float64)
        if reflect:
            half_vector = normalize(dir_in + dir_out)
        else:
            half_vector = normalize(dir_in + dir_out * eta)
        if dot(half_vector, frame.n) < 0:
            half_vector = -half_vector
        return half_vector

    def eval(self, dir_in, dir_out, vertex, direction=TransportDirection.TO_LIGHT):
        """BSDF times the outgoing cosine, for reflection or transmission."""
        ng = vertex.geometry_normal
        reflect = dot(ng, dir_in) * dot(ng, dir_out) > 0
        frame = _two_sided_frame(vertex, dir_in)
        eta = self._relative_eta(vertex, dir_in)

        ks = _eval_spectrum(self.specular_reflectance, vertex)
        kt = _eval_spectrum(self.specular_transmittance, vertex)
        roughness = _eval_roughness(self.roughness, vertex)
        half_vector = self._half_vector(dir_in, dir_out, reflect, eta, frame)

        h_dot_in = dot(half_vector, dir_in)
        f = fresnel_dielectric(h_dot_in, eta)
        d = gtr2(dot(frame.n, half_vector), roughness)
        g = smith_masking_gtr2(to_local(frame, dir_in), roughness) * smith_masking_gtr2(
            to_local(frame, dir_out), roughness
        )
        if reflect:
            return ks * (f * d * g) / (4 * abs(dot(frame.n, dir_in)))
        eta_factor = (
            1 / (eta * eta) if direction is TransportDirection.TO_LIGHT else 1.0
        )
        h_dot_out = dot(half_vector, dir_out)
        sqrt_denom = h_dot_in + eta * h_dot_out
        return kt * (
            eta_factor * (1 - f) * d * g * eta * eta * abs(h_dot_out * h_dot_in)
        ) / (abs(dot(frame.n, dir_in)) * sqrt_denom * sqrt_denom)

    def pdf_sample_bsdf(self, dir_in, dir_out, vertex):
        """Density of sample_bsdf producing dir_out."""
        ng = vertex.geometry_normal
        reflect = dot(ng, dir_in) * dot(ng, dir_out) > 0
        frame = _two_sided_frame(vertex, dir_in)
        eta = self._relative_eta(vertex, dir_in)
        half_vector = self._half_vector(dir_in, dir_out, reflect, eta, frame)
        roughness = _eval_roughness(self.roughness, vertex)

        h_dot_in = dot(half_vector, dir_in)
        f = fresnel_dielectric(h_dot_in, eta)
        d = gtr2(dot(half_vector, frame.n), roughness)
        g_in = smith_masking_gtr2(to_local(frame, dir_in), roughness)
        if reflect:
            return (f * d * g_in) / (4 * abs(dot(frame.n, dir_in)))
        h_dot_out = dot(half_vector, dir_out)
        sqrt_denom = h_dot_in + eta * h_dot_out
        dh_dout = eta * eta * h_dot_out / (sqrt_denom * sqrt_denom)
        return (1 - f) * d * g_in * abs(dh_dout * h_dot_in / dot(frame.n, dir_in))

    def sample_bsdf(self, dir_in, vertex, rnd_param_uv, rnd_param_w):
        """Sample a visible micro normal, then reflect or refract by the Fresnel term."""
        dir_in = np.asarray(dir_in, dtype=np.float64)
        eta = self._relative_eta(vertex, dir_in)
        frame = _two_sided_frame(vertex, dir_in)
        roughness = _eval_roughness(self.roughness, vertex)
        alpha = roughness * roughness
        local_micro_normal = sample_visible_normals(
            to_local(frame, dir_in), alpha, rnd_param_uv
        )
        half_vector = to_world(frame, local_micro_normal)
        if dot(half_vector, frame.n) < 0:
            half_vector = -half_vector

        h_dot_in = dot(half_vector, dir_in)
        f = fresnel_dielectric(h_dot_in, eta)
        if rnd_param_w <= f:
            return BSDFSampleRecord(_reflect(dir_in, half_vector), 0.0, roughness)

        h_dot_out_sq = 1 - (1 - h_dot_in * h_dot_in) / (eta * eta)
        if h_dot_out_sq <= 0:
            return None
        if h_dot_in < 0:
            half_vector = -half_vector
        h_dot_out = math.sqrt(h_dot_out_sq)
        refracted = -dir_in / eta + (abs(h_dot_in) / eta - h_dot_out) * half_vector
        return BSDFSampleRecord(refracted, eta, roughness)


Material = Optional[object]