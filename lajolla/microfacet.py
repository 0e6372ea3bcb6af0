"""Microfacet distribution, masking and Fresnel terms."""

from __future__ import annotations

import math

import numpy as np

from .frame import frame_from_normal, to_world
from .mathutil import PI, normalize, vec3


def schlick_fresnel(f0, cos_theta):
    """Schlick's approximation of the Fresnel reflectance; f0 may be a scalar or a spectrum."""
    return f0 + (1.0 - f0) * max(1.0 - cos_theta, 0.0) ** 5


def fresnel_dielectric_full(n_dot_i, n_dot_t, eta):
    """Unpolarised Fresnel reflectance of a dielectric interface.

    n_dot_i and n_dot_t are the absolute cosines of the incident and transmitted
    angles, eta is eta_transmission / eta_incident.
    """
    if not (n_dot_i >= 0 and n_dot_t >= 0 and eta > 0):
        raise ValueError("cosines must be non-negative and eta positive")
    rs = (n_dot_i - eta * n_dot_t) / (n_dot_i + eta * n_dot_t)
    rp = (eta * n_dot_i - n_dot_t) / (eta * n_dot_i + n_dot_t)
    return (rs * rs + rp * rp) / 2


def fresnel_dielectric(n_dot_i, eta):
    """Fresnel reflectance from the incident cosine alone (which may be negative)."""
    if not eta > 0:
        raise ValueError("eta must be positive")
    n_dot_t_sq = 1 - (1 - n_dot_i * n_dot_i) / (eta * eta)
    if n_dot_t_sq < 0:
        # total internal reflection
        return 1.0
    return fresnel_dielectric_full(abs(n_dot_i), math.sqrt(n_dot_t_sq), eta)


def gtr2(n_dot_h, roughness):
    """Generalized Trowbridge-Reitz (gamma = 2) normal distribution."""
    alpha = roughness * roughness
    a2 = alpha * alpha
    t = 1 + (a2 - 1) * n_dot_h * n_dot_h
    return a2 / (PI * t * t)


def ggx(n_dot_h, roughness):
    """The GGX distribution, identical to GTR2."""
    return gtr2(n_dot_h, roughness)


def smith_masking_gtr2(v_local, roughness):
    """Smith masking term for GTR2 given a direction in the local shading frame."""
    alpha = roughness * roughness
    a2 = alpha * alpha
    vx, vy, vz = (float(c) * float(c) for c in v_local)
    numerator = vx * a2 + vy * a2
    if vz == 0.0:
        # Lambda grows without bound at grazing angles.
        return 0.0
    lam = (-1 + math.sqrt(1 + numerator / vz)) / 2
    return 1 / (1 + lam)


def sample_visible_normals(local_dir_in, alpha, rnd_param):
    """Sample a micro normal from the GGX distribution of visible normals."""
    local_dir_in = np.asarray(local_dir_in, dtype=np.float64)
    if local_dir_in[2] < 0:
        return -sample_visible_normals(-local_dir_in, alpha, rnd_param)

    hemi_dir_in = normalize(
        vec3(alpha * local_dir_in[0], alpha * local_dir_in[1], local_dir_in[2])
    )

    r = math.sqrt(rnd_param[0])
    phi = 2 * PI * rnd_param[1]
    t1 = r * math.cos(phi)
    t2 = r * math.sin(phi)
    s = (1 + hemi_dir_in[2]) / 2
    t2 = (1 - s) * math.sqrt(max(0.0, 1 - t1 * t1)) + s * t2
    disk_n = vec3(t1, t2, math.sqrt(max(0.0, 1 - t1 * t1 - t2 * t2)))

    hemi_n = to_world(frame_from_normal(hemi_dir_in), disk_n)
    return normalize(vec3(alpha * hemi_n[0], alpha * hemi_n[1], max(0.0, hemi_n[2])))