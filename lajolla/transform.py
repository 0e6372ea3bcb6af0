"""4x4 homogeneous transformations and their application to vectors."""

from __future__ import annotations

import math

import numpy as np

from .mathutil import length, normalize, radians, vec3


def translate(delta):
    """Translation by delta."""
    m = np.eye(4)
    m[:3, 3] = delta
    return m


def scale(s):
    """Axis-aligned scaling by s."""
    return np.diag([s[0], s[1], s[2], 1.0]).astype(np.float64)


def rotate(angle, axis):
    """Rotation by angle degrees about axis."""
    a = normalize(axis)
    s = math.sin(radians(angle))
    c = math.cos(radians(angle))
    m = np.eye(4)
    m[0, 0] = a[0] * a[0] + (1 - a[0] * a[0]) * c
    m[0, 1] = a[0] * a[1] * (1 - c) - a[2] * s
    m[0, 2] = a[0] * a[2] * (1 - c) + a[1] * s
    m[1, 0] = a[0] * a[1] * (1 - c) + a[2] * s
    m[1, 1] = a[1] * a[1] + (1 - a[1] * a[1]) * c
    m[1, 2] = a[1] * a[2] * (1 - c) - a[0] * s
    m[2, 0] = a[0] * a[2] * (1 - c) - a[1] * s
    m[2, 1] = a[1] * a[2] * (1 - c) + a[0] * s
    m[2, 2] = a[2] * a[2] + (1 - a[2] * a[2]) * c
    return m


def look_at(pos, look, up):
    """Camera-to-world transform for a camera at pos looking towards look."""
    pos = np.asarray(pos, dtype=np.float64)
    direction = normalize(np.asarray(look, dtype=np.float64) - pos)
    side = np.cross(normalize(up), direction)
    if length(side) == 0:
        raise ValueError("up vector is parallel to the viewing direction")
    left = normalize(side)
    new_up = np.cross(direction, left)
    m = np.eye(4)
    m[:3, 0] = left
    m[:3, 1] = new_up
    m[:3, 2] = direction
    m[:3, 3] = pos
    return m


def perspective(fov):
    """Perspective projection with a field of view of fov degrees."""
    cot = 1.0 / math.tan(radians(fov / 2.0))
    return np.array(
        [
            [cot, 0.0, 0.0, 0.0],
            [0.0, cot, 0.0, 0.0],
            [0.0, 0.0, 1.0, -1.0],
            [0.0, 0.0, 1.0, 0.0],
        ]
    )


def xform_point(xform, pt):
    """Transform a point, including the homogeneous divide."""
    t = xform @ np.append(np.asarray(pt, dtype=np.float64), 1.0)
    inv_w = 1.0 / t[3]
    return vec3(t[0] * inv_w, t[1] * inv_w, t[2] * inv_w)


def xform_vector(xform, vec):
    """Transform a direction, ignoring translation."""
    return xform[:3, :3] @ np.asarray(vec, dtype=np.float64)


def xform_normal(inv_xform, n):
    """Transform a normal using the inverse of the transform."""
    return inv_xform[:3, :3].T @ np.asarray(n, dtype=np.float64)