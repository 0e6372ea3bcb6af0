"""Orthonormal coordinate frames."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .mathutil import vec3


def coordinate_system(n):
    """Return two vectors that together with unit vector n form an orthonormal basis."""
    if n[2] < -1 + 1e-6:
        return vec3(0.0, -1.0, 0.0), vec3(-1.0, 0.0, 0.0)
    a = 1.0 / (1.0 + n[2])
    b = -n[0] * n[1] * a
    return (
        vec3(1 - n[0] * n[0] * a, b, -n[0]),
        vec3(b, 1 - n[1] * n[1] * a, -n[1]),
    )


@dataclass(frozen=True, eq=False)
class Frame:
    """A basis of three orthogonal unit vectors x, y and n."""

    x: np.ndarray
    y: np.ndarray
    n: np.ndarray

    def __getitem__(self, i):
        return (self.x, self.y, self.n)[i]

    def __iter__(self):
        return iter((self.x, self.y, self.n))

    def __neg__(self):
        return Frame(-self.x, -self.y, -self.n)

    def __repr__(self):
        return f"Frame({self.x}, {self.y}, {self.n})"


def frame_from_normal(n):
    """Build a frame whose n axis is the given unit vector."""
    n = np.asarray(n, dtype=np.float64)
    x, y = coordinate_system(n)
    return Frame(x, y, n)


def to_local(frame, v):
    """Project v onto the frame's axes."""
    return vec3(
        float(np.dot(v, frame.x)), float(np.dot(v, frame.y)), float(np.dot(v, frame.n))
    )


def to_world(frame, v):
    """Convert local frame coordinates back to the reference space."""
    return frame.x * v[0] + frame.y * v[1] + frame.n * v[2]