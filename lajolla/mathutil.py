"""Scalar and small-vector helpers shared across the renderer."""

from __future__ import annotations

import math

import numpy as np

PI = 3.14159265358979323846
INV_PI = 1.0 / PI
TWO_PI = 2.0 * PI
INV_TWO_PI = 1.0 / TWO_PI
FOUR_PI = 4.0 * PI
INV_FOUR_PI = 1.0 / FOUR_PI
PI_OVER_TWO = 0.5 * PI
PI_OVER_FOUR = 0.25 * PI

INFINITY = math.inf

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


class RenderError(RuntimeError):
    """Raised when the renderer meets input it cannot handle."""


def modulo(a, b):
    """Remainder of a / b shifted into a non-negative range when it is negative."""
    if isinstance(a, int) and isinstance(b, int):
        quotient = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            quotient = -quotient
        r = a - b * quotient
        return r + b if r < 0 else r
    r = math.fmod(a, b)
    return r + b if r < 0.0 else r


def radians(deg):
    """Convert degrees to radians."""
    return (PI / 180.0) * deg


def degrees(rad):
    """Convert radians to degrees."""
    return (180.0 / PI) * rad


def to_lowercase(s):
    """Lower-case the ASCII letters of a string."""
    return s.translate(_ASCII_LOWER)


def vec3(x, y, z):
    """Build a 3D vector of doubles."""
    return np.array([x, y, z], dtype=np.float64)


def dot(a, b):
    """Dot product of two vectors."""
    return float(np.dot(a, b))


def length(v):
    """Euclidean length of a vector."""
    return math.sqrt(dot(v, v))


def normalize(v):
    """Return v scaled to unit length."""
    v = np.asarray(v, dtype=np.float64)
    return v / length(v)


def distance_squared(a, b):
    """Squared Euclidean distance between two points."""
    d = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return dot(d, d)


def distance(a, b):
    """Euclidean distance between two points."""
    return math.sqrt(distance_squared(a, b))