"""Constant and grid volumes for participating media."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from .mathutil import INFINITY, RenderError

_FLOAT32 = 1


def _as_value(x):
    if np.ndim(x) == 0:
        return float(x)
    return np.asarray(x, dtype=np.float64)


@dataclass
class Ray:
    """A ray with origin, direction and a valid parameter interval."""

    org: np.ndarray
    dir: np.ndarray
    tnear: float = 0.0
    tfar: float = INFINITY


@dataclass
class ConstantVolume:
    """A volume with the same value everywhere."""

    value: object

    def lookup(self, p):
        """Value at point p."""
        return _as_value(self.value)

    def max_value(self):
        """Upper bound of the volume's values."""
        return _as_value(self.value)

    def set_scale(self, scale):
        """Multiply the stored value by scale."""
        self.value = _as_value(self.value) * scale

    def intersect(self, ray):
        """A constant volume fills all of space."""
        return True


@dataclass
class GridVolume:
    """A trilinearly interpolated voxel grid inside an axis-aligned box.

    resolution is (x, y, z); data is laid out with x varying fastest.
    """

    resolution: tuple
    p_min: np.ndarray
    p_max: np.ndarray
    data: np.ndarray
    max_data: object
    scale: float = 1.0
    _zero: object = field(init=False, repr=False)

    def __post_init__(self):
        self.resolution = tuple(int(r) for r in self.resolution)
        self.p_min = np.asarray(self.p_min, dtype=np.float64)
        self.p_max = np.asarray(self.p_max, dtype=np.float64)
        self.max_data = _as_value(self.max_data)
        xres, yres, zres = self.resolution
        extra = np.shape(self.max_data)
        self.data = np.asarray(self.data, dtype=np.float64).reshape(
            (zres, yres, xres) + extra
        )
        self._zero = _as_value(np.zeros(extra))

    def lookup(self, p):
        """Trilinearly interpolated value at p, zero outside the grid's box."""
        pn = (np.asarray(p, dtype=np.float64) - self.p_min) / (self.p_max - self.p_min)
        if np.any(pn < 0) or np.any(pn > 1):
            return self._zero
        res = self.resolution
        pn = pn * (np.array(res, dtype=np.float64) - 1)
        lo = [min(max(int(c), 0), r - 1) for c, r in zip(pn, res)]
        hi = [min(max(i + 1, 0), r - 1) for i, r in zip(lo, res)]
        dx, dy, dz = (float(c - i) for c, i in zip(pn, lo))
        x0, y0, z0 = lo
        x1, y1, z1 = hi
        d = self.data
        value = (
            d[z0, y0, x0] * ((1 - dx) * (1 - dy) * (1 - dz))
            + d[z0, y0, x1] * (dx * (1 - dy) * (1 - dz))
            + d[z0, y1, x0] * ((1 - dx) * dy * (1 - dz))
            + d[z0, y1, x1] * (dx * dy * (1 - dz))
            + d[z1, y0, x0] * ((1 - dx) * (1 - dy) * dz)
            + d[z1, y0, x1] * (dx * (1 - dy) * dz)
            + d[z1, y1, x0] * ((1 - dx) * dy * dz)
            + d[z1, y1, x1] * (dx * dy * dz)
        )
        return _as_value(self.scale * value)

    def max_value(self):
        """Upper bound of the volume's values."""
        return _as_value(self.scale * self.max_data)

    def set_scale(self, scale):
        """Set the factor applied to every grid value."""
        self.scale = scale

    def intersect(self, ray):
        """Whether the ray segment [0, ray.tfar] passes through the grid's box."""
        org = np.asarray(ray.org, dtype=np.float64)
        direction = np.asarray(ray.dir, dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            t_near = ((self.p_min - org) / direction).tolist()
            t_far = ((self.p_max - org) / direction).tolist()
        t0, t1 = 0.0, float(ray.tfar)
        for tn, tf in zip(t_near, t_far):
            if tn > tf:
                tn, tf = tf, tn
            t0 = tn if tn > t0 else t0
            t1 = tf if tf < t1 else t1
            if t0 > t1:
                return False
        return True


def load_volume(filename, target_channel):
    """Read a binary VOL grid (version 3, float32) as a 1- or 3-channel GridVolume."""
    if target_channel not in (1, 3):
        raise ValueError("target_channel must be 1 or 3")
    path = Path(filename)
    raw = path.read_bytes()

    def fail(reason):
        return RenderError(f"{reason}. Filename:{path}")

    if raw[:3] != b"VOL":
        raise fail("Error loading volume from a file (incorrect header)")
    if len(raw) < 4 or raw[3] != 3:
        raise fail("Error loading volume from a file (incorrect header)")
    if len(raw) < 8:
        raise fail("Error loading volume from a file (truncated)")
    (vtype,) = struct.unpack_from("<i", raw, 4)
    if vtype != _FLOAT32:
        raise fail("Unsupported volume format (only support Float32)")
    if len(raw) < 24:
        raise fail("Error loading volume from a file (truncated)")
    xres, yres, zres, channels = struct.unpack_from("<4i", raw, 8)
    if channels not in (1, 3):
        raise fail("Unsupported volume format (wrong number of channels)")
    if len(raw) < 48:
        raise fail("Error loading volume from a file (truncated)")
    bounds = struct.unpack_from("<6f", raw, 24)
    p_min, p_max = bounds[:3], bounds[3:]

    count = xres * yres * zres
    needed = 4 * count * channels
    if count < 0 or len(raw) - 48 < needed:
        raise fail("Error loading volume from a file (truncated)")
    values = np.frombuffer(raw, dtype="<f4", count=count * channels, offset=48)
    values = values.astype(np.float64).reshape(count, channels)

    if target_channel == 1:
        data = values[:, 0]
        max_data = max(0.0, float(data.max())) if count else 0.0
    else:
        data = np.repeat(values, 3, axis=1) if channels == 1 else values
        max_data = np.maximum(0.0, data.max(axis=0)) if count else np.zeros(3)

    return GridVolume((xres, yres, zres), p_min, p_max, data, max_data, 1.0)