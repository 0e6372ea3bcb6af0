"""Pixel reconstruction filters, sampled by warping uniform numbers."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .mathutil import PI


@dataclass(frozen=True)
class Box:
    """A box filter of the given full width."""

    width: float

    def sample(self, rnd_param):
        """Map [0, 1]^2 to an offset in [-width/2, width/2]^2."""
        return (2.0 * np.asarray(rnd_param, dtype=np.float64) - 1.0) * (self.width / 2)


def _tent_warp(u, h):
    if u < 0.5:
        return h * (math.sqrt(2 * u) - 1)
    return h * (1 - math.sqrt(1 - 2 * (u - 0.5)))


@dataclass(frozen=True)
class Tent:
    """A tent filter of the given full width."""

    width: float

    def sample(self, rnd_param):
        """Map [0, 1]^2 to an offset distributed like the tent."""
        h = self.width / 2
        return np.array([_tent_warp(rnd_param[0], h), _tent_warp(rnd_param[1], h)])


@dataclass(frozen=True)
class Gaussian:
    """A Gaussian filter with standard deviation stddev."""

    stddev: float

    def sample(self, rnd_param):
        """Box-Muller transform of two uniform numbers."""
        r = self.stddev * math.sqrt(-2 * math.log(max(rnd_param[0], 1e-8)))
        angle = 2 * PI * rnd_param[1]
        return np.array([r * math.cos(angle), r * math.sin(angle)])