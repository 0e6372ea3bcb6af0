"""Homogeneous and heterogeneous participating media."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .spectrum import make_zero_spectrum


@dataclass
class HomogeneousMedium:
    """A medium with constant absorption and scattering coefficients."""

    sigma_a: np.ndarray
    sigma_s: np.ndarray

    def get_majorant(self, ray):
        """Upper bound of the extinction coefficient along the ray."""
        return np.asarray(self.sigma_a, dtype=np.float64) + np.asarray(
            self.sigma_s, dtype=np.float64
        )

    def get_sigma_s(self, p):
        """Scattering coefficient at p."""
        return np.asarray(self.sigma_s, dtype=np.float64)

    def get_sigma_a(self, p):
        """Absorption coefficient at p."""
        return np.asarray(self.sigma_a, dtype=np.float64)


@dataclass
class HeterogeneousMedium:
    """A medium whose density and albedo are given by volumes."""

    albedo: object
    density: object

    def get_majorant(self, ray):
        """Maximum density if the ray meets the density volume, else zero."""
        if self.density.intersect(ray):
            return self.density.max_value() * np.ones(3)
        return make_zero_spectrum()

    def get_sigma_s(self, p):
        """Scattering coefficient at p: density times albedo."""
        return self.density.lookup(p) * np.asarray(self.albedo.lookup(p))

    def get_sigma_a(self, p):
        """Absorption coefficient at p: density times one minus albedo."""
        return self.density.lookup(p) * (1.0 - np.asarray(self.albedo.lookup(p)))