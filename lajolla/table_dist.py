"""Tabulated discrete and piecewise-constant 2D distributions."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

import numpy as np


def _clamp(v, lo, hi):
    return max(lo, min(v, hi))


@dataclass
class TableDist1D:
    """A discrete distribution over table entries."""

    pmf: list
    cdf: list

    def sample(self, rnd_param):
        """Pick an entry index given a uniform number in [0, 1]."""
        size = len(self.pmf)
        if size == 0:
            raise ValueError("cannot sample from an empty distribution")
        return _clamp(bisect_right(self.cdf, rnd_param) - 1, 0, size - 1)

    def prob(self, index):
        """Probability of sampling the entry at index."""
        if not 0 <= index < len(self.pmf):
            raise IndexError(f"entry {index} out of range")
        return self.pmf[index]


def make_table_dist_1d(f):
    """Build a discrete distribution proportional to the positive values f."""
    pmf = [float(v) for v in f]
    if any(v <= 0 for v in pmf):
        raise ValueError("distribution entries must be positive")
    cdf = [0.0]
    for v in pmf:
        cdf.append(cdf[-1] + v)
    total = cdf[-1]
    n = len(pmf)
    if total > 0:
        # The final cdf entry keeps the raw total.
        pmf = [v / total for v in pmf]
        cdf = [c / total for c in cdf[:n]] + [cdf[n]]
    else:
        pmf = [1.0 / n for _ in pmf]
        cdf = [i / n for i in range(n)] + [1.0]
    return TableDist1D(pmf, cdf)


@dataclass
class TableDist2D:
    """A piecewise-constant distribution over the unit square."""

    cdf_rows: np.ndarray
    pdf_rows: np.ndarray
    cdf_marginals: np.ndarray
    pdf_marginals: np.ndarray
    total_values: float
    width: int
    height: int

    def sample(self, rnd_param):
        """Map two uniform numbers to a point in [0, 1]^2."""
        w, h = self.width, self.height
        u, v = float(rnd_param[0]), float(rnd_param[1])
        marg = self.cdf_marginals
        y = _clamp(bisect_right(marg, v) - 1, 0, h - 1)
        dy = v - marg[y]
        if marg[y + 1] - marg[y] > 0:
            dy /= marg[y + 1] - marg[y]
        row = self.cdf_rows[y]
        x = _clamp(bisect_right(row, u) - 1, 0, w - 1)
        dx = u - row[x]
        if row[x + 1] - row[x] > 0:
            dx /= row[x + 1] - row[x]
        return np.array([(x + dx) / w, (y + dy) / h])

    def pdf(self, xy):
        """Probability density of sample() producing the point xy."""
        w, h = self.width, self.height
        x = int(_clamp(xy[0] * w, 0.0, float(w - 1)))
        y = int(_clamp(xy[1] * h, 0.0, float(h - 1)))
        return float(self.pdf_marginals[y] * self.pdf_rows[y, x] * w * h)


def make_table_dist_2d(f, width, height):
    """Build a 2D distribution from row-major values f of shape height x width."""
    values = np.asarray(f, dtype=np.float64).reshape(height, width)
    cdf_rows = np.zeros((height, width + 1))
    pdf_rows = np.zeros((height, width))
    for y, row in enumerate(values):
        cdf_rows[y, 1:] = np.cumsum(row)
        integral = cdf_rows[y, width]
        if integral > 0:
            # The last entry keeps the integral for the marginal below.
            cdf_rows[y, :width] /= integral
            pdf_rows[y] = row / integral
        else:
            pdf_rows[y] = 1.0 / width
            cdf_rows[y, :width] = np.arange(width) / width
            cdf_rows[y, width] = 1.0

    weights = cdf_rows[:, width].copy()
    cdf_marginals = np.zeros(height + 1)
    cdf_marginals[1:] = np.cumsum(weights)
    total_values = float(cdf_marginals[height])
    if total_values > 0:
        cdf_marginals[:height] /= total_values
        cdf_marginals[height] = 1.0
        pdf_marginals = weights / total_values
    else:
        pdf_marginals = np.full(height, 1.0 / height)
        cdf_marginals[:height] = np.arange(height) / height
        cdf_marginals[height] = 1.0
    cdf_rows[:, width] = 1.0

    return TableDist2D(
        cdf_rows, pdf_rows, cdf_marginals, pdf_marginals, total_values, width, height
    )