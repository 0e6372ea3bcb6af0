"""RGB spectra and conversions from spectral measurements."""

from __future__ import annotations

import math

import numpy as np

from .mathutil import vec3

_CIE_Y_INTEGRAL = 106.856895
_WAVELENGTH_BEGIN = 400
_WAVELENGTH_END = 700


def make_zero_spectrum():
    """A black spectrum."""
    return vec3(0.0, 0.0, 0.0)


def make_const_spectrum(v):
    """A spectrum with the same value in every channel."""
    return vec3(v, v, v)


def from_rgb(rgb):
    """Convert linear RGB to a spectrum."""
    return np.asarray(rgb, dtype=np.float64).copy()


def to_rgb(s):
    """Convert a spectrum to linear RGB."""
    return np.asarray(s, dtype=np.float64).copy()


def spectrum_sqrt(s):
    """Channel-wise square root, with negative channels clamped to zero."""
    return np.sqrt(np.maximum(np.asarray(s, dtype=np.float64), 0.0))


def spectrum_exp(s):
    """Channel-wise exponential."""
    return np.exp(np.asarray(s, dtype=np.float64))


def luminance(s):
    """Perceived brightness of a linear RGB spectrum."""
    return float(s[0] * 0.212671 + s[1] * 0.715160 + s[2] * 0.072169)


def _lobe(wavelength, center, low, high):
    t = (wavelength - center) * (low if wavelength < center else high)
    return math.exp(-0.5 * t * t)


def x_fit_1931(wavelength):
    """Analytic fit of the CIE 1931 x colour-matching function."""
    return (
        0.362 * _lobe(wavelength, 442.0, 0.0624, 0.0374)
        + 1.056 * _lobe(wavelength, 599.8, 0.0264, 0.0323)
        - 0.065 * _lobe(wavelength, 501.1, 0.0490, 0.0382)
    )


def y_fit_1931(wavelength):
    """Analytic fit of the CIE 1931 y colour-matching function."""
    return 0.821 * _lobe(wavelength, 568.8, 0.0213, 0.0247) + 0.286 * _lobe(
        wavelength, 530.9, 0.0613, 0.0322
    )


def z_fit_1931(wavelength):
    """Analytic fit of the CIE 1931 z colour-matching function."""
    return 1.217 * _lobe(wavelength, 437.0, 0.0845, 0.0278) + 0.681 * _lobe(
        wavelength, 459.0, 0.0385, 0.0725
    )


def xyz_integral_coeff(wavelength):
    """The three colour-matching values at a wavelength."""
    return vec3(x_fit_1931(wavelength), y_fit_1931(wavelength), z_fit_1931(wavelength))


def integrate_xyz(data):
    """Integrate (wavelength, value) pairs sorted by wavelength into CIE XYZ."""
    data = list(data)
    if not data:
        return vec3(0.0, 0.0, 0.0)
    ret = vec3(0.0, 0.0, 0.0)
    last = len(data) - 1
    first_wave = data[0][0]
    pos = 0
    for step in range(_WAVELENGTH_BEGIN, _WAVELENGTH_END + 1):
        wavelength = float(step)
        while pos < last and not (
            (data[pos][0] <= wavelength < data[pos + 1][0]) or first_wave > wavelength
        ):
            pos += 1
        if pos < last and first_wave <= wavelength:
            curr_wave, curr_data = data[pos]
            next_wave, next_data = data[min(pos + 1, last)]
            span = next_wave - curr_wave
            measurement = (
                curr_data * (next_wave - wavelength) / span
                + next_data * (wavelength - curr_wave) / span
            )
        else:
            measurement = data[pos][1]
        ret += xyz_integral_coeff(wavelength) * measurement
    span = _WAVELENGTH_END - _WAVELENGTH_BEGIN
    return ret * (span / (_CIE_Y_INTEGRAL * span))


_XYZ_TO_RGB = np.array(
    [
        [3.240479, -1.537150, -0.498535],
        [-0.969256, 1.875991, 0.041556],
        [0.055648, -0.204043, 1.057311],
    ]
)


def xyz_to_rgb(xyz):
    """Convert CIE XYZ to linear RGB."""
    return _XYZ_TO_RGB @ np.asarray(xyz, dtype=np.float64)


def srgb_to_rgb(srgb):
    """Remove the sRGB transfer curve, giving linear RGB."""
    c = np.asarray(srgb, dtype=np.float64)
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)