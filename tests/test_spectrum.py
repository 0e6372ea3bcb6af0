import numpy as np
import pytest

from lajolla.spectrum import (
    from_rgb,
    integrate_xyz,
    luminance,
    make_const_spectrum,
    make_zero_spectrum,
    spectrum_exp,
    spectrum_sqrt,
    srgb_to_rgb,
    to_rgb,
    x_fit_1931,
    xyz_integral_coeff,
    xyz_to_rgb,
    y_fit_1931,
    z_fit_1931,
)


def test_basic_spectra():
    assert np.array_equal(make_zero_spectrum(), np.zeros(3))
    assert np.array_equal(make_const_spectrum(0.5), np.full(3, 0.5))
    rgb = np.array([0.1, 0.2, 0.3])
    assert np.array_equal(to_rgb(from_rgb(rgb)), rgb)


def test_sqrt_clamps_negative():
    s = spectrum_sqrt(np.array([4.0, -1.0, 0.25]))
    assert np.allclose(s, [2.0, 0.0, 0.5])


def test_exp():
    assert np.allclose(spectrum_exp(make_zero_spectrum()), np.ones(3))
    assert np.allclose(np.log(spectrum_exp(np.array([0.3, -2.0, 1.0]))), [0.3, -2.0, 1.0])


def test_luminance_weights():
    assert luminance(np.array([1.0, 0.0, 0.0])) == pytest.approx(0.212671)
    assert luminance(np.array([0.0, 1.0, 0.0])) == pytest.approx(0.715160)
    assert luminance(make_const_spectrum(2.0)) == pytest.approx(
        2.0 * luminance(make_const_spectrum(1.0))
    )


def test_colour_matching_functions_positive_in_visible_range():
    for wl in (450.0, 550.0, 600.0):
        assert y_fit_1931(wl) > 0
        assert np.allclose(
            xyz_integral_coeff(wl), [x_fit_1931(wl), y_fit_1931(wl), z_fit_1931(wl)]
        )
    assert y_fit_1931(550.0) > y_fit_1931(450.0)


def test_integrate_empty():
    assert np.array_equal(integrate_xyz([]), np.zeros(3))


def test_integrate_is_linear():
    one = integrate_xyz([(400.0, 1.0), (700.0, 1.0)])
    two = integrate_xyz([(400.0, 2.0), (700.0, 2.0)])
    assert np.allclose(two, 2 * one)
    assert np.all(one > 0)


def test_integrate_constant_forms_agree():
    single = integrate_xyz([(550.0, 1.0)])
    endpoints = integrate_xyz([(400.0, 1.0), (700.0, 1.0)])
    wide = integrate_xyz([(300.0, 1.0), (500.0, 1.0), (800.0, 1.0)])
    assert np.allclose(single, endpoints)
    assert np.allclose(single, wide)


def test_xyz_to_rgb_columns():
    assert np.allclose(xyz_to_rgb([1.0, 0.0, 0.0]), [3.240479, -0.969256, 0.055648])


def test_srgb_to_rgb():
    assert np.allclose(srgb_to_rgb([0.0, 1.0, 0.04045]), [0.0, 1.0, 0.04045 / 12.92])
    values = srgb_to_rgb(np.linspace(0, 1, 11))
    assert np.all(np.diff(values) > 0)