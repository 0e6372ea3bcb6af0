import math

import numpy as np

from lajolla.mathutil import vec3
from lajolla.media import HeterogeneousMedium, HomogeneousMedium
from lajolla.volume import ConstantVolume, GridVolume, Ray


def _ray(org, direction):
    return Ray(vec3(*org), vec3(*direction), 0.0, math.inf)


def test_homogeneous_coefficients():
    m = HomogeneousMedium(sigma_a=vec3(0.1, 0.2, 0.3), sigma_s=vec3(1.0, 2.0, 3.0))
    p = vec3(0, 0, 0)
    assert np.allclose(m.get_sigma_a(p), [0.1, 0.2, 0.3])
    assert np.allclose(m.get_sigma_s(p), [1.0, 2.0, 3.0])
    assert np.allclose(
        m.get_majorant(_ray((0, 0, 0), (1, 0, 0))), m.get_sigma_a(p) + m.get_sigma_s(p)
    )


def test_heterogeneous_sigma_sum_is_density():
    density = ConstantVolume(vec3(2.0, 4.0, 6.0))
    albedo = ConstantVolume(vec3(0.25, 0.5, 0.75))
    m = HeterogeneousMedium(albedo=albedo, density=density)
    p = vec3(1, 2, 3)
    assert np.allclose(m.get_sigma_s(p) + m.get_sigma_a(p), density.lookup(p))
    assert np.allclose(m.get_sigma_s(p), density.lookup(p) * albedo.lookup(p))


def test_heterogeneous_majorant_with_grid():
    values = np.tile([1.0, 2.0, 3.0], (8, 1))
    values[5] = [4.0, 1.0, 0.5]
    grid = GridVolume(
        (2, 2, 2), vec3(0, 0, 0), vec3(1, 1, 1), values, values.max(axis=0)
    )
    m = HeterogeneousMedium(albedo=ConstantVolume(vec3(1, 1, 1)), density=grid)
    hit = m.get_majorant(_ray((-1, 0.5, 0.5), (1, 0, 0)))
    miss = m.get_majorant(_ray((-1, 5.0, 0.5), (1, 0, 0)))
    assert np.allclose(hit, values.max(axis=0))
    assert np.allclose(miss, [0, 0, 0])


def test_heterogeneous_outside_grid_is_empty():
    values = np.ones((8, 3))
    grid = GridVolume((2, 2, 2), vec3(0, 0, 0), vec3(1, 1, 1), values, vec3(1, 1, 1))
    m = HeterogeneousMedium(albedo=ConstantVolume(vec3(0.5, 0.5, 0.5)), density=grid)
    assert np.allclose(m.get_sigma_s(vec3(3, 3, 3)), [0, 0, 0])
    assert np.allclose(m.get_sigma_a(vec3(0.5, 0.5, 0.5)), [0.5, 0.5, 0.5])