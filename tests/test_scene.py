import numpy as np
import pytest

from lajolla.lights import DiffuseAreaLight, Envmap, PointAndNormal
from lajolla.mathutil import distance
from lajolla.scene import BSphere, Integrator, RenderOptions, Scene


class _FakeShape:
    def __init__(self, area):
        self.area = area

    def surface_area(self):
        return self.area

    def sample_point_on_shape(self, ref_point, uv, w):
        return PointAndNormal(np.zeros(3), np.array([0.0, 0.0, 1.0]))

    def pdf_point_on_shape(self, point, ref_point):
        return 1.0 / self.area


def _two_light_scene(radius=1.0):
    shapes = [_FakeShape(1.0), _FakeShape(3.0)]
    lights = [DiffuseAreaLight(0, np.ones(3)), DiffuseAreaLight(1, np.ones(3))]
    return Scene(shapes=shapes, lights=lights, bounds=BSphere(radius, np.zeros(3)))


def test_render_option_defaults():
    options = RenderOptions()
    assert options.integrator is Integrator.PATH
    assert options.samples_per_pixel == 4
    assert options.max_depth == -1
    assert options.rr_depth == 5
    assert options.vol_path_version == 0
    assert options.max_null_collisions == 1000


def test_light_pmf_proportional_to_power():
    scene = _two_light_scene()
    p0, p1 = scene.light_pmf(0), scene.light_pmf(1)
    assert p0 + p1 == pytest.approx(1.0)
    assert p1 == pytest.approx(3 * p0)


def test_sample_light_follows_cdf():
    scene = _two_light_scene()
    assert scene.sample_light(0.1) == 0
    assert scene.sample_light(0.9) == 1
    assert scene.sample_light(1.0) == 1


def test_light_pmf_out_of_range():
    scene = _two_light_scene()
    with pytest.raises(IndexError):
        scene.light_pmf(2)


def test_no_envmap():
    scene = _two_light_scene()
    assert scene.has_envmap() is False
    with pytest.raises(ValueError):
        scene.get_envmap()


def test_envmap_lookup_and_initialisation():
    env = Envmap(np.ones(3))
    light = DiffuseAreaLight(0, np.ones(3))
    scene = Scene(
        shapes=[_FakeShape(2.0)],
        lights=[light, env],
        envmap_light_id=1,
        bounds=BSphere(5.0, np.zeros(3)),
    )
    assert scene.has_envmap()
    assert scene.get_envmap() is env
    assert env.sampling_dist is not None
    assert scene.light_pmf(0) + scene.light_pmf(1) == pytest.approx(1.0)


def test_epsilons_scale_with_bounds_and_cap():
    small = _two_light_scene(radius=10.0)
    assert small.shadow_epsilon() == pytest.approx(10.0 * 1e-5)
    assert small.intersection_epsilon() == small.shadow_epsilon()
    large = _two_light_scene(radius=1e6)
    assert large.shadow_epsilon() == 0.01
    assert large.intersection_epsilon() == 0.01


def test_bsphere_from_box_encloses_corners():
    lower, upper = np.array([-1.0, 0.0, 2.0]), np.array([3.0, 4.0, 5.0])
    sphere = BSphere.from_box(lower, upper)
    assert np.allclose(sphere.center, (lower + upper) / 2)
    assert distance(sphere.center, lower) == pytest.approx(sphere.radius)
    assert distance(sphere.center, upper) == pytest.approx(sphere.radius)


def test_zero_power_light_rejected():
    with pytest.raises(ValueError):
        Scene(shapes=[_FakeShape(1.0)], lights=[DiffuseAreaLight(0, np.zeros(3))])