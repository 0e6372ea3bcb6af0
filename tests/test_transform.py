import numpy as np
import pytest

from lajolla.mathutil import normalize, vec3
from lajolla.transform import (
    look_at,
    perspective,
    rotate,
    scale,
    translate,
    xform_normal,
    xform_point,
    xform_vector,
)


def test_translate_moves_points_not_vectors():
    m = translate(vec3(1.0, -2.0, 3.0))
    p = vec3(0.5, 0.5, 0.5)
    assert np.allclose(xform_point(m, p), p + vec3(1.0, -2.0, 3.0))
    assert np.allclose(xform_vector(m, p), p)


def test_scale():
    m = scale(vec3(2.0, 3.0, 4.0))
    assert np.allclose(xform_point(m, vec3(1.0, 1.0, 1.0)), [2.0, 3.0, 4.0])


def test_rotate_about_z():
    m = rotate(90.0, vec3(0.0, 0.0, 1.0))
    assert np.allclose(xform_vector(m, vec3(1.0, 0.0, 0.0)), [0.0, 1.0, 0.0])


def test_rotation_is_orthogonal():
    m = rotate(37.0, vec3(1.0, 2.0, -0.5))
    r = m[:3, :3]
    assert np.allclose(r @ r.T, np.eye(3))
    assert np.linalg.det(r) == pytest.approx(1.0)
    axis = normalize(vec3(1.0, 2.0, -0.5))
    assert np.allclose(xform_vector(m, axis), axis)


def test_rotate_inverse_by_negative_angle():
    a = rotate(25.0, vec3(0.3, 0.1, 0.9))
    b = rotate(-25.0, vec3(0.3, 0.1, 0.9))
    assert np.allclose(a @ b, np.eye(4))


def test_look_at():
    pos = vec3(1.0, 2.0, 3.0)
    target = vec3(4.0, 2.0, 7.0)
    m = look_at(pos, target, vec3(0.0, 1.0, 0.0))
    assert np.allclose(xform_point(m, vec3(0.0, 0.0, 0.0)), pos)
    assert np.allclose(xform_vector(m, vec3(0.0, 0.0, 1.0)), normalize(target - pos))
    r = m[:3, :3]
    assert np.allclose(r.T @ r, np.eye(3))


def test_look_at_parallel_up_raises():
    with pytest.raises(ValueError):
        look_at(vec3(0, 0, 0), vec3(0, 1, 0), vec3(0, 1, 0))


def test_perspective_projects_by_depth():
    m = perspective(90.0)
    p = xform_point(m, vec3(1.0, 2.0, 4.0))
    assert np.allclose(p, [0.25, 0.5, 0.75])
    far = xform_point(m, vec3(2.0, 4.0, 8.0))
    assert np.allclose(far[:2], p[:2] / 1.0 * 1.0)


def test_xform_normal_stays_perpendicular():
    m = scale(vec3(2.0, 0.5, 3.0)) @ rotate(30.0, vec3(1.0, 1.0, 0.0))
    inv = np.linalg.inv(m)
    tangent = vec3(1.0, -1.0, 0.0)
    normal = vec3(1.0, 1.0, 0.0)
    t2 = xform_vector(m, tangent)
    n2 = xform_normal(inv, normal)
    assert np.dot(t2, n2) == pytest.approx(0.0, abs=1e-12)