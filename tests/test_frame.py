import numpy as np
import pytest

from lajolla.frame import (
    Frame,
    coordinate_system,
    frame_from_normal,
    to_local,
    to_world,
)
from lajolla.mathutil import normalize, vec3

NORMALS = [
    vec3(0.0, 0.0, 1.0),
    vec3(1.0, 0.0, 0.0),
    normalize(vec3(1.0, 2.0, 3.0)),
    normalize(vec3(-0.3, 0.7, -0.5)),
    vec3(0.0, 0.0, -1.0),
]


@pytest.mark.parametrize("n", NORMALS)
def test_coordinate_system_is_orthonormal(n):
    x, y = coordinate_system(n)
    for v in (x, y):
        assert np.linalg.norm(v) == pytest.approx(1.0)
    assert np.dot(x, y) == pytest.approx(0.0, abs=1e-12)
    assert np.dot(x, n) == pytest.approx(0.0, abs=1e-12)
    assert np.dot(y, n) == pytest.approx(0.0, abs=1e-12)


def test_coordinate_system_degenerate_case():
    x, y = coordinate_system(vec3(0.0, 0.0, -1.0))
    assert np.array_equal(x, vec3(0.0, -1.0, 0.0))
    assert np.array_equal(y, vec3(-1.0, 0.0, 0.0))


@pytest.mark.parametrize("n", NORMALS)
def test_local_world_round_trip(n):
    frame = frame_from_normal(n)
    v = vec3(0.2, -1.5, 0.8)
    assert np.allclose(to_world(frame, to_local(frame, v)), v)
    assert np.allclose(to_local(frame, frame.n), vec3(0.0, 0.0, 1.0))


def test_indexing_and_negation():
    frame = frame_from_normal(normalize(vec3(1.0, 1.0, 1.0)))
    assert np.array_equal(frame[0], frame.x)
    assert np.array_equal(frame[2], frame.n)
    flipped = -frame
    for a, b in zip(frame, flipped):
        assert np.array_equal(a, -b)


def test_explicit_frame():
    frame = Frame(vec3(1, 0, 0), vec3(0, 1, 0), vec3(0, 0, 1))
    v = vec3(3.0, 4.0, 5.0)
    assert np.allclose(to_local(frame, v), v)
    assert "Frame(" in repr(frame)