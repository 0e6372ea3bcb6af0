import numpy as np
import pytest

from lajolla.table_dist import make_table_dist_1d, make_table_dist_2d


def test_1d_pmf_is_normalized():
    f = [1.0, 2.0, 1.0, 4.0]
    dist = make_table_dist_1d(f)
    assert sum(dist.pmf) == pytest.approx(1.0)
    for i, v in enumerate(f):
        assert dist.prob(i) == pytest.approx(v / sum(f))


def test_1d_sample_matches_cdf_intervals():
    dist = make_table_dist_1d([1.0, 2.0, 1.0])
    for i in range(3):
        lo, hi = dist.cdf[i], min(dist.cdf[i + 1], 1.0)
        assert dist.sample((lo + hi) / 2) == i
    assert dist.sample(0.0) == 0
    assert dist.sample(1.0) == 2


def test_1d_sample_frequencies():
    f = [1.0, 3.0, 6.0]
    dist = make_table_dist_1d(f)
    counts = np.zeros(3)
    for u in np.linspace(0, 1, 1000, endpoint=False):
        counts[dist.sample(u)] += 1
    assert np.allclose(counts / 1000, np.array(f) / sum(f), atol=0.01)


def test_1d_rejects_non_positive():
    with pytest.raises(ValueError):
        make_table_dist_1d([1.0, 0.0])


def test_1d_prob_out_of_range():
    dist = make_table_dist_1d([1.0])
    with pytest.raises(IndexError):
        dist.prob(1)


def test_1d_empty_cannot_sample():
    dist = make_table_dist_1d([])
    with pytest.raises(ValueError):
        dist.sample(0.5)


def test_2d_uniform_sample_is_identity():
    dist = make_table_dist_2d([1.0] * 12, 4, 3)
    for uv in ([0.1, 0.2], [0.5, 0.5], [0.93, 0.71]):
        assert np.allclose(dist.sample(uv), uv)
        assert dist.pdf(uv) == pytest.approx(1.0)


def test_2d_pdf_integrates_to_one():
    w, h = 5, 4
    f = np.arange(1, w * h + 1, dtype=float)
    dist = make_table_dist_2d(f, w, h)
    centers = [((x + 0.5) / w, (y + 0.5) / h) for y in range(h) for x in range(w)]
    total = sum(dist.pdf(c) for c in centers) / (w * h)
    assert total == pytest.approx(1.0)


def test_2d_pdf_proportional_to_values():
    w, h = 3, 2
    f = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    dist = make_table_dist_2d(f, w, h)
    ref = dist.pdf(((0 + 0.5) / w, (0 + 0.5) / h)) / f[0]
    for y in range(h):
        for x in range(w):
            p = dist.pdf(((x + 0.5) / w, (y + 0.5) / h))
            assert p == pytest.approx(ref * f[y * w + x])


def test_2d_samples_avoid_zero_cells():
    w, h = 4, 4
    f = np.zeros(w * h)
    f[5] = 1.0
    f[10] = 3.0
    dist = make_table_dist_2d(f, w, h)
    for u in np.linspace(0.01, 0.99, 9):
        for v in np.linspace(0.01, 0.99, 9):
            p = dist.sample([u, v])
            x, y = int(p[0] * w), int(p[1] * h)
            assert f[y * w + x] > 0
            assert dist.pdf(p) > 0