import math

import numpy as np
import pytest

from anisotof.core.metric import (
    anisotropy_ratios, as_metric_array, check_spd,
    identity_metric, metric_distance, rotated_metric, scaled_metric,
)


def random_spd(seed=0):
    rng = np.random.RandomState(seed)
    A = rng.randn(2, 2)
    return A @ A.T + np.eye(2) * 1e-3


def test_metric_layouts_normalise_to_tensor_array():
    flat = np.array([1.0, 0.0, 0.0, 1.0, 2.0, 0.5, 0.5, 3.0])
    m = as_metric_array(flat, 2)
    assert m.shape == (2, 2, 2)
    assert np.allclose(m[1], [[2.0, 0.5], [0.5, 3.0]])
    assert np.array_equal(as_metric_array(flat.reshape(2, 4), 2), m)
    assert np.array_equal(as_metric_array(m, 2), m)


@pytest.mark.parametrize('bad', [np.zeros(7), np.zeros((3, 4)), np.zeros((2, 3, 3)), np.zeros((1, 1, 2, 2))])
def test_metric_layout_mismatch(bad):
    with pytest.raises(ValueError):
        as_metric_array(bad, 2)


def test_check_spd():
    check_spd(np.stack([random_spd(1), np.eye(2)]))
    with pytest.raises(ValueError):
        check_spd(np.array([[[1.0, 0.5], [0.0, 1.0]]]))
    with pytest.raises(ValueError):
        check_spd(np.array([[[1.0, 0.0], [0.0, -1.0]]]))


def test_anisotropy_ratios():
    assert np.allclose(anisotropy_ratios(identity_metric(3)), 1.0)
    assert np.allclose(anisotropy_ratios(scaled_metric(2, 2.0, 1.0)), 2.0)
    assert np.allclose(anisotropy_ratios(rotated_metric(1, 5.0, 1.0, 0.7)), 5.0)


def test_rotated_metric_fast_axis():
    angle = math.pi / 6
    M = rotated_metric(1, 3.0, 1.0, angle)[0]
    fast = np.array([math.cos(angle), math.sin(angle)])
    slow = np.array([-math.sin(angle), math.cos(angle)])
    assert metric_distance(fast, M) == pytest.approx(1.0 / 3.0)
    assert metric_distance(slow, M) == pytest.approx(1.0)


def test_scaled_metric_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        scaled_metric(1, 0.0, 1.0)


def test_metric_distance_maps_to_euclidean():
    M = random_spd(4)
    d = np.array([0.3, -1.2])
    # M = L L^T, so d^T M d == |L^T d|^2
    L = np.linalg.cholesky(M)
    assert metric_distance(d, M) == pytest.approx(np.linalg.norm(L.T @ d))
