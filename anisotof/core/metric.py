"""Per-cell anisotropic metric tensors.

A metric is one 2x2 symmetric positive-definite matrix per cell. The travel
cost of a displacement ``d`` inside a cell with metric ``M`` is
``sqrt(d^T M d)``; the identity metric gives Euclidean distance. Propagation
speed in a unit direction ``e`` is therefore ``1 / sqrt(e^T M e)`` and the
ratio between the fastest and slowest directions is
``sqrt(lambda_max / lambda_min)``.
"""
from __future__ import annotations

import math

import numpy as np

from .constants import EPS_EIG

__all__ = [
    'as_metric_array',
    'identity_metric',
    'scaled_metric',
    'rotated_metric',
    'check_spd',
    'anisotropy_ratios',
    'metric_distance',
]


def as_metric_array(metric, num_cells: int) -> np.ndarray:
    """Normalise a metric input to a contiguous (num_cells, 2, 2) float64 array.

    Accepted layouts are a flat row-major array of ``4*num_cells`` values,
    an (num_cells, 4) array or an (num_cells, 2, 2) array.
    """
    m = np.asarray(metric, dtype=np.float64)
    if m.ndim == 1:
        if m.size != 4 * num_cells:
            raise ValueError(f"flat metric must hold 4*{num_cells} values, got {m.size}")
        m = m.reshape(num_cells, 2, 2)
    elif m.ndim == 2:
        if m.shape != (num_cells, 4):
            raise ValueError(f"metric must be ({num_cells}, 4), got {m.shape}")
        m = m.reshape(num_cells, 2, 2)
    elif m.ndim == 3:
        if m.shape != (num_cells, 2, 2):
            raise ValueError(f"metric must be ({num_cells}, 2, 2), got {m.shape}")
    else:
        raise ValueError(f"unsupported metric shape {m.shape}")
    return np.ascontiguousarray(m)


def identity_metric(num_cells: int) -> np.ndarray:
    """Isotropic unit-speed metric for every cell."""
    return np.tile(np.eye(2, dtype=np.float64), (num_cells, 1, 1))


def scaled_metric(num_cells: int, speed_x: float, speed_y: float) -> np.ndarray:
    """Axis-aligned metric with the given propagation speeds along x and y."""
    if speed_x <= 0.0 or speed_y <= 0.0:
        raise ValueError("speeds must be positive")
    M = np.diag([1.0 / speed_x ** 2, 1.0 / speed_y ** 2])
    return np.tile(M, (num_cells, 1, 1))


def rotated_metric(num_cells: int, speed_major: float, speed_minor: float, angle: float) -> np.ndarray:
    """Metric whose fast axis (speed_major) points at ``angle`` radians from x."""
    c, s = math.cos(angle), math.sin(angle)
    R = np.array([[c, -s], [s, c]], dtype=np.float64)
    D = np.diag([1.0 / speed_major ** 2, 1.0 / speed_minor ** 2])
    return np.tile(R @ D @ R.T, (num_cells, 1, 1))


def check_spd(metric: np.ndarray, tol: float = 1e-12) -> None:
    """Raise ValueError unless every (2, 2) tensor is symmetric positive-definite."""
    m = np.asarray(metric, dtype=np.float64)
    asym = np.abs(m[:, 0, 1] - m[:, 1, 0])
    scale = np.maximum(np.abs(m).reshape(m.shape[0], -1).max(axis=1), 1.0)
    bad = np.nonzero(asym > tol * scale)[0]
    if bad.size:
        raise ValueError(f"metric of cell {int(bad[0])} is not symmetric")
    lam = np.linalg.eigvalsh(m)
    bad = np.nonzero(lam[:, 0] <= 0.0)[0]
    if bad.size:
        raise ValueError(f"metric of cell {int(bad[0])} is not positive definite "
                         f"(min eigenvalue {float(lam[bad[0], 0]):.3g})")


def anisotropy_ratios(metric: np.ndarray) -> np.ndarray:
    """Per-cell ratio of fastest to slowest propagation speed (>= 1)."""
    lam = np.linalg.eigvalsh(np.asarray(metric, dtype=np.float64))
    lam = np.clip(lam, EPS_EIG, None)
    return np.sqrt(lam[:, 1] / lam[:, 0])


def metric_distance(d: np.ndarray, M: np.ndarray) -> float:
    """Length of displacement d measured in metric M."""
    q = float(d[0] * (M[0, 0] * d[0] + M[0, 1] * d[1]) + d[1] * (M[1, 0] * d[0] + M[1, 1] * d[1]))
    return math.sqrt(max(q, 0.0))
