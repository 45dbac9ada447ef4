"""Local update formulas of the ordered upwind method.

Given a not-yet-accepted cell ``c`` with centroid ``x`` and metric ``M``:

- line update from an accepted cell ``n``::

      U_n + |x - x_n|_M

- triangle update from two accepted cells ``n0``, ``n1``::

      min_{l in [0, 1]}  l*U0 + (1-l)*U1 + |x - (l*x0 + (1-l)*x1)|_M

  i.e. the wavefront crosses the segment [x1, x0] at the point that gives the
  earliest arrival at ``x``, with the values on the segment interpolated
  linearly. The objective is convex in ``l`` (linear term plus a norm of an
  affine map), so the minimum is either the stationary point, which has a
  closed form, or one of the two endpoints (the line updates).

Only consecutive neighbour pairs in counter-clockwise order that span a
proper sector at ``x`` (strictly positive cross product) are used for the
triangle update. This excludes degenerate triangles and the exterior gap of
boundary cells.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from .constants import EPS_SECTOR, EPS_TINY
from .metric import metric_distance
from .stats import SolveStats

__all__ = ['line_update', 'triangle_update', 'LocalUpdateSolver']


def line_update(x: np.ndarray, x_src: np.ndarray, u_src: float, M: np.ndarray) -> float:
    """Arrival time at x from a single accepted point x_src with value u_src."""
    return float(u_src) + metric_distance(x - x_src, M)


def triangle_update(x: np.ndarray, x0: np.ndarray, u0: float,
                    x1: np.ndarray, u1: float, M: np.ndarray) -> float:
    """Arrival time at x from the segment [x1, x0] with linearly interpolated values.

    Parameters
    ----------
    x : (2,) ndarray
        Point being updated.
    x0, x1 : (2,) ndarray
        Accepted points.
    u0, u1 : float
        Accepted values at x0 and x1.
    M : (2, 2) ndarray
        SPD metric used to measure the travel cost from the segment to x.

    Returns
    -------
    float
        ``min_{l in [0,1]} u1 + l*(u0 - u1) + |a - l*b|_M`` with ``a = x - x1``
        and ``b = x0 - x1``.
    """
    a = x - x1
    b = x0 - x1
    Ma = M @ a
    Mb = M @ b
    A = float(a @ Ma)
    B = float(b @ Ma)
    C = float(b @ Mb)
    u0 = float(u0); u1 = float(u1)
    if C <= EPS_TINY:
        # x0 and x1 coincide
        return min(u0, u1) + math.sqrt(max(A, 0.0))
    delta = u0 - u1

    def f(lam: float) -> float:
        return u1 + lam * delta + math.sqrt(max(A - 2.0 * B * lam + C * lam * lam, 0.0))

    best = min(f(0.0), f(1.0))
    # Stationary point exists only if the value difference is below the
    # metric length of the segment (otherwise the endpoint dominates).
    denom = C - delta * delta
    if denom > EPS_TINY:
        D = max(A * C - B * B, 0.0)
        lam = (B - delta * math.sqrt(D / denom)) / C
        if 0.0 < lam < 1.0:
            best = min(best, f(lam))
    return best


class LocalUpdateSolver:
    """Candidate arrival time for a cell from its accepted front neighbours.

    Parameters
    ----------
    centroids : (N, 2) ndarray
        Cell centroids.
    metric : (N, 2, 2) ndarray
        Per-cell metric; the metric of the cell being updated is used.
    neighbours : sequence of sequences of int
        Counter-clockwise ordered neighbour lists.
    stats : SolveStats, optional
        Receives triangle / line update counts.
    """

    def __init__(self, centroids: np.ndarray, metric: np.ndarray,
                 neighbours: Sequence[Sequence[int]], stats: Optional[SolveStats] = None):
        self.centroids = centroids
        self.metric = metric
        self.neighbours = neighbours
        self.stats = stats if stats is not None else SolveStats()

    def proper_sector(self, cell: int, n0: int, n1: int) -> bool:
        """True if n1 follows n0 counter-clockwise within a half-turn around cell."""
        x = self.centroids[cell]
        d0 = self.centroids[n0] - x
        d1 = self.centroids[n1] - x
        cross = float(d0[0] * d1[1] - d0[1] * d1[0])
        scale = math.hypot(d0[0], d0[1]) * math.hypot(d1[0], d1[1])
        return cross > EPS_SECTOR * scale

    def from_line(self, cell: int, src: int, solution: np.ndarray) -> float:
        self.stats.line_updates += 1
        return line_update(self.centroids[cell], self.centroids[src], solution[src], self.metric[cell])

    def from_triangle(self, cell: int, n0: int, n1: int, solution: np.ndarray) -> float:
        self.stats.tri_updates += 1
        return triangle_update(self.centroids[cell],
                               self.centroids[n0], solution[n0],
                               self.centroids[n1], solution[n1],
                               self.metric[cell])

    def compute_value(self, cell: int, solution: np.ndarray, front) -> float:
        """Best candidate for ``cell`` using only members of ``front``.

        Triangle updates over qualifying consecutive pairs take precedence; line
        updates are the fallback when no pair qualifies.

        Raises
        ------
        RuntimeError
            If no front neighbour gives a finite value. This cannot happen for a
            cell reached through a symmetric neighbour relation, so it signals
            broken topology or metric input.
        """
        nbs = self.neighbours[cell]
        k = len(nbs)
        val = math.inf
        if k >= 2:
            for i in range(k):
                n0 = nbs[i]
                n1 = nbs[(i + 1) % k]
                if n0 in front and n1 in front and self.proper_sector(cell, n0, n1):
                    val = min(val, self.from_triangle(cell, n0, n1, solution))
        if val == math.inf:
            for nb in nbs:
                if nb in front:
                    val = min(val, self.from_line(cell, nb, solution))
        if not math.isfinite(val):
            raise RuntimeError(
                f"no accepted front neighbour yields a finite value for cell {cell} "
                f"(neighbours={list(nbs)})")
        return val
