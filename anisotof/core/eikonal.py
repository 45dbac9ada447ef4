"""Anisotropic eikonal solver on 2-D unstructured grids.

Implements the Ordered Upwind Method of J.A. Sethian and A. Vladimirsky,
"Ordered Upwind Methods for Static Hamilton-Jacobi Equations", on grid cells
instead of mesh points. The arrival time ``U`` is zero at the start cells
and the travel cost inside cell ``c`` is measured with its metric ``M_c``.

Algorithm summary:

1. Put all cells in Far, ``U = inf``.
2. Move the start cells to Accepted, ``U = 0``.
3. Move cells adjacent to start cells to Considered and evaluate them from
   the accepted front.
4. Pop the Considered cell ``r`` with the smallest value.
5. Move ``r`` to Accepted and update the accepted front.
6. Move Far cells adjacent to ``r`` to Considered.
7. Re-evaluate Considered cells within ``h_r * F2/F1`` of ``r`` and keep
   the smaller of the old and new value (decrease-key).
8. Repeat from 4 until Considered is empty.

Cells never reached from the start cells keep the ``inf_value`` sentinel.

Example
-------
    >>> from anisotof import cartesian_grid, identity_metric, AnisotropicEikonal2D
    >>> grid = cartesian_grid(5, 5)
    >>> solver = AnisotropicEikonal2D(grid)
    >>> tof = solver.solve(identity_metric(grid.number_of_cells), [0])
"""
from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence

import numpy as np

from .config import EikonalConfig
from .considered import ConsideredQueue
from .constants import EPS_RADIUS
from .front import AcceptedFront
from .grid import cell_radii, order_counter_clockwise, vertex_neighbours
from .local_update import LocalUpdateSolver
from .logging_utils import configure_logging, get_logger
from .metric import anisotropy_ratios, as_metric_array, check_spd
from .stats import SolveStats, format_stats_table

logger = get_logger('anisotof.eikonal')

__all__ = ['AnisotropicEikonal2D', 'SolveSession', 'solve_eikonal']


class SolveSession:
    """Mutable state owned by a single solve() call.

    Attributes
    ----------
    solution : (N,) float64 ndarray
        Arrival times; ``inf_value`` until a cell is accepted.
    accepted : (N,) bool ndarray
        Accepted flags, monotone False -> True.
    considered : ConsideredQueue
        Tentative values of Considered cells.
    front : AcceptedFront
        Accepted cells with at least one non-accepted neighbour.
    stats : SolveStats
        Counters and timing of the run.
    """

    def __init__(self, solver: 'AnisotropicEikonal2D', metric: np.ndarray):
        cfg = solver.config
        n = solver.num_cells
        self.metric = metric
        self.ratios = anisotropy_ratios(metric)
        self.solution = np.full(n, cfg.inf_value, dtype=np.float64)
        self.accepted = np.zeros(n, dtype=bool)
        self.considered = ConsideredQueue(n)
        self.front = AcceptedFront(solver.neighbours, self.accepted, cfg.front_pruning)
        self.stats = SolveStats()
        self.local = LocalUpdateSolver(solver.centroids, metric, solver.neighbours, self.stats)
        self._order: Optional[List[int]] = [] if cfg.record_order else None

    @property
    def acceptance_order(self) -> np.ndarray:
        """Cells in the order they were accepted (start cells first)."""
        if self._order is None:
            return np.empty(0, dtype=np.int64)
        return np.asarray(self._order, dtype=np.int64)

    def mark_accepted(self, cell: int, value: float) -> None:
        self.accepted[cell] = True
        self.solution[cell] = value
        if self._order is not None:
            self._order.append(cell)


class AnisotropicEikonal2D:
    """Ordered upwind solver for the anisotropic eikonal equation on a 2-D grid.

    Parameters
    ----------
    grid
        Object exposing ``dimensions``, ``number_of_cells``, ``cell_centroids``
        and, unless ``neighbours`` is given, ``cells`` (vertex indices per cell).
    config : EikonalConfig, optional
        Solver options.
    neighbours : sequence of sequences of int, optional
        Precomputed counter-clockwise ordered neighbour lists. By default the
        cells sharing a vertex are used, ordered around each centroid.

    Raises
    ------
    ValueError
        If the grid is not 2-dimensional or the neighbour lists do not match it.
    """

    def __init__(self, grid, config: Optional[EikonalConfig] = None,
                 neighbours: Optional[Sequence[Sequence[int]]] = None):
        self.config = config if config is not None else EikonalConfig()
        if self.config.log_level is not None:
            configure_logging(self.config.log_level)
        if getattr(grid, 'dimensions', None) != 2:
            raise ValueError(
                f"Grid for AnisotropicEikonal2D must be 2d, got dimensions={getattr(grid, 'dimensions', None)}")
        self.grid = grid
        self.num_cells = int(grid.number_of_cells)
        centroids = np.asarray(grid.cell_centroids, dtype=np.float64)
        if centroids.shape != (self.num_cells, 2):
            raise ValueError(f"cell_centroids must be ({self.num_cells}, 2), got {centroids.shape}")
        self.centroids = np.ascontiguousarray(centroids)
        if neighbours is None:
            neighbours = order_counter_clockwise(grid, vertex_neighbours(grid))
        self.neighbours = self._check_neighbours(neighbours)
        self.cell_radius = cell_radii(self.centroids, self.neighbours)

    def _check_neighbours(self, neighbours) -> List[List[int]]:
        if len(neighbours) != self.num_cells:
            raise ValueError(f"expected {self.num_cells} neighbour lists, got {len(neighbours)}")
        out = []
        for c, nbs in enumerate(neighbours):
            row = [int(nb) for nb in nbs]
            for nb in row:
                if not 0 <= nb < self.num_cells or nb == c:
                    raise ValueError(f"invalid neighbour {nb} of cell {c}")
            out.append(row)
        return out

    def _check_start_cells(self, startcells) -> List[int]:
        raw = np.asarray(startcells).ravel()
        if raw.size and raw.dtype.kind not in 'iu':
            # integral floats such as 3.0 are accepted, anything else is rejected
            if raw.dtype.kind != 'f' or not np.all(np.isfinite(raw) & (np.floor(raw) == raw)):
                raise ValueError(f"start cells must be integer indices, got {raw.tolist()!r}")
        cells = raw.astype(np.int64)
        bad = cells[(cells < 0) | (cells >= self.num_cells)]
        if bad.size:
            raise ValueError(f"start cell {int(bad[0])} outside [0, {self.num_cells})")
        # duplicates are harmless but must only be seeded once
        return list(dict.fromkeys(int(c) for c in cells))

    def _close_mask(self, rcell: int, cells: np.ndarray, ratios: np.ndarray) -> np.ndarray:
        """Considered cells within ``locality_factor * h_r * F2/F1`` of cell ``rcell``."""
        d = self.centroids[cells] - self.centroids[rcell]
        dist = np.sqrt(np.einsum('ij,ij->i', d, d))
        radius = self.config.locality_factor * self.cell_radius[rcell] * np.maximum(ratios[rcell], ratios[cells])
        return dist <= radius * (1.0 + EPS_RADIUS)

    def solve(self, metric, startcells) -> np.ndarray:
        """Solve the eikonal equation.

        Parameters
        ----------
        metric : array_like
            Metric tensor per cell: flat row-major ``(4*N,)``, ``(N, 4)`` or
            ``(N, 2, 2)``. Must be symmetric positive-definite.
        startcells : sequence of int
            Cells where the arrival time is zero at the centroid.

        Returns
        -------
        (N,) float64 ndarray
            Arrival time per cell, ``config.inf_value`` where unreachable.
        """
        return self.solve_session(metric, startcells).solution

    def solve_session(self, metric, startcells) -> SolveSession:
        """Like solve() but return the whole session (solution, order, stats)."""
        M = as_metric_array(metric, self.num_cells)
        if self.config.validate_metric:
            check_spd(M)
        seeds = self._check_start_cells(startcells)
        session = SolveSession(self, M)
        t0 = time.perf_counter()
        self._propagate(session, seeds)
        stats = session.stats
        stats.time_total = time.perf_counter() - t0
        stats.unreachable = int(self.num_cells - np.count_nonzero(session.accepted))
        logger.info('eikonal solve: cells=%d seeds=%d accepted=%d unreachable=%d decrease_keys=%d time=%.3fs',
                    self.num_cells, len(seeds), stats.accepted, stats.unreachable,
                    stats.decrease_keys, stats.time_total)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('eikonal solve stats:\n%s', format_stats_table(stats))
        return session

    def _push_far_neighbours(self, session: SolveSession, cell: int, floor: float) -> None:
        accepted = session.accepted
        queue = session.considered
        for nb in self.neighbours[cell]:
            if not accepted[nb] and nb not in queue:
                value = max(session.local.compute_value(nb, session.solution, session.front), floor)
                queue.push(value, nb)
                session.stats.pushes += 1

    def _propagate(self, session: SolveSession, seeds: List[int]) -> None:
        stats = session.stats
        queue = session.considered
        front = session.front
        ratios = session.ratios
        debug = logger.isEnabledFor(logging.DEBUG)

        # Start cells are accepted with value zero.
        for s in seeds:
            session.mark_accepted(s, 0.0)
        front.add_seeds(seeds)
        stats.accepted = len(seeds)
        stats.front_max = len(front)
        for s in seeds:
            self._push_far_neighbours(session, s, 0.0)

        while queue:
            value, rcell = queue.pop_min()
            session.mark_accepted(rcell, value)
            front.accept(rcell)
            stats.accepted += 1
            stats.front_max = max(stats.front_max, len(front))
            if debug:
                logger.debug('accepted cell %d value=%.6g front=%d considered=%d',
                             rcell, value, len(front), len(queue))

            # New candidates never undercut the value just accepted.
            self._push_far_neighbours(session, rcell, value)

            if not queue:
                continue
            cells = queue.cells()
            for ccell in cells[self._close_mask(rcell, cells, ratios)].tolist():
                stats.reevaluations += 1
                new_value = max(session.local.compute_value(ccell, session.solution, front), value)
                if new_value < queue.value(ccell):
                    queue.decrease_key(ccell, new_value)
                    stats.decrease_keys += 1


def solve_eikonal(grid, metric, startcells, config: Optional[EikonalConfig] = None) -> np.ndarray:
    """One-shot convenience wrapper around AnisotropicEikonal2D.solve()."""
    return AnisotropicEikonal2D(grid, config=config).solve(metric, startcells)
