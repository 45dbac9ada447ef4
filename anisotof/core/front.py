"""Accepted-front bookkeeping.

The accepted front is the set of accepted cells that still have at least one
non-accepted neighbour. Only front cells can contribute to the local update of
a not-yet-accepted cell, so the set is pruned as cells become fully
surrounded.

Two pruning strategies maintain the same set:

- ``'count'``: each cell carries the number of its neighbours that are not
  accepted; accepting ``r`` decrements the count of every cell listing ``r``
  as a neighbour (reverse adjacency) and drops front cells reaching zero.
  O(degree) per acceptance.
- ``'scan'``: after each acceptance every front member is re-checked against
  its neighbour list. O(front size x degree) per acceptance.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Set

import numpy as np

from .config import FRONT_PRUNING_MODES

__all__ = ['AcceptedFront']


class AcceptedFront:
    """Set of accepted cells bordering at least one non-accepted cell.

    Parameters
    ----------
    neighbours : sequence of sequences of int
        Neighbour list per cell.
    accepted : (N,) bool ndarray
        The session's Accepted flags. Read only; the caller flips a flag
        *before* calling accept() or add_seeds() for that cell.
    mode : str
        ``'count'`` or ``'scan'``.
    """

    def __init__(self, neighbours: Sequence[Sequence[int]], accepted: np.ndarray, mode: str = 'count'):
        if mode not in FRONT_PRUNING_MODES:
            raise ValueError(f"Unknown front pruning mode: {mode!r}")
        self.neighbours = neighbours
        self.accepted = accepted
        self.mode = mode
        self._members: Set[int] = set()
        if mode == 'count':
            n = len(neighbours)
            self._remaining = np.array([len(nbs) for nbs in neighbours], dtype=np.int64)
            reverse: List[List[int]] = [[] for _ in range(n)]
            for c, nbs in enumerate(neighbours):
                for nb in nbs:
                    reverse[nb].append(c)
            self._reverse = reverse
            self._recorded = np.zeros(n, dtype=bool)

    def __contains__(self, cell) -> bool:
        return cell in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self):
        return iter(self._members)

    def cells(self) -> List[int]:
        return sorted(self._members)

    def _on_boundary(self, cell: int) -> bool:
        acc = self.accepted
        return any(not acc[nb] for nb in self.neighbours[cell])

    def add_seeds(self, cells: Iterable[int]) -> None:
        """Register start cells that were accepted without going through the queue."""
        seeds = list(dict.fromkeys(int(c) for c in cells))
        if self.mode == 'count':
            for c in seeds:
                self._record_acceptance(c)
            for c in seeds:
                if self._remaining[c] > 0:
                    self._members.add(c)
        else:
            self._members.update(c for c in seeds if self._on_boundary(c))

    def accept(self, cell: int) -> None:
        """Add a newly accepted cell and prune members that became interior."""
        cell = int(cell)
        if self.mode == 'count':
            self._record_acceptance(cell)
            if self._remaining[cell] > 0:
                self._members.add(cell)
        else:
            self._members.add(cell)
            interior = [c for c in self._members if not self._on_boundary(c)]
            self._members.difference_update(interior)

    def _record_acceptance(self, cell: int) -> None:
        # each acceptance decrements its reverse neighbours exactly once
        if self._recorded[cell]:
            return
        self._recorded[cell] = True
        remaining = self._remaining
        for c in self._reverse[cell]:
            remaining[c] -= 1
            if remaining[c] == 0:
                self._members.discard(c)
