"""Mutable min-priority queue for Considered cells.

Entries are ``(value, cell)`` pairs ordered lexicographically, so equal values
are served lowest cell index first and runs are reproducible. The queue is an
indexed binary heap: the cell index is the stable external handle and a
``cell -> heap slot`` array is kept up to date on every move, which makes
decrease-key O(log n) without lazy deletion.

Example:
    >>> q = ConsideredQueue(4)
    >>> q.push(2.0, 3); q.push(1.5, 1)
    >>> q.decrease_key(3, 1.0)
    >>> q.pop_min()
    (1.0, 3)
"""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

__all__ = ['ConsideredQueue']


class ConsideredQueue:
    """Indexed binary min-heap over ``(value, cell)`` with decrease-key.

    Parameters
    ----------
    num_cells : int
        Size of the cell index space; handles are cell indices in ``[0, num_cells)``.
    """

    def __init__(self, num_cells: int):
        self.num_cells = int(num_cells)
        self._heap: List[int] = []
        self._values = np.empty(self.num_cells, dtype=np.float64)
        self._pos = np.full(self.num_cells, -1, dtype=np.int64)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, cell) -> bool:
        c = int(cell)
        return 0 <= c < self.num_cells and self._pos[c] >= 0

    def clear(self) -> None:
        for c in self._heap:
            self._pos[c] = -1
        self._heap.clear()

    def value(self, cell: int) -> float:
        """Current key of a queued cell."""
        if cell not in self:
            raise KeyError(f"cell {cell} is not queued")
        return float(self._values[cell])

    def cells(self) -> np.ndarray:
        """Snapshot of the queued cells in heap order."""
        return np.array(self._heap, dtype=np.int64)

    def push(self, value: float, cell: int) -> None:
        c = int(cell)
        if not 0 <= c < self.num_cells:
            raise ValueError(f"cell {c} outside [0, {self.num_cells})")
        if self._pos[c] >= 0:
            raise ValueError(f"cell {c} is already queued")
        self._values[c] = value
        self._heap.append(c)
        self._pos[c] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def peek_min(self) -> Tuple[float, int]:
        if not self._heap:
            raise IndexError("peek on an empty ConsideredQueue")
        c = self._heap[0]
        return float(self._values[c]), c

    def pop_min(self) -> Tuple[float, int]:
        if not self._heap:
            raise IndexError("pop from an empty ConsideredQueue")
        top = self._heap[0]
        last = self._heap.pop()
        self._pos[top] = -1
        if self._heap:
            self._heap[0] = last
            self._pos[last] = 0
            self._sift_down(0)
        return float(self._values[top]), top

    def decrease_key(self, cell: int, value: float) -> None:
        """Lower the key of a queued cell; larger keys are rejected."""
        c = int(cell)
        if c not in self:
            raise KeyError(f"cell {c} is not queued")
        if value > self._values[c]:
            raise ValueError(
                f"decrease_key would increase cell {c} from {float(self._values[c])!r} to {value!r}")
        self._values[c] = value
        self._sift_up(int(self._pos[c]))

    # heap plumbing -----------------------------------------------------

    def _less(self, a: int, b: int) -> bool:
        va = self._values[a]; vb = self._values[b]
        return va < vb or (va == vb and a < b)

    def _swap(self, i: int, j: int) -> None:
        h = self._heap
        h[i], h[j] = h[j], h[i]
        self._pos[h[i]] = i
        self._pos[h[j]] = j

    def _sift_up(self, i: int) -> None:
        h = self._heap
        while i > 0:
            parent = (i - 1) >> 1
            if self._less(h[i], h[parent]):
                self._swap(i, parent)
                i = parent
            else:
                break

    def _sift_down(self, i: int) -> None:
        h = self._heap
        n = len(h)
        while True:
            left = 2 * i + 1
            if left >= n:
                break
            child = left
            right = left + 1
            if right < n and self._less(h[right], h[left]):
                child = right
            if self._less(h[child], h[i]):
                self._swap(i, child)
                i = child
            else:
                break
