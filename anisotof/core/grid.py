"""Unstructured 2-D grids and cell adjacency utilities.

The eikonal solver only needs three things from a grid: its dimensionality,
the cell centroids and, for each cell, the counter-clockwise ordered list of
cells sharing a vertex with it. This module provides a light polygonal grid
container plus the small builders used by the tests and examples:

- cartesian_grid: uniform nx x ny quadrilateral grid
- grid_from_triangles: wrap an existing (points, triangles) triangulation
- delaunay_grid: Delaunay triangulation of scattered points (scipy)

Canonical data format follows the rest of the package:
    points: (N, d) float64 array
    cells: sequence of vertex index tuples (triangles, quads or polygons)
"""
from __future__ import annotations

import math
from collections import defaultdict
from typing import List, Sequence, Tuple

import numpy as np

from .constants import EPS_AREA

__all__ = [
    'UnstructuredGrid2D',
    'cartesian_grid',
    'grid_from_triangles',
    'delaunay_grid',
    'polygon_signed_area',
    'vertex_neighbours',
    'order_counter_clockwise',
    'cell_radii',
]


def polygon_signed_area(poly) -> float:
    """Shoelace signed area of a polygon given as (K, 2) coordinates (CCW > 0)."""
    p = np.asarray(poly, dtype=np.float64)
    if p.shape[0] < 3:
        return 0.0
    x = p[:, 0]; y = p[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def _polygon_centroid(p: np.ndarray) -> np.ndarray:
    """Area-weighted centroid of a 2-D polygon; vertex mean if degenerate."""
    if p.shape[0] < 3:
        return p.mean(axis=0)
    x = p[:, 0]; y = p[:, 1]
    xn = np.roll(x, -1); yn = np.roll(y, -1)
    cross = x * yn - xn * y
    area = 0.5 * cross.sum()
    if abs(area) <= EPS_AREA:
        return p.mean(axis=0)
    cx = float(((x + xn) * cross).sum()) / (6.0 * area)
    cy = float(((y + yn) * cross).sum()) / (6.0 * area)
    return np.array([cx, cy], dtype=np.float64)


class UnstructuredGrid2D:
    """Polygonal cell grid.

    Parameters
    ----------
    points : (N, d) array_like
        Vertex coordinates. ``d`` is reported as ``dimensions``; the eikonal
        solver refuses grids where it is not 2.
    cells : sequence of sequences of int
        Vertex indices of each cell, counter-clockwise for 2-D polygons.
    """

    def __init__(self, points, cells):
        pts = np.asarray(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] < 1:
            raise ValueError(f"points must have shape (N, d), got {pts.shape}")
        n_pts = pts.shape[0]
        cell_list: List[Tuple[int, ...]] = []
        for ci, cell in enumerate(cells):
            verts = tuple(int(v) for v in cell)
            if not verts:
                raise ValueError(f"cell {ci} has no vertices")
            if min(verts) < 0 or max(verts) >= n_pts:
                raise ValueError(f"cell {ci} references a vertex outside [0, {n_pts})")
            cell_list.append(verts)
        self.points = pts
        self.cells = cell_list
        self.dimensions = int(pts.shape[1])
        self.number_of_cells = len(cell_list)
        self.cell_centroids = self._compute_centroids()

    def _compute_centroids(self) -> np.ndarray:
        out = np.empty((self.number_of_cells, self.dimensions), dtype=np.float64)
        for ci, verts in enumerate(self.cells):
            p = self.points[list(verts)]
            if self.dimensions == 2:
                out[ci] = _polygon_centroid(p)
            else:
                out[ci] = p.mean(axis=0)
        return out

    def cell_areas(self) -> np.ndarray:
        """Absolute polygon areas (2-D grids only)."""
        if self.dimensions != 2:
            raise ValueError("cell areas are only defined for 2-D grids")
        return np.array([abs(polygon_signed_area(self.points[list(c)])) for c in self.cells],
                        dtype=np.float64)

    def __repr__(self) -> str:
        return (f"UnstructuredGrid2D(points={self.points.shape[0]}, "
                f"cells={self.number_of_cells}, dimensions={self.dimensions})")


def cartesian_grid(nx: int, ny: int, dx: float = 1.0, dy: float = 1.0,
                   origin: Sequence[float] = (0.0, 0.0)) -> UnstructuredGrid2D:
    """Uniform quadrilateral grid with cell index ``i + nx*j``."""
    if nx < 1 or ny < 1:
        raise ValueError(f"grid must have at least one cell per direction, got {nx}x{ny}")
    xs = origin[0] + dx * np.arange(nx + 1, dtype=np.float64)
    ys = origin[1] + dy * np.arange(ny + 1, dtype=np.float64)
    X, Y = np.meshgrid(xs, ys)
    points = np.column_stack([X.ravel(), Y.ravel()])

    def node(i, j):
        return i + (nx + 1) * j

    cells = [(node(i, j), node(i + 1, j), node(i + 1, j + 1), node(i, j + 1))
             for j in range(ny) for i in range(nx)]
    return UnstructuredGrid2D(points, cells)


def _orient_triangles(points: np.ndarray, tris: np.ndarray) -> np.ndarray:
    """Return a copy of tris with every row counter-clockwise."""
    tris = tris.copy()
    if tris.size == 0:
        return tris
    p0 = points[tris[:, 0]]; p1 = points[tris[:, 1]]; p2 = points[tris[:, 2]]
    e1 = p1 - p0; e2 = p2 - p0
    areas = 0.5 * (e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])
    flip = areas < 0.0
    if np.any(flip):
        tris[flip, 1], tris[flip, 2] = tris[flip, 2], tris[flip, 1]
    return tris


def grid_from_triangles(points, triangles) -> UnstructuredGrid2D:
    """Wrap a triangulation; triangle orientation is normalised to CCW."""
    pts = np.asarray(points, dtype=np.float64)
    tris = np.asarray(triangles, dtype=np.int32)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"points must be (N, 2), got {pts.shape}")
    if tris.ndim != 2 or tris.shape[1] != 3:
        raise ValueError(f"triangles must be (M, 3), got {tris.shape}")
    return UnstructuredGrid2D(pts, _orient_triangles(pts, tris).tolist())


def delaunay_grid(points) -> UnstructuredGrid2D:
    """Delaunay triangulation of scattered 2-D points."""
    from scipy.spatial import Delaunay

    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"points must be (N, 2), got {pts.shape}")
    tri = Delaunay(pts)
    return grid_from_triangles(pts, tri.simplices)


def vertex_neighbours(grid) -> List[List[int]]:
    """For each cell, the sorted cells sharing at least one vertex with it."""
    vertex_cells = defaultdict(list)
    for ci, verts in enumerate(grid.cells):
        for v in verts:
            vertex_cells[v].append(ci)
    out: List[List[int]] = []
    for ci, verts in enumerate(grid.cells):
        nbs = set()
        for v in verts:
            nbs.update(vertex_cells[v])
        nbs.discard(ci)
        out.append(sorted(nbs))
    return out


def order_counter_clockwise(grid, neighbours: Sequence[Sequence[int]]) -> List[List[int]]:
    """Order each neighbour list counter-clockwise around the cell centroid.

    Neighbours are sorted by polar angle in [0, 2*pi) of the centroid offset;
    equal angles are broken by distance and then by cell index.
    """
    centroids = np.asarray(grid.cell_centroids, dtype=np.float64)
    ordered: List[List[int]] = []
    for ci, nbs in enumerate(neighbours):
        if len(nbs) < 2:
            ordered.append([int(n) for n in nbs])
            continue
        idx = np.asarray(nbs, dtype=np.int64)
        d = centroids[idx] - centroids[ci]
        ang = np.mod(np.arctan2(d[:, 1], d[:, 0]), 2.0 * math.pi)
        dist = np.hypot(d[:, 0], d[:, 1])
        order = np.lexsort((idx, dist, ang))
        ordered.append([int(n) for n in idx[order]])
    return ordered


def cell_radii(centroids, neighbours: Sequence[Sequence[int]]) -> np.ndarray:
    """Largest centroid distance from each cell to any of its neighbours (0 if isolated)."""
    c = np.asarray(centroids, dtype=np.float64)
    out = np.zeros(c.shape[0], dtype=np.float64)
    for ci, nbs in enumerate(neighbours):
        if len(nbs) == 0:
            out[ci] = 0.0
            continue
        d = c[np.asarray(nbs, dtype=np.int64)] - c[ci]
        out[ci] = float(np.sqrt(np.max(np.einsum('ij,ij->i', d, d))))
    return out
