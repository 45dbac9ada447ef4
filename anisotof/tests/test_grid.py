"""Unit tests for grid containers and adjacency utilities."""
import math

import numpy as np
import pytest

from anisotof.core.grid import (
    UnstructuredGrid2D, cartesian_grid, cell_radii, delaunay_grid, grid_from_triangles,
    order_counter_clockwise, polygon_signed_area, vertex_neighbours,
)


class TestCartesianGrid:

    def test_counts_and_centroids(self):
        grid = cartesian_grid(4, 3, dx=2.0, dy=0.5)
        assert grid.dimensions == 2
        assert grid.number_of_cells == 12
        assert grid.points.shape == (20, 2)
        # cell index i + nx*j
        assert np.allclose(grid.cell_centroids[0], [1.0, 0.25])
        assert np.allclose(grid.cell_centroids[5], [3.0, 0.75])
        assert np.allclose(grid.cell_areas(), 1.0)

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            cartesian_grid(0, 3)

    def test_vertex_neighbour_counts(self):
        grid = cartesian_grid(4, 4)
        nbs = vertex_neighbours(grid)
        assert len(nbs[0]) == 3      # corner
        assert len(nbs[1]) == 5      # edge
        assert len(nbs[5]) == 8      # interior
        assert nbs[0] == [1, 4, 5]

    def test_neighbour_relation_is_symmetric(self):
        grid = cartesian_grid(5, 3)
        nbs = vertex_neighbours(grid)
        for c, row in enumerate(nbs):
            assert c not in row
            for nb in row:
                assert c in nbs[nb]

    def test_counter_clockwise_order(self):
        grid = cartesian_grid(3, 3)
        ordered = order_counter_clockwise(grid, vertex_neighbours(grid))
        assert ordered[4] == [5, 8, 7, 6, 3, 0, 1, 2]
        assert ordered[0] == [1, 4, 3]
        c = grid.cell_centroids
        for cell, row in enumerate(ordered):
            angles = [math.atan2(*(c[nb] - c[cell])[::-1]) % (2 * math.pi) for nb in row]
            assert angles == sorted(angles)

    def test_cell_radii(self):
        grid = cartesian_grid(3, 3)
        r = cell_radii(grid.cell_centroids, vertex_neighbours(grid))
        assert np.allclose(r, math.sqrt(2.0))
        assert cell_radii(np.zeros((1, 2)), [[]])[0] == 0.0


class TestTriangleGrids:

    def test_orientation_is_normalised(self):
        points = [[0, 0], [1, 0], [0, 1], [1, 1]]
        triangles = [[0, 2, 1], [1, 3, 2]]   # first one clockwise
        grid = grid_from_triangles(points, triangles)
        for cell in grid.cells:
            assert polygon_signed_area(grid.points[list(cell)]) > 0.0
        assert np.allclose(grid.cell_centroids[0], [1.0 / 3.0, 1.0 / 3.0])

    def test_shape_validation(self):
        with pytest.raises(ValueError):
            grid_from_triangles([[0, 0, 0]], [[0, 0, 0]])
        with pytest.raises(ValueError):
            grid_from_triangles([[0, 0], [1, 0], [0, 1]], [[0, 1]])

    def test_delaunay_grid(self):
        rng = np.random.RandomState(0)
        pts = rng.rand(30, 2)
        grid = delaunay_grid(pts)
        assert grid.number_of_cells > 0
        assert np.all(grid.cell_areas() > 0.0)
        # triangles of a convex hull triangulation cover its area
        from scipy.spatial import ConvexHull
        assert grid.cell_areas().sum() == pytest.approx(ConvexHull(pts).volume)


class TestUnstructuredGrid:

    def test_invalid_vertex_reference(self):
        with pytest.raises(ValueError):
            UnstructuredGrid2D([[0, 0], [1, 0], [0, 1]], [[0, 1, 3]])

    def test_dimensions_follow_points(self):
        grid = UnstructuredGrid2D(np.zeros((4, 3)), [[0, 1, 2], [1, 2, 3]])
        assert grid.dimensions == 3
        with pytest.raises(ValueError):
            grid.cell_areas()

    def test_polygon_centroid(self):
        # L-shaped hexagon: area-weighted centroid differs from the vertex mean
        pts = [[0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]]
        grid = UnstructuredGrid2D(pts, [list(range(6))])
        assert grid.cell_areas()[0] == pytest.approx(3.0)
        assert np.allclose(grid.cell_centroids[0], [5.0 / 6.0, 5.0 / 6.0])

    def test_signed_area_orientation(self):
        sq = [(0, 0), (1, 0), (1, 1), (0, 1)]
        assert polygon_signed_area(sq) == pytest.approx(1.0)
        assert polygon_signed_area(sq[::-1]) == pytest.approx(-1.0)
