"""
Unit tests for GridMetadata and GridMap.
"""

import pytest
import numpy as np
from pydantic import ValidationError

from location_costmap.grid import GridMap, GridMetadata


class TestGridMetadata:
    """Tests for the lattice description."""

    def test_rows_and_cols(self):
        meta = GridMetadata(width=2.0, height=1.0, resolution=0.25)
        assert meta.cols == 8
        assert meta.rows == 4
        assert meta.shape == (4, 8)

    def test_rejects_zero_resolution(self):
        with pytest.raises(ValidationError):
            GridMetadata(width=2.0, height=2.0, resolution=0.0)

    def test_rejects_empty_lattice(self):
        # 0.1 / 1.0 rounds to zero columns
        with pytest.raises(ValidationError):
            GridMetadata(width=0.1, height=2.0, resolution=1.0)

    def test_is_immutable(self):
        meta = GridMetadata(width=2.0, height=2.0, resolution=1.0)
        with pytest.raises(ValidationError):
            meta.width = 4.0

    def test_equality_by_value(self):
        a = GridMetadata(width=2.0, height=2.0, resolution=1.0, origin_x=1.0)
        b = GridMetadata(width=2.0, height=2.0, resolution=1.0, origin_x=1.0)
        c = GridMetadata(width=2.0, height=2.0, resolution=1.0, origin_x=2.0)
        assert a == b
        assert a != c

    def test_cell_to_world(self):
        meta = GridMetadata(width=2.0, height=2.0, resolution=0.5, origin_x=-1.0, origin_y=2.0)
        assert meta.cell_to_world(1, 0) == (-1.0, 2.5)
        assert meta.cell_to_world(0, 3) == (0.5, 2.0)

    def test_world_to_cell(self):
        meta = GridMetadata(width=2.0, height=2.0, resolution=0.5, origin_x=-1.0, origin_y=2.0)
        assert meta.world_to_cell(-0.75, 2.6) == (1, 0)
        # Below the origin maps to negative indices, no clamping
        assert meta.world_to_cell(-1.25, 1.9) == (-1, -1)

    def test_contains_cell(self):
        meta = GridMetadata(width=2.0, height=1.0, resolution=1.0)
        assert meta.contains_cell(0, 1)
        assert not meta.contains_cell(1, 0)
        assert not meta.contains_cell(0, -1)

    def test_cell_origins(self):
        meta = GridMetadata(width=3.0, height=2.0, resolution=1.0, origin_x=10.0, origin_y=-5.0)
        xs, ys = meta.cell_origins()
        assert xs.shape == (2, 3)
        assert ys.shape == (2, 3)
        assert xs[1, 2] == 12.0
        assert ys[1, 2] == -4.0

    def test_cell_origins_are_lower_left_corners(self):
        """Same points as cell_to_world, not the cell midpoints."""
        meta = GridMetadata(width=1.0, height=1.0, resolution=0.5)
        xs, ys = meta.cell_origins()
        assert xs[0, 0] == 0.0 and ys[0, 0] == 0.0
        for row in range(meta.rows):
            for col in range(meta.cols):
                assert (xs[row, col], ys[row, col]) == meta.cell_to_world(row, col)
                assert meta.world_to_cell(xs[row, col], ys[row, col]) == (row, col)


class TestGridMap:
    """Tests for the numeric grid."""

    def test_create(self):
        meta = GridMetadata(width=4.0, height=3.0, resolution=1.0)
        grid = GridMap.create(meta)
        assert grid.data.shape == (3, 4)
        assert grid.rows == 3
        assert grid.cols == 4
        assert np.all(grid.data == 0)

    def test_create_ones(self):
        meta = GridMetadata(width=4.0, height=3.0, resolution=1.0)
        grid = GridMap.ones(meta, value=2.5)
        assert np.all(grid.data == 2.5)
        assert grid.total() == pytest.approx(30.0)

    def test_copy_is_independent(self):
        meta = GridMetadata(width=2.0, height=2.0, resolution=1.0)
        grid = GridMap.ones(meta)
        clone = grid.copy()
        clone.data[0, 0] = 7.0
        assert grid.data[0, 0] == 1.0
        assert clone.metadata is grid.metadata

    def test_copy_of_built_grid_is_writable(self):
        meta = GridMetadata(width=2.0, height=2.0, resolution=1.0)
        grid = GridMap.ones(meta)
        grid.data.setflags(write=False)
        clone = grid.copy()
        clone.data[0, 0] = 0.0
        assert clone.data.flags.writeable
        assert grid.data[0, 0] == 1.0
