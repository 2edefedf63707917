"""Tests for exterior classification."""

import numpy as np

from conftest import make_grid


class TestClassifyExterior:
    """Tests for the classify_exterior flood fill."""

    def test_hole_is_not_exterior(self, ring_grid):
        from stitchgenie.grid.exterior import classify_exterior

        exterior = classify_exterior(ring_grid)

        assert not exterior[3, 3]
        assert exterior[0, 0]
        assert exterior[7, 7]
        assert exterior[3, 0]

    def test_partition(self, ring_grid):
        """Occupied, exterior and hole cells cover the grid exactly once."""
        from stitchgenie.grid.exterior import classify_exterior

        exterior = classify_exterior(ring_grid)
        hole = ~ring_grid & ~exterior

        assert not (exterior & ring_grid).any()
        assert (ring_grid | exterior | hole).all()
        assert int(hole.sum()) == 1

    def test_all_empty_grid(self):
        from stitchgenie.grid.exterior import classify_exterior

        exterior = classify_exterior(np.zeros((5, 7), dtype=bool))

        assert exterior.all()

    def test_all_full_grid(self, full_grid):
        from stitchgenie.grid.exterior import classify_exterior

        exterior = classify_exterior(full_grid)

        assert not exterior.any()

    def test_diagonal_gap_does_not_leak(self):
        """Empty cells touching only diagonally stay separate."""
        from stitchgenie.grid.exterior import classify_exterior

        grid = make_grid([
            ".....",
            ".###.",
            ".#.#.",
            ".##..",
            ".....",
        ])
        exterior = classify_exterior(grid)

        # (2, 2) touches the exterior cell (3, 3) only diagonally
        assert not exterior[2, 2]
        assert exterior[3, 3]

    def test_channel_to_border_is_exterior(self):
        """A pocket opened to the edge by a one-cell channel is exterior."""
        from stitchgenie.grid.exterior import classify_exterior

        grid = make_grid([
            "#####",
            "#...#",
            "#...#",
            "##.##",
        ])
        exterior = classify_exterior(grid)

        assert exterior[1:3, 1:4].all()
        assert exterior[3, 2]

    def test_single_row_grid(self):
        from stitchgenie.grid.exterior import classify_exterior

        grid = make_grid([".#.#."])
        exterior = classify_exterior(grid)

        np.testing.assert_array_equal(exterior, ~grid)

    def test_mask_is_read_only(self, ring_grid):
        import pytest

        from stitchgenie.grid.exterior import classify_exterior

        exterior = classify_exterior(ring_grid)

        with pytest.raises(ValueError):
            exterior[0, 0] = False


class TestCellClasses:
    def test_labels(self, ring_grid):
        from stitchgenie.grid.exterior import classify_cells, classify_exterior
        from stitchgenie.models import CellClass

        labels = classify_cells(ring_grid, classify_exterior(ring_grid))

        assert labels[0, 0] == CellClass.EXTERIOR.value
        assert labels[1, 1] == CellClass.OCCUPIED.value
        assert labels[3, 3] == CellClass.HOLE.value

    def test_count_holes(self, ring_grid, full_grid):
        from stitchgenie.grid.exterior import classify_exterior, count_holes

        assert count_holes(ring_grid, classify_exterior(ring_grid)) == 1
        assert count_holes(full_grid, classify_exterior(full_grid)) == 0

    def test_border_seeds_unique(self):
        from stitchgenie.grid.exterior import border_seeds

        seeds = list(border_seeds(np.zeros((1, 1), dtype=bool)))

        assert seeds == [(0, 0)]
