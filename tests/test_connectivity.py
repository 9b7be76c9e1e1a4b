"""Tests for flood-fill connectivity checking."""

from treasure_hunt.api.connectivity import flood_fill, is_fully_connected
from treasure_hunt.api.grid import Grid
from treasure_hunt.api.models import Position

ORIGIN = Position(0, 0)


class TestFloodFill:
    """Tests for flood_fill()."""

    def test_open_grid_reaches_everything(self):
        grid = Grid(4)
        assert len(flood_fill(grid, ORIGIN)) == 16

    def test_obstacles_are_not_reached(self):
        grid = Grid.from_rows([
            ".#.",
            ".#.",
            "...",
        ])
        reached = flood_fill(grid, ORIGIN)
        assert Position(1, 0) not in reached
        assert Position(1, 1) not in reached
        assert Position(2, 0) in reached
        assert len(reached) == 7

    def test_walled_origin_reaches_only_itself(self):
        grid = Grid.from_rows([
            ".#.",
            "#..",
            "...",
        ])
        assert flood_fill(grid, ORIGIN) == {ORIGIN}

    def test_no_diagonal_leaks(self):
        """A diagonal gap between two obstacles does not let the fill through."""
        grid = Grid.from_rows([
            ".#",
            "#.",
        ])
        assert Position(1, 1) not in flood_fill(grid, ORIGIN)


class TestIsFullyConnected:
    """Tests for is_fully_connected()."""

    def test_empty_grid_is_connected(self):
        assert is_fully_connected(Grid(5), ORIGIN) is True

    def test_single_cell_grid_is_connected(self):
        assert is_fully_connected(Grid(1), ORIGIN) is True

    def test_wall_with_gap_is_connected(self):
        grid = Grid.from_rows([
            "..#..",
            "..#..",
            "..#..",
            "..#..",
            ".....",
        ])
        assert is_fully_connected(grid, ORIGIN) is True

    def test_enclosed_corner_is_not_connected(self):
        grid = Grid.from_rows([
            ".....",
            ".....",
            ".....",
            "....#",
            "...#.",
        ])
        assert is_fully_connected(grid, ORIGIN) is False

    def test_enclosed_origin_is_not_connected(self):
        grid = Grid.from_rows([
            ".#.",
            "#..",
            "...",
        ])
        assert is_fully_connected(grid, ORIGIN) is False

    def test_only_origin_open_is_connected(self):
        """Nothing else is open, so nothing is cut off."""
        grid = Grid.from_rows([
            ".##",
            "###",
            "###",
        ])
        assert is_fully_connected(grid, ORIGIN) is True

    def test_treasure_cells_count_as_open(self):
        grid = Grid.from_rows([
            "...",
            "..#",
            ".#$",
        ])
        assert is_fully_connected(grid, ORIGIN) is False

    def test_check_does_not_mutate_grid(self):
        grid = Grid.from_rows([
            "..#",
            "...",
            "#..",
        ])
        before = repr(grid)
        is_fully_connected(grid, ORIGIN)
        assert repr(grid) == before
        assert grid.is_obstacle(Position(2, 0))
