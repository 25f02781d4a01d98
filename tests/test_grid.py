"""Tests for grid and geometry primitives."""
import pytest

from battlemap.core.map_generation.grid import (
    Grid,
    Position,
    Room,
    blank_canvas,
    count_neighbors,
)


class TestGridConstruction:
    """Tests for Grid validation."""

    def test_dimensions(self):
        grid = Grid.from_rows([["wall", "empty", "wall"], ["empty", "empty", "empty"]])
        assert grid.width == 3
        assert grid.height == 2

    def test_ragged_rows_rejected(self):
        with pytest.raises(ValueError):
            Grid.from_rows([["wall", "wall"], ["wall"]])

    def test_empty_grid_rejected(self):
        with pytest.raises(ValueError):
            Grid.from_rows([])

    def test_empty_terrain_id_rejected(self):
        """Every cell must carry a non-empty terrain id."""
        with pytest.raises(ValueError):
            Grid.from_rows([["wall", ""]])

    def test_grid_is_detached_from_canvas(self):
        """Mutating the construction canvas does not change the grid."""
        canvas = blank_canvas(3, 3, "empty")
        grid = Grid.from_rows(canvas)
        canvas[1][1] = "wall"
        assert grid.get(1, 1) == "empty"


class TestGridQueries:
    """Tests for lookups and iteration."""

    def test_get_out_of_bounds(self, open_room):
        with pytest.raises(IndexError):
            open_room.get(5, 0)
        with pytest.raises(IndexError):
            open_room.get(-1, 2)

    def test_neighbors_corner(self, open_room):
        """A corner cell has three in-bounds neighbours."""
        assert len(list(open_room.neighbors(0, 0))) == 3
        assert len(list(open_room.neighbors(0, 0, diagonal=False))) == 2

    def test_neighbors_center(self, open_room):
        assert len(list(open_room.neighbors(2, 2))) == 8

    def test_cells_row_major(self, open_room):
        positions = [p for p, _ in open_room.cells()]
        assert positions[0] == Position(0, 0)
        assert positions[1] == Position(1, 0)
        assert positions[5] == Position(0, 1)

    def test_edge_cells(self, open_room):
        edges = list(open_room.edge_cells())
        assert len(edges) == 16
        assert all(terrain_id == "wall" for _, terrain_id in edges)

    def test_terrain_counts(self, open_room):
        assert open_room.terrain_counts() == {"wall": 16, "empty": 9}

    def test_equality_and_hash(self):
        a = Grid.from_rows([["wall", "empty"]])
        b = Grid.from_rows([["wall", "empty"]])
        assert a == b
        assert hash(a) == hash(b)
        assert a != Grid.from_rows([["empty", "wall"]])

    def test_to_list_is_mutable_copy(self, open_room):
        rows = open_room.to_list()
        rows[0][0] = "empty"
        assert open_room.get(0, 0) == "wall"


class TestRoom:
    """Tests for Room geometry."""

    def test_center(self):
        assert Room(2, 3, 5, 4).center == Position(4, 5)

    def test_contains(self):
        room = Room(2, 2, 3, 3)
        assert room.contains(2, 2)
        assert room.contains(4, 4)
        assert not room.contains(5, 4)


class TestCountNeighbors:
    def test_counts_only_in_bounds(self):
        canvas = blank_canvas(3, 3, "wall")
        assert count_neighbors(canvas, 1, 1, "wall") == 8
        assert count_neighbors(canvas, 0, 0, "wall") == 3
