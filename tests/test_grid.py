# tests/test_grid.py
from __future__ import annotations

import pytest

from grid import Grid, PlacementError
from tetrominoes import TETROMINOES


def test_place_and_remove_round_trip() -> None:
    grid = Grid(4, 4)
    piece = grid.place(TETROMINOES["O"], 0, (0, 0))

    assert piece.cells == ((0, 0), (0, 1), (1, 0), (1, 1))
    assert piece.is_lit
    assert grid.find_first_empty() == (0, 2)

    grid.remove(piece.piece_id)
    assert grid.find_first_empty() == (0, 0)
    assert grid.placed_pieces() == []


def test_can_place_rejects_out_of_bounds_and_overlap() -> None:
    grid = Grid(4, 4)
    assert not grid.can_place(TETROMINOES["I"], 0, (0, 1))
    assert not grid.can_place(TETROMINOES["O"], 0, (-1, 0))

    grid.place(TETROMINOES["O"], 0, (0, 0))
    assert not grid.can_place(TETROMINOES["O"], 0, (1, 1))
    assert grid.can_place(TETROMINOES["O"], 0, (2, 2))


def test_pieces_may_not_straddle_mask_regions() -> None:
    mask = [[True, True, False, False]] * 4
    grid = Grid(4, 4, mask)

    assert not grid.can_place(TETROMINOES["I"], 0, (0, 0))
    assert grid.can_place(TETROMINOES["I"], 1, (0, 2))

    piece = grid.place(TETROMINOES["I"], 1, (0, 2))
    assert not piece.is_lit
    assert not grid.mask_value(0, 2)


def test_invalid_placement_raises() -> None:
    grid = Grid(2, 2)
    with pytest.raises(PlacementError, match="Cannot place I"):
        grid.place(TETROMINOES["I"], 0, (0, 0))


def test_removing_unknown_piece_raises() -> None:
    grid = Grid(2, 2)
    with pytest.raises(PlacementError, match="not found"):
        grid.remove(7)


def test_ids_are_unique_per_grid() -> None:
    first = Grid(4, 4)
    second = Grid(4, 4)

    a = first.place(TETROMINOES["O"], 0, (0, 0))
    b = first.place(TETROMINOES["O"], 0, (0, 2))
    c = second.place(TETROMINOES["O"], 0, (0, 0))

    assert (a.piece_id, b.piece_id) == (1, 2)
    assert c.piece_id == 1


def test_grid_fills_up() -> None:
    grid = Grid(2, 4)
    grid.place(TETROMINOES["O"], 0, (0, 0))
    assert not grid.is_full()
    grid.place(TETROMINOES["O"], 0, (0, 2))
    assert grid.is_full()
    assert grid.find_first_empty() is None


def test_cells_returns_a_copy() -> None:
    grid = Grid(2, 2)
    snapshot = grid.cells()
    snapshot[0][0] = "junk"  # type: ignore[assignment]
    assert grid.cells()[0][0] is None
