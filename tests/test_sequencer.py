# tests/test_sequencer.py
from __future__ import annotations

import pytest

import sequencer
from grid import PlacedTetromino
from sequencer import (
    SequenceResult,
    is_supported,
    sequence_digit,
    sequence_pieces,
    sequence_time,
    spawn_position,
    topological_order,
)
from solver import TileResult, TileStats, tile_digit, tile_grid, tile_time, tile_time_grid


def _full_4x4() -> TileResult:
    return tile_grid(4, 4, [[True] * 4 for _ in range(4)], seed=42)


def _assert_gravity_order(seq: SequenceResult) -> None:
    bottom_row = seq.rows - 1
    placed_cells: set = set()
    placed_ids: set = set()
    grid = {cell: s.piece for s in seq.sequence for cell in s.piece.cells}
    for s in seq.sequence:
        assert is_supported(s.piece, placed_cells, bottom_row)
        for r, c in s.piece.cells:
            for row in range(r):
                above = grid.get((row, c))
                assert above is None or above.piece_id not in placed_ids
        placed_cells.update(s.piece.cells)
        placed_ids.add(s.piece.piece_id)


def test_empty_or_failed_tiling_gives_no_sequence() -> None:
    failed = TileResult(success=False, pieces=(), grid=(), stats=TileStats(0, 0, 0.0))
    seq = sequence_pieces(failed)

    assert not seq.success
    assert seq.sequence == ()


def test_small_grid_sequence_covers_every_piece_in_order() -> None:
    tiling = _full_4x4()
    seq = sequence_pieces(tiling)

    assert seq.success
    assert (seq.rows, seq.cols) == (4, 4)
    assert [s.order for s in seq.sequence] == [0, 1, 2, 3]
    assert {s.piece.piece_id for s in seq.sequence} == {p.piece_id for p in tiling.pieces}
    _assert_gravity_order(seq)


def test_first_piece_rests_on_the_floor() -> None:
    for digit in range(10):
        seq = sequence_pieces(tile_digit(digit, seed=100 + digit))
        assert seq.success, digit
        assert len(seq.sequence) == 15
        assert seq.sequence[0].piece.max_row == seq.rows - 1


def test_every_piece_lands_on_support() -> None:
    seq = sequence_pieces(tile_digit(8, seed=42))
    assert seq.success
    _assert_gravity_order(seq)


def test_steps_spawn_rotate_move_drop_lock() -> None:
    seq = sequence_pieces(tile_digit(5, seed=42))
    assert seq.success

    for s in seq.sequence:
        piece = s.piece
        actions = [step.action for step in s.steps]
        assert actions[0] == "spawn"
        assert actions[-1] == "lock"
        assert actions.count("rotate") == piece.rotation_index

        spawn_row, spawn_col = spawn_position(piece, seq.cols)
        assert (s.steps[0].row, s.steps[0].col) == (spawn_row, spawn_col)
        assert actions.count("move") == abs(piece.anchor[1] - spawn_col)

        drops = [step for step in s.steps if step.action == "drop"]
        assert [step.row for step in drops] == list(range(spawn_row + 1, piece.anchor[0] + 1))
        assert all(step.col == piece.anchor[1] for step in drops)
        assert (s.steps[-1].row, s.steps[-1].col) == piece.anchor
        assert s.drop_column == piece.anchor[1]


def test_moves_carry_their_direction() -> None:
    seq = sequence_pieces(tile_time_grid(12, 34, seed=42))
    directions = {
        step.direction
        for s in seq.sequence
        for step in s.steps
        if step.action == "move"
    }
    assert directions <= {"left", "right"}
    assert directions


def test_unified_grid_is_not_placed_left_to_right() -> None:
    tiling = tile_time_grid(12, 34, seed=42)
    seq = sequence_pieces(tiling)

    assert seq.success
    assert len(seq.sequence) == len(tiling.pieces)
    by_row: dict[int, list] = {}
    for s in seq.sequence:
        by_row.setdefault(s.piece.max_row, []).append(s)
    # within a row, dropped pieces step back to the left at least once
    rows_out_of_order = []
    for row, group in by_row.items():
        cols = [s.piece.min_col for s in sorted(group, key=lambda s: s.order)]
        if any(b < a for a, b in zip(cols, cols[1:])):
            rows_out_of_order.append(row)
    assert rows_out_of_order
    # one layer at a time from the floor
    assert seq.sequence[0].piece.max_row == seq.rows - 1
    _assert_gravity_order(seq)


def test_topological_order_respects_support() -> None:
    tiling = _full_4x4()
    ordered = topological_order(tiling.pieces, tiling.grid)

    assert ordered is not None
    seen: set = set()
    for piece in ordered:
        for r, c in piece.cells:
            if r + 1 < tiling.rows:
                below = tiling.grid[r + 1][c]
                assert below is piece or below.piece_id in seen
        seen.add(piece.piece_id)


def test_wrappers_sequence_digits_and_times() -> None:
    assert sequence_digit(tile_digit(3, seed=9)).success

    results = sequence_time(tile_time(23, 59, seed=42))
    assert len(results) == 4
    assert all(r.success and len(r.sequence) == 15 for r in results)


@pytest.mark.parametrize("cols", [6, 32])
def test_spawn_is_centered_above_the_field(cols: int) -> None:
    tiling = tile_digit(0, seed=1)
    piece = tiling.pieces[0]
    row, col = spawn_position(piece, cols)
    assert row < 0
    assert 0 <= col <= cols - 1


def test_stalled_greedy_order_falls_back_to_support_order(monkeypatch: pytest.MonkeyPatch) -> None:
    tiling = _full_4x4()
    # every drop path reported blocked: the greedy pass stalls on its first pick
    monkeypatch.setattr(sequencer, "has_clear_drop_path", lambda piece, placed_ids, grid: False)

    seq = sequence_pieces(tiling)

    assert seq.success
    assert [s.order for s in seq.sequence] == [0, 1, 2, 3]
    assert {s.piece.piece_id for s in seq.sequence} == {p.piece_id for p in tiling.pieces}
    assert seq.sequence[0].piece.max_row == seq.rows - 1
    assert all(s.steps[-1].action == "lock" for s in seq.sequence)
    _assert_gravity_order(seq)


def test_interlocking_pieces_cannot_be_dropped() -> None:
    # each piece rests on the other: A over B on the left, B over A on the right
    a = PlacedTetromino(
        piece_id=1, kind="S", rotation_index=0, anchor=(0, 0),
        cells=((0, 0), (0, 1), (1, 2), (1, 3)), is_lit=True,
    )
    b = PlacedTetromino(
        piece_id=2, kind="Z", rotation_index=0, anchor=(0, 0),
        cells=((0, 2), (0, 3), (1, 0), (1, 1)), is_lit=True,
    )
    tiling = TileResult(
        success=True,
        pieces=(a, b),
        grid=((a, a, b, b), (b, b, a, a)),
        stats=TileStats(0, 0, 0.0),
    )

    assert topological_order(tiling.pieces, tiling.grid) is None

    seq = sequence_pieces(tiling)
    assert seq.success is False
    assert seq.sequence == ()
    assert (seq.rows, seq.cols) == (2, 4)
