# sequencer.py
# Orders a finished tiling into a valid Tetris drop sequence with per-piece moves

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Set

from grid import PlacedTetromino
from solver import TileResult
from tetrominoes import TETROMINOES, Cell, rotation_size

logger = logging.getLogger(__name__)

StepAction = Literal["spawn", "rotate", "move", "drop", "lock"]
MoveDirection = Literal["left", "right", "none"]


@dataclass(frozen=True)
class PlacementStep:
    action: StepAction
    row: Optional[int] = None
    col: Optional[int] = None
    direction: Optional[MoveDirection] = None


@dataclass(frozen=True)
class SequencedPiece:
    piece: PlacedTetromino
    order: int
    drop_column: int
    steps: tuple[PlacementStep, ...]


@dataclass(frozen=True)
class SequenceResult:
    success: bool
    sequence: tuple[SequencedPiece, ...]
    rows: int
    cols: int


def spawn_position(piece: PlacedTetromino, grid_cols: int) -> Cell:
    """Above the field, horizontally centered for the piece's final rotation."""
    height, width = rotation_size(TETROMINOES[piece.kind], piece.rotation_index)
    return (-height, (grid_cols - width) // 2)


def generate_steps(piece: PlacedTetromino, grid_cols: int) -> tuple[PlacementStep, ...]:
    """spawn, rotate x rotation_index, one move per column, one drop per row, lock.

    Pieces always spawn in rotation 0.
    """
    spawn_row, spawn_col = spawn_position(piece, grid_cols)
    target_row, target_col = piece.anchor

    steps: List[PlacementStep] = [PlacementStep("spawn", row=spawn_row, col=spawn_col)]

    steps.extend(PlacementStep("rotate") for _ in range(piece.rotation_index))

    distance = target_col - spawn_col
    if distance:
        direction: MoveDirection = "right" if distance > 0 else "left"
        step = 1 if distance > 0 else -1
        for m in range(1, abs(distance) + 1):
            steps.append(PlacementStep("move", col=spawn_col + m * step, direction=direction))

    for row in range(spawn_row + 1, target_row + 1):
        steps.append(PlacementStep("drop", row=row, col=target_col))

    steps.append(PlacementStep("lock", row=target_row, col=target_col))
    return tuple(steps)


def is_supported(piece: PlacedTetromino, placed_cells: Set[Cell], bottom_row: int) -> bool:
    """Lowest cell in each of the piece's columns rests on the floor or a placed cell."""
    lowest: Dict[int, int] = {}
    for r, c in piece.cells:
        if r > lowest.get(c, -1):
            lowest[c] = r

    return all(row == bottom_row or (row + 1, col) in placed_cells for col, row in lowest.items())


def has_clear_drop_path(
    piece: PlacedTetromino,
    placed_ids: Set[int],
    grid: tuple[tuple[PlacedTetromino | None, ...], ...],
) -> bool:
    """No already-sequenced piece sits anywhere above one of the piece's cells."""
    for r, c in piece.cells:
        for row in range(r):
            above = grid[row][c]
            if above is not None and above.piece_id in placed_ids:
                return False
    return True


def _sequenced(piece: PlacedTetromino, order: int, grid_cols: int) -> SequencedPiece:
    return SequencedPiece(
        piece=piece,
        order=order,
        drop_column=piece.anchor[1],
        steps=generate_steps(piece, grid_cols),
    )


def topological_order(
    pieces: tuple[PlacedTetromino, ...],
    grid: tuple[tuple[PlacedTetromino | None, ...], ...],
) -> Optional[List[PlacedTetromino]]:
    """Kahn's algorithm over "rests on" edges: a piece waits for every piece directly
    beneath one of its cells. Ties go to the lowest piece. None on a cycle.
    """
    rows = len(grid)
    by_id = {piece.piece_id: piece for piece in pieces}
    waits_on: Dict[int, Set[int]] = {piece.piece_id: set() for piece in pieces}
    supports: Dict[int, Set[int]] = {piece.piece_id: set() for piece in pieces}

    for piece in pieces:
        for r, c in piece.cells:
            if r + 1 >= rows:
                continue
            below = grid[r + 1][c]
            if below is not None and below.piece_id != piece.piece_id:
                waits_on[piece.piece_id].add(below.piece_id)
                supports[below.piece_id].add(piece.piece_id)

    in_degree = {pid: len(deps) for pid, deps in waits_on.items()}
    ready = [pid for pid, degree in in_degree.items() if degree == 0]
    ordered: List[PlacedTetromino] = []

    while ready:
        ready.sort(key=lambda pid: -by_id[pid].max_row)
        current = ready.pop(0)
        ordered.append(by_id[current])
        for dependent in supports[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)

    if len(ordered) != len(pieces):
        return None
    return ordered


def sequence_pieces(result: TileResult) -> SequenceResult:
    """Greedy bottom-up drop order, falling back to a global topological sort if it stalls."""
    rows = result.rows
    cols = result.cols

    if not result.success or not result.pieces:
        return SequenceResult(success=False, sequence=(), rows=rows, cols=cols)

    bottom_row = rows - 1
    placed_cells: Set[Cell] = set()
    placed_ids: Set[int] = set()
    # dict keeps the tiling's piece order for stable tie-breaking
    remaining: Dict[int, PlacedTetromino] = {piece.piece_id: piece for piece in result.pieces}
    sequence: List[SequencedPiece] = []

    while remaining:
        candidates = [
            piece
            for piece in remaining.values()
            if is_supported(piece, placed_cells, bottom_row)
            and has_clear_drop_path(piece, placed_ids, result.grid)
        ]

        if not candidates:
            logger.debug(
                "Greedy sequencing stalled with %d of %d pieces left; trying topological order",
                len(remaining), len(result.pieces),
            )
            return _sequence_topologically(result)

        # Fill from the floor up; leftmost first among equals.
        candidates.sort(key=lambda p: (-p.max_row, p.min_col))
        piece = candidates[0]

        del remaining[piece.piece_id]
        placed_ids.add(piece.piece_id)
        placed_cells.update(piece.cells)
        sequence.append(_sequenced(piece, len(sequence), cols))

    return SequenceResult(success=True, sequence=tuple(sequence), rows=rows, cols=cols)


def _sequence_topologically(result: TileResult) -> SequenceResult:
    ordered = topological_order(result.pieces, result.grid)
    if ordered is None:
        logger.warning("Pieces of a %dx%d tiling interlock; no drop order exists", result.rows, result.cols)
        return SequenceResult(success=False, sequence=(), rows=result.rows, cols=result.cols)

    return SequenceResult(
        success=True,
        sequence=tuple(_sequenced(piece, order, result.cols) for order, piece in enumerate(ordered)),
        rows=result.rows,
        cols=result.cols,
    )


def sequence_digit(result: TileResult) -> SequenceResult:
    return sequence_pieces(result)


def sequence_time(results: List[TileResult]) -> List[SequenceResult]:
    return [sequence_pieces(result) for result in results]
