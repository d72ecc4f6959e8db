# solver.py
# Randomized backtracking tiler; digit, HH:MM and unified HH:MM entry points

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from digits import (
    DIGIT_COLS,
    DIGIT_PATTERNS,
    DIGIT_ROWS,
    TIME_COLON_GAP_COLS,
    TIME_DIGIT_GAP_COLS,
    DigitMask,
    build_time_mask,
    count_lit_cells,
    count_unlit_cells,
    time_digits,
    time_layout,
    validate_digit,
    validate_time,
)
from grid import Grid, PlacedTetromino
from rng import Seed, SeededRandom, seed_to_number
from tetrominoes import TETROMINOES, Cell, Tetromino, all_rotations

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1_000_000

# Sub-seed offsets for the unified grid's gap regions (digits use +0..+3)
GAP_SEED_OFFSET = 10


@dataclass(frozen=True)
class TileStats:
    attempts: int
    backtracks: int
    duration_ms: float


@dataclass(frozen=True)
class TileResult:
    success: bool
    pieces: tuple[PlacedTetromino, ...]
    grid: tuple[tuple[PlacedTetromino | None, ...], ...]
    stats: TileStats

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0


@dataclass
class _SearchState:
    attempts: int
    backtracks: int
    max_attempts: int


def _empty_grid(rows: int, cols: int) -> tuple[tuple[None, ...], ...]:
    return tuple((None,) * cols for _ in range(rows))


def anchors_covering(tetromino: Tetromino, rotation_index: int, target: Cell) -> list[Cell]:
    """One anchor per cell of the rotation, each landing that cell on `target`."""
    row, col = target
    return [(row - dr, col - dc) for dr, dc in tetromino.rotations[rotation_index]]


def _backtrack(
    grid: Grid,
    combos: list[tuple[str, int]],
    random: SeededRandom,
    state: _SearchState,
) -> bool:
    if grid.is_full():
        return True

    if state.attempts >= state.max_attempts:
        return False

    target = grid.find_first_empty()
    if target is None:
        return True

    for kind, rotation_index in random.shuffle(combos):
        tetromino = TETROMINOES[kind]
        for anchor in anchors_covering(tetromino, rotation_index, target):
            state.attempts += 1

            if not grid.can_place(tetromino, rotation_index, anchor):
                continue

            piece = grid.place(tetromino, rotation_index, anchor)
            if _backtrack(grid, combos, random, state):
                return True

            grid.remove(piece.piece_id)
            state.backtracks += 1

    return False


def tile_grid(
    rows: int,
    cols: int,
    mask: Optional[DigitMask] = None,
    seed: Optional[Seed] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> TileResult:
    """Cover a rows x cols grid with tetrominoes that never straddle mask regions."""
    if mask is not None and (len(mask) != rows or any(len(row) != cols for row in mask)):
        raise ValueError(f"Mask must be {rows}x{cols} to tile a {rows}x{cols} grid")

    start = time.perf_counter()
    grid = Grid(rows, cols, mask)

    if mask is not None and (count_lit_cells(mask) % 4 or count_unlit_cells(mask) % 4):
        logger.warning(
            "Mask %dx%d cannot be tiled: %d lit / %d unlit cells",
            rows, cols, count_lit_cells(mask), count_unlit_cells(mask),
        )
        return TileResult(
            success=False,
            pieces=(),
            grid=_empty_grid(rows, cols),
            stats=TileStats(0, 0, (time.perf_counter() - start) * 1000.0),
        )

    random = SeededRandom(seed_to_number(seed))
    state = _SearchState(attempts=0, backtracks=0, max_attempts=max_attempts)

    success = _backtrack(grid, all_rotations(), random, state)

    stats = TileStats(
        attempts=state.attempts,
        backtracks=state.backtracks,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )

    if not success:
        logger.warning(
            "Tiling %dx%d gave up after %d attempts (%d backtracks)",
            rows, cols, stats.attempts, stats.backtracks,
        )
        return TileResult(success=False, pieces=(), grid=_empty_grid(rows, cols), stats=stats)

    logger.debug(
        "Tiled %dx%d with %d pieces: %d attempts, %d backtracks, %.1f ms",
        rows, cols, len(grid.placed_pieces()), stats.attempts, stats.backtracks, stats.duration_ms,
    )
    return TileResult(
        success=True,
        pieces=tuple(grid.placed_pieces()),
        grid=tuple(tuple(row) for row in grid.cells()),
        stats=stats,
    )


def tile_digit(
    digit: int,
    seed: Optional[Seed] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> TileResult:
    digit = validate_digit(digit)
    return tile_grid(DIGIT_ROWS, DIGIT_COLS, DIGIT_PATTERNS[digit], seed=seed, max_attempts=max_attempts)


def tile_time(
    hours: int,
    minutes: int,
    seed: Optional[Seed] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> List[TileResult]:
    """Four independent digit tilings; sub-seeds differ so "11:11" still varies."""
    hours, minutes = validate_time(hours, minutes)
    base_seed = seed_to_number(seed)
    return [
        tile_digit(digit, seed=base_seed + idx, max_attempts=max_attempts)
        for idx, digit in enumerate(time_digits(hours, minutes))
    ]


def _merge_stats(results: List[TileResult]) -> TileStats:
    return TileStats(
        attempts=sum(r.stats.attempts for r in results),
        backtracks=sum(r.stats.backtracks for r in results),
        duration_ms=sum(r.stats.duration_ms for r in results),
    )


def tile_time_grid(
    hours: int,
    minutes: int,
    seed: Optional[Seed] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    digit_gap_cols: int = TIME_DIGIT_GAP_COLS,
    colon_gap_cols: int = TIME_COLON_GAP_COLS,
    extended_hours: bool = False,
) -> TileResult:
    """Tile HH:MM as one field.

    Each digit and each gap rectangle is solved on its own slice of the composite
    mask, then the pieces are spliced into one coordinate space with ids 1..N.
    Any failed region, or an uncovered cell after splicing, fails the whole field.
    """
    mask, total_cols = build_time_mask(hours, minutes, digit_gap_cols, colon_gap_cols, extended_hours)
    base_seed = seed_to_number(seed)

    parts: list[tuple[TileResult, int]] = []
    digit_idx = 0
    gap_idx = 0
    for kind, offset, width in time_layout(digit_gap_cols, colon_gap_cols):
        if kind == "digit":
            sub_seed = base_seed + digit_idx
            digit_idx += 1
        else:
            sub_seed = base_seed + GAP_SEED_OFFSET + gap_idx
            gap_idx += 1
        region_mask = [row[offset : offset + width] for row in mask]
        result = tile_grid(DIGIT_ROWS, width, region_mask, seed=sub_seed, max_attempts=max_attempts)
        parts.append((result, offset))

    stats = _merge_stats([result for result, _ in parts])

    if not all(result.success for result, _ in parts):
        logger.warning("Unified grid for %02d:%02d failed: a region could not be tiled", hours, minutes)
        return TileResult(success=False, pieces=(), grid=_empty_grid(DIGIT_ROWS, total_cols), stats=stats)

    cells: list[list[PlacedTetromino | None]] = [[None] * total_cols for _ in range(DIGIT_ROWS)]
    pieces: list[PlacedTetromino] = []
    for result, offset in parts:
        for original in result.pieces:
            piece = original.shifted(offset, piece_id=len(pieces) + 1)
            pieces.append(piece)
            for r, c in piece.cells:
                cells[r][c] = piece

    if any(cell is None for row in cells for cell in row):
        logger.warning("Unified grid for %02d:%02d left cells uncovered", hours, minutes)
        return TileResult(success=False, pieces=(), grid=_empty_grid(DIGIT_ROWS, total_cols), stats=stats)

    return TileResult(
        success=True,
        pieces=tuple(pieces),
        grid=tuple(tuple(row) for row in cells),
        stats=stats,
    )


def format_tiling(result: TileResult) -> str:
    """Text view: piece letter per cell, uppercase lit, lowercase background, '.' empty."""
    lines = []
    for row in result.grid:
        chars = []
        for piece in row:
            if piece is None:
                chars.append(".")
            else:
                chars.append(piece.kind if piece.is_lit else piece.kind.lower())
        lines.append("".join(chars))
    return "\n".join(lines)
