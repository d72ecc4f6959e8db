# grid.py
# Occupancy grid over a lit/unlit mask; placement commit + rollback

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from digits import DigitMask
from tetrominoes import Cell, Tetromino, absolute_cells


class PlacementError(ValueError):
    """Raised for placements that break the grid's invariants."""


@dataclass(frozen=True)
class PlacedTetromino:
    piece_id: int
    kind: str
    rotation_index: int
    anchor: Cell  # top-left of the rotation's bounding box
    cells: tuple[Cell, ...]  # absolute grid coordinates
    is_lit: bool

    @property
    def max_row(self) -> int:
        return max(r for r, _ in self.cells)

    @property
    def min_col(self) -> int:
        return min(c for _, c in self.cells)

    def shifted(self, col_offset: int, piece_id: int) -> "PlacedTetromino":
        """Same piece moved right by `col_offset` columns under a new id."""
        row, col = self.anchor
        return PlacedTetromino(
            piece_id=piece_id,
            kind=self.kind,
            rotation_index=self.rotation_index,
            anchor=(row, col + col_offset),
            cells=tuple((r, c + col_offset) for r, c in self.cells),
            is_lit=self.is_lit,
        )


class Grid:
    def __init__(self, rows: int, cols: int, mask: Optional[DigitMask] = None):
        self.rows = rows
        self.cols = cols
        self._cells: list[list[PlacedTetromino | None]] = [[None] * cols for _ in range(rows)]
        # No mask: the whole grid is one lit region.
        self._mask: DigitMask = mask if mask is not None else [[True] * cols for _ in range(rows)]
        self._placed: dict[int, PlacedTetromino] = {}
        self._next_id = 1

    def can_place(self, tetromino: Tetromino, rotation_index: int, anchor: Cell) -> bool:
        cells = absolute_cells(tetromino, rotation_index, anchor)

        for r, c in cells:
            if r < 0 or r >= self.rows or c < 0 or c >= self.cols:
                return False

        for r, c in cells:
            if self._cells[r][c] is not None:
                return False

        # A piece may never straddle lit and unlit cells.
        first_r, first_c = cells[0]
        region = self._mask[first_r][first_c]
        return all(self._mask[r][c] == region for r, c in cells)

    def place(self, tetromino: Tetromino, rotation_index: int, anchor: Cell) -> PlacedTetromino:
        if not self.can_place(tetromino, rotation_index, anchor):
            raise PlacementError(
                f"Cannot place {tetromino.kind} (rotation {rotation_index}) at {anchor}"
            )

        cells = absolute_cells(tetromino, rotation_index, anchor)
        first_r, first_c = cells[0]
        piece = PlacedTetromino(
            piece_id=self._next_id,
            kind=tetromino.kind,
            rotation_index=rotation_index,
            anchor=anchor,
            cells=cells,
            is_lit=bool(self._mask[first_r][first_c]),
        )
        self._next_id += 1

        for r, c in cells:
            self._cells[r][c] = piece
        self._placed[piece.piece_id] = piece
        return piece

    def remove(self, piece_id: int) -> None:
        piece = self._placed.pop(piece_id, None)
        if piece is None:
            raise PlacementError(f"Piece {piece_id} not found")
        for r, c in piece.cells:
            self._cells[r][c] = None

    def find_first_empty(self) -> Cell | None:
        """First unoccupied cell scanning top-to-bottom, left-to-right."""
        for r in range(self.rows):
            row = self._cells[r]
            for c in range(self.cols):
                if row[c] is None:
                    return (r, c)
        return None

    def is_full(self) -> bool:
        return self.find_first_empty() is None

    def placed_pieces(self) -> list[PlacedTetromino]:
        return list(self._placed.values())

    def cells(self) -> list[list[PlacedTetromino | None]]:
        return [list(row) for row in self._cells]

    def mask_value(self, row: int, col: int) -> bool:
        return bool(self._mask[row][col])
