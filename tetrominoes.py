# tetrominoes.py
# Tetromino definitions + rotation states

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

Cell = tuple[int, int]

# Spawn shapes (rotation 0) as sets of (row, col)
TETROMINO_SHAPES: dict[str, set[Cell]] = {
    "I": {(0, 0), (0, 1), (0, 2), (0, 3)},
    "O": {(0, 0), (0, 1), (1, 0), (1, 1)},
    "T": {(0, 0), (0, 1), (0, 2), (1, 1)},
    "S": {(0, 1), (0, 2), (1, 0), (1, 1)},
    "Z": {(0, 0), (0, 1), (1, 1), (1, 2)},
    "J": {(0, 0), (1, 0), (1, 1), (1, 2)},
    "L": {(0, 2), (1, 0), (1, 1), (1, 2)},
}

TETROMINO_TYPES: tuple[str, ...] = ("I", "O", "T", "S", "Z", "J", "L")


@dataclass(frozen=True)
class Tetromino:
    kind: str
    rotations: tuple[tuple[Cell, ...], ...]  # each rotation: 4 offsets, sorted row-major


def _normalize(shape: Iterable[Cell]) -> frozenset[Cell]:
    rows = [r for r, _ in shape]
    cols = [c for _, c in shape]
    min_r, min_c = min(rows), min(cols)
    return frozenset((r - min_r, c - min_c) for r, c in shape)


def _rotate90(shape: Iterable[Cell]) -> set[Cell]:
    # Clockwise: (r, c) -> (c, -r)
    return {(c, -r) for r, c in shape}


def generate_rotations(shape: set[Cell]) -> list[tuple[Cell, ...]]:
    """Distinct clockwise rotations starting from the spawn shape, normalized to (0,0).

    Symmetric pieces collapse: O has one state, I/S/Z have two, T/J/L four.
    """
    seen: set[frozenset[Cell]] = set()
    result: list[tuple[Cell, ...]] = []

    variant: Iterable[Cell] = shape
    for _ in range(4):
        norm = _normalize(variant)
        if norm not in seen:
            seen.add(norm)
            result.append(tuple(sorted(norm)))
        variant = _rotate90(variant)

    return result


TETROMINOES: dict[str, Tetromino] = {
    kind: Tetromino(kind=kind, rotations=tuple(generate_rotations(TETROMINO_SHAPES[kind])))
    for kind in TETROMINO_TYPES
}


def rotation_count(kind: str) -> int:
    return len(TETROMINOES[kind].rotations)


def all_rotations() -> list[tuple[str, int]]:
    """Every (type, rotation index) combination, in catalog order."""
    return [
        (kind, rotation_index)
        for kind in TETROMINO_TYPES
        for rotation_index in range(rotation_count(kind))
    ]


def absolute_cells(tetromino: Tetromino, rotation_index: int, anchor: Cell) -> tuple[Cell, ...]:
    """Cells covered when `rotation_index` is placed with its bounding-box top-left at `anchor`."""
    row, col = anchor
    return tuple((row + dr, col + dc) for dr, dc in tetromino.rotations[rotation_index])


def rotation_size(tetromino: Tetromino, rotation_index: int) -> tuple[int, int]:
    """(height, width) of a rotation's bounding box."""
    offsets = tetromino.rotations[rotation_index]
    return (
        max(r for r, _ in offsets) + 1,
        max(c for _, c in offsets) + 1,
    )
