# digits.py
# Digit masks (10x6 pixel font) and the composite HH:MM mask

from __future__ import annotations

from typing import Sequence

DigitMask = Sequence[Sequence[bool]]

DIGIT_ROWS = 10
DIGIT_COLS = 6

# Default spacing (in columns) between the digits of a pair, and around the colon
TIME_DIGIT_GAP_COLS = 2
TIME_COLON_GAP_COLS = 4

TIME_ROWS = DIGIT_ROWS
TIME_COLS = DIGIT_COLS * 4 + TIME_DIGIT_GAP_COLS * 2 + TIME_COLON_GAP_COLS


def parse_mask(visual: str) -> tuple[tuple[bool, ...], ...]:
    """'X' is lit, anything else is unlit. Blank lines are ignored."""
    lines = [line.strip() for line in visual.strip().splitlines() if line.strip()]
    return tuple(tuple(ch == "X" for ch in line) for line in lines)


# Block-style digits. Every lit and unlit region holds a multiple of 4 cells.
DIGIT_PATTERNS: dict[int, tuple[tuple[bool, ...], ...]] = {
    0: parse_mask(
        """
        XXXXXX
        XXXXXX
        XX..XX
        XX..XX
        XX..XX
        XX..XX
        XXXXXX
        XXXXXX
        XXXXXX
        XXXXXX
        """
    ),
    1: parse_mask(
        """
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        """
    ),
    2: parse_mask(
        """
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        XXXXXX
        XXXXXX
        XX....
        XX....
        XXXXXX
        XXXXXX
        """
    ),
    3: parse_mask(
        """
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        XXXXXX
        XXXXXX
        """
    ),
    4: parse_mask(
        """
        XX..XX
        XX..XX
        XX..XX
        XX..XX
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        ....XX
        ....XX
        """
    ),
    5: parse_mask(
        """
        XXXXXX
        XXXXXX
        XX....
        XX....
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        XXXXXX
        XXXXXX
        """
    ),
    6: parse_mask(
        """
        XXXXXX
        XXXXXX
        XX....
        XX....
        XXXXXX
        XXXXXX
        XX..XX
        XX..XX
        XXXXXX
        XXXXXX
        """
    ),
    7: parse_mask(
        """
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        ....XX
        """
    ),
    8: parse_mask(
        """
        XXXXXX
        XXXXXX
        XX..XX
        XX..XX
        XXXXXX
        XXXXXX
        XX..XX
        XX..XX
        XXXXXX
        XXXXXX
        """
    ),
    9: parse_mask(
        """
        XXXXXX
        XXXXXX
        XX..XX
        XX..XX
        XXXXXX
        XXXXXX
        ....XX
        ....XX
        XXXXXX
        XXXXXX
        """
    ),
}


def count_lit_cells(mask: DigitMask) -> int:
    return sum(1 for row in mask for value in row if value)


def count_unlit_cells(mask: DigitMask) -> int:
    return sum(1 for row in mask for value in row if not value)


def region_sizes(mask: DigitMask) -> list[tuple[bool, int]]:
    """Sizes of the 4-connected regions of equal mask value, as (lit, size) pairs."""
    rows = len(mask)
    cols = len(mask[0]) if rows else 0
    seen: set[tuple[int, int]] = set()
    regions: list[tuple[bool, int]] = []

    for r in range(rows):
        for c in range(cols):
            if (r, c) in seen:
                continue
            value = mask[r][c]
            stack = [(r, c)]
            seen.add((r, c))
            size = 0
            while stack:
                cr, cc = stack.pop()
                size += 1
                for nr, nc in ((cr - 1, cc), (cr + 1, cc), (cr, cc - 1), (cr, cc + 1)):
                    if 0 <= nr < rows and 0 <= nc < cols and (nr, nc) not in seen and mask[nr][nc] == value:
                        seen.add((nr, nc))
                        stack.append((nr, nc))
            regions.append((bool(value), size))

    return regions


def validate_mask(mask: DigitMask) -> None:
    """Raise ValueError unless the mask is rectangular and every region is a multiple of 4 cells."""
    if not mask or not mask[0]:
        raise ValueError("Mask must have at least one row and one column")
    width = len(mask[0])
    for idx, row in enumerate(mask):
        if len(row) != width:
            raise ValueError(f"Mask row {idx} has {len(row)} columns, expected {width}")
    for lit, size in region_sizes(mask):
        if size % 4 != 0:
            kind = "lit" if lit else "unlit"
            raise ValueError(f"Mask has a {kind} region of {size} cells; regions must be multiples of 4")


def _check_digit_patterns() -> None:
    for digit, mask in DIGIT_PATTERNS.items():
        if len(mask) != DIGIT_ROWS or any(len(row) != DIGIT_COLS for row in mask):
            raise ValueError(f"Digit {digit} mask must be {DIGIT_ROWS}x{DIGIT_COLS}")
        try:
            validate_mask(mask)
        except ValueError as exc:
            raise ValueError(f"Digit {digit}: {exc}") from exc


_check_digit_patterns()


def _require_int(value: object, name: str, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueError(f"Invalid {name}: {value!r}. Must be an integer {low}-{high}.")
    return value


def validate_digit(digit: object) -> int:
    return _require_int(digit, "digit", 0, 9)


def validate_time(hours: object, minutes: object, extended_hours: bool = False) -> tuple[int, int]:
    """Check an HH:MM pair. Extended hours (countdowns) allow 0-99."""
    h = _require_int(hours, "hours", 0, 99 if extended_hours else 23)
    m = _require_int(minutes, "minutes", 0, 59)
    return h, m


def time_digits(hours: int, minutes: int) -> tuple[int, int, int, int]:
    return hours // 10, hours % 10, minutes // 10, minutes % 10


def time_layout(
    digit_gap_cols: int = TIME_DIGIT_GAP_COLS,
    colon_gap_cols: int = TIME_COLON_GAP_COLS,
) -> list[tuple[str, int, int]]:
    """Column regions of a unified HH:MM field as (kind, col_offset, width).

    Layout: [d0][gap][d1][colon gap][d2][gap][d3]; kind is "digit" or "gap".
    Zero-width gaps are omitted.
    """
    for name, width in (("digit_gap_cols", digit_gap_cols), ("colon_gap_cols", colon_gap_cols)):
        if isinstance(width, bool) or not isinstance(width, int) or width < 0:
            raise ValueError(f"Invalid {name}: {width!r}. Must be a non-negative integer.")

    gaps = (digit_gap_cols, colon_gap_cols, digit_gap_cols)
    regions: list[tuple[str, int, int]] = []
    offset = 0
    for idx in range(4):
        regions.append(("digit", offset, DIGIT_COLS))
        offset += DIGIT_COLS
        if idx < 3 and gaps[idx] > 0:
            regions.append(("gap", offset, gaps[idx]))
            offset += gaps[idx]
    return regions


def build_time_mask(
    hours: int,
    minutes: int,
    digit_gap_cols: int = TIME_DIGIT_GAP_COLS,
    colon_gap_cols: int = TIME_COLON_GAP_COLS,
    extended_hours: bool = False,
) -> tuple[list[list[bool]], int]:
    """Four digit masks side by side with unlit gap columns. Returns (mask, total_cols)."""
    hours, minutes = validate_time(hours, minutes, extended_hours)
    regions = time_layout(digit_gap_cols, colon_gap_cols)
    total_cols = sum(width for _, _, width in regions)

    mask = [[False] * total_cols for _ in range(DIGIT_ROWS)]
    digits = iter(time_digits(hours, minutes))
    for kind, offset, _ in regions:
        if kind != "digit":
            continue
        pattern = DIGIT_PATTERNS[next(digits)]
        for r in range(DIGIT_ROWS):
            mask[r][offset : offset + DIGIT_COLS] = pattern[r]

    return mask, total_cols
