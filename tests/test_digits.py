# tests/test_digits.py
from __future__ import annotations

import pytest

from digits import (
    DIGIT_COLS,
    DIGIT_PATTERNS,
    DIGIT_ROWS,
    TIME_COLS,
    build_time_mask,
    count_lit_cells,
    count_unlit_cells,
    parse_mask,
    region_sizes,
    time_layout,
    validate_mask,
    validate_time,
)


def test_every_digit_is_a_10x6_mask_with_tileable_counts() -> None:
    assert sorted(DIGIT_PATTERNS) == list(range(10))
    for digit, mask in DIGIT_PATTERNS.items():
        assert len(mask) == DIGIT_ROWS, digit
        assert all(len(row) == DIGIT_COLS for row in mask), digit
        lit = count_lit_cells(mask)
        unlit = count_unlit_cells(mask)
        assert lit + unlit == 60
        assert lit % 4 == 0 and unlit % 4 == 0, digit


def test_every_digit_region_is_a_multiple_of_four() -> None:
    for mask in DIGIT_PATTERNS.values():
        assert all(size % 4 == 0 for _, size in region_sizes(mask))


def test_digit_one_is_a_right_hand_bar() -> None:
    one = DIGIT_PATTERNS[1]
    assert all(row == (False, False, False, False, True, True) for row in one)
    assert sorted(region_sizes(one)) == [(False, 40), (True, 20)]


def test_parse_mask_ignores_blank_lines() -> None:
    assert parse_mask("\n  X.\n\n  .X\n") == ((True, False), (False, True))


def test_validate_mask_rejects_odd_region() -> None:
    mask = parse_mask(
        """
        XXX.
        ....
        """
    )
    with pytest.raises(ValueError, match="lit region of 3 cells"):
        validate_mask(mask)


def test_validate_mask_rejects_ragged_rows() -> None:
    with pytest.raises(ValueError, match="columns"):
        validate_mask([[True] * 4, [True] * 3])


def test_time_layout_places_gaps_between_digits() -> None:
    assert time_layout() == [
        ("digit", 0, 6),
        ("gap", 6, 2),
        ("digit", 8, 6),
        ("gap", 14, 4),
        ("digit", 18, 6),
        ("gap", 24, 2),
        ("digit", 26, 6),
    ]
    assert [kind for kind, _, _ in time_layout(0, 0)] == ["digit"] * 4


def test_build_time_mask_keeps_gap_columns_unlit() -> None:
    mask, cols = build_time_mask(12, 34)
    assert cols == TIME_COLS == 32
    assert len(mask) == DIGIT_ROWS
    for col in (6, 7, 14, 15, 16, 17, 24, 25):
        assert not any(row[col] for row in mask)
    # digit 1 occupies its last two columns
    assert all(row[4] and row[5] for row in mask)
    assert [row[26:32] for row in mask] == [list(row) for row in DIGIT_PATTERNS[4]]


@pytest.mark.parametrize(("hours", "minutes"), [(24, 0), (-1, 0), (0, 60), (1.5, 0), (True, 0), ("12", 0)])
def test_validate_time_rejects_out_of_range_and_non_integers(hours: object, minutes: object) -> None:
    with pytest.raises(ValueError, match="Invalid"):
        validate_time(hours, minutes)


def test_extended_hours_allow_countdowns_past_a_day() -> None:
    assert validate_time(99, 59, extended_hours=True) == (99, 59)
    with pytest.raises(ValueError, match="hours"):
        validate_time(100, 0, extended_hours=True)
    mask, _ = build_time_mask(48, 0, extended_hours=True)
    assert [row[0:6] for row in mask] == [list(row) for row in DIGIT_PATTERNS[4]]


def test_negative_gap_widths_are_rejected() -> None:
    with pytest.raises(ValueError, match="colon_gap_cols"):
        build_time_mask(12, 34, colon_gap_cols=-1)
