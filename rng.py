"""Seeded randomizer used to vary the solver's search order"""
from __future__ import annotations

import time
from typing import Optional, Sequence, TypeVar, Union

T = TypeVar("T")

Seed = Union[int, str]

MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def seed_to_number(seed: Optional[Seed]) -> int:
    """Ints pass through, strings hash to an unsigned 32-bit int, None uses wall-clock ms."""
    if seed is None:
        return time.time_ns() // 1_000_000
    if isinstance(seed, str):
        h = 0
        for ch in seed:
            h = ((h << 5) - h + ord(ch)) & MASK32
        return h
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ValueError(f"Invalid seed: {seed!r}. Must be an int or a str.")
    return seed


class SeededRandom:
    """Mulberry32: 32-bit state, one multiply-xorshift round per draw."""

    def __init__(self, seed: int):
        self.state = seed & MASK32

    def next_float(self) -> float:
        """Next value in [0, 1)."""
        self.state = (self.state + 0x6D2B79F5) & MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return ((t ^ (t >> 14)) & MASK32) / 4294967296

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates over a copy; the input is left untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = int(self.next_float() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result
