# clock.py
# Picks the time to display next and solves it

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from animation import estimate_animation_duration_ms
from countdown import (
    countdown_seed,
    epoch_ms,
    floor_to_minute,
    format_hhmm,
    get_countdown_time,
)
from sequencer import SequenceResult, sequence_pieces
from settings import ClockSettings
from solver import TileResult, tile_time_grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockPlan:
    hours: int
    minutes: int
    seed: int
    estimated_ms: int
    extended_hours: bool = False
    finished: bool = False


@dataclass(frozen=True)
class SolvedClock:
    plan: ClockPlan
    tiling: TileResult
    sequence: SequenceResult

    @property
    def success(self) -> bool:
        return self.tiling.success and self.sequence.success


def _estimate(hours: int, minutes: int, seed: int, settings: ClockSettings, extended: bool = False) -> int:
    tiling = tile_time_grid(hours, minutes, seed=seed, extended_hours=extended)
    return estimate_animation_duration_ms(sequence_pieces(tiling), settings.animation_timing())


def plan_clock_target(now: datetime, settings: ClockSettings, iterations: int = 3) -> ClockPlan:
    """Aim for the minute the animation will finish in, not the minute it starts in.

    Slow speeds can span more than a minute, so the target is refined until the
    estimated completion falls inside the minute being drawn.
    """
    base = floor_to_minute(now)
    seed = epoch_ms(base)

    target = base
    estimated_ms = 0
    for _ in range(iterations):
        estimated_ms = _estimate(target.hour, target.minute, seed, settings)
        completion = base + timedelta(milliseconds=estimated_ms)
        if (completion.hour, completion.minute) == (target.hour, target.minute):
            break
        target = completion

    logger.info(
        "[tetris-time] speed=%s base=%s target=%s etaMs=%d",
        settings.speed,
        format_hhmm(base.hour, base.minute),
        format_hhmm(target.hour, target.minute),
        estimated_ms,
    )
    return ClockPlan(hours=target.hour, minutes=target.minute, seed=seed, estimated_ms=estimated_ms)


def plan_countdown_target(target_date: datetime, settings: ClockSettings, now: Optional[datetime] = None) -> ClockPlan:
    remaining = get_countdown_time(target_date, now)
    seed = countdown_seed(target_date, remaining.hours, remaining.minutes)
    estimated_ms = _estimate(remaining.hours, remaining.minutes, seed, settings, extended=True)

    logger.info(
        "[tetris-time] mode=countdown target=%s remaining=%s finished=%s",
        target_date.isoformat(),
        format_hhmm(remaining.hours, remaining.minutes),
        remaining.finished,
    )
    return ClockPlan(
        hours=remaining.hours,
        minutes=remaining.minutes,
        seed=seed,
        estimated_ms=estimated_ms,
        extended_hours=True,
        finished=remaining.finished,
    )


def solve_plan(plan: ClockPlan) -> SolvedClock:
    tiling = tile_time_grid(plan.hours, plan.minutes, seed=plan.seed, extended_hours=plan.extended_hours)
    sequence = sequence_pieces(tiling)
    if not (tiling.success and sequence.success):
        logger.warning(
            "Could not build %s (tiling=%s, sequence=%s)",
            format_hhmm(plan.hours, plan.minutes),
            tiling.success,
            sequence.success,
        )
    return SolvedClock(plan=plan, tiling=tiling, sequence=sequence)
