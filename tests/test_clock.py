# tests/test_clock.py
from __future__ import annotations

from datetime import datetime, timedelta

from clock import ClockPlan, plan_clock_target, plan_countdown_target, solve_plan
from countdown import countdown_seed, epoch_ms
from settings import ClockSettings


def test_clock_target_is_the_minute_the_replay_finishes_in() -> None:
    now = datetime(2025, 1, 1, 12, 0, 30)
    base = datetime(2025, 1, 1, 12, 0)
    plan = plan_clock_target(now, ClockSettings.from_speed(10))

    assert plan.seed == epoch_ms(base)
    assert plan.estimated_ms > 0
    completion = base + timedelta(milliseconds=plan.estimated_ms)
    assert (completion.hour, completion.minute) == (plan.hours, plan.minutes)


def test_slow_replays_aim_past_the_current_minute() -> None:
    plan = plan_clock_target(datetime(2025, 1, 1, 12, 0, 5), ClockSettings.from_speed(1))
    assert (plan.hours, plan.minutes) != (12, 0)
    assert 0 <= plan.hours <= 23 and 0 <= plan.minutes <= 59


def test_countdown_plan_uses_extended_hours() -> None:
    now = datetime(2025, 1, 1, 12, 0)
    target = now + timedelta(hours=30, minutes=15)
    plan = plan_countdown_target(target, ClockSettings.from_speed(10), now=now)

    assert (plan.hours, plan.minutes) == (30, 15)
    assert plan.extended_hours
    assert not plan.finished
    assert plan.seed == countdown_seed(target, 30, 15)


def test_finished_countdown_shows_zeros() -> None:
    now = datetime(2025, 1, 1, 12, 0)
    plan = plan_countdown_target(now - timedelta(minutes=1), ClockSettings.from_speed(10), now=now)
    assert (plan.hours, plan.minutes, plan.finished) == (0, 0, True)


def test_solve_plan_tiles_and_sequences() -> None:
    solved = solve_plan(ClockPlan(hours=12, minutes=34, seed=42, estimated_ms=0))

    assert solved.success
    assert solved.tiling.cols == 32
    assert len(solved.sequence.sequence) == len(solved.tiling.pieces)
