from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import List, Optional

import pygame

from animation import estimate_animation_duration_ms
from animator import FieldAnimator
from clock import ClockPlan, SolvedClock, plan_clock_target, plan_countdown_target, solve_plan
from countdown import format_hhmm, parse_mode, parse_target_date
from digits import validate_time
from gui import WINDOW_WIDTH, WINDOW_HEIGHT, BG, draw_field, draw_top_bar
from log_setup import setup_logger
from rng import seed_to_number
from settings import ClockSettings, parse_speed
from solver import format_tiling

logger = logging.getLogger(__name__)

# How often an idle display looks for the next time to draw
CHECK_INTERVAL_MS = 1000


def parse_hhmm(value: str) -> tuple[int, int]:
    try:
        hh, mm = value.split(":")
        return validate_time(int(hh), int(mm))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected HH:MM between 00:00 and 23:59, got {value!r}") from None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Clock drawn by falling tetrominoes (pygame).")
    ap.add_argument("--mode", type=str, default="clock", help="clock (default) or countdown")
    ap.add_argument("--to", type=str, default=None, help="countdown target, ISO 8601 (e.g. 2025-01-01T00:00:00)")
    ap.add_argument("--speed", type=str, default=None, help="animation speed multiplier, 1-10 (default 3)")
    ap.add_argument("--seed", type=str, default=None, help="fixed seed (int or text) for --time")
    ap.add_argument("--time", type=parse_hhmm, default=None, help="show a fixed HH:MM instead of the clock")
    ap.add_argument("--headless", action="store_true", help="print the tiling instead of opening a window")
    ap.add_argument("--log-level", type=str, default="info")
    return ap.parse_args(argv)


def _seed_arg(value: Optional[str]):
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value


def next_plan(args: argparse.Namespace, settings: ClockSettings) -> ClockPlan:
    if args.time is not None:
        hours, minutes = args.time
        return ClockPlan(hours=hours, minutes=minutes, seed=seed_to_number(_seed_arg(args.seed)), estimated_ms=0)

    target_date = parse_target_date(args.to)
    if parse_mode(args.mode) == "countdown" and target_date is not None:
        return plan_countdown_target(target_date, settings)
    return plan_clock_target(datetime.now(), settings)


def run_headless(args: argparse.Namespace, settings: ClockSettings) -> int:
    solved = solve_plan(next_plan(args, settings))
    if not solved.success:
        logger.error("Failed to build %s", format_hhmm(solved.plan.hours, solved.plan.minutes))
        return 1

    print(format_tiling(solved.tiling))
    stats = solved.tiling.stats
    eta = estimate_animation_duration_ms(solved.sequence, settings.animation_timing())
    print(
        f"{format_hhmm(solved.plan.hours, solved.plan.minutes)}: "
        f"{len(solved.sequence.sequence)} pieces, {stats.attempts} attempts, "
        f"{stats.backtracks} backtracks, estimated {eta / 1000:.1f}s at speed {settings.speed:g}"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logger(level=args.log_level)
    settings = ClockSettings.from_speed(parse_speed(args.speed))

    if args.time is not None and args.mode == "countdown":
        logger.warning("--time overrides --mode countdown")

    if args.headless:
        return run_headless(args, settings)

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    pygame.display.set_caption("Tetris Time")

    # Fonts
    title_font = pygame.font.SysFont("SF Pro Display", 28, bold=True)
    label_font = pygame.font.SysFont("SF Pro Text", 16)

    clock = pygame.time.Clock()

    solved: SolvedClock | None = None
    animator: FieldAnimator | None = None
    countdown_finished = False
    mode_label = "fixed" if args.time is not None else parse_mode(args.mode)
    since_check_ms = CHECK_INTERVAL_MS

    running = True
    while running:
        dt_ms = clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in (pygame.K_UP, pygame.K_DOWN):
                    step = 1 if event.key == pygame.K_UP else -1
                    settings = settings.with_speed(settings.speed + step)
                    logger.info("Speed %g, restarting animation", settings.speed)
                    # New timings: drop the in-flight replay and solve again
                    if animator is not None:
                        animator.cancel()
                    countdown_finished = False

        # Only one replay at a time; the next cycle starts when it is done
        since_check_ms += dt_ms
        idle = animator is None or animator.done
        if idle and not countdown_finished and since_check_ms >= CHECK_INTERVAL_MS:
            since_check_ms = 0
            plan = next_plan(args, settings)
            cancelled = animator is not None and animator.cancelled
            same_minute = solved is not None and (solved.plan.hours, solved.plan.minutes) == (plan.hours, plan.minutes)
            # Live modes redraw only when the displayed minute changes
            if mode_label == "fixed" or plan.finished or not same_minute or cancelled:
                solved = solve_plan(plan)
                if solved.success:
                    animator = FieldAnimator(solved.sequence, settings.animation_timing())
                else:
                    # Skip this cycle and retry on the next check
                    animator = None
                countdown_finished = plan.finished

        if animator is not None:
            animator.update(dt_ms)

        screen.fill(BG)
        time_text = format_hhmm(solved.plan.hours, solved.plan.minutes) if solved else "--:--"
        draw_top_bar(screen, title_font, label_font, mode_label, time_text, settings.speed)
        draw_field(screen, animator)

        pygame.display.flip()

    pygame.quit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
