# settings.py
# Display constants and speed-scaled animation timings

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from animation import AnimationTiming

FRAME_MS = 16  # one frame at 60 fps

# Empty rows above the digits where pieces spawn and fall
FIELD_TOP_PADDING_ROWS = 10

# Closing animation (not affected by speed)
DISPLAY_PAUSE_MS = 5000
FLASH_DURATION_MS = 50
FLASH_COUNT = 4
ROW_CLEAR_DELAY_MS = 60

DEFAULT_SPEED = 3.0
MAX_SPEED = 10.0


def scale_ms(ms: int, speed: float, minimum: int = FRAME_MS) -> int:
    # Halves round up.
    return max(minimum, math.floor(ms / speed + 0.5))


def parse_speed(value: Optional[str], default: float = DEFAULT_SPEED, max_speed: float = MAX_SPEED) -> float:
    """Positive number capped at `max_speed`; anything else gives `default`."""
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    if math.isnan(parsed) or parsed <= 0:
        return default
    return min(parsed, max_speed)


@dataclass(frozen=True)
class ClockSettings:
    speed: float
    drop_duration_ms: int  # gravity: ms per row
    piece_delay_ms: int
    rotate_duration_ms: int
    think_duration_ms: int

    @classmethod
    def from_speed(cls, speed: float = DEFAULT_SPEED) -> "ClockSettings":
        if speed <= 0:
            raise ValueError(f"Invalid speed: {speed!r}. Must be positive.")
        return cls(
            speed=speed,
            drop_duration_ms=scale_ms(500, speed),
            piece_delay_ms=scale_ms(600, speed, minimum=0),
            rotate_duration_ms=scale_ms(400, speed),
            think_duration_ms=scale_ms(300, speed, minimum=0),
        )

    @property
    def nudge_duration_ms(self) -> int:
        # Moves and rotations run faster than gravity.
        return max(scale_ms(40, self.speed), self.drop_duration_ms // 3)

    def animation_timing(self) -> AnimationTiming:
        return AnimationTiming(
            field_top_padding_rows=FIELD_TOP_PADDING_ROWS,
            nudge_duration_ms=self.nudge_duration_ms,
            rotate_duration_ms=max(self.rotate_duration_ms, self.nudge_duration_ms),
            hard_drop_duration_ms=self.drop_duration_ms,
            piece_delay_ms=self.piece_delay_ms,
            think_duration_ms=self.think_duration_ms,
            min_hard_drop_delay_ms=FRAME_MS,
        )

    def with_speed(self, speed: float) -> "ClockSettings":
        return ClockSettings.from_speed(min(max(speed, 1.0), MAX_SPEED))
