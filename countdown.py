# countdown.py
# Clock/countdown modes and HH:MM time helpers

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

ClockMode = Literal["clock", "countdown"]

# Largest value an HH:MM display can show
MAX_COUNTDOWN_HOURS = 99


@dataclass(frozen=True)
class CountdownTime:
    hours: int
    minutes: int
    finished: bool


def format_hhmm(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def floor_to_minute(moment: datetime) -> datetime:
    return moment.replace(second=0, microsecond=0)


def parse_mode(value: Optional[str]) -> ClockMode:
    if value is not None and value.lower() == "countdown":
        return "countdown"
    return "clock"


def parse_target_date(value: Optional[str]) -> Optional[datetime]:
    """ISO 8601 (e.g. 2025-01-01T00:00:00); None when missing or unparseable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def get_countdown_time(target: datetime, now: Optional[datetime] = None) -> CountdownTime:
    """Whole minutes left until `target`, capped at 99:59."""
    if now is None:
        now = datetime.now(target.tzinfo)

    remaining_s = (target - now).total_seconds()
    if remaining_s <= 0:
        return CountdownTime(hours=0, minutes=0, finished=True)

    total_minutes = int(remaining_s // 60)
    if total_minutes == 0:
        return CountdownTime(hours=0, minutes=0, finished=False)

    hours, minutes = divmod(total_minutes, 60)
    if hours > MAX_COUNTDOWN_HOURS:
        hours, minutes = MAX_COUNTDOWN_HOURS, 59
    return CountdownTime(hours=hours, minutes=minutes, finished=False)


def epoch_ms(moment: datetime) -> int:
    return round(moment.timestamp() * 1000)


def countdown_seed(target: datetime, hours: int, minutes: int) -> int:
    """A different tiling for every remaining minute of the same countdown."""
    return epoch_ms(target) + hours * 60 + minutes
