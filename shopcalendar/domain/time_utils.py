"""
Helpers for wall-clock times as used by the opening-hour pickers.
"""

from datetime import time
from enum import Enum
from typing import List, NamedTuple

from .exceptions import InvalidScheduleError

MINUTES_PER_DAY = 24 * 60


class TimePeriod(str, Enum):
    """Coarse part of the day a time falls into."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class TimeOption(NamedTuple):
    """A single entry of the time picker."""
    value: str
    display: str


def parse_time(value: str) -> time:
    """
    Parse a ``HH:MM`` string into a time object.

    Raises:
        InvalidScheduleError: If the string is not a valid wall-clock time
    """
    try:
        hour_str, minute_str = value.strip().split(":")
        return time(hour=int(hour_str), minute=int(minute_str))
    except (AttributeError, ValueError) as exc:
        raise InvalidScheduleError(f"Invalid time '{value}', expected HH:MM") from exc


def format_time(value: time) -> str:
    """Format a time as ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def minutes_of_day(value: time) -> int:
    """Return the number of minutes since midnight."""
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    """Build a time from minutes since midnight. 1440 wraps to 00:00."""
    minutes %= MINUTES_PER_DAY
    return time(hour=minutes // 60, minute=minutes % 60)


def format_12h(value: time) -> str:
    """Format a time for display, e.g. ``9:30 AM``."""
    period = "AM" if value.hour < 12 else "PM"
    display_hour = value.hour % 12 or 12
    return f"{display_hour}:{value.minute:02d} {period}"


def time_options(step_minutes: int = 30) -> List[TimeOption]:
    """
    Build the list of selectable opening/closing times.

    With the default step this is the 48 half-hour options from 00:00 to 23:30.
    """
    if step_minutes <= 0 or MINUTES_PER_DAY % step_minutes:
        raise ValueError(f"step_minutes must divide a day evenly, got {step_minutes}")

    options: List[TimeOption] = []
    for minutes in range(0, MINUTES_PER_DAY, step_minutes):
        value = time_from_minutes(minutes)
        options.append(TimeOption(value=format_time(value), display=format_12h(value)))
    return options


def period_of_day(value: time) -> TimePeriod:
    """Classify a time into morning, afternoon, evening or night."""
    hour = value.hour
    if 5 <= hour < 12:
        return TimePeriod.MORNING
    if 12 <= hour < 17:
        return TimePeriod.AFTERNOON
    if 17 <= hour < 21:
        return TimePeriod.EVENING
    return TimePeriod.NIGHT
