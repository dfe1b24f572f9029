"""
Domain models for weekly opening hours, special date ranges and slots.
"""

from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Callable, Optional

import pendulum
from pendulum import Date

from .exceptions import InvalidScheduleError
from .time_utils import format_time, minutes_of_day, parse_time

DEFAULT_SLOT_DURATION = 30
ALLOWED_SLOT_DURATIONS = (15, 30, 45, 60)

# Translates a day or type name for display; the engine never inspects the result
LabelLookup = Callable[[str], str]


class Weekday(str, Enum):
    """Day of the week. The value is the key used in persisted data."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_date(cls, date: Date) -> "Weekday":
        """Return the weekday a calendar date falls on."""
        return list(cls)[date.isoweekday() - 1]

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Look up a weekday by name, case-insensitively (``mon`` works too)."""
        needle = value.strip().lower()
        for day in cls:
            if day.value.lower() == needle or day.value[:3].lower() == needle:
                return day
        raise ValueError(f"Unknown weekday: '{value}'")

    @property
    def is_weekend(self) -> bool:
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)

    def label(self, labels: Optional[LabelLookup] = None) -> str:
        return labels(self.value) if labels else self.value


class RangeType(str, Enum):
    """Tag of a special date range."""
    HOLIDAY = "holiday"
    SPECIAL = "special"
    PROMO = "promo"

    def label(self, labels: Optional[LabelLookup] = None) -> str:
        return labels(self.value) if labels else self.value


class EditMode(str, Enum):
    """
    Tag armed for the next committed selection.

    ``REGULAR`` only marks the calendar as being in normal mode; it has no
    ``RangeType`` and is never stored.
    """
    REGULAR = "regular"
    HOLIDAY = "holiday"
    SPECIAL = "special"
    PROMO = "promo"

    @property
    def range_type(self) -> Optional[RangeType]:
        if self is EditMode.REGULAR:
            return None
        return RangeType(self.value)


@dataclass(frozen=True)
class DaySchedule:
    """
    Opening hours of a single weekday.

    Invariant: open must be before close. Pickers only offer ordered values,
    so an unordered schedule is accepted here and can be detected with
    ``is_well_ordered``.
    """
    open: time
    close: time
    slot_duration_minutes: int = DEFAULT_SLOT_DURATION

    def __post_init__(self):
        if self.slot_duration_minutes not in ALLOWED_SLOT_DURATIONS:
            raise InvalidScheduleError(
                f"Slot duration must be one of {ALLOWED_SLOT_DURATIONS}, "
                f"got {self.slot_duration_minutes}"
            )

    @classmethod
    def from_strings(
        cls,
        open_time: str,
        close_time: str,
        slot_duration_minutes: int | None = None
    ) -> "DaySchedule":
        """Build a schedule from ``HH:MM`` strings."""
        return cls(
            open=parse_time(open_time),
            close=parse_time(close_time),
            slot_duration_minutes=(
                DEFAULT_SLOT_DURATION if slot_duration_minutes is None else slot_duration_minutes
            )
        )

    @property
    def open_minutes(self) -> int:
        return minutes_of_day(self.open)

    @property
    def close_minutes(self) -> int:
        return minutes_of_day(self.close)

    def is_well_ordered(self) -> bool:
        """Check the open < close invariant."""
        return self.open_minutes < self.close_minutes

    def __str__(self) -> str:
        return f"{format_time(self.open)} - {format_time(self.close)} ({self.slot_duration_minutes} min)"


@dataclass(frozen=True)
class DateRange:
    """
    An inclusive range of calendar days.

    Invariant: start <= end. Use ``normalized`` to build a range from two
    dates in any order.
    """
    start: Date
    end: Date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start date {self.start} must not be after end date {self.end}")

    @classmethod
    def normalized(cls, first: Date, second: Date) -> "DateRange":
        """Build a range from two dates regardless of their order."""
        return cls(start=min(first, second), end=max(first, second))

    def contains(self, date: Date) -> bool:
        return self.start <= date <= self.end

    def overlaps(self, other: "DateRange") -> bool:
        """Check if two ranges share at least one day. Touching ends count."""
        return self.start <= other.end and self.end >= other.start

    def days(self) -> int:
        """Number of days covered, both ends included."""
        return self.start.diff(self.end).in_days() + 1

    def __str__(self) -> str:
        if self.start == self.end:
            return self.start.format("DD.MM.YYYY")
        return f"{self.start.format('DD.MM.YYYY')} - {self.end.format('DD.MM.YYYY')}"


@dataclass(frozen=True)
class DateRangeRecord:
    """A tagged date range overriding the regular weekly hours."""
    start_date: Date
    end_date: Date
    type: RangeType

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(
                f"Start date {self.start_date} must not be after end date {self.end_date}"
            )

    @classmethod
    def from_range(cls, date_range: DateRange, range_type: RangeType) -> "DateRangeRecord":
        return cls(start_date=date_range.start, end_date=date_range.end, type=range_type)

    @property
    def key(self) -> str:
        """Storage key: the start date as ``YYYY-MM-DD``."""
        return date_key(self.start_date)

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    def covers(self, date: Date) -> bool:
        return self.start_date <= date <= self.end_date

    def __str__(self) -> str:
        return f"{self.date_range} [{self.type.value}]"


@dataclass(frozen=True)
class Slot:
    """A bookable time interval derived from a day schedule."""
    weekday: Weekday
    start: time
    end: time

    @property
    def duration_minutes(self) -> int:
        return minutes_of_day(self.end) - minutes_of_day(self.start)

    def format_display(self, labels: Optional[LabelLookup] = None) -> str:
        """Format: Monday | 09:00 - 09:30"""
        return f"{self.weekday.label(labels)} | {format_time(self.start)} - {format_time(self.end)}"


def date_key(date: Date) -> str:
    """Canonical string form of a calendar date (YYYY-MM-DD)."""
    return date.isoformat()


def parse_date(value: str) -> Date:
    """
    Parse a ``YYYY-MM-DD`` string into a calendar date.

    Raises:
        InvalidScheduleError: If the string is not a valid date
    """
    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except (AttributeError, ValueError) as exc:
        raise InvalidScheduleError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc
