"""
Recurring weekly opening hours of a shop.
"""

import logging
from dataclasses import dataclass, replace
from datetime import time
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .exceptions import ClosedDayError
from .models import DEFAULT_SLOT_DURATION, DaySchedule, Weekday
from .time_utils import parse_time

logger = logging.getLogger(__name__)

STANDARD_OPEN = time(9, 0)
STANDARD_CLOSE = time(17, 0)


@dataclass(frozen=True)
class TimePreset:
    """A named open/close pair offered as a one-click shortcut."""
    name: str
    open: time
    close: time

    @classmethod
    def from_strings(cls, name: str, open_time: str, close_time: str) -> "TimePreset":
        return cls(name=name, open=parse_time(open_time), close=parse_time(close_time))


DEFAULT_PRESETS: Dict[str, TimePreset] = {
    preset.name: preset
    for preset in (
        TimePreset.from_strings("morning", "08:00", "12:00"),
        TimePreset.from_strings("afternoon", "12:00", "17:00"),
        TimePreset.from_strings("evening", "17:00", "22:00"),
        TimePreset.from_strings("full_day", "09:00", "18:00"),
        TimePreset.from_strings("late_night", "18:00", "23:00"),
    )
}


class WeeklyAvailability:
    """
    Mapping of each weekday to its opening hours, or None when closed.

    A new instance has every day closed. Mutations only touch this in-memory
    copy; persisting it is the job of the repository on explicit save.
    """

    def __init__(self, days: Optional[Mapping[Weekday, Optional[DaySchedule]]] = None):
        self._days: Dict[Weekday, Optional[DaySchedule]] = {day: None for day in Weekday}
        if days:
            for day, schedule in days.items():
                self._days[Weekday(day)] = schedule

    def get(self, day: Weekday) -> Optional[DaySchedule]:
        return self._days[day]

    def is_open(self, day: Weekday) -> bool:
        return self._days[day] is not None

    def open_days(self) -> List[Weekday]:
        return [day for day, schedule in self._days.items() if schedule is not None]

    def items(self) -> Iterator[Tuple[Weekday, Optional[DaySchedule]]]:
        return iter(self._days.items())

    def __iter__(self) -> Iterator[Weekday]:
        return iter(self._days)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeeklyAvailability):
            return NotImplemented
        return self._days == other._days

    def __repr__(self) -> str:
        return f"WeeklyAvailability({self._days!r})"

    def copy(self) -> "WeeklyAvailability":
        return WeeklyAvailability(self._days)

    def slot_duration(self, day: Weekday) -> int:
        """Return the day's slot duration, 30 when the day has none."""
        schedule = self._days[day]
        return schedule.slot_duration_minutes if schedule else DEFAULT_SLOT_DURATION

    def set_day(self, day: Weekday, schedule: Optional[DaySchedule]) -> None:
        """Replace the schedule of a day. None closes the day."""
        if schedule is not None and not schedule.is_well_ordered():
            logger.debug("Storing %s with open >= close: %s", day.value, schedule)
        self._days[day] = schedule

    def clear_day(self, day: Weekday) -> None:
        self._days[day] = None

    def clear_all(self) -> None:
        for day in Weekday:
            self._days[day] = None

    def set_time(self, day: Weekday, bound: str, value: time) -> DaySchedule:
        """
        Change the opening or closing time of a day.

        A closed day is opened with the other bound taken from the standard
        business hours.

        Args:
            day: Day to edit
            bound: Either "open" or "close"
            value: New time

        Returns:
            The resulting schedule
        """
        if bound not in ("open", "close"):
            raise ValueError(f"bound must be 'open' or 'close', got '{bound}'")

        current = self._days[day] or DaySchedule(
            open=STANDARD_OPEN,
            close=STANDARD_CLOSE,
            slot_duration_minutes=DEFAULT_SLOT_DURATION
        )
        schedule = replace(current, **{bound: value})
        self.set_day(day, schedule)
        return schedule

    def apply_preset(self, day: Weekday, preset: TimePreset) -> DaySchedule:
        """Overwrite open/close of a day, keeping its slot duration."""
        schedule = DaySchedule(
            open=preset.open,
            close=preset.close,
            slot_duration_minutes=self.slot_duration(day)
        )
        self.set_day(day, schedule)
        return schedule

    def set_slot_duration(self, day: Weekday, minutes: int) -> DaySchedule:
        """
        Change the slot duration of an open day.

        Raises:
            ClosedDayError: If the day has no opening hours
            InvalidScheduleError: If minutes is not an allowed duration
        """
        current = self._days[day]
        if current is None:
            raise ClosedDayError(f"{day.value} is closed, set opening hours first")

        schedule = replace(current, slot_duration_minutes=minutes)
        self._days[day] = schedule
        return schedule

    def copy_to_all_days(self, source_day: Weekday) -> None:
        """
        Copy the opening hours of one day to every day of the week.

        Each day keeps its own slot duration if it has one, otherwise it takes
        the source day's. Nothing happens when the source day is closed.
        """
        source = self._days[source_day]
        if source is None:
            logger.debug("copy_to_all_days ignored, %s is closed", source_day.value)
            return

        for day in Weekday:
            existing = self._days[day]
            duration = (
                existing.slot_duration_minutes if existing
                else source.slot_duration_minutes
            )
            self._days[day] = DaySchedule(
                open=source.open,
                close=source.close,
                slot_duration_minutes=duration
            )

    def apply_standard_business_hours(
        self,
        open_time: time = STANDARD_OPEN,
        close_time: time = STANDARD_CLOSE
    ) -> None:
        """Open Monday to Friday with the standard hours and close the weekend."""
        for day in Weekday:
            if day.is_weekend:
                self._days[day] = None
                continue
            self._days[day] = DaySchedule(
                open=open_time,
                close=close_time,
                slot_duration_minutes=self.slot_duration(day)
            )
