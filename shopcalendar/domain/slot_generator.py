"""
Derives bookable time slots from opening hours.

Pure domain logic: no I/O, no shared state. Calling it repeatedly with the
same input yields the same slots.
"""

from typing import List, Optional

from pendulum import Date

from .models import DaySchedule, Slot, Weekday
from .special_dates import SpecialDateRangeStore
from .time_utils import time_from_minutes
from .weekly_availability import WeeklyAvailability


def generate_slots(schedule: DaySchedule, weekday: Weekday) -> List[Slot]:
    """
    Split a day's opening hours into consecutive slots.

    Slots start at the opening time and are emitted while a full slot still
    fits before closing. A trailing remainder shorter than the slot duration
    is dropped.

    Example:
    Hours: 09:00 - 10:40, duration 30
    Result: [09:00-09:30, 09:30-10:00, 10:00-10:30]
    """
    duration = schedule.slot_duration_minutes
    close_minutes = schedule.close_minutes

    slots: List[Slot] = []
    current = schedule.open_minutes

    while current + duration <= close_minutes:
        slots.append(
            Slot(
                weekday=weekday,
                start=time_from_minutes(current),
                end=time_from_minutes(current + duration)
            )
        )
        current += duration

    return slots


class SlotGenerator:
    """
    Produces the slots of a calendar date for the booking side.

    Looks up the weekday's opening hours and, when special dates are given,
    returns nothing for days covered by a holiday range.
    """

    def __init__(
        self,
        availability: WeeklyAvailability,
        special_dates: Optional[SpecialDateRangeStore] = None
    ):
        self.availability = availability
        self.special_dates = special_dates

    def generate(self, schedule: DaySchedule, weekday: Weekday) -> List[Slot]:
        return generate_slots(schedule, weekday)

    def slots_for_weekday(self, weekday: Weekday) -> List[Slot]:
        schedule = self.availability.get(weekday)
        if schedule is None:
            return []
        return generate_slots(schedule, weekday)

    def slots_for(self, date: Date, exclude_holidays: bool = True) -> List[Slot]:
        """
        Get the bookable slots of a calendar date.

        Args:
            date: Day to generate slots for
            exclude_holidays: Return no slots when a holiday range covers the day

        Returns:
            Ordered list of slots, empty on closed days
        """
        if exclude_holidays and self.special_dates is not None:
            if self.special_dates.is_holiday(date):
                return []

        return self.slots_for_weekday(Weekday.from_date(date))
