"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .analytics import AnalyticsSummary, summarize
from .exceptions import ClosedDayError, InvalidScheduleError, PersistenceError, ScheduleError
from .models import (
    DateRange,
    DateRangeRecord,
    DaySchedule,
    EditMode,
    RangeType,
    Slot,
    Weekday,
)
from .overlap import is_overlapping
from .selection import (
    DesktopRangeSelector,
    InputModality,
    MobileRangeSelector,
    RangeSelectionController,
    create_controller,
)
from .slot_generator import SlotGenerator, generate_slots
from .special_dates import SpecialDateRangeStore
from .weekly_availability import DEFAULT_PRESETS, TimePreset, WeeklyAvailability

__all__ = [
    "AnalyticsSummary",
    "summarize",
    "ClosedDayError",
    "InvalidScheduleError",
    "PersistenceError",
    "ScheduleError",
    "DateRange",
    "DateRangeRecord",
    "DaySchedule",
    "EditMode",
    "RangeType",
    "Slot",
    "Weekday",
    "is_overlapping",
    "DesktopRangeSelector",
    "InputModality",
    "MobileRangeSelector",
    "RangeSelectionController",
    "create_controller",
    "SlotGenerator",
    "generate_slots",
    "SpecialDateRangeStore",
    "DEFAULT_PRESETS",
    "TimePreset",
    "WeeklyAvailability",
]
