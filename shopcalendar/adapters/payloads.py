"""
Persisted shape of a shop schedule and its conversion to domain objects.

Stored documents look like::

    {
        "availability": {
            "Monday": {"open": "09:00", "close": "17:00", "slotDuration": 30},
            "Sunday": null
        },
        "specialDates": {
            "2025-08-10": {"type": "holiday", "endDate": "2025-08-12"}
        }
    }
"""

import logging
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.exceptions import InvalidScheduleError
from ..domain.models import (
    ALLOWED_SLOT_DURATIONS,
    DEFAULT_SLOT_DURATION,
    DateRangeRecord,
    DaySchedule,
    EditMode,
    Weekday,
    date_key,
    parse_date,
)
from ..domain.special_dates import SpecialDateRangeStore
from ..domain.time_utils import format_time, parse_time
from ..domain.weekly_availability import WeeklyAvailability

logger = logging.getLogger(__name__)


class DayHoursPayload(BaseModel):
    """Opening hours of one weekday as stored."""
    model_config = ConfigDict(populate_by_name=True)

    open: Optional[str] = None
    close: Optional[str] = None
    slot_duration: Optional[int] = Field(default=None, alias="slotDuration")

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        """Ensure times are HH:MM."""
        if value is None:
            return value
        return format_time(parse_time(value))

    @field_validator("slot_duration")
    @classmethod
    def validate_slot_duration(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value not in ALLOWED_SLOT_DURATIONS:
            raise ValueError(f"slotDuration must be one of {ALLOWED_SLOT_DURATIONS}, got {value}")
        return value

    def is_complete(self) -> bool:
        return bool(self.open and self.close)


class SpecialDatePayload(BaseModel):
    """A special date range as stored under its start date."""
    model_config = ConfigDict(populate_by_name=True)

    type: str
    end_date: Optional[str] = Field(default=None, alias="endDate")

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        """Accept range tags plus the legacy 'regular' marker."""
        allowed = [mode.value for mode in EditMode]
        if value not in allowed:
            raise ValueError(f"type must be one of {allowed}, got '{value}'")
        return value


class ShopSchedulePayload(BaseModel):
    """The availability part of a stored shop document."""
    model_config = ConfigDict(populate_by_name=True)

    availability: Dict[str, Optional[DayHoursPayload]] = Field(default_factory=dict)
    special_dates: Dict[str, SpecialDatePayload] = Field(default_factory=dict, alias="specialDates")

    @field_validator("availability")
    @classmethod
    def validate_weekdays(
        cls, value: Dict[str, Optional[DayHoursPayload]]
    ) -> Dict[str, Optional[DayHoursPayload]]:
        names = {day.value for day in Weekday}
        unknown = sorted(set(value) - names)
        if unknown:
            raise ValueError(f"Unknown weekday keys: {unknown}")
        return value


def availability_from_payload(payload: ShopSchedulePayload) -> WeeklyAvailability:
    """Build weekly hours, treating missing and incomplete days as closed."""
    availability = WeeklyAvailability()
    for day_name, hours in payload.availability.items():
        if hours is None or not hours.is_complete():
            continue
        availability.set_day(
            Weekday(day_name),
            DaySchedule(
                open=parse_time(hours.open),
                close=parse_time(hours.close),
                slot_duration_minutes=hours.slot_duration or DEFAULT_SLOT_DURATION
            )
        )
    return availability


def special_dates_from_payload(payload: ShopSchedulePayload) -> SpecialDateRangeStore:
    """Build the range store. Ranges saved with the 'regular' marker are skipped."""
    store = SpecialDateRangeStore()
    for start_str, entry in payload.special_dates.items():
        range_type = EditMode(entry.type).range_type
        if range_type is None:
            logger.warning("Skipping special date %s stored without a range tag", start_str)
            continue

        start = parse_date(start_str)
        end = parse_date(entry.end_date) if entry.end_date else start
        store.put(DateRangeRecord(start_date=min(start, end), end_date=max(start, end), type=range_type))
    return store


def decode_schedule(data: Dict[str, Any]) -> Tuple[WeeklyAvailability, SpecialDateRangeStore]:
    """
    Convert a stored document into domain objects.

    Raises:
        InvalidScheduleError: If the document does not match the stored shape
    """
    try:
        payload = ShopSchedulePayload.model_validate(data)
    except ValidationError as exc:
        raise InvalidScheduleError(f"Invalid schedule document: {exc}") from exc

    return availability_from_payload(payload), special_dates_from_payload(payload)


def encode_availability(availability: WeeklyAvailability) -> Dict[str, Dict[str, Any]]:
    """Stored form of the weekly hours. Closed days are left out."""
    encoded: Dict[str, Dict[str, Any]] = {}
    for day, schedule in availability.items():
        if schedule is None:
            continue
        encoded[day.value] = {
            "open": format_time(schedule.open),
            "close": format_time(schedule.close),
            "slotDuration": schedule.slot_duration_minutes,
        }
    return encoded


def encode_special_dates(store: SpecialDateRangeStore) -> Dict[str, Dict[str, str]]:
    return {
        record.key: {"type": record.type.value, "endDate": date_key(record.end_date)}
        for record in store.list()
    }


def encode_schedule(
    availability: WeeklyAvailability,
    special_dates: SpecialDateRangeStore
) -> Dict[str, Any]:
    return {
        "availability": encode_availability(availability),
        "specialDates": encode_special_dates(special_dates),
    }
