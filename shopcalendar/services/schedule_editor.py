"""
Application service for one editing session of a shop's availability.

The service loads the shop's weekly hours and special dates through a
repository adapter, lets the owner edit in-memory copies and hands a snapshot
back to the repository on explicit save. Special dates are only changed
through the session's range selection controller.
"""

from __future__ import annotations

import logging
from datetime import time
from typing import Dict, List, Optional, Tuple

from pendulum import Date

from ..adapters.repository import ShopRepositoryProtocol
from ..domain.analytics import AnalyticsSummary, summarize
from ..domain.models import DateRangeRecord, DaySchedule, EditMode, Slot, Weekday
from ..domain.selection import (
    InputModality,
    RangeSelectionController,
    TodayProvider,
    create_controller,
)
from ..domain.slot_generator import SlotGenerator
from ..domain.special_dates import SpecialDateRangeStore
from ..domain.weekly_availability import (
    DEFAULT_PRESETS,
    STANDARD_CLOSE,
    STANDARD_OPEN,
    TimePreset,
    WeeklyAvailability,
)

logger = logging.getLogger(__name__)


class ScheduleEditorService:
    """
    Orchestrates loading, editing and saving a shop schedule.

    Saving is not guarded against overlapping calls: a second ``save`` may
    start before the first one finished, and the last write wins.
    """

    def __init__(
        self,
        repository: ShopRepositoryProtocol,
        shop_id: str,
        *,
        modality: InputModality = InputModality.DESKTOP,
        presets: Optional[Dict[str, TimePreset]] = None,
        today: Optional[TodayProvider] = None,
        standard_hours: Tuple[time, time] = (STANDARD_OPEN, STANDARD_CLOSE),
    ) -> None:
        self._repository = repository
        self.shop_id = shop_id
        self.presets = dict(presets or DEFAULT_PRESETS)
        self.standard_hours = standard_hours
        self._today = today
        self.availability = WeeklyAvailability()
        self.special_dates = SpecialDateRangeStore()
        self.has_unsaved_changes = False
        self.controller = self._build_controller(InputModality(modality))

    def _build_controller(
        self,
        modality: InputModality,
        edit_mode: EditMode = EditMode.REGULAR
    ) -> RangeSelectionController:
        controller = create_controller(
            modality, self.special_dates, edit_mode=edit_mode, today=self._today
        )
        controller.add_change_listener(self._mark_dirty)
        return controller

    def _mark_dirty(self, _controller: Optional[RangeSelectionController] = None) -> None:
        self.has_unsaved_changes = True

    async def load(self) -> None:
        """
        Replace the session's data with the stored schedule.

        Any pending selection is dropped since it referred to the old data.
        """
        schedule = await self._repository.load(self.shop_id)
        self.availability = schedule.availability
        self.special_dates = schedule.special_dates
        self.controller = self._build_controller(
            self.controller.modality, self.controller.edit_mode
        )
        self.has_unsaved_changes = False

    async def save(self) -> None:
        """
        Hand the current hours and special dates to the repository.

        Raises:
            PersistenceError: If storage fails; nothing is retried
        """
        await self._repository.save(
            self.shop_id,
            self.availability.copy(),
            self.special_dates.copy(),
        )
        self.has_unsaved_changes = False
        logger.info("Saved availability of shop %s", self.shop_id)

    # Weekly hours

    def set_day(self, day: Weekday, schedule: Optional[DaySchedule]) -> None:
        self.availability.set_day(day, schedule)
        self._mark_dirty()

    def apply_preset(self, day: Weekday, preset_name: str) -> DaySchedule:
        """
        Apply a named preset to a day.

        Raises:
            KeyError: If the preset does not exist
        """
        try:
            preset = self.presets[preset_name]
        except KeyError:
            raise KeyError(
                f"Unknown preset '{preset_name}'. Available: {', '.join(sorted(self.presets))}"
            ) from None

        schedule = self.availability.apply_preset(day, preset)
        self._mark_dirty()
        return schedule

    def set_slot_duration(self, day: Weekday, minutes: int) -> DaySchedule:
        schedule = self.availability.set_slot_duration(day, minutes)
        self._mark_dirty()
        return schedule

    def copy_to_all_days(self, source_day: Weekday) -> None:
        self.availability.copy_to_all_days(source_day)
        self._mark_dirty()

    def apply_standard_business_hours(self) -> None:
        self.availability.apply_standard_business_hours(*self.standard_hours)
        self._mark_dirty()

    def clear_all(self) -> None:
        self.availability.clear_all()
        self._mark_dirty()

    # Special dates

    def set_edit_mode(self, mode: EditMode) -> None:
        self.controller.edit_mode = mode

    def remove_range(self, start_date: Date) -> bool:
        """Delete the special range starting on a date."""
        record = self.special_dates.get(start_date)
        if record is None:
            return False
        return self.controller.remove(record)

    def special_ranges(self) -> List[DateRangeRecord]:
        return self.special_dates.list()

    def summary(self) -> AnalyticsSummary:
        return summarize(self.special_dates)

    # Downstream consumers

    def get_slots_for(self, date: Date, exclude_holidays: bool = True) -> List[Slot]:
        """Bookable slots of a date, computed from the current session data."""
        generator = SlotGenerator(self.availability, self.special_dates)
        return generator.slots_for(date, exclude_holidays=exclude_holidays)
