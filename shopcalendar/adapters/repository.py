"""
Storage contract used by the schedule editor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..domain.special_dates import SpecialDateRangeStore
from ..domain.weekly_availability import WeeklyAvailability


@dataclass
class ShopSchedule:
    """Everything the engine loads and saves for one shop."""
    availability: WeeklyAvailability = field(default_factory=WeeklyAvailability)
    special_dates: SpecialDateRangeStore = field(default_factory=SpecialDateRangeStore)


class ShopRepositoryProtocol(Protocol):
    """Protocol describing the storage behaviour needed by the editor."""

    async def load(self, shop_id: str) -> ShopSchedule:
        """Return the stored schedule of a shop."""

    async def save(
        self,
        shop_id: str,
        availability: WeeklyAvailability,
        special_dates: SpecialDateRangeStore,
    ) -> None:
        """Persist a schedule, raising PersistenceError on failure."""
