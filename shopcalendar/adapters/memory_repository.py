"""
In-memory shop repository for tests and the CLI's --mock mode.
"""

from typing import Any, Dict, List, Optional

from ..domain.exceptions import PersistenceError
from ..domain.special_dates import SpecialDateRangeStore
from ..domain.weekly_availability import WeeklyAvailability
from .payloads import decode_schedule, encode_schedule
from .repository import ShopSchedule


class InMemoryShopRepository:
    """
    Keeps stored documents in a dict.

    Documents go through the same encoding as the file repository, so a
    save/load cycle behaves like real storage. Set ``fail_with`` to make
    the next calls raise a PersistenceError.
    """

    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None):
        self.documents: Dict[str, Dict[str, Any]] = dict(documents or {})
        self.fail_with: Optional[str] = None
        self.saved_shops: List[str] = []

    async def load(self, shop_id: str) -> ShopSchedule:
        self._maybe_fail()
        availability, special_dates = decode_schedule(self.documents.get(shop_id, {}))
        return ShopSchedule(availability=availability, special_dates=special_dates)

    async def save(
        self,
        shop_id: str,
        availability: WeeklyAvailability,
        special_dates: SpecialDateRangeStore,
    ) -> None:
        self._maybe_fail()
        self.documents[shop_id] = encode_schedule(availability, special_dates)
        self.saved_shops.append(shop_id)

    def _maybe_fail(self) -> None:
        if self.fail_with:
            raise PersistenceError(self.fail_with)
