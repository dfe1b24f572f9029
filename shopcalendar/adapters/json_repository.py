"""
File-backed shop repository: one JSON document per shop.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict

import pendulum

from ..domain.exceptions import PersistenceError
from ..domain.special_dates import SpecialDateRangeStore
from ..domain.weekly_availability import WeeklyAvailability
from .payloads import decode_schedule, encode_schedule
from .repository import ShopSchedule

logger = logging.getLogger(__name__)

_SHOP_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileShopRepository:
    """
    Stores each shop's schedule in ``<data_dir>/<shop_id>.json``.

    Saving merges into an existing document, so keys this engine does not
    own (name, services, ...) survive. A shop without a document loads as
    an empty schedule with every day closed.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, shop_id: str) -> Path:
        if not _SHOP_ID_PATTERN.match(shop_id) or shop_id in (".", ".."):
            raise PersistenceError(f"Invalid shop id: '{shop_id}'")
        return self.data_dir / f"{shop_id}.json"

    async def load(self, shop_id: str) -> ShopSchedule:
        """
        Load the schedule of a shop.

        Raises:
            PersistenceError: If the document cannot be read or parsed
            InvalidScheduleError: If the document has the wrong shape
        """
        document = self._read_document(self.path_for(shop_id))
        availability, special_dates = decode_schedule(document)
        logger.debug(
            "Loaded shop %s: %d open days, %d special ranges",
            shop_id, len(availability.open_days()), len(special_dates)
        )
        return ShopSchedule(availability=availability, special_dates=special_dates)

    async def save(
        self,
        shop_id: str,
        availability: WeeklyAvailability,
        special_dates: SpecialDateRangeStore,
    ) -> None:
        """
        Write the schedule of a shop.

        Raises:
            PersistenceError: If the document cannot be written
        """
        path = self.path_for(shop_id)
        document = self._read_document(path)
        document.update(encode_schedule(availability, special_dates))
        document["lastUpdated"] = pendulum.now().to_iso8601_string()

        tmp_path = path.parent / f"{path.name}.tmp"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as file_handle:
                json.dump(document, file_handle, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as exc:
            if tmp_path.exists():
                tmp_path.unlink()
            raise PersistenceError(f"Could not save schedule of shop '{shop_id}': {exc}") from exc

        logger.info("Saved schedule of shop %s to %s", shop_id, path)

    def _read_document(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path, "r", encoding="utf-8") as file_handle:
                document = json.load(file_handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Could not read {path}: {exc}") from exc

        if not isinstance(document, dict):
            raise PersistenceError(f"{path} must contain a JSON object at the root level.")
        return document
