"""
In-memory collection of tagged special date ranges.
"""

import logging
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional

from pendulum import Date

from .models import DateRangeRecord, RangeType, date_key

logger = logging.getLogger(__name__)


class SpecialDateRangeStore:
    """
    Special date ranges keyed by their start date.

    There is one record per start date: putting a record whose start date is
    already present replaces the old one. The store does not check overlaps;
    callers validate candidates before ``put``.
    """

    def __init__(self, records: Optional[Iterable[DateRangeRecord]] = None):
        self._records: Dict[str, DateRangeRecord] = {}
        for record in records or ():
            self.put(record)

    def list(self) -> List[DateRangeRecord]:
        """Return all records ordered by start date."""
        return sorted(self._records.values(), key=lambda r: r.start_date)

    def get(self, start_date: Date) -> Optional[DateRangeRecord]:
        return self._records.get(date_key(start_date))

    def put(self, record: DateRangeRecord) -> None:
        """Store a record, replacing any record with the same start date."""
        replaced = self._records.get(record.key)
        if replaced is not None and replaced != record:
            logger.debug("Replacing %s with %s", replaced, record)
        self._records[record.key] = record

    def remove(self, start_date: Date) -> Optional[DateRangeRecord]:
        """Remove the record starting on the given date and return it."""
        return self._records.pop(date_key(start_date), None)

    def clear(self) -> None:
        self._records.clear()

    def find_covering(self, date: Date) -> Optional[DateRangeRecord]:
        """Return the record whose range includes the date, if any."""
        exact = self._records.get(date_key(date))
        if exact is not None:
            return exact

        for record in self.list():
            if record.covers(date):
                return record
        return None

    def is_holiday(self, date: Date) -> bool:
        """Check if any holiday range includes the date, even one overlapped by another range."""
        return any(
            record.type is RangeType.HOLIDAY and record.covers(date)
            for record in self._records.values()
        )

    def copy(self) -> "SpecialDateRangeStore":
        return SpecialDateRangeStore(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DateRangeRecord]:
        return iter(self.list())

    def __contains__(self, start_date: object) -> bool:
        if not isinstance(start_date, date):
            return False
        return date_key(start_date) in self._records

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpecialDateRangeStore):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"SpecialDateRangeStore({self.list()!r})"
