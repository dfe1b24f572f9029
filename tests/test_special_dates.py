"""
Tests for the special date store, the overlap check and the summary counts.
"""

import pendulum

from shopcalendar.domain.analytics import summarize
from shopcalendar.domain.models import DateRange, DateRangeRecord, RangeType
from shopcalendar.domain.overlap import is_overlapping
from shopcalendar.domain.special_dates import SpecialDateRangeStore


def _record(start: str, end: str, range_type: RangeType = RangeType.HOLIDAY) -> DateRangeRecord:
    return DateRangeRecord(
        start_date=pendulum.parse(start).date(),
        end_date=pendulum.parse(end).date(),
        type=range_type
    )


def _range(start: str, end: str) -> DateRange:
    return DateRange.normalized(pendulum.parse(start).date(), pendulum.parse(end).date())


class TestSpecialDateRangeStore:
    """Tests for SpecialDateRangeStore."""

    def test_list_is_ordered_by_start_date(self):
        store = SpecialDateRangeStore()
        store.put(_record("2025-09-01", "2025-09-02"))
        store.put(_record("2025-08-10", "2025-08-12"))

        assert [r.key for r in store.list()] == ["2025-08-10", "2025-09-01"]
        assert len(store) == 2

    def test_get_and_remove(self):
        store = SpecialDateRangeStore([_record("2025-08-10", "2025-08-12")])
        start = pendulum.date(2025, 8, 10)

        assert store.get(start).end_date == pendulum.date(2025, 8, 12)
        assert start in store

        removed = store.remove(start)

        assert removed.type is RangeType.HOLIDAY
        assert store.get(start) is None
        assert store.remove(start) is None

    def test_put_with_same_start_date_overwrites(self):
        """
        One record per start date: the second put silently replaces the first,
        even though both are different ranges. Kept as-is on purpose.
        """
        store = SpecialDateRangeStore()
        store.put(_record("2025-08-10", "2025-08-12", RangeType.HOLIDAY))
        store.put(_record("2025-08-10", "2025-08-20", RangeType.PROMO))

        assert len(store) == 1
        record = store.get(pendulum.date(2025, 8, 10))
        assert record.type is RangeType.PROMO
        assert record.end_date == pendulum.date(2025, 8, 20)

    def test_clear(self):
        store = SpecialDateRangeStore([_record("2025-08-10", "2025-08-12")])

        store.clear()

        assert store.list() == []

    def test_find_covering_and_is_holiday(self):
        store = SpecialDateRangeStore([
            _record("2025-08-10", "2025-08-12", RangeType.HOLIDAY),
            _record("2025-08-20", "2025-08-21", RangeType.SPECIAL),
        ])

        assert store.find_covering(pendulum.date(2025, 8, 11)).key == "2025-08-10"
        assert store.find_covering(pendulum.date(2025, 8, 21)).type is RangeType.SPECIAL
        assert store.find_covering(pendulum.date(2025, 8, 15)) is None
        assert store.is_holiday(pendulum.date(2025, 8, 12))
        assert not store.is_holiday(pendulum.date(2025, 8, 20))

    def test_is_holiday_inside_enclosing_special_range(self):
        """Stored documents may hold overlapping ranges; the holiday still counts."""
        store = SpecialDateRangeStore([
            _record("2025-08-10", "2025-08-15", RangeType.SPECIAL),
            _record("2025-08-12", "2025-08-13", RangeType.HOLIDAY),
        ])

        assert store.is_holiday(pendulum.date(2025, 8, 13))
        assert not store.is_holiday(pendulum.date(2025, 8, 14))

    def test_copy_is_independent(self):
        store = SpecialDateRangeStore([_record("2025-08-10", "2025-08-12")])
        clone = store.copy()

        clone.clear()

        assert len(store) == 1
        assert clone != store


class TestOverlap:
    """Tests for is_overlapping."""

    def test_intersecting_ranges_overlap(self):
        existing = [_record("2025-08-10", "2025-08-12")]

        assert is_overlapping(_range("2025-08-11", "2025-08-13"), existing)

    def test_touching_endpoints_overlap(self):
        existing = [_record("2025-08-10", "2025-08-12")]

        assert is_overlapping(_range("2025-08-12", "2025-08-14"), existing)
        assert is_overlapping(_range("2025-08-08", "2025-08-10"), existing)

    def test_enclosing_and_enclosed_ranges_overlap(self):
        existing = [_record("2025-08-10", "2025-08-12")]

        assert is_overlapping(_range("2025-08-01", "2025-08-31"), existing)
        assert is_overlapping(_range("2025-08-11", "2025-08-11"), existing)

    def test_disjoint_ranges_do_not_overlap(self):
        existing = [
            _record("2025-08-10", "2025-08-12"),
            _record("2025-08-20", "2025-08-22"),
        ]

        assert not is_overlapping(_range("2025-08-13", "2025-08-19"), existing)

    def test_empty_store_never_overlaps(self):
        assert not is_overlapping(_range("2025-08-13", "2025-08-19"), [])


class TestSummarize:
    """Tests for summary counts."""

    def test_counts_per_type(self):
        store = SpecialDateRangeStore([
            _record("2025-08-01", "2025-08-02", RangeType.HOLIDAY),
            _record("2025-08-05", "2025-08-05", RangeType.HOLIDAY),
            _record("2025-08-10", "2025-08-12", RangeType.PROMO),
        ])

        summary = summarize(store)

        assert summary.total == 3
        assert summary.count(RangeType.HOLIDAY) == 2
        assert summary.count(RangeType.SPECIAL) == 0
        assert summary.count(RangeType.PROMO) == 1

    def test_empty_store(self):
        summary = summarize(SpecialDateRangeStore())

        assert summary.total == 0
        assert set(summary.by_type) == set(RangeType)
