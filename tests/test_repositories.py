"""
Tests for stored schedule documents and the repository adapters.
"""

import asyncio
import json
from pathlib import Path

import pendulum
import pytest

from shopcalendar.adapters.json_repository import JsonFileShopRepository
from shopcalendar.adapters.payloads import decode_schedule, encode_schedule
from shopcalendar.domain.exceptions import InvalidScheduleError, PersistenceError
from shopcalendar.domain.models import DaySchedule, RangeType, Weekday


class TestPayloads:
    """Tests for decoding and encoding the stored shape."""

    def test_decode_full_document(self):
        availability, special_dates = decode_schedule({
            "availability": {
                "Monday": {"open": "9:00", "close": "17:00", "slotDuration": 60},
                "Tuesday": {"open": "09:00", "close": "17:00"},
            },
            "specialDates": {
                "2025-08-10": {"type": "holiday", "endDate": "2025-08-12"},
            },
        })

        assert availability.get(Weekday.MONDAY) == DaySchedule.from_strings("09:00", "17:00", 60)
        assert availability.slot_duration(Weekday.TUESDAY) == 30
        assert special_dates.get(pendulum.date(2025, 8, 10)).end_date == pendulum.date(2025, 8, 12)

    def test_incomplete_days_are_closed(self):
        """Entries holding only a slot duration count as closed days."""
        availability, _ = decode_schedule({
            "availability": {"Monday": {"slotDuration": 45}, "Friday": None},
        })

        assert availability.open_days() == []

    def test_regular_marker_is_skipped(self):
        _, special_dates = decode_schedule({
            "specialDates": {
                "2025-08-10": {"type": "regular", "endDate": "2025-08-12"},
                "2025-08-20": {"type": "promo"},
            },
        })

        records = special_dates.list()
        assert len(records) == 1
        assert records[0].type is RangeType.PROMO
        assert records[0].start_date == records[0].end_date

    @pytest.mark.parametrize("document", [
        {"availability": {"Funday": {"open": "09:00", "close": "17:00"}}},
        {"availability": {"Monday": {"open": "9am", "close": "17:00"}}},
        {"availability": {"Monday": {"open": "09:00", "close": "17:00", "slotDuration": 20}}},
        {"specialDates": {"2025-08-10": {"type": "vacation"}}},
        {"specialDates": {"10.08.2025": {"type": "holiday"}}},
    ])
    def test_invalid_documents_raise(self, document):
        with pytest.raises(InvalidScheduleError):
            decode_schedule(document)

    def test_encode_leaves_out_closed_days(self):
        availability, special_dates = decode_schedule({
            "availability": {"Monday": {"open": "10:00", "close": "18:00", "slotDuration": 45}},
            "specialDates": {"2025-08-10": {"type": "special", "endDate": "2025-08-11"}},
        })

        assert encode_schedule(availability, special_dates) == {
            "availability": {"Monday": {"open": "10:00", "close": "18:00", "slotDuration": 45}},
            "specialDates": {"2025-08-10": {"type": "special", "endDate": "2025-08-11"}},
        }


class TestJsonFileShopRepository:
    """Tests for the file-backed repository."""

    def test_missing_document_loads_empty(self, tmp_path):
        repository = JsonFileShopRepository(tmp_path)

        schedule = asyncio.run(repository.load("new-shop"))

        assert schedule.availability.open_days() == []
        assert len(schedule.special_dates) == 0

    def test_save_then_load(self, tmp_path):
        repository = JsonFileShopRepository(tmp_path / "data")
        schedule = asyncio.run(repository.load("shop-1"))
        schedule.availability.apply_standard_business_hours()

        asyncio.run(repository.save("shop-1", schedule.availability, schedule.special_dates))
        loaded = asyncio.run(repository.load("shop-1"))

        assert loaded.availability == schedule.availability
        assert (tmp_path / "data" / "shop-1.json").exists()

    def test_save_keeps_foreign_keys(self, tmp_path):
        path = tmp_path / "shop-1.json"
        path.write_text(json.dumps({"name": "Downtown Barber", "availability": {}}), encoding="utf-8")
        repository = JsonFileShopRepository(tmp_path)
        schedule = asyncio.run(repository.load("shop-1"))

        asyncio.run(repository.save("shop-1", schedule.availability, schedule.special_dates))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["name"] == "Downtown Barber"
        assert document["specialDates"] == {}
        assert "lastUpdated" in document

    def test_corrupt_document_raises_persistence_error(self, tmp_path):
        (tmp_path / "shop-1.json").write_text("{not json", encoding="utf-8")
        repository = JsonFileShopRepository(tmp_path)

        with pytest.raises(PersistenceError, match="Could not read"):
            asyncio.run(repository.load("shop-1"))

    def test_non_object_document_raises_persistence_error(self, tmp_path):
        (tmp_path / "shop-1.json").write_text("[]", encoding="utf-8")
        repository = JsonFileShopRepository(tmp_path)

        with pytest.raises(PersistenceError, match="JSON object"):
            asyncio.run(repository.load("shop-1"))

    @pytest.mark.parametrize("shop_id", ["../escape", "a/b", "", ".."])
    def test_invalid_shop_id(self, tmp_path, shop_id):
        repository = JsonFileShopRepository(tmp_path)

        with pytest.raises(PersistenceError, match="Invalid shop id"):
            asyncio.run(repository.load(shop_id))

    def test_unwritable_location_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        repository = JsonFileShopRepository(blocker / "data")
        schedule = asyncio.run(repository.load("shop-1"))

        with pytest.raises(PersistenceError, match="Could not save"):
            asyncio.run(repository.save("shop-1", schedule.availability, schedule.special_dates))

    def test_failed_replace_removes_temporary_file(self, tmp_path, monkeypatch):
        repository = JsonFileShopRepository(tmp_path)
        schedule = asyncio.run(repository.load("shop-1"))

        def failing_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", failing_replace)

        with pytest.raises(PersistenceError, match="disk full"):
            asyncio.run(repository.save("shop-1", schedule.availability, schedule.special_dates))
        assert list(tmp_path.iterdir()) == []
