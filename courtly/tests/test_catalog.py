from datetime import date, datetime, timedelta, timezone

import pytest

from courtly.app.core.config import settings
from courtly.app.core.errors import BookingValidationError
from courtly.app.services import catalog


TZ = timezone(timedelta(hours=7))


def test_time_slot_grid_covers_opening_hours():
    slots = catalog.generate_time_slots()

    assert len(slots) == 14
    assert slots[0].id == "08:00-09:00"
    assert slots[0].label == "08:00 - 09:00"
    assert slots[-1].id == "21:00-22:00"
    for earlier, later in zip(slots, slots[1:]):
        assert earlier.end_time == later.start_time


def test_time_slot_grid_is_deterministic_and_ignores_date():
    first = catalog.generate_time_slots(date(2025, 6, 1))
    second = catalog.generate_time_slots(date(2025, 6, 1))
    other_day = catalog.generate_time_slots(date(2026, 1, 15))

    assert first == second == other_day


def test_court_list_is_fixed():
    courts = catalog.list_courts()

    assert [c.id for c in courts] == ["court-1", "court-2", "court-3", "court-4"]
    assert [c.name for c in courts] == ["Court 1", "Court 2", "Court 3", "Court 4"]
    assert catalog.list_courts() == courts
    assert catalog.get_court("court-3").name == "Court 3"
    assert catalog.get_court("court-9") is None


def test_parse_slot_ids_drops_blanks():
    assert catalog.parse_slot_ids(" 08:00-09:00, ,09:00-10:00,") == ["08:00-09:00", "09:00-10:00"]
    assert catalog.parse_slot_ids("") == []
    assert catalog.parse_slot_ids(None) == []


def test_normalise_slot_ids_dedupes_and_orders():
    assert catalog.normalise_slot_ids(["10:00-11:00", "08:00-09:00", "10:00-11:00"]) == [
        "08:00-09:00",
        "10:00-11:00",
    ]


def test_normalise_slot_ids_rejects_unknown_slot():
    with pytest.raises(BookingValidationError, match="07:00-08:00"):
        catalog.normalise_slot_ids(["07:00-08:00", "08:00-09:00"])


def test_parse_booking_date():
    assert catalog.parse_booking_date("2025-06-01") == date(2025, 6, 1)
    with pytest.raises(BookingValidationError):
        catalog.parse_booking_date("01/06/2025")


def test_slot_starting_now_has_passed():
    now = datetime(2025, 6, 1, 10, 0, tzinfo=TZ)

    assert catalog.is_slot_passed(date(2025, 6, 1), "10:00-11:00", now)
    assert catalog.is_slot_passed(date(2025, 6, 1), "09:00-10:00", now)


def test_slot_starting_after_now_is_bookable():
    now = datetime(2025, 6, 1, 9, 59, tzinfo=TZ)

    assert not catalog.is_slot_passed(date(2025, 6, 1), "10:00-11:00", now)
    assert not catalog.is_slot_passed(date(2025, 6, 2), "08:00-09:00", now)


def test_cutoff_moves_the_boundary():
    now = datetime(2025, 6, 1, 9, 30, tzinfo=TZ)

    assert not catalog.is_slot_passed(date(2025, 6, 1), "10:00-11:00", now, cutoff_minutes=29)
    assert catalog.is_slot_passed(date(2025, 6, 1), "10:00-11:00", now, cutoff_minutes=30)


def test_bookable_dates_is_rolling_window():
    window = catalog.bookable_dates(date(2025, 6, 29))

    assert len(window) == settings.BOOKING_WINDOW_DAYS
    assert window[0] == date(2025, 6, 29)
    assert window[2] == date(2025, 7, 1)
    assert catalog.bookable_dates(date(2025, 6, 1), days=2) == [date(2025, 6, 1), date(2025, 6, 2)]


def test_quote_price_counts_distinct_slots():
    court = catalog.get_court("court-1")

    assert catalog.quote_price(court, ["08:00-09:00", "09:00-10:00", "08:00-09:00"]) == 2 * court.price_per_hour
