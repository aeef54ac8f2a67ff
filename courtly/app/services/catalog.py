from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo

from courtly.app.core.config import settings
from courtly.app.core.errors import BookingValidationError
from courtly.app.models import Court, TimeSlot


_COURT_DESCRIPTIONS = {
    "court-1": "Premium wooden flooring, professional lighting",
    "court-2": "Standard court with good ventilation",
    "court-3": "Competition-ready court with gallery seating",
    "court-4": "Training court with rebound wall",
}


def generate_time_slots(day: date | None = None) -> list[TimeSlot]:
    """Return the daily grid of one-hour slots.

    The grid is the same every day; ``day`` is accepted so callers can pass
    the requested date without caring about that.
    """
    slots: list[TimeSlot] = []
    for hour in range(settings.OPENING_HOUR, settings.CLOSING_HOUR):
        start = time(hour, 0)
        end = time(hour + 1, 0)
        slots.append(
            TimeSlot(
                id=f"{hour:02d}:00-{hour + 1:02d}:00",
                label=f"{start:%H:%M} - {end:%H:%M}",
                start_time=start,
                end_time=end,
            )
        )
    return slots


def list_courts() -> list[Court]:
    return [
        Court(
            id=court_id,
            name=f"Court {court_id.split('-')[1]}",
            description=description,
            price_per_hour=settings.PRICE_PER_SLOT,
        )
        for court_id, description in _COURT_DESCRIPTIONS.items()
    ]


def get_court(court_id: str) -> Court | None:
    for court in list_courts():
        if court.id == court_id:
            return court
    return None


def get_time_slot(slot_id: str) -> TimeSlot | None:
    for slot in generate_time_slots():
        if slot.id == slot_id:
            return slot
    return None


def parse_booking_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise BookingValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def parse_slot_ids(raw: str | None) -> list[str]:
    """Split a comma-separated ``timeslots`` query value, dropping blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def normalise_slot_ids(slot_ids: Iterable[str]) -> list[str]:
    """Deduplicate, validate against the grid and order by start time."""
    grid = {slot.id: slot for slot in generate_time_slots()}
    unique = set(slot_ids)
    unknown = sorted(unique - grid.keys())
    if unknown:
        raise BookingValidationError(f"Unknown time slot(s): {', '.join(unknown)}")
    return sorted(unique, key=lambda slot_id: grid[slot_id].start_time)


def slot_start(day: date, slot_id: str, tz: tzinfo | None) -> datetime:
    slot = get_time_slot(slot_id)
    if slot is None:
        raise BookingValidationError(f"Unknown time slot: {slot_id}")
    return datetime.combine(day, slot.start_time, tzinfo=tz)


def is_slot_passed(day: date, slot_id: str, now: datetime, cutoff_minutes: int = 0) -> bool:
    """A slot has passed once ``now + cutoff`` reaches its start."""
    start = slot_start(day, slot_id, now.tzinfo)
    return start <= now + timedelta(minutes=cutoff_minutes)


def bookable_dates(today: date, days: int | None = None) -> list[date]:
    window = settings.BOOKING_WINDOW_DAYS if days is None else days
    return [today + timedelta(days=offset) for offset in range(window)]


def quote_price(court: Court, slot_ids: Iterable[str]) -> int:
    return court.price_per_hour * len(set(slot_ids))
