from __future__ import annotations

import logging
import secrets
from collections.abc import Sequence
from datetime import date, datetime, timezone

from courtly.app.core.config import settings
from courtly.app.core.errors import BookingNotFound, BookingValidationError, SlotConflict
from courtly.app.db.store import ReservationStore
from courtly.app.models import PAYMENT_COMPLETED, CustomerInfo, Reservation
from courtly.app.services import catalog
from courtly.app.services.availability import is_court_available
from courtly.app.services.holds import SlotHolds


logger = logging.getLogger(__name__)

# No 0/O or 1/I so ids survive being read out over the phone.
BOOKING_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
BOOKING_ID_LENGTH = 8


def new_booking_id() -> str:
    return "BK-" + "".join(secrets.choice(BOOKING_ID_ALPHABET) for _ in range(BOOKING_ID_LENGTH))


def ensure_bookable(day: date, slot_ids: Sequence[str], now: datetime) -> None:
    """Reject dates outside the rolling window and slots that have already started."""
    window = catalog.bookable_dates(now.date())
    if day not in window:
        raise BookingValidationError(
            f"Date must be between {window[0].isoformat()} and {window[-1].isoformat()}"
        )
    for slot_id in slot_ids:
        if catalog.is_slot_passed(day, slot_id, now, settings.BOOKING_CUTOFF_MINUTES):
            raise BookingValidationError(f"Cannot book a past timeslot: {slot_id}")


async def create_reservation(
    store: ReservationStore,
    holds: SlotHolds,
    *,
    court_id: str,
    day: date,
    slot_ids: Sequence[str],
    customer: CustomerInfo,
    total_price: int,
) -> str:
    """Re-check availability, then write one completed record per slot.

    Returns the booking id shared by every written record. Raises
    ``SlotConflict`` without writing anything if the court is taken for any
    requested slot.
    """
    if not slot_ids:
        raise BookingValidationError("Missing booking details")
    if catalog.get_court(court_id) is None:
        raise BookingValidationError(f"Unknown court: {court_id}")
    slots = catalog.normalise_slot_ids(slot_ids)

    if not await holds.acquire(day, court_id, slots):
        raise SlotConflict("Slot temporarily held by another request")

    try:
        if not await is_court_available(store, court_id, day, slots):
            logger.warning("Conflict for %s on %s at %s", court_id, day, ",".join(slots))
            raise SlotConflict("One or more selected slots are already reserved")

        booking_id = new_booking_id()
        created_at = datetime.now(timezone.utc)
        await store.insert_batch(
            [
                Reservation(
                    date=day,
                    timeslot_id=slot_id,
                    court_id=court_id,
                    customer_name=customer.name,
                    customer_email=customer.email,
                    customer_phone=customer.phone,
                    total_price=total_price,
                    payment_status=PAYMENT_COMPLETED,
                    created_at=created_at,
                    payment_ref=booking_id,
                )
                for slot_id in slots
            ]
        )
    finally:
        await holds.release(day, court_id, slots)

    logger.info("Booked %s on %s at %s as %s", court_id, day, ",".join(slots), booking_id)
    return booking_id


async def get_booking(store: ReservationStore, booking_id: str) -> list[Reservation]:
    records = await store.by_payment_ref(booking_id)
    if not records:
        raise BookingNotFound(f"Booking {booking_id} not found")
    return records
