import logging

from fastapi import APIRouter, Depends

from courtly.app.core.config import settings
from courtly.app.core.errors import BookingValidationError
from courtly.app.db.store import ReservationStore, get_store
from courtly.app.models import CustomerInfo
from courtly.app.routers.schemas import BookingOut, PaymentIn, PaymentOut
from courtly.app.services import catalog, clock
from courtly.app.services.holds import SlotHolds, get_holds
from courtly.app.services.reservations import create_reservation, ensure_bookable, get_booking


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/process_payment", response_model=PaymentOut)
async def process_payment(
    payload: PaymentIn,
    store: ReservationStore = Depends(get_store),
    holds: SlotHolds = Depends(get_holds),
) -> PaymentOut:
    """Simulated card payment that books the court on success.

    Card fields must be present but are never sent to a processor.
    """
    court = catalog.get_court(payload.courtId)
    if court is None:
        raise BookingValidationError(f"Unknown court: {payload.courtId}")
    day = catalog.parse_booking_date(payload.date)
    slot_ids = catalog.normalise_slot_ids(payload.timeslots)
    ensure_bookable(day, slot_ids, clock.server_now())

    total_price = catalog.quote_price(court, slot_ids)
    if payload.amount is not None and payload.amount != total_price:
        logger.warning(
            "Client amount %s differs from quote %s for %s on %s", payload.amount, total_price, court.id, day
        )

    booking_id = await create_reservation(
        store,
        holds,
        court_id=court.id,
        day=day,
        slot_ids=slot_ids,
        customer=CustomerInfo(
            name=payload.customerName,
            email=payload.customerEmail,
            phone=payload.customerPhone,
        ),
        total_price=total_price,
    )
    return PaymentOut(
        success=True,
        bookingId=booking_id,
        totalPrice=total_price,
        currency=settings.PRICE_CURRENCY,
    )


@router.get("/reservations/{booking_id}", response_model=BookingOut)
async def read_booking(
    booking_id: str,
    store: ReservationStore = Depends(get_store),
) -> BookingOut:
    records = await get_booking(store, booking_id)
    first = records[0]
    return BookingOut(
        bookingId=booking_id,
        date=first.date.isoformat(),
        courtId=first.court_id,
        timeslots=catalog.normalise_slot_ids(r.timeslot_id for r in records),
        totalPrice=first.total_price,
        paymentStatus=first.payment_status,
        customerName=first.customer_name,
        customerEmail=first.customer_email,
        createdAt=first.created_at,
    )
