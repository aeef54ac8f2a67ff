from fastapi import APIRouter

from courtly.app.core.config import settings
from courtly.app.routers.schemas import DatesOut, NowOut, TimeSlotOut, TimeSlotsOut
from courtly.app.services import catalog, clock


router = APIRouter()


@router.get("/timeslots", response_model=TimeSlotsOut)
async def list_timeslots(date: str | None = None) -> TimeSlotsOut:
    """Daily slot grid; for today, slots that have already started are left out."""
    slots = catalog.generate_time_slots()
    if date:
        day = catalog.parse_booking_date(date)
        now = clock.server_now()
        if day == now.date():
            slots = [
                slot
                for slot in slots
                if not catalog.is_slot_passed(day, slot.id, now, settings.BOOKING_CUTOFF_MINUTES)
            ]
    return TimeSlotsOut(timeslots=[TimeSlotOut(**slot.to_dict()) for slot in slots])


@router.get("/dates", response_model=DatesOut)
async def list_dates() -> DatesOut:
    today = clock.venue_today()
    return DatesOut(
        today=today.isoformat(),
        dates=[day.isoformat() for day in catalog.bookable_dates(today)],
    )


@router.get("/now", response_model=NowOut)
async def now() -> NowOut:
    """Server clock so clients pin "today" and passed slots to venue time."""
    return NowOut(**clock.clock_snapshot())
