from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from courtly.app.core.errors import UpstreamFailure
from courtly.app.db.store import ReservationStore, get_store
from courtly.app.routers.schemas import CourtOut, CourtsOut
from courtly.app.services import catalog
from courtly.app.services.availability import find_occupied_courts


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/courts", response_model=CourtsOut)
async def list_courts(
    date: str | None = None,
    timeslots: str | None = None,
    timeslot: str | None = None,
    store: ReservationStore = Depends(get_store),
) -> CourtsOut:
    courts = catalog.list_courts()
    slot_ids = catalog.parse_slot_ids(timeslots or timeslot)
    if not date or not slot_ids:
        return CourtsOut(courts=[CourtOut(**court.to_dict()) for court in courts])

    day = catalog.parse_booking_date(date)
    slot_ids = catalog.normalise_slot_ids(slot_ids)
    try:
        occupied = await find_occupied_courts(store, day, slot_ids)
    except UpstreamFailure:
        logger.warning("Occupancy unknown for %s %s, returning unfiltered courts", day, slot_ids, exc_info=True)
        return CourtsOut(
            courts=[CourtOut(**court.to_dict()) for court in courts],
            occupancyKnown=False,
        )

    return CourtsOut(courts=[CourtOut(**court.to_dict()) for court in courts if court.id not in occupied])
