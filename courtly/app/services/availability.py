from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from courtly.app.db.store import ReservationStore


async def find_occupied_courts(store: ReservationStore, day: date, slot_ids: Iterable[str]) -> set[str]:
    """Courts with a completed reservation in any of ``slot_ids`` on ``day``.

    An empty slot set places no restriction and never hits storage.
    """
    requested = set(slot_ids)
    if not requested:
        return set()

    reservations = await store.reservations_for_date(day)
    return {r.court_id for r in reservations if r.timeslot_id in requested}


async def is_court_available(
    store: ReservationStore,
    court_id: str,
    day: date,
    slot_ids: Iterable[str],
) -> bool:
    requested = set(slot_ids)
    if not requested:
        return True

    reservations = await store.reservations_for_date(day, court_id=court_id)
    return not any(r.timeslot_id in requested for r in reservations)
