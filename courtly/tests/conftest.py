import asyncio
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone

import pytest

from courtly.app.core.errors import SlotConflict, UpstreamFailure
from courtly.app.db.store import get_store
from courtly.app.main import app
from courtly.app.models import PAYMENT_COMPLETED, Reservation
from courtly.app.services import clock
from courtly.app.services.holds import SlotHolds, get_holds


# Sunday 2025-06-01 10:00 at the venue (UTC+7)
VENUE_TZ = timezone(timedelta(hours=7))
FROZEN_NOW = datetime(2025, 6, 1, 10, 0, tzinfo=VENUE_TZ)


class InMemoryReservationStore:
    """Stand-in for ReservationStore keeping rows in a list.

    ``insert_batch`` applies the same uniqueness rule as the partial index on
    the reservation table. Reads snapshot the rows and then yield to the loop
    once, like a network round trip would.
    """

    def __init__(self) -> None:
        self.records: list[Reservation] = []
        self.fail_reads = False
        self.fail_writes = False

    async def reservations_for_date(self, day: date, court_id: str | None = None) -> list[Reservation]:
        if self.fail_reads:
            raise UpstreamFailure("Reservation lookup failed")
        rows = [
            r
            for r in self.records
            if r.date == day
            and r.payment_status == PAYMENT_COMPLETED
            and (court_id is None or r.court_id == court_id)
        ]
        await asyncio.sleep(0)
        return rows

    async def by_payment_ref(self, payment_ref: str) -> list[Reservation]:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise UpstreamFailure("Reservation lookup failed")
        return sorted((r for r in self.records if r.payment_ref == payment_ref), key=lambda r: r.timeslot_id)

    async def insert_batch(self, records: Sequence[Reservation]) -> None:
        if self.fail_writes:
            raise UpstreamFailure("Database error")
        taken = {
            (r.date, r.timeslot_id, r.court_id) for r in self.records if r.payment_status == PAYMENT_COMPLETED
        }
        for record in records:
            key = (record.date, record.timeslot_id, record.court_id)
            if record.payment_status == PAYMENT_COMPLETED:
                if key in taken:
                    raise SlotConflict("One or more selected slots are already reserved")
                taken.add(key)
        self.records.extend(records)

    async def ping(self) -> None:
        return None

    def add(self, day: date, slot_id: str, court_id: str, status: str = PAYMENT_COMPLETED, ref: str = "BK-SEED0001") -> None:
        self.records.append(
            Reservation(
                date=day,
                timeslot_id=slot_id,
                court_id=court_id,
                customer_name="Seed",
                customer_email="seed@example.com",
                customer_phone="+620000",
                total_price=50_000,
                payment_status=status,
                created_at=FROZEN_NOW,
                payment_ref=ref,
            )
        )


class FakeRedis:
    """The handful of redis.asyncio.Redis calls SlotHolds and readiness use."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def set(self, key: str, value: str, nx: bool = False, px: int | None = None) -> bool | None:
        if nx and key in self.data:
            return None
        self.data[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def ping(self) -> bool:
        return True


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def holds(fake_redis: FakeRedis) -> SlotHolds:
    return SlotHolds(fake_redis)


@pytest.fixture
def frozen_clock(monkeypatch: pytest.MonkeyPatch) -> datetime:
    monkeypatch.setattr(clock, "server_now", lambda: FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture
def api(store: InMemoryReservationStore, holds: SlotHolds, frozen_clock: datetime):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_holds] = lambda: holds
    try:
        yield app
    finally:
        app.dependency_overrides.clear()
