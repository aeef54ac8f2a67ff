from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Sequence
from datetime import date

from asyncpg import exceptions as asyncpg_exc
from fastapi import Depends, status
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from courtly.app.core.errors import SlotConflict, UpstreamFailure
from courtly.app.db.session import get_session
from courtly.app.models import PAYMENT_COMPLETED, Reservation


logger = logging.getLogger(__name__)

_COLUMNS = """
    date, timeslot_id, court_id, customer_name, customer_email,
    customer_phone, total_price, payment_status, created_at, payment_ref
"""


def _is_unique_violation(exc: DBAPIError) -> bool:
    orig = getattr(exc, "orig", exc)
    if isinstance(orig, asyncpg_exc.UniqueViolationError):
        return True
    if isinstance(getattr(orig, "__cause__", None), asyncpg_exc.UniqueViolationError):
        return True
    return getattr(orig, "sqlstate", None) == "23505"


class ReservationStore:
    """Reservation persistence on top of one request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def reservations_for_date(self, day: date, court_id: str | None = None) -> list[Reservation]:
        """Completed reservations for ``day``, optionally narrowed to one court."""
        query = f"SELECT {_COLUMNS} FROM reservation WHERE date = :date AND payment_status = :status"
        params: dict[str, object] = {"date": day, "status": PAYMENT_COMPLETED}
        if court_id is not None:
            query += " AND court_id = :court_id"
            params["court_id"] = court_id

        try:
            result = await self.session.execute(text(query), params)
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamFailure("Reservation lookup failed") from exc
        return [Reservation(**row) for row in result.mappings().all()]

    async def by_payment_ref(self, payment_ref: str) -> list[Reservation]:
        try:
            result = await self.session.execute(
                text(
                    f"""
                    SELECT {_COLUMNS}
                    FROM reservation
                    WHERE payment_ref = :payment_ref
                    ORDER BY timeslot_id
                    """
                ),
                {"payment_ref": payment_ref},
            )
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamFailure("Reservation lookup failed") from exc
        return [Reservation(**row) for row in result.mappings().all()]

    async def insert_batch(self, records: Sequence[Reservation]) -> None:
        """Insert all records or none of them.

        The partial unique index on (date, timeslot_id, court_id) turns each
        insert into an atomic insert-if-absent for completed bookings.
        """
        try:
            for record in records:
                await self.session.execute(
                    text(
                        f"""
                        INSERT INTO reservation ({_COLUMNS})
                        VALUES (
                          :date, :timeslot_id, :court_id, :customer_name, :customer_email,
                          :customer_phone, :total_price, :payment_status, :created_at, :payment_ref
                        )
                        """
                    ),
                    {
                        "date": record.date,
                        "timeslot_id": record.timeslot_id,
                        "court_id": record.court_id,
                        "customer_name": record.customer_name,
                        "customer_email": record.customer_email,
                        "customer_phone": record.customer_phone,
                        "total_price": record.total_price,
                        "payment_status": record.payment_status,
                        "created_at": record.created_at,
                        "payment_ref": record.payment_ref,
                    },
                )
            await self.session.commit()
        except (SQLAlchemyError, OSError) as exc:
            await self._rollback()
            if isinstance(exc, DBAPIError) and _is_unique_violation(exc):
                raise SlotConflict("One or more selected slots are already reserved") from exc
            logger.exception("Reservation insert failed")
            raise UpstreamFailure("Database error") from exc

    async def ping(self) -> None:
        try:
            await self.session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamFailure("Database unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE) from exc

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except (SQLAlchemyError, OSError):
            # The connection is gone; the pool discards it.
            logger.warning("Rollback after failed insert did not complete", exc_info=True)


async def get_store(session: AsyncSession = Depends(get_session)) -> AsyncGenerator[ReservationStore, None]:
    yield ReservationStore(session)
