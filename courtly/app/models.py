from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time


PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"


@dataclass(frozen=True)
class TimeSlot:
    """One fixed hourly interval of the daily schedule."""

    id: str
    label: str
    start_time: time
    end_time: time

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "label": self.label,
            "startTime": self.start_time.strftime("%H:%M"),
            "endTime": self.end_time.strftime("%H:%M"),
        }


@dataclass(frozen=True)
class Court:
    id: str
    name: str
    description: str
    price_per_hour: int

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "pricePerHour": self.price_per_hour,
        }


@dataclass(frozen=True)
class CustomerInfo:
    name: str | None = None
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class Reservation:
    """A persisted booking of one court for one slot on one day.

    Records written for the same payment share ``payment_ref``.
    """

    date: date
    timeslot_id: str
    court_id: str
    customer_name: str | None
    customer_email: str | None
    customer_phone: str | None
    total_price: int
    payment_status: str
    created_at: datetime
    payment_ref: str
