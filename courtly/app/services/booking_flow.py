from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date

from courtly.app.core.errors import BookingValidationError
from courtly.app.models import CustomerInfo
from courtly.app.services import catalog


class BookingStep(str, enum.Enum):
    SELECTING_DATE = "selecting_date"
    SELECTING_TIME = "selecting_time"
    SELECTING_COURT = "selecting_court"
    ENTERING_DETAILS = "entering_details"
    PAYING = "paying"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class CardDetails:
    number: str
    name: str
    expiry_month: str
    expiry_year: str
    cvv: str


@dataclass
class BookingFlow:
    """Customer booking session: date -> slots -> court -> details -> payment.

    Choosing a new date or changing the slot selection drops everything picked
    after it, so the court is always re-chosen against fresh availability.
    """

    step: BookingStep = BookingStep.SELECTING_DATE
    day: date | None = None
    slot_ids: list[str] = field(default_factory=list)
    court_id: str | None = None
    customer: CustomerInfo | None = None
    booking_id: str | None = None
    total_price: int | None = None

    def _require_open(self) -> None:
        if self.step is BookingStep.CONFIRMED:
            raise BookingValidationError("Booking is already confirmed")

    def select_date(self, day: date) -> None:
        self._require_open()
        self.day = day
        self.slot_ids = []
        self.court_id = None
        self.customer = None
        self.step = BookingStep.SELECTING_TIME

    def toggle_slot(self, slot_id: str) -> None:
        self._require_open()
        if self.day is None:
            raise BookingValidationError("Select a date first")
        if slot_id in self.slot_ids:
            selected = [s for s in self.slot_ids if s != slot_id]
        else:
            selected = [*self.slot_ids, slot_id]
        self.slot_ids = catalog.normalise_slot_ids(selected)
        self.court_id = None
        self.customer = None
        self.step = BookingStep.SELECTING_COURT if self.slot_ids else BookingStep.SELECTING_TIME

    def select_court(self, court_id: str) -> None:
        self._require_open()
        if not self.slot_ids:
            raise BookingValidationError("Select at least one time slot first")
        if catalog.get_court(court_id) is None:
            raise BookingValidationError(f"Unknown court: {court_id}")
        self.court_id = court_id
        self.step = BookingStep.ENTERING_DETAILS

    def submit_details(self, customer: CustomerInfo) -> None:
        self._require_open()
        if self.court_id is None:
            raise BookingValidationError("Select a court first")
        if not (customer.name and customer.email and customer.phone):
            raise BookingValidationError("Name, email and phone are required")
        self.customer = customer
        self.step = BookingStep.PAYING

    def quote(self) -> int:
        court = catalog.get_court(self.court_id) if self.court_id else None
        if court is None:
            return 0
        return catalog.quote_price(court, self.slot_ids)

    def checkout_request(self, card: CardDetails) -> dict[str, object]:
        """Body for ``POST /process_payment``."""
        if self.step is not BookingStep.PAYING or self.day is None or self.customer is None:
            raise BookingValidationError("Booking details are incomplete")
        return {
            "date": self.day.isoformat(),
            "timeslots": list(self.slot_ids),
            "courtId": self.court_id,
            "amount": self.quote(),
            "cardNumber": card.number,
            "cardName": card.name,
            "expiryMonth": card.expiry_month,
            "expiryYear": card.expiry_year,
            "cvv": card.cvv,
            "customerName": self.customer.name,
            "customerEmail": self.customer.email,
            "customerPhone": self.customer.phone,
        }

    def confirm(self, booking_id: str, total_price: int) -> None:
        if self.step is not BookingStep.PAYING:
            raise BookingValidationError("No payment in progress")
        self.booking_id = booking_id
        self.total_price = total_price
        self.step = BookingStep.CONFIRMED

    def summary(self) -> dict[str, object]:
        if self.step is not BookingStep.CONFIRMED:
            raise BookingValidationError("Booking is not confirmed")
        return {
            "bookingId": self.booking_id,
            "date": self.day.isoformat(),
            "courtId": self.court_id,
            "timeslots": list(self.slot_ids),
            "hours": len(self.slot_ids),
            "totalPrice": self.total_price,
        }
