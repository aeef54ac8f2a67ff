from datetime import datetime

from pydantic import BaseModel, Field


class TimeSlotOut(BaseModel):
    id: str
    label: str
    startTime: str
    endTime: str


class TimeSlotsOut(BaseModel):
    timeslots: list[TimeSlotOut]


class CourtOut(BaseModel):
    id: str
    name: str
    description: str
    pricePerHour: int


class CourtsOut(BaseModel):
    courts: list[CourtOut]
    # False when reservations could not be read and the list is unfiltered.
    occupancyKnown: bool = True


class NowOut(BaseModel):
    nowUnixMs: int
    nowISO: str
    timezone: str
    utcOffsetMinutes: int


class DatesOut(BaseModel):
    today: str
    dates: list[str]


CARD_FIELDS = ("cardNumber", "cardName", "expiryMonth", "expiryYear", "cvv")


class PaymentIn(BaseModel):
    date: str = Field(min_length=1)
    timeslots: list[str] = Field(min_length=1)
    courtId: str = Field(min_length=1)
    # Client-side quote; the charged amount is always recomputed server-side.
    amount: int | None = None
    cardNumber: str = Field(min_length=1, max_length=32)
    cardName: str = Field(min_length=1, max_length=200)
    expiryMonth: str = Field(min_length=1, max_length=2)
    expiryYear: str = Field(min_length=1, max_length=4)
    cvv: str = Field(min_length=1, max_length=4)
    customerName: str | None = Field(default=None, max_length=200)
    customerEmail: str | None = Field(default=None, max_length=254)
    customerPhone: str | None = Field(default=None, max_length=32)


class PaymentOut(BaseModel):
    success: bool
    bookingId: str
    totalPrice: int
    currency: str


class BookingOut(BaseModel):
    bookingId: str
    date: str
    courtId: str
    timeslots: list[str]
    totalPrice: int
    paymentStatus: str
    customerName: str | None
    customerEmail: str | None
    createdAt: datetime


class ErrorOut(BaseModel):
    success: bool = False
    error: str
