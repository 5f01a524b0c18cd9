# barberbook/schemas/booking.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
import datetime as dt
from enum import Enum
from uuid import UUID

from barberbook.schemas.availability import TimeSlot


class BookingChannelType(str, Enum):
    PUBLIC = "public"
    STAFF = "staff"
    BOT = "bot"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class BookingError(str, Enum):
    """Expected, typed reasons a booking attempt did not commit"""
    SLOT_UNAVAILABLE = "slot_unavailable"
    STAFF_NOT_BOOKABLE = "staff_not_bookable"
    INVALID_SERVICE = "invalid_service"
    PAST_OR_OUT_OF_RANGE_DATE = "past_or_out_of_range_date"
    PERSISTENCE_CONFLICT = "persistence_conflict"

    @property
    def slot_taken(self) -> bool:
        """Both kinds mean the caller should refresh slots and re-prompt"""
        return self in (BookingError.SLOT_UNAVAILABLE, BookingError.PERSISTENCE_CONFLICT)


class CustomerInfo(BaseModel):
    """Customer identity captured by the intake channel"""
    name: str = Field(..., min_length=1, max_length=200, description="Customer name")
    phone: str = Field(..., description="Customer phone, digits only after validation")
    email: Optional[str] = Field(None, description="Customer email")
    notes: Optional[str] = Field(None, max_length=1000, description="Free text from the customer")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Customer name is required")
        return v

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        digits = "".join(ch for ch in v if ch.isdigit())
        if not 10 <= len(digits) <= 13:
            raise ValueError("Phone must have between 10 and 13 digits")
        return digits


class BookingRequest(BaseModel):
    """The five inputs every intake channel gathers before booking"""
    staff_id: UUID = Field(..., description="Staff member being booked")
    service_id: UUID = Field(..., description="Requested service")
    date: dt.date = Field(..., description="Appointment date")
    start_time: dt.time = Field(..., description="Appointment start time (shop local)")
    customer: CustomerInfo

    @field_validator("start_time")
    @classmethod
    def shop_local_minute(cls, v: dt.time) -> dt.time:
        # Slots are published as shop wall-clock times
        if v.tzinfo is not None:
            raise ValueError("start_time must be a shop-local time without a UTC offset")
        if v.second or v.microsecond:
            raise ValueError("start_time must fall on a whole minute")
        return v


class BotBookingRequest(BookingRequest):
    """Booking collected by the conversational bot"""
    conversation_id: Optional[str] = Field(None, description="Bot conversation reference")


class BookingResult(BaseModel):
    """Outcome of one booking attempt"""
    success: bool
    appointment_id: Optional[UUID] = None
    error: Optional[BookingError] = None
    message: str = ""
    alternatives: List[TimeSlot] = Field(default_factory=list)

    @classmethod
    def booked(cls, appointment_id: UUID) -> "BookingResult":
        return cls(success=True, appointment_id=appointment_id, message="Appointment booked")

    @classmethod
    def rejected(cls, error: BookingError, message: str) -> "BookingResult":
        return cls(success=False, error=error, message=message)
