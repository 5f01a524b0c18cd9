# barberbook/schemas/__init__.py
from .availability import TimeSlot, AvailabilityResponse, AvailableDatesResponse
from .booking import (
    AppointmentStatus,
    BookingChannelType,
    BookingError,
    BookingRequest,
    BookingResult,
    BotBookingRequest,
    CustomerInfo,
)
from .schedule import WorkHourCreate, BreakCreate, ExceptionCreate
from .appointment import CancelAppointmentRequest, CancelledBy

__all__ = [
    "TimeSlot",
    "AvailabilityResponse",
    "AvailableDatesResponse",
    "AppointmentStatus",
    "BookingChannelType",
    "BookingError",
    "BookingRequest",
    "BookingResult",
    "BotBookingRequest",
    "CustomerInfo",
    "WorkHourCreate",
    "BreakCreate",
    "ExceptionCreate",
    "CancelAppointmentRequest",
    "CancelledBy",
]
