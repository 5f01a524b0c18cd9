# barberbook/models/__init__.py
from .base import Base
from .staff import Staff, WorkHourRule, BreakRule, ScheduleException, StaffDayLedger
from .service import Service
from .appointment import Appointment

__all__ = [
    "Base",
    "Staff",
    "WorkHourRule",
    "BreakRule",
    "ScheduleException",
    "StaffDayLedger",
    "Service",
    "Appointment",
]
