# barberbook/scheduling/conflicts.py
"""Conflict detection between a candidate booking and existing appointments"""
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, List
from uuid import UUID

from barberbook.scheduling.calendar import Interval, overlaps, to_minutes

CANCELLED = "cancelled"


@dataclass(frozen=True)
class BookedInterval:
    """Anything shaped like an Appointment row works where this is accepted"""
    staff_id: UUID
    appointment_date: date
    start_time: time
    duration_minutes: int
    status: str = "confirmed"


def active_appointments(appointments: Iterable, staff_id, day: date) -> List:
    """Appointments of this staff member on this date that still hold their time"""
    return [
        appt for appt in appointments
        if appt.staff_id == staff_id
        and appt.appointment_date == day
        and appt.status != CANCELLED
    ]


def has_conflict(staff_id, day: date, start_time: time, duration_minutes: int, appointments: Iterable) -> bool:
    start = to_minutes(start_time)
    return any(
        overlaps(start, duration_minutes, to_minutes(appt.start_time), appt.duration_minutes)
        for appt in active_appointments(appointments, staff_id, day)
    )


def fits_in_windows(windows: Iterable[Interval], start_minute: int, duration_minutes: int) -> bool:
    return any(window.contains(start_minute, duration_minutes) for window in windows)
