# barberbook/scheduling/availability.py
"""Slot generation for one staff member, one date and one service duration"""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, List, Optional

from barberbook.scheduling.calendar import from_minutes, overlaps, to_minutes
from barberbook.scheduling.conflicts import active_appointments
from barberbook.scheduling.schedule import StaffSchedule, get_day_windows

DEFAULT_GRANULARITY_MINUTES = 15


@dataclass(frozen=True)
class Slot:
    date: date
    start_time: time
    end_time: time


def compute_slots(
        schedule: StaffSchedule,
        day: date,
        service_duration_minutes: int,
        existing_appointments: Iterable,
        slot_granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
        now: Optional[datetime] = None,
        min_lead_minutes: int = 0,
) -> List[Slot]:
    """
    Bookable start times, ascending.

    Candidates are walked from the start of each day window in
    `slot_granularity_minutes` steps; a candidate is kept when the whole
    service fits inside its window and it overlaps no active appointment.
    `now` is the shop-local wall clock; on that date, candidates earlier than
    now + min_lead_minutes are dropped and earlier dates yield nothing.
    """
    if service_duration_minutes <= 0:
        raise ValueError("service_duration_minutes must be positive")
    if slot_granularity_minutes <= 0:
        raise ValueError("slot_granularity_minutes must be positive")

    earliest = 0
    if now is not None:
        if day < now.date():
            return []
        if day == now.date():
            earliest = to_minutes(now.time()) + (1 if now.second or now.microsecond else 0) + min_lead_minutes

    booked = [
        (to_minutes(appt.start_time), appt.duration_minutes)
        for appt in active_appointments(existing_appointments, schedule.staff_id, day)
    ]

    slots = []
    for window in get_day_windows(schedule, day):
        candidate = window.start
        while candidate + service_duration_minutes <= window.end:
            if candidate >= earliest and not any(
                    overlaps(candidate, service_duration_minutes, start, duration)
                    for start, duration in booked
            ):
                slots.append(Slot(
                    date=day,
                    start_time=from_minutes(candidate),
                    end_time=from_minutes(candidate + service_duration_minutes),
                ))
            candidate += slot_granularity_minutes

    return slots
