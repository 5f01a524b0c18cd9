"""
Pure scheduling core: no database, no clock.

Services in barberbook.services load rows and feed them through these
functions; everything here is deterministic given its arguments.
"""
from .calendar import Interval, weekday_of, overlaps, subtract_interval, merge_intervals, to_minutes, from_minutes
from .schedule import StaffSchedule, RuleBlock, DateException, get_day_windows
from .availability import Slot, compute_slots
from .conflicts import BookedInterval, active_appointments, has_conflict, fits_in_windows

__all__ = [
    "Interval",
    "weekday_of",
    "overlaps",
    "subtract_interval",
    "merge_intervals",
    "to_minutes",
    "from_minutes",
    "StaffSchedule",
    "RuleBlock",
    "DateException",
    "get_day_windows",
    "Slot",
    "compute_slots",
    "BookedInterval",
    "active_appointments",
    "has_conflict",
    "fits_in_windows",
]
