# barberbook/scheduling/schedule.py
"""In-memory view of one staff member's bookable calendar inputs"""
from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional
from uuid import UUID

from barberbook.scheduling.calendar import Interval, merge_intervals, subtract_interval, weekday_of


@dataclass(frozen=True)
class RuleBlock:
    """A recurring weekly block (work hours or break)"""
    weekday: int
    start_time: time
    end_time: time

    @property
    def interval(self) -> Interval:
        return Interval.from_times(self.start_time, self.end_time)


@dataclass(frozen=True)
class DateException:
    """Full-day closure when is_closed, otherwise one closed interval on that date"""
    date: date
    is_closed: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def interval(self) -> Optional[Interval]:
        if self.is_closed or self.start_time is None or self.end_time is None:
            return None
        return Interval.from_times(self.start_time, self.end_time)


@dataclass
class StaffSchedule:
    staff_id: UUID
    work_hours: List[RuleBlock] = field(default_factory=list)
    breaks: List[RuleBlock] = field(default_factory=list)
    exceptions: List[DateException] = field(default_factory=list)

    @classmethod
    def from_models(cls, staff_id, work_hours, breaks, exceptions) -> "StaffSchedule":
        """Build from ORM rows (WorkHourRule, BreakRule, ScheduleException)"""
        return cls(
            staff_id=staff_id,
            work_hours=[RuleBlock(w.weekday, w.start_time, w.end_time) for w in work_hours],
            breaks=[RuleBlock(b.weekday, b.start_time, b.end_time) for b in breaks],
            exceptions=[
                DateException(e.date, bool(e.is_closed), e.start_time, e.end_time)
                for e in exceptions
            ],
        )

    def works_on(self, weekday: int) -> bool:
        return any(rule.weekday == weekday for rule in self.work_hours)

    def exceptions_on(self, day: date) -> List[DateException]:
        return [exc for exc in self.exceptions if exc.date == day]

    def is_closed_on(self, day: date) -> bool:
        return any(exc.is_closed for exc in self.exceptions_on(day))


def get_day_windows(schedule: StaffSchedule, day: date) -> List[Interval]:
    """
    Open intervals for one staff member on one date.

    Work hours of the weekday (merged, so overlapping rules are tolerated),
    minus the weekday's breaks, minus the date's partial exceptions. A
    full-day exception closes the day outright.
    """
    weekday = weekday_of(day)

    windows = merge_intervals(
        rule.interval for rule in schedule.work_hours if rule.weekday == weekday
    )
    if not windows:
        return []

    exceptions = schedule.exceptions_on(day)
    if any(exc.is_closed for exc in exceptions):
        return []

    for rule in schedule.breaks:
        if rule.weekday == weekday:
            windows = subtract_interval(windows, rule.interval)

    for exc in exceptions:
        cut = exc.interval
        if cut is not None:
            windows = subtract_interval(windows, cut)

    return windows
