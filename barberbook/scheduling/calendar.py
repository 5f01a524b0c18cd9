# barberbook/scheduling/calendar.py
"""
Calendar primitives.

Times of day are handled as minutes since midnight and intervals are
half-open: [start, end). An interval ending at 10:30 does not overlap one
starting at 10:30.
"""
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, List

MINUTES_PER_DAY = 24 * 60


def weekday_of(day: date) -> int:
    """0=Monday ... 6=Sunday, the convention of every weekday column"""
    return day.weekday()


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} is not a minute of the day")
    return time(hour=minutes // 60, minute=minutes % 60)


@dataclass(frozen=True, order=True)
class Interval:
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Interval start ({self.start}) must be before end ({self.end})")

    @classmethod
    def from_times(cls, start: time, end: time) -> "Interval":
        return cls(to_minutes(start), to_minutes(end))

    @property
    def duration(self) -> int:
        return self.end - self.start

    def contains(self, start: int, duration: int) -> bool:
        return self.start <= start and start + duration <= self.end

    def to_dict(self):
        return {
            "start": from_minutes(self.start).isoformat(timespec="minutes"),
            "end": from_minutes(self.end).isoformat(timespec="minutes"),
        }


def overlaps(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    """True if [start_a, start_a+duration_a) and [start_b, start_b+duration_b) share a minute"""
    return start_a < start_b + duration_b and start_b < start_a + duration_a


def subtract_interval(free: List[Interval], cut: Interval) -> List[Interval]:
    """
    Remove `cut` from a disjoint, sorted list of free intervals.

    An interval strictly containing the cut is split in two, one touching
    an edge is shrunk and one fully covered is dropped.
    """
    result = []
    for interval in free:
        if cut.end <= interval.start or cut.start >= interval.end:
            result.append(interval)
            continue

        if interval.start < cut.start:
            result.append(Interval(interval.start, cut.start))
        if cut.end < interval.end:
            result.append(Interval(cut.end, interval.end))

    return result


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Sort and coalesce overlapping or touching intervals"""
    merged: List[Interval] = []
    for interval in sorted(intervals):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Interval(last.start, max(last.end, interval.end))
        else:
            merged.append(interval)
    return merged
