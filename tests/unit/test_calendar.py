"""Tests for calendar primitives."""
from datetime import date, time

import pytest

from barberbook.scheduling.calendar import (
    Interval,
    from_minutes,
    merge_intervals,
    overlaps,
    subtract_interval,
    to_minutes,
    weekday_of,
)


class TestMinutes:
    """Conversion between time of day and minutes since midnight."""

    def test_to_minutes(self):
        assert to_minutes(time(0, 0)) == 0
        assert to_minutes(time(9, 15)) == 555
        assert to_minutes(time(23, 59)) == 1439

    def test_to_minutes_ignores_seconds(self):
        assert to_minutes(time(10, 30, 45)) == 630

    def test_from_minutes(self):
        assert from_minutes(555) == time(9, 15)

    def test_from_minutes_rejects_end_of_day(self):
        with pytest.raises(ValueError):
            from_minutes(24 * 60)

    def test_weekday_monday_is_zero(self):
        assert weekday_of(date(2026, 3, 2)) == 0
        assert weekday_of(date(2026, 3, 8)) == 6


class TestInterval:
    def test_start_must_precede_end(self):
        with pytest.raises(ValueError):
            Interval(600, 600)
        with pytest.raises(ValueError):
            Interval(700, 600)

    def test_contains_whole_duration(self):
        window = Interval.from_times(time(9, 0), time(12, 0))
        assert window.contains(to_minutes(time(11, 0)), 60)
        assert not window.contains(to_minutes(time(11, 15)), 60)
        assert not window.contains(to_minutes(time(8, 45)), 30)

    def test_to_dict(self):
        assert Interval(540, 720).to_dict() == {"start": "09:00", "end": "12:00"}


class TestOverlaps:
    """Half-open intervals: touching ends do not collide."""

    def test_adjacent_do_not_overlap(self):
        assert not overlaps(600, 30, 630, 30)
        assert not overlaps(630, 30, 600, 30)

    def test_partial_overlap(self):
        assert overlaps(600, 30, 615, 30)

    def test_containment_overlaps(self):
        assert overlaps(600, 120, 630, 15)
        assert overlaps(630, 15, 600, 120)


class TestIntervalArithmetic:
    def test_subtract_splits_containing_interval(self):
        free = [Interval(540, 1020)]
        assert subtract_interval(free, Interval(720, 780)) == [Interval(540, 720), Interval(780, 1020)]

    def test_subtract_trims_edge(self):
        assert subtract_interval([Interval(540, 720)], Interval(480, 600)) == [Interval(600, 720)]

    def test_subtract_drops_covered_interval(self):
        assert subtract_interval([Interval(540, 600)], Interval(500, 700)) == []

    def test_subtract_leaves_disjoint_intervals(self):
        free = [Interval(540, 600), Interval(660, 720)]
        assert subtract_interval(free, Interval(600, 660)) == free

    def test_merge_coalesces_overlapping_and_touching(self):
        merged = merge_intervals([Interval(600, 700), Interval(540, 620), Interval(700, 720), Interval(800, 900)])
        assert merged == [Interval(540, 720), Interval(800, 900)]
