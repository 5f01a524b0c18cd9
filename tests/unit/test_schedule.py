"""Tests for day window derivation."""
from datetime import date, time
from uuid import uuid4

from barberbook.scheduling.calendar import Interval
from barberbook.scheduling.schedule import DateException, RuleBlock, StaffSchedule, get_day_windows

MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)


def make_schedule(work_hours=(), breaks=(), exceptions=()):
    return StaffSchedule(
        staff_id=uuid4(),
        work_hours=list(work_hours),
        breaks=list(breaks),
        exceptions=list(exceptions),
    )


class TestDayWindows:

    def test_break_splits_work_hours(self):
        """09:00-17:00 with a 12:00-13:00 break gives two windows."""
        schedule = make_schedule(
            work_hours=[RuleBlock(0, time(9, 0), time(17, 0))],
            breaks=[RuleBlock(0, time(12, 0), time(13, 0))],
        )

        windows = get_day_windows(schedule, MONDAY)

        assert windows == [Interval.from_times(time(9, 0), time(12, 0)),
                           Interval.from_times(time(13, 0), time(17, 0))]

    def test_no_rule_for_weekday_is_empty(self):
        schedule = make_schedule(work_hours=[RuleBlock(0, time(9, 0), time(17, 0))])
        assert get_day_windows(schedule, TUESDAY) == []

    def test_breaks_of_other_weekdays_are_ignored(self):
        schedule = make_schedule(
            work_hours=[RuleBlock(0, time(9, 0), time(12, 0))],
            breaks=[RuleBlock(1, time(10, 0), time(11, 0))],
        )
        assert get_day_windows(schedule, MONDAY) == [Interval(540, 720)]

    def test_closed_exception_wins_over_work_hours(self):
        schedule = make_schedule(
            work_hours=[RuleBlock(0, time(9, 0), time(17, 0))],
            exceptions=[DateException(MONDAY, is_closed=True)],
        )
        assert get_day_windows(schedule, MONDAY) == []
        assert get_day_windows(schedule, date(2026, 3, 9)) == [Interval(540, 1020)]

    def test_partial_exception_removes_interval(self):
        schedule = make_schedule(
            work_hours=[RuleBlock(0, time(9, 0), time(17, 0))],
            exceptions=[DateException(MONDAY, is_closed=False, start_time=time(14, 0), end_time=time(15, 30))],
        )
        assert get_day_windows(schedule, MONDAY) == [Interval(540, 840), Interval(930, 1020)]

    def test_overlapping_work_rules_are_merged(self):
        schedule = make_schedule(work_hours=[
            RuleBlock(0, time(9, 0), time(12, 0)),
            RuleBlock(0, time(11, 0), time(14, 0)),
        ])
        assert get_day_windows(schedule, MONDAY) == [Interval(540, 840)]

    def test_break_spanning_two_rules(self):
        schedule = make_schedule(
            work_hours=[RuleBlock(0, time(8, 0), time(12, 0)), RuleBlock(0, time(13, 0), time(18, 0))],
            breaks=[RuleBlock(0, time(11, 30), time(13, 30))],
        )
        assert get_day_windows(schedule, MONDAY) == [Interval(480, 690), Interval(810, 1080)]

    def test_works_on_and_is_closed_on(self):
        schedule = make_schedule(
            work_hours=[RuleBlock(0, time(9, 0), time(12, 0))],
            exceptions=[DateException(MONDAY, is_closed=True)],
        )
        assert schedule.works_on(0)
        assert not schedule.works_on(1)
        assert schedule.is_closed_on(MONDAY)
        assert not schedule.is_closed_on(TUESDAY)
