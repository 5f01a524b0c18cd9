"""Tests for slot generation."""
from datetime import date, datetime, time
from uuid import uuid4

import pytest

from barberbook.scheduling.availability import compute_slots
from barberbook.scheduling.conflicts import BookedInterval
from barberbook.scheduling.schedule import DateException, RuleBlock, StaffSchedule

MONDAY = date(2026, 3, 2)


@pytest.fixture
def schedule():
    """Monday 09:00-12:00."""
    return StaffSchedule(staff_id=uuid4(), work_hours=[RuleBlock(0, time(9, 0), time(12, 0))])


def starts(slots):
    return [slot.start_time for slot in slots]


class TestComputeSlots:

    def test_hour_service_in_morning_window(self, schedule):
        """Last slot is the one that ends exactly at closing time."""
        slots = compute_slots(schedule, MONDAY, 60, [])

        assert starts(slots)[0] == time(9, 0)
        assert starts(slots)[1] == time(9, 15)
        assert starts(slots)[-1] == time(11, 0)
        assert time(11, 15) not in starts(slots)
        assert len(slots) == 9
        assert slots[-1].end_time == time(12, 0)

    def test_closed_date_has_no_slots(self, schedule):
        schedule.exceptions.append(DateException(MONDAY, is_closed=True))
        for duration in (15, 30, 60, 120):
            assert compute_slots(schedule, MONDAY, duration, []) == []

    def test_booked_time_is_skipped(self, schedule):
        booked = [BookedInterval(schedule.staff_id, MONDAY, time(10, 0), 30)]

        slots = starts(compute_slots(schedule, MONDAY, 30, booked))

        assert time(9, 30) in slots
        assert time(9, 45) not in slots
        assert time(10, 0) not in slots
        assert time(10, 15) not in slots
        assert time(10, 30) in slots

    def test_cancelled_and_foreign_appointments_do_not_block(self, schedule):
        booked = [
            BookedInterval(schedule.staff_id, MONDAY, time(10, 0), 30, status="cancelled"),
            BookedInterval(uuid4(), MONDAY, time(10, 0), 30),
            BookedInterval(schedule.staff_id, date(2026, 3, 9), time(10, 0), 30),
        ]
        slots = starts(compute_slots(schedule, MONDAY, 30, booked))
        assert time(10, 0) in slots

    def test_same_inputs_same_output(self, schedule):
        booked = [BookedInterval(schedule.staff_id, MONDAY, time(9, 30), 45)]
        assert compute_slots(schedule, MONDAY, 30, booked) == compute_slots(schedule, MONDAY, 30, booked)

    def test_custom_granularity(self, schedule):
        slots = starts(compute_slots(schedule, MONDAY, 60, [], slot_granularity_minutes=30))
        assert slots == [time(9, 0), time(9, 30), time(10, 0), time(10, 30), time(11, 0)]

    def test_service_longer_than_window(self, schedule):
        assert compute_slots(schedule, MONDAY, 240, []) == []

    def test_past_date_is_empty(self, schedule):
        assert compute_slots(schedule, MONDAY, 30, [], now=datetime(2026, 3, 3, 8, 0)) == []

    def test_today_drops_started_times(self, schedule):
        slots = starts(compute_slots(schedule, MONDAY, 30, [], now=datetime(2026, 3, 2, 10, 0)))
        assert slots[0] == time(10, 0)

    def test_today_with_seconds_rounds_up(self, schedule):
        slots = starts(compute_slots(schedule, MONDAY, 30, [], now=datetime(2026, 3, 2, 10, 0, 30)))
        assert slots[0] == time(10, 15)

    def test_lead_time(self, schedule):
        slots = starts(compute_slots(
            schedule, MONDAY, 30, [], now=datetime(2026, 3, 2, 9, 0), min_lead_minutes=60
        ))
        assert slots[0] == time(10, 0)

    def test_rejects_non_positive_duration(self, schedule):
        with pytest.raises(ValueError):
            compute_slots(schedule, MONDAY, 0, [])
        with pytest.raises(ValueError):
            compute_slots(schedule, MONDAY, 30, [], slot_granularity_minutes=0)
