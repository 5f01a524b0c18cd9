"""Tests for the availability read side."""
from datetime import date, time, timedelta
from uuid import uuid4

from barberbook.models import ScheduleException
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.services.booking.booking_service import BookingService


class TestAvailableSlots:

    def test_monday_hour_service(self, db, staff, long_service, monday, now):
        response = AvailabilityService.get_slots_for_service(db, staff.id, monday, long_service.id, now)

        starts = [slot.start_time for slot in response.slots]
        assert starts[0] == time(9, 0)
        assert starts[-1] == time(11, 0)
        assert response.is_closed is False
        assert response.slot_granularity_minutes == 15

    def test_booked_slot_disappears(self, db, staff, haircut, customer, monday, now):
        before = AvailabilityService.get_slots_for_service(db, staff.id, monday, haircut.id, now)
        assert time(10, 0) in [slot.start_time for slot in before.slots]

        BookingService.try_book(db, staff.id, haircut.id, monday, time(10, 0), customer, now=now)

        after = AvailabilityService.get_slots_for_service(db, staff.id, monday, haircut.id, now)
        assert time(10, 0) not in [slot.start_time for slot in after.slots]
        assert time(10, 30) in [slot.start_time for slot in after.slots]

    def test_closed_date_reports_reason(self, db, staff, monday, now):
        db.add(ScheduleException(staff_id=staff.id, date=monday, is_closed=True))
        db.commit()

        response = AvailabilityService.get_available_slots(db, staff.id, monday, 30, now)

        assert response.is_closed is True
        assert response.slots == []
        assert response.reason == "Closed on this date"

    def test_non_working_weekday(self, db, staff, monday, now):
        response = AvailabilityService.get_available_slots(db, staff.id, monday + timedelta(days=2), 30, now)
        assert response.is_closed is True
        assert response.slots == []

    def test_past_date(self, db, staff, monday, now):
        response = AvailabilityService.get_available_slots(db, staff.id, monday - timedelta(weeks=1), 30, now)
        assert response.is_closed is True

    def test_unknown_service(self, db, staff, monday, now):
        assert AvailabilityService.get_slots_for_service(db, staff.id, monday, uuid4(), now) is None

    def test_unknown_staff(self, db, monday, now):
        response = AvailabilityService.get_available_slots(db, uuid4(), monday, 30, now)
        assert response.is_closed is True


class TestAvailableDates:

    def test_only_working_days(self, db, staff, monday):
        response = AvailabilityService.get_available_dates(db, staff.id, days_ahead=14, today=monday)

        assert response.start_date == monday
        assert response.end_date == monday + timedelta(days=13)
        assert response.dates == [
            monday,
            monday + timedelta(days=1),
            monday + timedelta(days=7),
            monday + timedelta(days=8),
        ]

    def test_closed_date_is_excluded(self, db, staff, monday):
        db.add(ScheduleException(staff_id=staff.id, date=monday + timedelta(days=7), is_closed=True))
        db.commit()

        response = AvailabilityService.get_available_dates(db, staff.id, days_ahead=14, today=monday)
        assert monday + timedelta(days=7) not in response.dates

    def test_days_ahead_is_capped_by_horizon(self, db, staff):
        response = AvailabilityService.get_available_dates(db, staff.id, days_ahead=365, today=date(2026, 3, 2))
        assert response.end_date == date(2026, 3, 2) + timedelta(days=59)

    def test_zero_days_ahead_is_empty(self, db, staff, monday):
        response = AvailabilityService.get_available_dates(db, staff.id, days_ahead=0, today=monday)
        assert response.dates == []

    def test_days_ahead_defaults_to_horizon(self, db, staff, monday):
        response = AvailabilityService.get_available_dates(db, staff.id, today=monday)
        assert response.end_date == monday + timedelta(days=59)


class TestNextSlots:

    def test_rolls_over_to_next_working_day(self, db, staff, long_service, monday, now):
        """From Monday 11:00 on, the next hour slots are on Tuesday."""
        late_monday = now.replace(year=monday.year, month=monday.month, day=monday.day, hour=11, minute=1)

        slots = AvailabilityService.find_next_slots(db, staff.id, long_service.id, monday, limit=2, now=late_monday)

        assert [(slot.date, slot.start_time) for slot in slots] == [
            (monday + timedelta(days=1), time(9, 0)),
            (monday + timedelta(days=1), time(9, 15)),
        ]
