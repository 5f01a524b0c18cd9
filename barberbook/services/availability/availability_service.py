# barberbook/services/availability/availability_service.py
from typing import List, Optional
from datetime import date, datetime, timedelta
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from barberbook.config.settings import get_settings
from barberbook.models.appointment import Appointment
from barberbook.models.service import Service
from barberbook.scheduling.availability import compute_slots
from barberbook.scheduling.schedule import get_day_windows
from barberbook.schemas.availability import AvailabilityResponse, AvailableDatesResponse, TimeSlot
from barberbook.services.schedule.schedule_service import ScheduleService
from barberbook.utils.clock import shop_now

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Read side of the booking engine.
    Results are a snapshot for rendering pickers; booking re-validates everything.
    """

    @staticmethod
    def get_available_slots(
            db: Session,
            staff_id: UUID,
            day: date,
            duration_minutes: int,
            now: Optional[datetime] = None,
    ) -> AvailabilityResponse:
        """Bookable start times for one staff member, date and service duration"""
        settings = get_settings()
        now = now or shop_now()

        response = AvailabilityResponse(
            staff_id=staff_id,
            date=day,
            duration_minutes=duration_minutes,
            slot_granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
        )

        staff = ScheduleService.get_staff(db, staff_id)
        if not staff or not staff.is_active:
            response.is_closed = True
            response.reason = "Staff member is not taking bookings"
            return response

        if day < now.date() or day > now.date() + timedelta(days=settings.MAX_BOOKING_HORIZON_DAYS):
            response.is_closed = True
            response.reason = "Date is outside the booking window"
            return response

        schedule = ScheduleService.load_schedule(db, staff_id, day)
        if not schedule.works_on(day.weekday()):
            response.is_closed = True
            response.reason = "No work hours configured for this weekday"
            return response
        if schedule.is_closed_on(day):
            response.is_closed = True
            response.reason = "Closed on this date"
            return response

        appointments = AvailabilityService.get_active_appointments(db, staff_id, day)
        slots = compute_slots(
            schedule,
            day,
            duration_minutes,
            appointments,
            slot_granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
            now=now,
            min_lead_minutes=settings.MIN_BOOKING_LEAD_MINUTES,
        )
        response.slots = [TimeSlot.from_slot(slot) for slot in slots]

        logger.debug(f"Computed {len(slots)} slots for staff {staff_id} on {day} ({duration_minutes} min)")
        return response

    @staticmethod
    def get_slots_for_service(
            db: Session,
            staff_id: UUID,
            day: date,
            service_id: UUID,
            now: Optional[datetime] = None,
    ) -> Optional[AvailabilityResponse]:
        """Same as get_available_slots with the duration taken from the service; None if unknown"""
        service = db.get(Service, service_id)
        if not service or not service.is_active:
            return None
        return AvailabilityService.get_available_slots(db, staff_id, day, service.duration_minutes, now)

    @staticmethod
    def get_available_dates(
            db: Session,
            staff_id: UUID,
            days_ahead: Optional[int] = None,
            today: Optional[date] = None,
    ) -> AvailableDatesResponse:
        """Dates that have at least one open window: a work day and not fully closed"""
        settings = get_settings()
        today = today or shop_now().date()
        if days_ahead is None:
            days_ahead = settings.MAX_BOOKING_HORIZON_DAYS
        days_ahead = max(0, min(days_ahead, settings.MAX_BOOKING_HORIZON_DAYS))
        end_date = today + timedelta(days=days_ahead - 1)

        response = AvailableDatesResponse(staff_id=staff_id, start_date=today, end_date=end_date)

        staff = ScheduleService.get_staff(db, staff_id)
        if not staff or not staff.is_active:
            return response

        schedule = ScheduleService.load_schedule(db, staff_id)
        schedule.exceptions = [exc for exc in schedule.exceptions if today <= exc.date <= end_date]

        response.dates = [
            today + timedelta(days=offset)
            for offset in range(days_ahead)
            if get_day_windows(schedule, today + timedelta(days=offset))
        ]
        return response

    @staticmethod
    def find_next_slots(
            db: Session,
            staff_id: UUID,
            service_id: UUID,
            from_day: date,
            limit: int = 3,
            now: Optional[datetime] = None,
            max_days: int = 14,
    ) -> List[TimeSlot]:
        """Nearest upcoming slots starting at from_day, used to suggest alternatives"""
        found: List[TimeSlot] = []
        for offset in range(max_days):
            response = AvailabilityService.get_slots_for_service(
                db, staff_id, from_day + timedelta(days=offset), service_id, now
            )
            if response is None:
                break
            found.extend(response.slots[:limit - len(found)])
            if len(found) >= limit:
                break
        return found

    @staticmethod
    def get_active_appointments(db: Session, staff_id: UUID, day: date) -> List[Appointment]:
        return db.query(Appointment).filter(
            Appointment.staff_id == staff_id,
            Appointment.appointment_date == day,
            Appointment.status != "cancelled",
        ).order_by(Appointment.start_time.asc()).all()

