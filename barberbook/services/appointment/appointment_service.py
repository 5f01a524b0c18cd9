# ============================================================================
# barberbook/services/appointment/appointment_service.py
# Appointment lifecycle - no FastAPI dependencies, fully testable
# ============================================================================
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Dict, Any, List
from uuid import UUID

from sqlalchemy.orm import Session

from barberbook.config.settings import get_settings
from barberbook.models.appointment import Appointment
from barberbook.schemas.appointment import CancelledBy
from barberbook.schemas.booking import AppointmentStatus
from barberbook.utils.clock import shop_now

logger = logging.getLogger(__name__)

FINAL_STATUSES = {
    AppointmentStatus.CANCELLED.value,
    AppointmentStatus.COMPLETED.value,
    AppointmentStatus.NO_SHOW.value,
}


class AppointmentNotFound(LookupError):
    pass


class InvalidStatusTransition(ValueError):
    pass


class CancellationWindowClosed(ValueError):
    """Customers may only cancel a minimum number of hours ahead"""


class AppointmentService:
    """Status changes on existing appointments. Rows are never deleted."""

    @staticmethod
    def get_appointment(db: Session, appointment_id: UUID) -> Appointment:
        appointment = db.get(Appointment, appointment_id)
        if not appointment:
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")
        return appointment

    @staticmethod
    def list_for_day(
            db: Session,
            staff_id: UUID,
            day: date,
            include_cancelled: bool = False
    ) -> Dict[str, Any]:
        """Appointments of one staff member on one date, in start order"""
        query = db.query(Appointment).filter(
            Appointment.staff_id == staff_id,
            Appointment.appointment_date == day,
        )
        if not include_cancelled:
            query = query.filter(Appointment.status != AppointmentStatus.CANCELLED.value)

        appointments = query.order_by(Appointment.start_time.asc()).all()
        return {
            "staff_id": str(staff_id),
            "date": day.isoformat(),
            "total_appointments": len(appointments),
            "appointments": [appt.to_dict() for appt in appointments],
        }

    @staticmethod
    def confirm(db: Session, appointment_id: UUID) -> Appointment:
        appointment = AppointmentService.get_appointment(db, appointment_id)
        if appointment.status != AppointmentStatus.PENDING.value:
            raise InvalidStatusTransition(f"Cannot confirm an appointment that is {appointment.status}")
        return AppointmentService._set_status(db, appointment, AppointmentStatus.CONFIRMED)

    @staticmethod
    def check_in(db: Session, appointment_id: UUID) -> Appointment:
        """Customer arrived. A pending booking is confirmed on arrival; repeat check-ins keep the first time."""
        appointment = AppointmentService.get_appointment(db, appointment_id)
        if appointment.status in FINAL_STATUSES:
            raise InvalidStatusTransition(f"Cannot check in an appointment that is {appointment.status}")
        if appointment.checked_in_at:
            return appointment

        appointment.checked_in_at = datetime.now(timezone.utc)
        return AppointmentService._set_status(db, appointment, AppointmentStatus.CONFIRMED)

    @staticmethod
    def complete(db: Session, appointment_id: UUID) -> Appointment:
        appointment = AppointmentService.get_appointment(db, appointment_id)
        if appointment.status != AppointmentStatus.CONFIRMED.value:
            raise InvalidStatusTransition(f"Cannot complete an appointment that is {appointment.status}")
        return AppointmentService._set_status(db, appointment, AppointmentStatus.COMPLETED)

    @staticmethod
    def mark_no_show(db: Session, appointment_id: UUID) -> Appointment:
        """Customer never came. Final; the interval stays held for the record."""
        appointment = AppointmentService.get_appointment(db, appointment_id)
        if appointment.status in FINAL_STATUSES:
            raise InvalidStatusTransition(f"Cannot mark an appointment that is {appointment.status} as no-show")
        if appointment.checked_in_at:
            raise InvalidStatusTransition("Customer already checked in")
        return AppointmentService._set_status(db, appointment, AppointmentStatus.NO_SHOW)

    @staticmethod
    def cancel(
            db: Session,
            appointment_id: UUID,
            reason: Optional[str] = None,
            cancelled_by: CancelledBy = CancelledBy.STAFF,
            now: Optional[datetime] = None,
    ) -> Appointment:
        """Soft cancel; frees the slot for new bookings"""
        appointment = AppointmentService.get_appointment(db, appointment_id)

        if appointment.status == AppointmentStatus.CANCELLED.value:
            return appointment
        if appointment.status in FINAL_STATUSES:
            raise InvalidStatusTransition(f"Cannot cancel an appointment that is {appointment.status}")

        if cancelled_by == CancelledBy.CUSTOMER:
            min_hours = get_settings().CUSTOMER_CANCEL_MIN_HOURS
            now = now or shop_now()
            if appointment.starts_at - now < timedelta(hours=min_hours):
                raise CancellationWindowClosed(
                    f"Customers can only cancel at least {min_hours}h before the appointment"
                )

        appointment.cancelled_at = datetime.now(timezone.utc)
        appointment.cancelled_by = cancelled_by.value
        appointment.cancellation_reason = reason
        return AppointmentService._set_status(db, appointment, AppointmentStatus.CANCELLED)

    @staticmethod
    def auto_complete_past(db: Session, now: Optional[datetime] = None) -> int:
        """Mark confirmed appointments whose end time has passed as completed"""
        now = now or shop_now()
        candidates: List[Appointment] = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED.value,
            Appointment.appointment_date <= now.date(),
        ).all()

        completed = 0
        for appointment in candidates:
            if appointment.ends_at <= now:
                appointment.status = AppointmentStatus.COMPLETED.value
                completed += 1

        if completed:
            db.commit()
            logger.info(f"Auto-completed {completed} appointments")
        return completed

    @staticmethod
    def _set_status(db: Session, appointment: Appointment, status: AppointmentStatus) -> Appointment:
        previous = appointment.status
        appointment.status = status.value
        db.commit()
        db.refresh(appointment)
        logger.info(f"Appointment {appointment.id}: {previous} -> {status.value}")
        return appointment
