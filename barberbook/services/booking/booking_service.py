# ============================================================================
# barberbook/services/booking/booking_service.py
# The single write entry point for new appointments
# ============================================================================
"""
Atomic check-then-insert for bookings.

Every committed booking for a (staff, date) pair advances that pair's
StaffDayLedger.version. A booking records the version it observed before
reading the day's appointments and only commits if the version is still
the same when it writes (compare-and-swap). Two concurrent attempts on the
same staff and date therefore cannot both commit; the loser sees either the
winner's appointment or a stale version and gets a typed rejection.

Schedule edits advance the same version for the dates they touch, and the
day windows are read again after the claim, so a booking cannot commit into
time that was closed while it was in flight.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barberbook.config.settings import get_settings
from barberbook.models.appointment import Appointment
from barberbook.models.service import Service
from barberbook.models.staff import Staff, StaffDayLedger
from barberbook.scheduling.calendar import to_minutes
from barberbook.scheduling.conflicts import fits_in_windows, has_conflict
from barberbook.scheduling.schedule import get_day_windows
from barberbook.schemas.booking import BookingChannelType, BookingError, BookingResult, CustomerInfo
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.services.schedule.schedule_service import ScheduleService
from barberbook.utils.clock import shop_now

logger = logging.getLogger(__name__)


class StaleDayLedger(Exception):
    """Another booking committed on the same staff/date after we read it"""


class BookingService:
    """Handles booking commits"""

    @staticmethod
    def try_book(
            db: Session,
            staff_id: UUID,
            service_id: UUID,
            day: date,
            start_time: time,
            customer: CustomerInfo,
            channel: BookingChannelType = BookingChannelType.PUBLIC,
            now: Optional[datetime] = None,
    ) -> BookingResult:
        """
        Validate a candidate booking against live data and commit it atomically.

        Returns a BookingResult; expected rejections are values, not exceptions.
        Database faults other than a lost race propagate to the caller, in
        which case the booking status is unknown.
        """
        settings = get_settings()
        now = now or shop_now()
        # Wall-clock in the shop zone; an attached offset is not honoured
        start_time = start_time.replace(tzinfo=None)
        if start_time.second or start_time.microsecond:
            return BookingService._reject(BookingError.SLOT_UNAVAILABLE, "Start time must fall on a whole minute", staff_id, day, start_time)

        # 1. Service
        service = db.get(Service, service_id)
        if not service or not service.is_active or not service.duration_minutes or service.duration_minutes <= 0:
            return BookingService._reject(BookingError.INVALID_SERVICE, "Service not found or inactive", staff_id, day, start_time)
        duration = service.duration_minutes

        # 2. Staff
        staff = db.get(Staff, staff_id)
        if not staff or not staff.is_active:
            return BookingService._reject(BookingError.STAFF_NOT_BOOKABLE, "Staff member is not taking bookings", staff_id, day, start_time)

        # 3. Date range
        starts_at = datetime.combine(day, start_time)
        if starts_at < now + timedelta(minutes=settings.MIN_BOOKING_LEAD_MINUTES):
            return BookingService._reject(BookingError.PAST_OR_OUT_OF_RANGE_DATE, "Requested time is in the past", staff_id, day, start_time)
        if day > now.date() + timedelta(days=settings.MAX_BOOKING_HORIZON_DAYS):
            return BookingService._reject(
                BookingError.PAST_OR_OUT_OF_RANGE_DATE,
                f"Bookings open at most {settings.MAX_BOOKING_HORIZON_DAYS} days ahead",
                staff_id, day, start_time,
            )

        # 4. Day windows, re-read from the schedule rows
        schedule = ScheduleService.load_schedule(db, staff_id, day)
        if not schedule.works_on(day.weekday()):
            return BookingService._reject(BookingError.STAFF_NOT_BOOKABLE, "No work hours on this weekday", staff_id, day, start_time)

        if not fits_in_windows(get_day_windows(schedule, day), to_minutes(start_time), duration):
            return BookingService._reject(BookingError.SLOT_UNAVAILABLE, "Requested time is outside working hours", staff_id, day, start_time)

        # 5. Observe the ledger version, then the appointments it guards
        observed_version = BookingService._read_ledger_version(db, staff_id, day)
        appointments = AvailabilityService.get_active_appointments(db, staff_id, day)
        if has_conflict(staff_id, day, start_time, duration, appointments):
            return BookingService._reject(BookingError.SLOT_UNAVAILABLE, "Requested time is no longer available", staff_id, day, start_time)

        # 6. Insert and claim the day in one transaction
        appointment = Appointment(
            staff_id=staff_id,
            service_id=service_id,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_email=customer.email,
            notes=customer.notes,
            appointment_date=day,
            start_time=start_time,
            duration_minutes=duration,
            status=BookingService._initial_status(channel),
            booking_source=channel.value,
        )

        try:
            db.add(appointment)
            BookingService._claim_day(db, staff_id, day, observed_version)
            # Schedule edits committed since step 4 are visible once the day is claimed
            if not BookingService._fits_schedule(db, staff_id, day, start_time, duration):
                db.rollback()
                return BookingService._reject(BookingError.SLOT_UNAVAILABLE, "Working hours changed while booking", staff_id, day, start_time)
            db.commit()
        except (StaleDayLedger, IntegrityError) as e:
            db.rollback()
            logger.info(f"Lost booking race for staff {staff_id} on {day} at {start_time}: {type(e).__name__}")
            return BookingService._classify_lost_race(db, staff_id, day, start_time, duration)
        except Exception:
            db.rollback()
            logger.error(f"Booking commit failed for staff {staff_id} on {day} at {start_time}", exc_info=True)
            raise

        logger.info(
            f"Booked appointment {appointment.id} for staff {staff_id} on {day} at {start_time} "
            f"({duration} min, channel={channel.value})"
        )
        return BookingResult.booked(appointment.id)

    @staticmethod
    def _read_ledger_version(db: Session, staff_id: UUID, day: date) -> Optional[int]:
        row = db.query(StaffDayLedger.version).filter(
            StaffDayLedger.staff_id == staff_id,
            StaffDayLedger.date == day,
        ).first()
        return row.version if row else None

    @staticmethod
    def _claim_day(db: Session, staff_id: UUID, day: date, observed_version: Optional[int]) -> None:
        """
        Advance the ledger from observed_version, or create it when none was seen.
        Raises StaleDayLedger on a version miss; a concurrent first claim surfaces
        as IntegrityError on the (staff_id, date) unique constraint.
        """
        if observed_version is None:
            db.add(StaffDayLedger(staff_id=staff_id, date=day, version=1))
            db.flush()
            return

        result = db.execute(
            update(StaffDayLedger)
            .where(
                StaffDayLedger.staff_id == staff_id,
                StaffDayLedger.date == day,
                StaffDayLedger.version == observed_version,
            )
            .values(version=StaffDayLedger.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StaleDayLedger(f"Ledger for staff {staff_id} on {day} moved past version {observed_version}")
        db.flush()

    @staticmethod
    def _classify_lost_race(db: Session, staff_id: UUID, day: date, start_time: time, duration: int) -> BookingResult:
        """After a rolled back commit, report whether the slot itself is now taken"""
        appointments = AvailabilityService.get_active_appointments(db, staff_id, day)
        if has_conflict(staff_id, day, start_time, duration, appointments):
            return BookingService._reject(BookingError.SLOT_UNAVAILABLE, "Requested time is no longer available", staff_id, day, start_time)
        if not BookingService._fits_schedule(db, staff_id, day, start_time, duration):
            return BookingService._reject(BookingError.SLOT_UNAVAILABLE, "Working hours changed while booking", staff_id, day, start_time)
        return BookingService._reject(
            BookingError.PERSISTENCE_CONFLICT,
            "Another booking was saved at the same moment, please refresh and try again",
            staff_id, day, start_time,
        )

    @staticmethod
    def _fits_schedule(db: Session, staff_id: UUID, day: date, start_time: time, duration: int) -> bool:
        schedule = ScheduleService.load_schedule(db, staff_id, day)
        return fits_in_windows(get_day_windows(schedule, day), to_minutes(start_time), duration)

    @staticmethod
    def _initial_status(channel: BookingChannelType) -> str:
        settings = get_settings()
        return {
            BookingChannelType.PUBLIC: settings.PUBLIC_BOOKING_STATUS,
            BookingChannelType.STAFF: settings.STAFF_BOOKING_STATUS,
            BookingChannelType.BOT: settings.BOT_BOOKING_STATUS,
        }[channel]

    @staticmethod
    def _reject(error: BookingError, message: str, staff_id, day, start_time) -> BookingResult:
        logger.info(f"Booking rejected ({error.value}) for staff {staff_id} on {day} at {start_time}: {message}")
        return BookingResult.rejected(error, message)
