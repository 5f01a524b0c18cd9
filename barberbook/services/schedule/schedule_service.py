# ============================================================================
# barberbook/services/schedule/schedule_service.py
# Staff calendar configuration: work hours, breaks and dated exceptions
# ============================================================================
import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barberbook.models.staff import Staff, WorkHourRule, BreakRule, ScheduleException, StaffDayLedger
from barberbook.scheduling.calendar import Interval, overlaps
from barberbook.scheduling.schedule import StaffSchedule, get_day_windows
from barberbook.schemas.schedule import WorkHourCreate, BreakCreate, ExceptionCreate
from barberbook.utils.clock import shop_now

logger = logging.getLogger(__name__)


class ScheduleValidationError(ValueError):
    """Schedule configuration is malformed"""


class ScheduleConflictError(ValueError):
    """A new recurring block overlaps an existing one on the same weekday"""


class StaffNotFoundError(LookupError):
    pass


class ScheduleService:
    """Reads and edits one staff member's recurring rules and exceptions"""

    @staticmethod
    def get_staff(db: Session, staff_id: UUID) -> Optional[Staff]:
        return db.get(Staff, staff_id)

    @staticmethod
    def load_schedule(db: Session, staff_id: UUID, day: Optional[date] = None) -> StaffSchedule:
        """
        Fetch the rows that make up a staff member's calendar.
        With `day`, only that weekday's rules and that date's exceptions are read.
        """
        work_query = db.query(WorkHourRule).filter(WorkHourRule.staff_id == staff_id)
        break_query = db.query(BreakRule).filter(BreakRule.staff_id == staff_id)
        exception_query = db.query(ScheduleException).filter(ScheduleException.staff_id == staff_id)

        if day is not None:
            weekday = day.weekday()
            work_query = work_query.filter(WorkHourRule.weekday == weekday)
            break_query = break_query.filter(BreakRule.weekday == weekday)
            exception_query = exception_query.filter(ScheduleException.date == day)

        return StaffSchedule.from_models(
            staff_id,
            work_query.all(),
            break_query.all(),
            exception_query.all(),
        )

    @staticmethod
    def get_day_windows(db: Session, staff_id: UUID, day: date) -> List[Interval]:
        schedule = ScheduleService.load_schedule(db, staff_id, day)
        return get_day_windows(schedule, day)

    # ------------------------------------------------------------------
    # Work hours
    # ------------------------------------------------------------------

    @staticmethod
    def list_work_hours(db: Session, staff_id: UUID) -> List[WorkHourRule]:
        return db.query(WorkHourRule).filter(
            WorkHourRule.staff_id == staff_id
        ).order_by(WorkHourRule.weekday.asc(), WorkHourRule.start_time.asc()).all()

    @staticmethod
    def add_work_hours(db: Session, staff_id: UUID, payload: WorkHourCreate) -> WorkHourRule:
        ScheduleService._require_staff(db, staff_id)
        existing = db.query(WorkHourRule).filter(
            WorkHourRule.staff_id == staff_id,
            WorkHourRule.weekday == payload.weekday,
        ).all()
        ScheduleService._reject_overlap(existing, payload, "work hours")

        rule = WorkHourRule(
            staff_id=staff_id,
            weekday=payload.weekday,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )
        db.add(rule)
        ScheduleService._advance_ledger(db, staff_id, weekday=payload.weekday)
        db.commit()
        db.refresh(rule)

        logger.info(f"Added work hours {payload.start_time}-{payload.end_time} on weekday {payload.weekday} for staff {staff_id}")
        return rule

    @staticmethod
    def delete_work_hours(db: Session, staff_id: UUID, rule_id: UUID) -> bool:
        return ScheduleService._delete(db, WorkHourRule, staff_id, rule_id)

    # ------------------------------------------------------------------
    # Breaks
    # ------------------------------------------------------------------

    @staticmethod
    def list_breaks(db: Session, staff_id: UUID) -> List[BreakRule]:
        return db.query(BreakRule).filter(
            BreakRule.staff_id == staff_id
        ).order_by(BreakRule.weekday.asc(), BreakRule.start_time.asc()).all()

    @staticmethod
    def add_break(db: Session, staff_id: UUID, payload: BreakCreate) -> BreakRule:
        ScheduleService._require_staff(db, staff_id)
        existing = db.query(BreakRule).filter(
            BreakRule.staff_id == staff_id,
            BreakRule.weekday == payload.weekday,
        ).all()
        ScheduleService._reject_overlap(existing, payload, "break")

        rule = BreakRule(
            staff_id=staff_id,
            weekday=payload.weekday,
            start_time=payload.start_time,
            end_time=payload.end_time,
            break_type=payload.break_type,
            description=payload.description,
        )
        db.add(rule)
        ScheduleService._advance_ledger(db, staff_id, weekday=payload.weekday)
        db.commit()
        db.refresh(rule)

        logger.info(f"Added {payload.break_type} break on weekday {payload.weekday} for staff {staff_id}")
        return rule

    @staticmethod
    def delete_break(db: Session, staff_id: UUID, rule_id: UUID) -> bool:
        return ScheduleService._delete(db, BreakRule, staff_id, rule_id)

    # ------------------------------------------------------------------
    # Exceptions
    # ------------------------------------------------------------------

    @staticmethod
    def list_exceptions(db: Session, staff_id: UUID, start_date: Optional[date] = None) -> List[ScheduleException]:
        query = db.query(ScheduleException).filter(ScheduleException.staff_id == staff_id)
        if start_date:
            query = query.filter(ScheduleException.date >= start_date)
        return query.order_by(ScheduleException.date.asc()).all()

    @staticmethod
    def add_exception(db: Session, staff_id: UUID, payload: ExceptionCreate) -> ScheduleException:
        ScheduleService._require_staff(db, staff_id)

        if not payload.is_closed and (payload.start_time is None or payload.end_time is None):
            raise ScheduleValidationError("A partial closure needs start_time and end_time")
        ScheduleService._ensure_ledger(db, staff_id, payload.date)

        exception = ScheduleException(
            staff_id=staff_id,
            date=payload.date,
            is_closed=payload.is_closed,
            start_time=None if payload.is_closed else payload.start_time,
            end_time=None if payload.is_closed else payload.end_time,
            note=payload.note,
        )
        db.add(exception)
        ScheduleService._advance_ledger(db, staff_id, day=payload.date)
        db.commit()
        db.refresh(exception)

        kind = "closed" if payload.is_closed else f"closed {payload.start_time}-{payload.end_time}"
        logger.info(f"Added exception for staff {staff_id} on {payload.date}: {kind}")
        return exception

    @staticmethod
    def delete_exception(db: Session, staff_id: UUID, exception_id: UUID) -> bool:
        return ScheduleService._delete(db, ScheduleException, staff_id, exception_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_staff(db: Session, staff_id: UUID) -> Staff:
        staff = db.get(Staff, staff_id)
        if not staff:
            raise StaffNotFoundError(f"Staff {staff_id} not found")
        return staff

    @staticmethod
    def _reject_overlap(existing, payload, label: str) -> None:
        new_block = Interval.from_times(payload.start_time, payload.end_time)
        for rule in existing:
            block = Interval.from_times(rule.start_time, rule.end_time)
            if overlaps(new_block.start, new_block.duration, block.start, block.duration):
                raise ScheduleConflictError(
                    f"New {label} {payload.start_time}-{payload.end_time} overlaps "
                    f"existing {rule.start_time}-{rule.end_time} on weekday {payload.weekday}"
                )

    @staticmethod
    def _delete(db: Session, model, staff_id: UUID, row_id: UUID) -> bool:
        row = db.query(model).filter(model.id == row_id, model.staff_id == staff_id).first()
        if not row:
            return False
        if isinstance(row, ScheduleException):
            ScheduleService._advance_ledger(db, staff_id, day=row.date)
        else:
            ScheduleService._advance_ledger(db, staff_id, weekday=row.weekday)
        db.delete(row)
        db.commit()
        return True

    # ------------------------------------------------------------------
    # Booking ledger
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_ledger(db: Session, staff_id: UUID, day: date) -> None:
        """Create the (staff, date) ledger row at version 0 if no booking has yet"""
        exists = db.query(StaffDayLedger.id).filter(
            StaffDayLedger.staff_id == staff_id,
            StaffDayLedger.date == day,
        ).first()
        if exists:
            return

        db.add(StaffDayLedger(staff_id=staff_id, date=day, version=0))
        try:
            db.commit()
        except IntegrityError:
            # A first booking created it concurrently
            db.rollback()

    @staticmethod
    def _advance_ledger(db: Session, staff_id: UUID, day: Optional[date] = None, weekday: Optional[int] = None) -> int:
        """
        Bump the ledger version of the dates a schedule edit touches, so a
        booking that read the old windows fails its version check at commit.
        A weekday edit touches every ledgered date from today on.
        Runs in the caller's transaction; returns the number of rows bumped.
        """
        query = db.query(StaffDayLedger.id, StaffDayLedger.date).filter(StaffDayLedger.staff_id == staff_id)
        if day is not None:
            query = query.filter(StaffDayLedger.date == day)
        else:
            query = query.filter(StaffDayLedger.date >= shop_now().date())

        ids = [row.id for row in query.all() if weekday is None or row.date.weekday() == weekday]
        if not ids:
            return 0

        db.execute(
            update(StaffDayLedger)
            .where(StaffDayLedger.id.in_(ids))
            .values(version=StaffDayLedger.version + 1)
            .execution_options(synchronize_session=False)
        )
        return len(ids)
