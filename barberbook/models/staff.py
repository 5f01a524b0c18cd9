# barberbook/models/staff.py
"""
Staff Model - barbers and their bookable calendar inputs
Work hours and breaks repeat weekly, exceptions apply to one date.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Date, Time, Integer, Text, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from barberbook.models.base import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=True, unique=True)
    specialty = Column(String(200), nullable=True)
    phone_number = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    work_hours = relationship("WorkHourRule", back_populates="staff", cascade="all, delete-orphan")
    breaks = relationship("BreakRule", back_populates="staff", cascade="all, delete-orphan")
    exceptions = relationship("ScheduleException", back_populates="staff", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Staff(id={self.id}, name={self.name})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "specialty": self.specialty,
            "is_active": self.is_active,
        }


class WorkHourRule(Base):
    """Recurring weekly work block"""
    __tablename__ = "staff_work_hours"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)

    weekday = Column(Integer, nullable=False)  # 0=Monday, 6=Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("Staff", back_populates="work_hours")

    def to_dict(self):
        return {
            "id": str(self.id),
            "staff_id": str(self.staff_id),
            "weekday": self.weekday,
            "start_time": self.start_time.isoformat(timespec="minutes"),
            "end_time": self.end_time.isoformat(timespec="minutes"),
        }


class BreakRule(Base):
    """Recurring weekly break, carved out of the work hours of the same weekday"""
    __tablename__ = "staff_breaks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)

    weekday = Column(Integer, nullable=False)  # 0=Monday, 6=Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    break_type = Column(String(50), default="lunch")  # lunch, coffee, other
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("Staff", back_populates="breaks")

    def to_dict(self):
        return {
            "id": str(self.id),
            "staff_id": str(self.staff_id),
            "weekday": self.weekday,
            "start_time": self.start_time.isoformat(timespec="minutes"),
            "end_time": self.end_time.isoformat(timespec="minutes"),
            "break_type": self.break_type,
            "description": self.description,
        }


class ScheduleException(Base):
    """Date-specific override: full-day closure or one closed interval"""
    __tablename__ = "staff_exceptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    is_closed = Column(Boolean, default=True, nullable=False)  # False = partial closure
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    note = Column(String, nullable=True)  # "Holiday", "Doctor", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("Staff", back_populates="exceptions")

    def to_dict(self):
        return {
            "id": str(self.id),
            "staff_id": str(self.staff_id),
            "date": self.date.isoformat(),
            "is_closed": self.is_closed,
            "start_time": self.start_time.isoformat(timespec="minutes") if self.start_time else None,
            "end_time": self.end_time.isoformat(timespec="minutes") if self.end_time else None,
            "note": self.note,
        }


class StaffDayLedger(Base):
    """
    One row per (staff, date) that has been booked or had its schedule edited.
    Every committed booking and schedule edit advances `version`; a booking
    whose observed version is stale at commit time is rejected.
    """
    __tablename__ = "staff_day_ledger"
    __table_args__ = (
        UniqueConstraint("staff_id", "date", name="uq_staff_day_ledger_staff_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    version = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
