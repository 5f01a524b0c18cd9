# barberbook/models/appointment.py
from sqlalchemy import Column, String, Integer, Text, Boolean, Date, Time, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.sql import func
from datetime import datetime, timedelta
import uuid
from barberbook.models.base import Base


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_staff_date", "staff_id", "appointment_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # References
    staff_id = Column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Uuid, ForeignKey("services.id"), nullable=False)

    # Customer info
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)

    # Appointment details
    appointment_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)  # copied from the service at booking time
    notes = Column(Text, nullable=True)

    # Status tracking
    status = Column(String, default="pending", index=True)  # pending, confirmed, completed, cancelled, no_show
    booking_source = Column(String, default="public")  # public, staff, bot
    checked_in_at = Column(DateTime(timezone=True), nullable=True)  # customer arrived

    # Notifications
    notification_sent = Column(Boolean, default=False)
    confirmation_sent_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(String, nullable=True)  # customer, staff
    cancellation_reason = Column(Text, nullable=True)

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.appointment_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=self.duration_minutes)

    def to_dict(self):
        return {
            "id": str(self.id),
            "staff_id": str(self.staff_id),
            "service_id": str(self.service_id),
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "customer_email": self.customer_email,
            "date": self.appointment_date.isoformat(),
            "start_time": self.start_time.isoformat(timespec="minutes"),
            "end_time": self.ends_at.time().isoformat(timespec="minutes"),
            "duration_minutes": self.duration_minutes,
            "status": self.status,
            "booking_source": self.booking_source,
            "notes": self.notes,
            "notification_sent": self.notification_sent,
            "checked_in_at": self.checked_in_at.isoformat() if self.checked_in_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancellation_reason": self.cancellation_reason,
        }
