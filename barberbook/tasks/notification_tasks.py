# barberbook/tasks/notification_tasks.py
"""Confirmation delivery tasks"""
import logging
from datetime import datetime, timezone
from uuid import UUID

from barberbook.config.celery_config import celery_app
from barberbook.config.database import SessionLocal
from barberbook.models.appointment import Appointment
from barberbook.models.service import Service
from barberbook.models.staff import Staff
from barberbook.services.notification.notification_service import format_confirmation_message
from barberbook.services.twilio.whatsapp_service import WhatsAppService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_booking_confirmation(self, appointment_id: str, channel: str, payload: dict = None):
    """Send the WhatsApp confirmation for a committed appointment"""
    db = SessionLocal()
    try:
        appointment = db.query(Appointment).filter_by(id=UUID(appointment_id)).first()
        if not appointment:
            logger.error(f"Appointment {appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        if appointment.notification_sent:
            return {"status": "skipped", "reason": "already_sent"}

        if appointment.status == "cancelled":
            return {"status": "skipped", "reason": "appointment_cancelled"}

        staff = db.get(Staff, appointment.staff_id)
        service = db.get(Service, appointment.service_id)

        message = format_confirmation_message(
            customer_name=appointment.customer_name,
            formatted_date=appointment.appointment_date.strftime("%d/%m/%Y"),
            time=appointment.start_time.strftime("%H:%M"),
            service_name=service.name if service else "",
            staff_name=staff.name if staff else "",
            template=(payload or {}).get("template"),
        )

        result = WhatsAppService().send_message(appointment.customer_phone, message)
        if not result["success"]:
            raise RuntimeError(result["error"])

        appointment.notification_sent = True
        appointment.confirmation_sent_at = datetime.now(timezone.utc)
        db.commit()

        logger.info(f"Confirmation sent for appointment {appointment_id} via {channel}")
        return {"status": "success", "message_sid": result["message_sid"]}

    except Exception as exc:
        db.rollback()
        logger.error(f"Confirmation failed for appointment {appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))

    finally:
        db.close()
