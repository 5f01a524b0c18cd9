# barberbook/tasks/appointment_tasks.py
"""Periodic appointment maintenance"""
import logging

from barberbook.config.celery_config import celery_app
from barberbook.config.database import SessionLocal
from barberbook.services.appointment.appointment_service import AppointmentService

logger = logging.getLogger(__name__)


@celery_app.task
def auto_complete_appointments():
    """Close out confirmed appointments that have already ended"""
    db = SessionLocal()
    try:
        completed = AppointmentService.auto_complete_past(db)
        return {"status": "success", "completed": completed}
    finally:
        db.close()
