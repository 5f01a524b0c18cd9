"""Health checks and monitoring endpoints"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.orm import Session

from barberbook.config.celery_config import celery_app
from barberbook.config.database import get_db
from barberbook.config.settings import get_settings
from barberbook.models.appointment import Appointment
from barberbook.utils.clock import shop_now

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "barberbook-booking"}


@health_router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Database, notification broker and today's booking count"""
    settings = get_settings()
    checks = {
        "api": "healthy",
        "database": "unknown",
        "broker": "unknown",
        "overall": "unknown"
    }

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        checks["database"] = f"unhealthy: {str(e)}"

    # Bookings still commit without a broker; only confirmations queue up
    try:
        with celery_app.connection_for_write() as conn:
            conn.ensure_connection(max_retries=1)
        checks["broker"] = "healthy"
    except Exception as e:
        logger.warning(f"Broker health check failed: {e}")
        checks["broker"] = f"unhealthy: {str(e)}"

    if all(status == "healthy" for key, status in checks.items() if key != "overall"):
        checks["overall"] = "healthy"
    else:
        checks["overall"] = "degraded"

    if checks["database"] == "healthy":
        today = shop_now().date()
        checks["bookings_today"] = db.query(func.count(Appointment.id)).filter(
            Appointment.appointment_date == today,
            Appointment.status != "cancelled",
        ).scalar()
        checks["timezone"] = settings.DEFAULT_TIMEZONE

    return checks
