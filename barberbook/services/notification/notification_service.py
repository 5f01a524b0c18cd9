# barberbook/services/notification/notification_service.py
"""Booking confirmations: message rendering and fire-and-forget dispatch"""
import logging
from typing import Optional
from uuid import UUID

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TEMPLATE = """Olá {customer_name}! 👋

Seu agendamento foi recebido:

📅 *{date}*
🕐 *{time}*
✂️ *{service}*
💈 com *{staff}*

Te esperamos! 😊"""


def format_confirmation_message(
        customer_name: str,
        formatted_date: str,
        time: str,
        service_name: str,
        staff_name: str,
        template: Optional[str] = None,
) -> str:
    return (template or DEFAULT_CONFIRMATION_TEMPLATE).format(
        customer_name=customer_name,
        date=formatted_date,
        time=time,
        service=service_name,
        staff=staff_name,
    )


class NotificationService:
    """Queues confirmations; never lets a delivery problem reach the booking"""

    @staticmethod
    def dispatch_booking_confirmation(appointment_id: UUID, channel: str, payload: Optional[dict] = None) -> bool:
        """Enqueue the confirmation task. Returns False if it could not be queued"""
        from barberbook.tasks.notification_tasks import send_booking_confirmation

        try:
            send_booking_confirmation.delay(
                appointment_id=str(appointment_id),
                channel=channel,
                payload=payload or {},
            )
            logger.info(f"Queued confirmation for appointment {appointment_id} ({channel})")
            return True
        except Exception as e:
            logger.error(f"Could not queue confirmation for appointment {appointment_id}: {e}")
            return False
