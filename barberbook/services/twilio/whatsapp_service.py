# barberbook/services/twilio/whatsapp_service.py
"""WhatsApp sending through Twilio"""
import logging
from twilio.rest import Client
from twilio.base.exceptions import TwilioException

from barberbook.config.settings import get_settings

logger = logging.getLogger(__name__)


class WhatsAppService:
    def __init__(self, client: Client = None):
        settings = get_settings()
        self.from_number = settings.TWILIO_WHATSAPP_FROM
        self.client = client or Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)

    @staticmethod
    def to_whatsapp_address(phone_digits: str) -> str:
        digits = "".join(ch for ch in phone_digits if ch.isdigit())
        return f"whatsapp:+{digits}"

    def send_message(self, to_phone: str, message_body: str) -> dict:
        """Send one WhatsApp message; Twilio failures are reported, not raised"""
        try:
            twilio_message = self.client.messages.create(
                body=message_body,
                from_=self.to_whatsapp_address(self.from_number),
                to=self.to_whatsapp_address(to_phone),
            )
            logger.info(f"WhatsApp sent to {to_phone}: {twilio_message.sid}")
            return {"success": True, "message_sid": twilio_message.sid}

        except TwilioException as e:
            logger.error(f"Twilio error sending WhatsApp to {to_phone}: {str(e)}")
            return {"success": False, "error": str(e)}
