# barberbook/services/booking/channels.py
"""
Booking intake channels.

Each channel turns its own request shape into the five booking inputs,
calls BookingService.try_book once and branches on the result. None of them
checks availability on its own; the booking transaction is the only judge.
"""
import logging
from typing import Optional
from datetime import datetime

from sqlalchemy.orm import Session

from barberbook.schemas.booking import BookingChannelType, BookingRequest, BookingResult, BotBookingRequest
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.services.booking.booking_service import BookingService
from barberbook.services.notification.notification_service import NotificationService

logger = logging.getLogger(__name__)


class BookingChannel:
    channel = BookingChannelType.PUBLIC

    def book(self, db: Session, request: BookingRequest, now: Optional[datetime] = None) -> BookingResult:
        result = BookingService.try_book(
            db,
            staff_id=request.staff_id,
            service_id=request.service_id,
            day=request.date,
            start_time=request.start_time,
            customer=request.customer,
            channel=self.channel,
            now=now,
        )

        if result.success:
            self.after_booking(result, request)
        else:
            result = self.after_rejection(db, result, request, now)
        return result

    def after_booking(self, result: BookingResult, request: BookingRequest) -> None:
        """Best-effort confirmation; the booking already committed"""
        try:
            NotificationService.dispatch_booking_confirmation(
                result.appointment_id,
                self.channel.value,
                self.notification_payload(request),
            )
        except Exception as e:
            logger.error(f"Confirmation dispatch failed for appointment {result.appointment_id}: {e}")

    def after_rejection(self, db: Session, result: BookingResult, request: BookingRequest,
                        now: Optional[datetime]) -> BookingResult:
        return result

    def notification_payload(self, request: BookingRequest) -> dict:
        return {"customer_phone": request.customer.phone}


class PublicBookingChannel(BookingChannel):
    """Self-service booking page"""
    channel = BookingChannelType.PUBLIC


class StaffBookingChannel(BookingChannel):
    """Booking created by a staff member from the agenda dialog"""
    channel = BookingChannelType.STAFF


class BotBookingChannel(BookingChannel):
    """Conversational bot; suggests nearby free slots when the requested one is taken"""
    channel = BookingChannelType.BOT
    alternatives_limit = 3

    def after_rejection(self, db: Session, result: BookingResult, request: BookingRequest,
                        now: Optional[datetime]) -> BookingResult:
        if result.error is None or not result.error.slot_taken:
            return result

        result.alternatives = AvailabilityService.find_next_slots(
            db,
            staff_id=request.staff_id,
            service_id=request.service_id,
            from_day=request.date,
            limit=self.alternatives_limit,
            now=now,
        )
        return result

    def notification_payload(self, request: BookingRequest) -> dict:
        payload = super().notification_payload(request)
        if isinstance(request, BotBookingRequest) and request.conversation_id:
            payload["conversation_id"] = request.conversation_id
        return payload


public_channel = PublicBookingChannel()
staff_channel = StaffBookingChannel()
bot_channel = BotBookingChannel()
