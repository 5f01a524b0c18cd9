# ============================================================================
# barberbook/api/v1/bot/appointments.py
# Conversational bot intake - the bot collects the fields, we book
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session

from barberbook.api.dependencies import booking_response
from barberbook.config.database import get_db
from barberbook.schemas.booking import BookingResult, BotBookingRequest
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.services.booking.channels import bot_channel
from barberbook.utils.clock import shop_now

router = APIRouter()


@router.post("/appointments", response_model=BookingResult, status_code=201,
             responses={409: {"model": BookingResult}, 400: {"model": BookingResult},
                        404: {"model": BookingResult}, 422: {"model": BookingResult}})
def create_bot_appointment(request: BotBookingRequest, db: Session = Depends(get_db)):
    """
    Book from a bot conversation.
    When the slot was taken, the response carries up to three alternatives.
    """
    return booking_response(bot_channel.book(db, request))


@router.get("/staff/{staff_id}/next-slots")
def get_next_slots(
        staff_id: UUID = Path(...),
        service_id: UUID = Query(...),
        from_date: Optional[date] = Query(None),
        limit: int = Query(3, ge=1, le=20),
        db: Session = Depends(get_db)
):
    """Nearest free slots, for the bot to offer"""
    slots = AvailabilityService.find_next_slots(
        db, staff_id, service_id, from_date or shop_now().date(), limit=limit
    )
    return {
        "staff_id": str(staff_id),
        "service_id": str(service_id),
        "slots": [slot.model_dump(mode="json") for slot in slots],
    }
