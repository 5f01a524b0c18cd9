# ============================================================================
# barberbook/api/v1/public/booking.py
# Self-service booking page - no authentication
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.orm import Session

from barberbook.api.dependencies import booking_response
from barberbook.config.database import get_db
from barberbook.models.service import Service
from barberbook.models.staff import Staff
from barberbook.schemas.availability import AvailabilityResponse, AvailableDatesResponse
from barberbook.schemas.booking import BookingRequest, BookingResult
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.services.booking.channels import public_channel

router = APIRouter()


@router.get("/staff/{staff_ref}")
def get_public_staff(
        staff_ref: str = Path(..., description="Staff id or public slug"),
        db: Session = Depends(get_db)
):
    """Public profile of a bookable staff member plus the active services"""
    staff = None
    try:
        staff = db.get(Staff, UUID(staff_ref))
    except ValueError:
        staff = db.query(Staff).filter(Staff.slug == staff_ref).first()

    if not staff or not staff.is_active:
        raise HTTPException(status_code=404, detail="Staff member not found")

    services = db.query(Service).filter(Service.is_active.is_(True)).order_by(
        Service.display_order.asc(), Service.name.asc()
    ).all()

    return {
        "staff": staff.to_dict(),
        "services": [service.to_dict() for service in services],
    }


@router.get("/staff/{staff_id}/slots", response_model=AvailabilityResponse)
def get_slots(
        staff_id: UUID = Path(..., description="The staff member"),
        day: date = Query(..., alias="date", description="Date to list slots for"),
        service_id: Optional[UUID] = Query(None, description="Service, used for the slot duration"),
        duration_minutes: Optional[int] = Query(None, gt=0, le=600, description="Explicit duration when no service is given"),
        db: Session = Depends(get_db)
):
    """
    Bookable start times for a date. The list is a snapshot: booking
    re-checks the slot and may still answer 409.
    """
    if service_id:
        response = AvailabilityService.get_slots_for_service(db, staff_id, day, service_id)
        if response is None:
            raise HTTPException(status_code=404, detail="Service not found or inactive")
        return response

    if not duration_minutes:
        raise HTTPException(status_code=400, detail="service_id or duration_minutes is required")

    return AvailabilityService.get_available_slots(db, staff_id, day, duration_minutes)


@router.get("/staff/{staff_id}/dates", response_model=AvailableDatesResponse)
def get_available_dates(
        staff_id: UUID = Path(..., description="The staff member"),
        days: Optional[int] = Query(None, ge=1, le=365, description="How many days ahead to check"),
        db: Session = Depends(get_db)
):
    """Dates with at least one open window, for greying out the date picker"""
    return AvailabilityService.get_available_dates(db, staff_id, days_ahead=days)


@router.post("/appointments", response_model=BookingResult, status_code=201,
             responses={409: {"model": BookingResult}, 400: {"model": BookingResult},
                        404: {"model": BookingResult}, 422: {"model": BookingResult}})
def create_public_appointment(
        request: BookingRequest,
        db: Session = Depends(get_db)
):
    """Book a slot from the public page"""
    return booking_response(public_channel.book(db, request))
