# ============================================================================
# barberbook/api/v1/dashboard/appointments.py
# Staff agenda - thin HTTP layer
# ============================================================================
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.orm import Session

from barberbook.api.dependencies import booking_response
from barberbook.config.database import get_db
from barberbook.schemas.appointment import CancelAppointmentRequest
from barberbook.schemas.booking import BookingRequest, BookingResult
from barberbook.services.appointment.appointment_service import (
    AppointmentService,
    AppointmentNotFound,
    CancellationWindowClosed,
    InvalidStatusTransition,
)
from barberbook.services.booking.channels import staff_channel

router = APIRouter()


@router.get("/staff/{staff_id}/appointments")
def list_day_appointments(
        staff_id: UUID = Path(..., description="The staff member"),
        day: date = Query(..., alias="date", description="Agenda date"),
        include_cancelled: bool = Query(False),
        db: Session = Depends(get_db)
):
    """Agenda for one staff member and date"""
    return AppointmentService.list_for_day(db, staff_id, day, include_cancelled)


@router.post("/appointments", response_model=BookingResult, status_code=201,
             responses={409: {"model": BookingResult}, 400: {"model": BookingResult},
                        404: {"model": BookingResult}, 422: {"model": BookingResult}})
def create_staff_appointment(request: BookingRequest, db: Session = Depends(get_db)):
    """Book on behalf of a customer from the agenda"""
    return booking_response(staff_channel.book(db, request))


@router.get("/appointments/{appointment_id}")
def get_appointment(appointment_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return AppointmentService.get_appointment(db, appointment_id).to_dict()
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/appointments/{appointment_id}/confirm")
def confirm_appointment(appointment_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return AppointmentService.confirm(db, appointment_id).to_dict()
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/appointments/{appointment_id}/check-in")
def check_in_appointment(appointment_id: UUID = Path(...), db: Session = Depends(get_db)):
    """Customer arrived"""
    try:
        return AppointmentService.check_in(db, appointment_id).to_dict()
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/appointments/{appointment_id}/complete")
def complete_appointment(appointment_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return AppointmentService.complete(db, appointment_id).to_dict()
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/appointments/{appointment_id}/no-show")
def mark_no_show(appointment_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return AppointmentService.mark_no_show(db, appointment_id).to_dict()
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/appointments/{appointment_id}/cancel")
def cancel_appointment(
        payload: CancelAppointmentRequest,
        appointment_id: UUID = Path(...),
        db: Session = Depends(get_db)
):
    try:
        return AppointmentService.cancel(db, appointment_id, payload.reason, payload.cancelled_by).to_dict()
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidStatusTransition, CancellationWindowClosed) as e:
        raise HTTPException(status_code=400, detail=str(e))
