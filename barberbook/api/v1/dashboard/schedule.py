# ============================================================================
# barberbook/api/v1/dashboard/schedule.py
# Staff calendar configuration - thin HTTP layer over ScheduleService
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.orm import Session

from barberbook.config.database import get_db
from barberbook.schemas.schedule import WorkHourCreate, BreakCreate, ExceptionCreate
from barberbook.services.schedule.schedule_service import (
    ScheduleService,
    ScheduleConflictError,
    ScheduleValidationError,
    StaffNotFoundError,
)

router = APIRouter(prefix="/staff/{staff_id}")


def _translate(exc: Exception) -> HTTPException:
    if isinstance(exc, StaffNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ScheduleConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


@router.get("/work-hours")
def list_work_hours(staff_id: UUID = Path(...), db: Session = Depends(get_db)):
    return [rule.to_dict() for rule in ScheduleService.list_work_hours(db, staff_id)]


@router.post("/work-hours", status_code=201)
def add_work_hours(payload: WorkHourCreate, staff_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return ScheduleService.add_work_hours(db, staff_id, payload).to_dict()
    except (StaffNotFoundError, ScheduleConflictError, ScheduleValidationError) as e:
        raise _translate(e)


@router.delete("/work-hours/{rule_id}", status_code=204)
def delete_work_hours(staff_id: UUID = Path(...), rule_id: UUID = Path(...), db: Session = Depends(get_db)):
    if not ScheduleService.delete_work_hours(db, staff_id, rule_id):
        raise HTTPException(status_code=404, detail="Work hours not found")


@router.get("/breaks")
def list_breaks(staff_id: UUID = Path(...), db: Session = Depends(get_db)):
    return [rule.to_dict() for rule in ScheduleService.list_breaks(db, staff_id)]


@router.post("/breaks", status_code=201)
def add_break(payload: BreakCreate, staff_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return ScheduleService.add_break(db, staff_id, payload).to_dict()
    except (StaffNotFoundError, ScheduleConflictError, ScheduleValidationError) as e:
        raise _translate(e)


@router.delete("/breaks/{rule_id}", status_code=204)
def delete_break(staff_id: UUID = Path(...), rule_id: UUID = Path(...), db: Session = Depends(get_db)):
    if not ScheduleService.delete_break(db, staff_id, rule_id):
        raise HTTPException(status_code=404, detail="Break not found")


@router.get("/exceptions")
def list_exceptions(
        staff_id: UUID = Path(...),
        start_date: Optional[date] = Query(None, description="Only exceptions on or after this date"),
        db: Session = Depends(get_db)
):
    return [exc.to_dict() for exc in ScheduleService.list_exceptions(db, staff_id, start_date)]


@router.post("/exceptions", status_code=201)
def add_exception(payload: ExceptionCreate, staff_id: UUID = Path(...), db: Session = Depends(get_db)):
    try:
        return ScheduleService.add_exception(db, staff_id, payload).to_dict()
    except (StaffNotFoundError, ScheduleValidationError) as e:
        raise _translate(e)


@router.delete("/exceptions/{exception_id}", status_code=204)
def delete_exception(staff_id: UUID = Path(...), exception_id: UUID = Path(...), db: Session = Depends(get_db)):
    if not ScheduleService.delete_exception(db, staff_id, exception_id):
        raise HTTPException(status_code=404, detail="Exception not found")


@router.get("/day-windows")
def get_day_windows(
        staff_id: UUID = Path(...),
        day: date = Query(..., alias="date"),
        db: Session = Depends(get_db)
):
    """Open intervals for a date after breaks and exceptions"""
    windows = ScheduleService.get_day_windows(db, staff_id, day)
    return {
        "staff_id": str(staff_id),
        "date": day.isoformat(),
        "windows": [window.to_dict() for window in windows],
    }
