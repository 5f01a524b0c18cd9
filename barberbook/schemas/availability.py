# barberbook/schemas/availability.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
import datetime as dt
from uuid import UUID


class TimeSlot(BaseModel):
    """Bookable start time, valid only when it was computed"""
    date: dt.date = Field(..., description="Slot date")
    start_time: dt.time = Field(..., description="Slot start time")
    end_time: dt.time = Field(..., description="Slot end time")

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: dt.time, info) -> dt.time:
        start_time = info.data.get("start_time")
        if start_time and v <= start_time:
            raise ValueError("End time must be after start time")
        return v

    @classmethod
    def from_slot(cls, slot) -> "TimeSlot":
        return cls(date=slot.date, start_time=slot.start_time, end_time=slot.end_time)


class AvailabilityResponse(BaseModel):
    """Slots for one staff member and date"""
    staff_id: UUID
    date: dt.date
    duration_minutes: int
    slot_granularity_minutes: int
    is_closed: bool = False
    reason: Optional[str] = Field(None, description="Why there are no slots, when known")
    slots: List[TimeSlot] = Field(default_factory=list)


class AvailableDatesResponse(BaseModel):
    """Dates within the booking horizon that have at least one open window"""
    staff_id: UUID
    start_date: dt.date
    end_date: dt.date
    dates: List[dt.date] = Field(default_factory=list)
