# barberbook/schemas/schedule.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
import datetime as dt


class RuleBlockCreate(BaseModel):
    """Recurring weekly block"""
    weekday: int = Field(..., ge=0, le=6, description="0=Monday ... 6=Sunday")
    start_time: dt.time
    end_time: dt.time

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: dt.time, info) -> dt.time:
        start_time = info.data.get("start_time")
        if start_time and v <= start_time:
            raise ValueError("end_time must be after start_time")
        return v


class WorkHourCreate(RuleBlockCreate):
    pass


class BreakCreate(RuleBlockCreate):
    break_type: str = Field("lunch", max_length=50)
    description: Optional[str] = None


class ExceptionCreate(BaseModel):
    """Full-day closure, or one closed interval when is_closed is false"""
    date: dt.date
    is_closed: bool = True
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    note: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def check_partial_closure(self) -> "ExceptionCreate":
        if self.is_closed:
            return self
        if self.start_time is None or self.end_time is None:
            raise ValueError("start_time and end_time are required when is_closed is false")
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self
