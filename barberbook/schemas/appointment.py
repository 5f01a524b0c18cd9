# barberbook/schemas/appointment.py
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class CancelledBy(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"


class CancelAppointmentRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)
    cancelled_by: CancelledBy = CancelledBy.STAFF
