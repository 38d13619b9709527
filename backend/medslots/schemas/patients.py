# backend/medslots/schemas/patients.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from .bookings import BookingRead


class PatientCreate(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class PatientRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PatientDetail(PatientRead):
    bookings: list[BookingRead] = []
