# backend/medslots/schemas/bookings.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .slots import SlotRead


class BookingCreate(BaseModel):
    patient_id: int = Field(alias="patientId")
    reason: Optional[str] = None

    model_config = {"populate_by_name": True}


class BookingRead(BaseModel):
    id: int
    slot_id: int
    patient_id: int
    doctor_id: int
    reason: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    slot: Optional[SlotRead] = None

    model_config = {"from_attributes": True}


class BookingPatient(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class DoctorBookingRead(BookingRead):
    patient: BookingPatient
