# backend/medslots/schemas/doctors.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class DoctorCreate(BaseModel):
    username: str
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class DoctorRead(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
