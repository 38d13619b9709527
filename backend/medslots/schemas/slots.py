# backend/medslots/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AvailableSlot(BaseModel):
    """A computed, not yet persisted slot (book it by virtual_id)."""
    virtual_id: str = Field(description="{pattern_id}-{ISO start instant}")
    doctor_id: int
    pattern_id: int
    start_time: datetime
    end_time: datetime
    status: str

    model_config = {"from_attributes": True}


class SlotRead(BaseModel):
    """A persisted slot row."""
    id: int
    doctor_id: int
    pattern_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    status: str

    model_config = {"from_attributes": True}


class SlotsInvalidateResponse(BaseModel):
    doctor_id: int
    deleted_keys: int
