# backend/medslots/schemas/patterns.py

import json
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator


class RecurrenceCreate(BaseModel):
    type: str
    end_date: Optional[str] = None
    week_days: Optional[list[int]] = None


class PatternCreate(BaseModel):
    """Body of POST /doctors/{id}/slots."""
    start_time: str
    end_time: str
    duration: int
    recurrence: RecurrenceCreate


class PatternUpdate(BaseModel):
    is_active: bool


class PatternRead(BaseModel):
    id: int
    doctor_id: int
    start_time: datetime
    end_time: datetime
    duration: int
    type: str
    week_days: list[int]
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool

    model_config = {"from_attributes": True}

    @field_validator("week_days", mode="before")
    @classmethod
    def decode_week_days(cls, value):
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value
