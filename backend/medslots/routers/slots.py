# backend/medslots/routers/slots.py
"""
Slots API endpoints.

GET  /doctors/{id}/slots?date=       - Available slots of a day (cached)
POST /doctors/{id}/slots             - Create a recurring pattern
POST /doctors/{id}/slots/invalidate  - Drop cached days of a doctor (admin)
POST /slots/{slot_id}/book           - Book a real or virtual slot
"""

import json

from fastapi import APIRouter, Depends, Query, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_config, get_doctor
from ..models.tables import Doctors, RecurringPatterns
from ..redis_client import get_redis
from ..schemas.bookings import BookingCreate, BookingRead
from ..schemas.common import DataResponse
from ..schemas.patterns import PatternCreate, PatternRead
from ..schemas.slots import AvailableSlot, SlotsInvalidateResponse
from ..services.slots import (
    SlotsConfig,
    book_slot,
    get_available_slots,
    invalidate_doctor_cache,
)
from ..services.slots.config import to_storage
from ..services.slots.validators import parse_date_param, validate_pattern_request


router = APIRouter(tags=["slots"])


@router.get("/doctors/{doctor_id}/slots", response_model=DataResponse[list[AvailableSlot]])
def get_doctor_slots(
    target_date: str | None = Query(None, alias="date"),
    doctor: Doctors = Depends(get_doctor),
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
    config: SlotsConfig = Depends(get_config),
):
    """Get available slots of a doctor on a date."""
    day = parse_date_param(target_date, config)
    slots = get_available_slots(db, doctor.id, day, config, redis)
    return {"data": slots}


@router.post(
    "/doctors/{doctor_id}/slots",
    response_model=DataResponse[PatternRead],
    status_code=status.HTTP_201_CREATED,
)
def create_doctor_slots(
    data: PatternCreate,
    doctor: Doctors = Depends(get_doctor),
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
    config: SlotsConfig = Depends(get_config),
):
    """Create a recurring availability pattern for a doctor."""
    req = validate_pattern_request(
        start_time=data.start_time,
        end_time=data.end_time,
        duration=data.duration,
        recurrence_type=data.recurrence.type,
        week_days=data.recurrence.week_days,
        end_date=data.recurrence.end_date,
        config=config,
    )

    obj = RecurringPatterns(
        doctor_id=doctor.id,
        start_time=to_storage(req.start_time, config),
        end_time=to_storage(req.end_time, config),
        duration=req.duration,
        type=req.type,
        week_days=json.dumps(req.week_days),
        start_date=to_storage(req.start_time, config),
        end_date=to_storage(req.end_date, config) if req.end_date else None,
        is_active=1,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    # A new pattern can add slots to any future date
    invalidate_doctor_cache(redis, doctor.id, config)

    return {
        "message": "Recurring pattern created successfully",
        "data": PatternRead.model_validate(obj),
    }


@router.post(
    "/doctors/{doctor_id}/slots/invalidate",
    response_model=DataResponse[SlotsInvalidateResponse],
)
def invalidate_doctor_slots(
    doctor: Doctors = Depends(get_doctor),
    redis: Redis = Depends(get_redis),
    config: SlotsConfig = Depends(get_config),
):
    """Manually invalidate slots cache for a doctor (admin endpoint)."""
    deleted = invalidate_doctor_cache(redis, doctor.id, config)
    return {"data": {"doctor_id": doctor.id, "deleted_keys": deleted}}


@router.post(
    "/slots/{slot_id}/book",
    response_model=DataResponse[BookingRead],
    status_code=status.HTTP_201_CREATED,
)
def book_doctor_slot(
    slot_id: str,
    data: BookingCreate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
    config: SlotsConfig = Depends(get_config),
):
    """Book a slot by numeric id or virtual id."""
    booking = book_slot(db, slot_id, data.patient_id, data.reason, config, redis)
    return {
        "message": "Slot booked successfully",
        "data": BookingRead.model_validate(booking),
    }
