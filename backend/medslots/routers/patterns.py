# backend/medslots/routers/patterns.py
# PATCH = is_active only, DELETE = hard; both drop the doctor's cached days

from fastapi import APIRouter, Depends
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_config, get_doctor
from ..errors import NotFoundError
from ..models.tables import Doctors, RecurringPatterns as DBPatterns
from ..redis_client import get_redis
from ..schemas.common import DataResponse, MessageResponse
from ..schemas.patterns import PatternRead, PatternUpdate
from ..services.slots import SlotsConfig, invalidate_doctor_cache

router = APIRouter(prefix="/doctors/{doctor_id}/patterns", tags=["patterns"])


def _get_doctor_pattern(db: Session, doctor: Doctors, pattern_id: int) -> DBPatterns:
    obj = db.get(DBPatterns, pattern_id)
    if not obj or obj.doctor_id != doctor.id:
        raise NotFoundError("Pattern not found")
    return obj


@router.get("", response_model=DataResponse[list[PatternRead]])
def list_patterns(
    doctor: Doctors = Depends(get_doctor),
    db: Session = Depends(get_db),
):
    patterns = (
        db.query(DBPatterns)
        .filter(DBPatterns.doctor_id == doctor.id, DBPatterns.is_active == 1)
        .order_by(DBPatterns.id)
        .all()
    )
    return {"data": [PatternRead.model_validate(p) for p in patterns]}


@router.patch("/{pattern_id}", response_model=DataResponse[PatternRead])
def update_pattern(
    pattern_id: int,
    data: PatternUpdate,
    doctor: Doctors = Depends(get_doctor),
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
    config: SlotsConfig = Depends(get_config),
):
    obj = _get_doctor_pattern(db, doctor, pattern_id)

    obj.is_active = 1 if data.is_active else 0
    db.commit()
    db.refresh(obj)

    invalidate_doctor_cache(redis, doctor.id, config)

    state = "activated" if data.is_active else "deactivated"
    return {
        "message": f"Pattern {state} successfully",
        "data": PatternRead.model_validate(obj),
    }


@router.delete("/{pattern_id}", response_model=MessageResponse)
def delete_pattern(
    pattern_id: int,
    doctor: Doctors = Depends(get_doctor),
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
    config: SlotsConfig = Depends(get_config),
):
    obj = _get_doctor_pattern(db, doctor, pattern_id)
    db.delete(obj)
    db.commit()

    invalidate_doctor_cache(redis, doctor.id, config)

    return {"message": "Pattern deleted successfully"}
