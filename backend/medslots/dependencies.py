# backend/medslots/dependencies.py

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .database import get_db
from .errors import NotFoundError
from .models.tables import Doctors
from .services.slots.config import SlotsConfig


def get_config(request: Request) -> SlotsConfig:
    return request.app.state.slots_config


def get_doctor(doctor_id: int, db: Session = Depends(get_db)) -> Doctors:
    """Path dependency: the doctor addressed by {doctor_id}."""
    doctor = db.get(Doctors, doctor_id)
    if not doctor:
        raise NotFoundError("Doctor not found")
    return doctor
