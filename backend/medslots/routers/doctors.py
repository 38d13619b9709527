# backend/medslots/routers/doctors.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from ..database import get_db
from ..dependencies import get_config, get_doctor
from ..models.tables import Bookings as DBBookings, Doctors as DBDoctors, Slots as DBSlots
from ..schemas.bookings import DoctorBookingRead
from ..schemas.common import DataResponse
from ..schemas.doctors import DoctorCreate, DoctorRead
from ..services import uniqueness
from ..services.slots import SlotsConfig
from ..services.slots.config import to_storage
from ..services.slots.validators import parse_date_range

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get("", response_model=DataResponse[list[DoctorRead]])
def list_doctors(db: Session = Depends(get_db)):
    doctors = db.query(DBDoctors).order_by(DBDoctors.id).all()
    return {"data": [DoctorRead.model_validate(d) for d in doctors]}


@router.post("", response_model=DataResponse[DoctorRead], status_code=status.HTTP_201_CREATED)
def create_doctor(
    data: DoctorCreate,
    db: Session = Depends(get_db),
):
    uniqueness.doctor_username.ensure_unique(db, data.username)
    uniqueness.doctor_email.ensure_unique(db, data.email)

    obj = DBDoctors(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return {
        "message": "Doctor created successfully",
        "data": DoctorRead.model_validate(obj),
    }


@router.get("/{doctor_id}/bookings", response_model=DataResponse[list[DoctorBookingRead]])
def list_doctor_bookings(
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    doctor: DBDoctors = Depends(get_doctor),
    db: Session = Depends(get_db),
    config: SlotsConfig = Depends(get_config),
):
    """Bookings of a doctor whose slot starts within [start_date, end_date]."""
    first_day, last_day = parse_date_range(start_date, end_date, config)
    range_start, _ = config.day_bounds(first_day)
    _, range_end = config.day_bounds(last_day)

    bookings = (
        db.query(DBBookings)
        .join(DBSlots, DBBookings.slot_id == DBSlots.id)
        .options(joinedload(DBBookings.slot), joinedload(DBBookings.patient))
        .filter(
            DBBookings.doctor_id == doctor.id,
            DBSlots.start_time >= to_storage(range_start),
            DBSlots.start_time < to_storage(range_end),
        )
        .order_by(DBSlots.start_time)
        .all()
    )
    return {"data": [DoctorBookingRead.model_validate(b) for b in bookings]}
