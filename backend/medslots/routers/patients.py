# backend/medslots/routers/patients.py
# DELETE = hard, refused while the patient has bookings

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from ..database import get_db
from ..errors import ConflictError, NotFoundError
from ..models.tables import Bookings as DBBookings, Patients as DBPatients
from ..schemas.common import DataResponse, MessageResponse
from ..schemas.patients import PatientCreate, PatientDetail, PatientRead
from ..services import uniqueness

router = APIRouter(prefix="/patients", tags=["patients"])


def _get_patient(db: Session, patient_id: int, with_bookings: bool = False) -> DBPatients:
    query = db.query(DBPatients).filter(DBPatients.id == patient_id)
    if with_bookings:
        query = query.options(selectinload(DBPatients.bookings).selectinload(DBBookings.slot))
    obj = query.first()
    if not obj:
        raise NotFoundError("Patient not found")
    return obj


@router.get("", response_model=DataResponse[list[PatientRead]])
def list_patients(db: Session = Depends(get_db)):
    patients = db.query(DBPatients).order_by(DBPatients.id).all()
    return {"data": [PatientRead.model_validate(p) for p in patients]}


@router.get("/{patient_id}", response_model=DataResponse[PatientDetail])
def get_patient(patient_id: int, db: Session = Depends(get_db)):
    obj = _get_patient(db, patient_id, with_bookings=True)
    return {"data": PatientDetail.model_validate(obj)}


@router.post("", response_model=DataResponse[PatientRead], status_code=status.HTTP_201_CREATED)
def create_patient(
    data: PatientCreate,
    db: Session = Depends(get_db),
):
    uniqueness.patient_email.ensure_unique(db, data.email)

    obj = DBPatients(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return {
        "message": "Patient created successfully",
        "data": PatientRead.model_validate(obj),
    }


@router.put("/{patient_id}", response_model=DataResponse[PatientRead])
def update_patient(
    patient_id: int,
    data: PatientCreate,
    db: Session = Depends(get_db),
):
    obj = _get_patient(db, patient_id)
    uniqueness.patient_email.ensure_unique(db, data.email, exclude_id=obj.id)

    for field, value in data.model_dump().items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return {
        "message": "Patient updated successfully",
        "data": PatientRead.model_validate(obj),
    }


@router.delete("/{patient_id}", response_model=MessageResponse)
def delete_patient(patient_id: int, db: Session = Depends(get_db)):
    obj = _get_patient(db, patient_id, with_bookings=True)
    if obj.bookings:
        raise ConflictError("Cannot delete patient with existing bookings")

    db.delete(obj)
    db.commit()
    return {"message": "Patient deleted successfully"}
