# backend/medslots/services/uniqueness.py
"""
Uniqueness checks for create/update payloads.

Each checker is bound to one mapped column, so the query is built from the
entity class itself. The database UNIQUE constraints remain the final guard.
"""

from sqlalchemy.orm import Session

from ..errors import BadRequestError
from ..models.tables import Doctors, Patients


class UniquenessChecker:
    def __init__(self, model, column, field_name: str):
        self.model = model
        self.column = column
        self.field_name = field_name

    def is_taken(self, db: Session, value, exclude_id: int | None = None) -> bool:
        query = db.query(self.model.id).filter(self.column == value)
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query.first() is not None

    def ensure_unique(self, db: Session, value, exclude_id: int | None = None) -> None:
        if self.is_taken(db, value, exclude_id):
            raise BadRequestError(f"The {self.field_name} field must be unique")


doctor_username = UniquenessChecker(Doctors, Doctors.username, "username")
doctor_email = UniquenessChecker(Doctors, Doctors.email, "email")
patient_email = UniquenessChecker(Patients, Patients.email, "email")
