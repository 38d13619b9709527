"""Shared test fixtures for the slots service."""

import json

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from medslots.config import Settings
from medslots.database import create_db_engine, create_session_factory
from medslots.main import create_app
from medslots.models.tables import Base, Doctors, Patients, RecurringPatterns, Slots
from medslots.services.slots.config import SlotsConfig, to_storage


# 2025-01-13 is a Monday
MONDAY = "2025-01-13"
TUESDAY = "2025-01-14"
WEDNESDAY = "2025-01-15"


@pytest.fixture
def config() -> SlotsConfig:
    return SlotsConfig(timezone="UTC")


@pytest.fixture
def engine():
    """In-memory database shared by every session of a test."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """File database: each session gets its own connection and transaction."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'slots.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def app(redis, session_factory):
    settings = Settings(
        database_url="sqlite://",
        redis_url="redis://localhost:6379/15",
        timezone="UTC",
        auto_create_tables=False,
    )
    return create_app(settings=settings, redis=redis, session_factory=session_factory)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


# ── Factories ────────────────────────────────────────────────────────────


@pytest.fixture
def make_doctor(db):
    counter = {"n": 0}

    def _make(**overrides) -> Doctors:
        counter["n"] += 1
        n = counter["n"]
        doctor = Doctors(
            username=overrides.get("username", f"doctor{n}"),
            first_name=overrides.get("first_name", "Gregory"),
            last_name=overrides.get("last_name", f"House{n}"),
            email=overrides.get("email", f"doctor{n}@clinic.test"),
        )
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    return _make


@pytest.fixture
def make_patient(db):
    counter = {"n": 0}

    def _make(**overrides) -> Patients:
        counter["n"] += 1
        n = counter["n"]
        patient = Patients(
            first_name=overrides.get("first_name", "Jane"),
            last_name=overrides.get("last_name", f"Doe{n}"),
            email=overrides.get("email", f"patient{n}@mail.test"),
            phone=overrides.get("phone"),
        )
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient

    return _make


def build_pattern(
    doctor_id: int = 1,
    start: str = f"{MONDAY}T09:00:00+00:00",
    end: str = f"{MONDAY}T17:00:00+00:00",
    duration: int = 30,
    type: str = "daily",
    week_days: list[int] | None = None,
    end_date: str | None = None,
    is_active: bool = True,
    id: int | None = None,
) -> RecurringPatterns:
    """Transient pattern row (not added to any session)."""
    from datetime import datetime

    start_dt = datetime.fromisoformat(start)
    return RecurringPatterns(
        id=id,
        doctor_id=doctor_id,
        start_time=to_storage(start_dt),
        end_time=to_storage(datetime.fromisoformat(end)),
        duration=duration,
        type=type,
        week_days=json.dumps(week_days or []),
        start_date=to_storage(start_dt),
        end_date=to_storage(datetime.fromisoformat(end_date)) if end_date else None,
        is_active=1 if is_active else 0,
    )


@pytest.fixture
def make_pattern(db):
    def _make(doctor: Doctors, **kwargs) -> RecurringPatterns:
        pattern = build_pattern(doctor_id=doctor.id, **kwargs)
        db.add(pattern)
        db.commit()
        db.refresh(pattern)
        return pattern

    return _make


@pytest.fixture
def make_slot(db):
    def _make(doctor: Doctors, start: str, end: str, status: str = "available", pattern=None) -> Slots:
        from datetime import datetime

        slot = Slots(
            doctor_id=doctor.id,
            pattern_id=pattern.id if pattern else None,
            start_time=to_storage(datetime.fromisoformat(start)),
            end_time=to_storage(datetime.fromisoformat(end)),
            status=status,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make
