# backend/medslots/services/slots/booking.py
"""
Booking resolution.

Real slot:    load → must be available → patient → CAS status + booking
Virtual slot: parse → pattern → offered by it? → existing row for (doctor, start, end)?
                booked    → conflict
                available → CAS status + booking
                none      → insert booked slot + booking

Double booking is prevented by the store, not by in-process locks:
- slots UNIQUE(doctor_id, start_time, end_time) stops a second row
- UPDATE ... WHERE status = 'available' stops a second status flip
- bookings UNIQUE(slot_id) stops a second booking row
The loser of a race gets ConflictError. The cache entry of the slot's date
is invalidated once the transaction commits.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta

from redis import Redis
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import BadRequestError, ConflictError, NotFoundError
from ...models.tables import Bookings, Patients, RecurringPatterns, Slots
from .calculator import SLOT_STATUS_AVAILABLE, SLOT_STATUS_BOOKED, generate_pattern_slots
from .config import SlotsConfig, get_slots_config, from_storage, to_storage
from .invalidator import invalidate_doctor_day
from .matcher import pattern_applies, weekday_code
from .slot_ref import RealSlotRef, SlotRef, VirtualSlotRef, parse_slot_ref

logger = logging.getLogger(__name__)


def book_slot(
    db: Session,
    slot_id: str,
    patient_id: int,
    reason: str | None = None,
    config: SlotsConfig | None = None,
    redis: Redis | None = None,
) -> Bookings:
    """
    Book a slot by its identifier (numeric key or virtual id).

    Raises:
        BadRequestError: malformed identifier or slot time, or a time the pattern does not offer
        NotFoundError: slot, pattern or patient does not exist
        ConflictError: slot not available / already booked / race lost
    """
    config = config or get_slots_config()
    ref = parse_slot_ref(slot_id, config)
    return resolve_booking(db, ref, patient_id, reason, config, redis)


def resolve_booking(
    db: Session,
    ref: SlotRef,
    patient_id: int,
    reason: str | None = None,
    config: SlotsConfig | None = None,
    redis: Redis | None = None,
) -> Bookings:
    config = config or get_slots_config()
    if isinstance(ref, VirtualSlotRef):
        return book_virtual_slot(db, ref, patient_id, reason, config, redis)
    return book_real_slot(db, ref, patient_id, reason, config, redis)


def book_real_slot(
    db: Session,
    ref: RealSlotRef,
    patient_id: int,
    reason: str | None = None,
    config: SlotsConfig | None = None,
    redis: Redis | None = None,
) -> Bookings:
    """Book a persisted slot row."""
    config = config or get_slots_config()

    slot = db.get(Slots, ref.slot_id)
    if not slot:
        raise NotFoundError("Slot not found")
    if slot.status != SLOT_STATUS_AVAILABLE:
        raise ConflictError("Slot is not available")

    _ensure_patient(db, patient_id)

    slot_key, doctor_id, start_time = slot.id, slot.doctor_id, slot.start_time
    with _booking_transaction(db, slot_label=str(slot_key)):
        _claim_slot(db, slot_key)
        booking = _create_booking(db, slot_key, patient_id, doctor_id, reason)

    _after_commit(db, booking, doctor_id, start_time, config, redis)
    return booking


def book_virtual_slot(
    db: Session,
    ref: VirtualSlotRef,
    patient_id: int,
    reason: str | None = None,
    config: SlotsConfig | None = None,
    redis: Redis | None = None,
) -> Bookings:
    """Book an interval computed from a recurring pattern, persisting it on first booking."""
    config = config or get_slots_config()

    pattern = db.get(RecurringPatterns, ref.pattern_id)
    if not pattern:
        raise NotFoundError("Pattern not found")

    if not _pattern_offers(pattern, ref.start, config):
        raise BadRequestError("Slot time is not offered by the pattern")

    doctor_id = pattern.doctor_id
    start_time = to_storage(ref.start, config)
    end_time = to_storage(ref.start + timedelta(minutes=pattern.duration), config)

    existing = _find_existing_slot(db, doctor_id, start_time, end_time)
    if existing is not None and existing.status == SLOT_STATUS_BOOKED:
        raise ConflictError("Slot is already booked")

    _ensure_patient(db, patient_id)

    label = f"{pattern.id}@{start_time}"
    with _booking_transaction(db, slot_label=label):
        if existing is not None:
            _claim_slot(db, existing.id)
            slot = existing
        else:
            slot = Slots(
                doctor_id=doctor_id,
                pattern_id=pattern.id,
                start_time=start_time,
                end_time=end_time,
                status=SLOT_STATUS_BOOKED,
            )
            db.add(slot)
            db.flush()
        booking = _create_booking(db, slot.id, patient_id, doctor_id, reason)

    _after_commit(db, booking, doctor_id, start_time, config, redis)
    return booking


# ── Helpers ──────────────────────────────────────────────────────────────


@contextmanager
def _booking_transaction(db: Session, slot_label: str):
    """Run the body atomically; uniqueness violations mean the race was lost."""
    try:
        yield
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Booking conflict for slot {slot_label}: {e.orig}")
        raise ConflictError("Slot is already booked") from e
    except ConflictError:
        db.rollback()
        logger.info(f"Booking conflict for slot {slot_label}: status already changed")
        raise
    except Exception:
        db.rollback()
        raise


def _claim_slot(db: Session, slot_id: int) -> None:
    """Compare-and-set a slot from available to booked."""
    result = db.execute(
        update(Slots)
        .where(Slots.id == slot_id, Slots.status == SLOT_STATUS_AVAILABLE)
        .values(status=SLOT_STATUS_BOOKED)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ConflictError("Slot is already booked")


def _create_booking(
    db: Session,
    slot_id: int,
    patient_id: int,
    doctor_id: int,
    reason: str | None,
) -> Bookings:
    booking = Bookings(
        slot_id=slot_id,
        patient_id=patient_id,
        doctor_id=doctor_id,
        reason=reason or "",
    )
    db.add(booking)
    db.flush()
    return booking


def _after_commit(
    db: Session,
    booking: Bookings,
    doctor_id: int,
    start_time: str,
    config: SlotsConfig,
    redis: Redis | None,
) -> None:
    # Invalidate first: it must run for every committed booking
    if redis is not None:
        invalidate_doctor_day(redis, doctor_id, from_storage(start_time), config)

    db.refresh(booking)
    logger.info(
        f"Slot {booking.slot_id} booked: booking={booking.id} patient={booking.patient_id}"
    )


def _ensure_patient(db: Session, patient_id: int) -> Patients:
    patient = db.get(Patients, patient_id)
    if not patient:
        raise NotFoundError("Patient not found")
    return patient


def _find_existing_slot(
    db: Session,
    doctor_id: int,
    start_time: str,
    end_time: str,
) -> Slots | None:
    return (
        db.query(Slots)
        .filter(
            Slots.doctor_id == doctor_id,
            Slots.start_time == start_time,
            Slots.end_time == end_time,
        )
        .first()
    )


def _pattern_offers(pattern: RecurringPatterns, start: datetime, config: SlotsConfig) -> bool:
    """Whether the pattern materializes a slot starting at `start` (booked or not)."""
    day = config.local_date(start)
    if not pattern_applies(pattern, day, config):
        return False
    slots = generate_pattern_slots(pattern, config.day_start(day), set(), weekday_code(day), config)
    return config.format_instant(start) in {s["start_time"] for s in slots}
