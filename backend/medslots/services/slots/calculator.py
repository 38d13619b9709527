# backend/medslots/services/slots/calculator.py
"""
Slot materialization: expand a doctor's recurring patterns into the concrete
bookable slots of one calendar day.

Produces per-slot data (JSON-ready, cached verbatim):
  {virtual_id, doctor_id, pattern_id, start_time, end_time, status}

Contains:
✓ Active patterns applicable to the date (one-time / daily / weekly)
✓ Fixed-duration intervals inside each pattern's time-of-day window
✓ Exclusion of intervals whose start already has a booked slot row

Does NOT contain:
✗ Overlap resolution between patterns (union of all free slots)
✗ Partial trailing intervals (window end is a hard stop)
"""

from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from .config import SlotsConfig, get_slots_config, from_storage, to_storage
from .matcher import PATTERN_WEEKLY, pattern_week_days, select_applicable_patterns, weekday_code
from .slot_ref import format_virtual_id


SLOT_STATUS_AVAILABLE = "available"
SLOT_STATUS_BOOKED = "booked"


def generate_pattern_slots(
    pattern,
    day_start: datetime,
    booked_starts: set[str],
    day_of_week: int,
    config: SlotsConfig | None = None,
) -> list[dict]:
    """
    Expand one pattern into the free slots of the day starting at day_start.

    Args:
        pattern: RecurringPatterns row (or any object with the same attributes)
        day_start: Midnight of the target day in the process timezone
        booked_starts: ISO start instants (config.format_instant) already booked
        day_of_week: Weekday code of the day, 1 = Monday ... 7 = Sunday

    Returns:
        Available virtual slots in ascending start order.
    """
    config = config or get_slots_config()

    if not pattern.is_active:
        return []

    if pattern.type == PATTERN_WEEKLY and day_of_week not in pattern_week_days(pattern):
        return []

    # Only the wall-clock part of the pattern window is used
    pattern_start = config.localize(from_storage(pattern.start_time))
    pattern_end = config.localize(from_storage(pattern.end_time))
    day_start = config.localize(day_start)

    window_start = day_start.replace(
        hour=pattern_start.hour, minute=pattern_start.minute, second=0, microsecond=0
    )
    window_end = day_start.replace(
        hour=pattern_end.hour, minute=pattern_end.minute, second=0, microsecond=0
    )

    # Step in UTC so every increment is exactly `duration` minutes
    step = timedelta(minutes=pattern.duration)
    current = window_start.astimezone(timezone.utc)
    window_end_utc = window_end.astimezone(timezone.utc)

    slots: list[dict] = []
    while current < window_end_utc:
        current_end = current + step
        if current_end > window_end_utc:
            break

        start_iso = config.format_instant(current)
        if start_iso not in booked_starts:
            slots.append({
                "virtual_id": format_virtual_id(pattern.id, current, config),
                "doctor_id": pattern.doctor_id,
                "pattern_id": pattern.id,
                "start_time": start_iso,
                "end_time": config.format_instant(current_end),
                "status": SLOT_STATUS_AVAILABLE,
            })

        current = current_end

    return slots


def calculate_day_slots(
    db: Session,
    doctor_id: int,
    target_date: date,
    config: SlotsConfig | None = None,
) -> list[dict]:
    """
    Calculate available slots for a doctor on a specific date.

    Returns:
        Union of every applicable pattern's free slots, sorted by start time.
        Empty list = no slots.
    """
    config = config or get_slots_config()

    # Step 1: Patterns that apply to the date
    patterns = select_applicable_patterns(
        _get_doctor_patterns(db, doctor_id), target_date, config
    )
    if not patterns:
        return []

    # Step 2: Already booked starts on the date
    booked_starts = _get_booked_starts(db, doctor_id, target_date, config)

    # Step 3: Expand and merge
    day_start = config.day_start(target_date)
    day_of_week = weekday_code(target_date)

    slots: list[dict] = []
    for pattern in patterns:
        slots.extend(
            generate_pattern_slots(pattern, day_start, booked_starts, day_of_week, config)
        )

    slots.sort(key=lambda s: datetime.fromisoformat(s["start_time"]))
    return slots


# ── Database helpers ─────────────────────────────────────────────────────


def _get_doctor_patterns(db: Session, doctor_id: int) -> list:
    """Get active recurring patterns of a doctor."""
    from ...models.tables import RecurringPatterns

    return (
        db.query(RecurringPatterns)
        .filter(
            RecurringPatterns.doctor_id == doctor_id,
            RecurringPatterns.is_active == 1,
        )
        .order_by(RecurringPatterns.id)
        .all()
    )


def _get_booked_starts(
    db: Session,
    doctor_id: int,
    target_date: date,
    config: SlotsConfig,
) -> set[str]:
    """Get ISO start instants of booked slots for a doctor on a date."""
    from ...models.tables import Slots

    day_start, day_end = config.day_bounds(target_date)

    rows = (
        db.query(Slots.start_time)
        .filter(
            Slots.doctor_id == doctor_id,
            Slots.status == SLOT_STATUS_BOOKED,
            Slots.start_time >= to_storage(day_start),
            Slots.start_time < to_storage(day_end),
        )
        .all()
    )
    return {config.format_instant(from_storage(start_time)) for (start_time,) in rows}
