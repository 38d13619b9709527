# backend/medslots/services/slots/availability.py
"""
Read path: available slots of a doctor on a date, served from the Redis
cache when present, otherwise computed and stored.

The doctor's cache generation is read before computing and the result is
stored only if it is unchanged, so an invalidation that lands while the
slots are being computed is never overwritten.
"""

import logging
from datetime import date

from redis import Redis, RedisError
from sqlalchemy.orm import Session

from .calculator import calculate_day_slots
from .config import SlotsConfig, get_slots_config
from .redis_store import AvailableSlotsCache

logger = logging.getLogger(__name__)


def get_available_slots(
    db: Session,
    doctor_id: int,
    target_date: date,
    config: SlotsConfig | None = None,
    redis: Redis | None = None,
) -> list[dict]:
    """
    Get available slots for a doctor on a date.

    Cache errors are treated as a miss; the result is always computed from
    the store in that case.
    """
    config = config or get_slots_config()
    date_string = config.date_string(target_date)

    if redis is None:
        return calculate_day_slots(db, doctor_id, target_date, config)

    store = AvailableSlotsCache(redis, config)

    try:
        cached = store.get(doctor_id, date_string)
        generation = store.generation(doctor_id) if cached is None else None
    except RedisError as e:
        logger.warning(f"Slots cache read failed for doctor={doctor_id} date={date_string}: {e}")
        cached, generation = None, None

    if cached is not None:
        return cached

    # Cache miss: calculate and store
    logger.debug("Slots cache miss for doctor=%s date=%s", doctor_id, date_string)
    slots = calculate_day_slots(db, doctor_id, target_date, config)

    if generation is None:
        return slots

    try:
        stored = store.set_if_generation(doctor_id, date_string, slots, generation)
    except RedisError as e:
        logger.warning(f"Slots cache write failed for doctor={doctor_id} date={date_string}: {e}")
    else:
        if not stored:
            logger.debug(
                "Slots cache write skipped for doctor=%s date=%s: invalidated while computing",
                doctor_id,
                date_string,
            )

    return slots
