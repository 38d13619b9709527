# backend/medslots/services/slots/invalidator.py
"""
Cache invalidation for doctor slots.

Triggers:
✓ Booking committed → invalidate the booked slot's date
✓ Pattern created / toggled / deleted → invalidate all dates of the doctor

Invalidation is best-effort: a Redis failure is logged and swallowed, the
stale entry expires with its TTL.
"""

import logging
from datetime import date, datetime

from redis import Redis, RedisError

from .config import SlotsConfig, get_slots_config
from .redis_store import AvailableSlotsCache

logger = logging.getLogger(__name__)


def invalidate_doctor_day(
    redis: Redis,
    doctor_id: int,
    day: date | datetime | str,
    config: SlotsConfig | None = None,
) -> int:
    """
    Invalidate the cached slots of one doctor on one date.

    Args:
        redis: Redis client
        doctor_id: Doctor ID
        day: Date, instant (its date in the process timezone) or yyyy-MM-dd

    Returns:
        Number of deleted cache keys
    """
    config = config or get_slots_config()
    date_string = day if isinstance(day, str) else config.date_string(day)

    try:
        return AvailableSlotsCache(redis, config).invalidate(doctor_id, date_string)
    except RedisError as e:
        logger.warning(
            f"Failed to invalidate slots cache for doctor={doctor_id} date={date_string}: {e}"
        )
        return 0


def invalidate_doctor_cache(
    redis: Redis,
    doctor_id: int,
    config: SlotsConfig | None = None,
) -> int:
    """
    Invalidate every cached date of a doctor.

    Returns:
        Number of deleted cache keys
    """
    try:
        return AvailableSlotsCache(redis, config).invalidate_all(doctor_id)
    except RedisError as e:
        logger.warning(f"Failed to invalidate slots cache for doctor={doctor_id}: {e}")
        return 0
