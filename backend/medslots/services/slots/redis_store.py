# backend/medslots/services/slots/redis_store.py
"""
Redis storage for computed available slots.

Key format: available_slots:{doctor_id}:{yyyy-MM-dd}
Value: JSON array of the already sorted, already filtered slot dicts.
TTL: SlotsConfig.cache_ttl_seconds (30 days by default).

A missing key means "must recompute", never "no slots". An empty day is
stored as "[]".

Generation key: available_slots_generation:{doctor_id}
Every invalidation increments it before deleting. A computed list is only
stored if the generation is still the one read before computing, so a read
racing a booking cannot put the pre-booking list back.
"""

import json

from redis import Redis, WatchError

from .config import SlotsConfig, get_slots_config


class AvailableSlotsCache:
    """Redis wrapper for per-(doctor, date) available slot lists."""

    KEY_PREFIX = "available_slots"
    GENERATION_PREFIX = "available_slots_generation"

    def __init__(self, redis: Redis, config: SlotsConfig | None = None):
        self.redis = redis
        self.config = config or get_slots_config()

    def _key(self, doctor_id: int, date_string: str) -> str:
        return f"{self.KEY_PREFIX}:{doctor_id}:{date_string}"

    def _doctor_pattern(self, doctor_id: int) -> str:
        return f"{self.KEY_PREFIX}:{doctor_id}:*"

    def _generation_key(self, doctor_id: int) -> str:
        return f"{self.GENERATION_PREFIX}:{doctor_id}"

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, doctor_id: int, date_string: str) -> list[dict] | None:
        """
        Get cached slots for a day.

        Returns:
            Slot list, or None on cache miss (or an unreadable entry).
        """
        raw = self.redis.get(self._key(doctor_id, date_string))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            slots = json.loads(raw)
        except json.JSONDecodeError:
            return None
        return slots if isinstance(slots, list) else None

    def generation(self, doctor_id: int) -> int:
        """Current invalidation generation of a doctor (0 if never invalidated)."""
        return _parse_generation(self.redis.get(self._generation_key(doctor_id)))

    # ── Write ────────────────────────────────────────────────────────────

    def set(
        self,
        doctor_id: int,
        date_string: str,
        slots: list[dict],
        ttl: int | None = None,
    ) -> None:
        """Store the computed slot list for a day."""
        self.redis.set(
            self._key(doctor_id, date_string),
            json.dumps(slots),
            ex=ttl or self.config.cache_ttl_seconds,
        )

    def set_if_generation(
        self,
        doctor_id: int,
        date_string: str,
        slots: list[dict],
        generation: int,
        ttl: int | None = None,
    ) -> bool:
        """
        Store the slot list only if no invalidation happened since `generation`
        was read.

        Returns:
            True if stored, False if the list was computed from stale data.
        """
        generation_key = self._generation_key(doctor_id)
        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(generation_key)
                if _parse_generation(pipe.get(generation_key)) != generation:
                    return False
                pipe.multi()
                pipe.set(
                    self._key(doctor_id, date_string),
                    json.dumps(slots),
                    ex=ttl or self.config.cache_ttl_seconds,
                )
                pipe.execute()
            except WatchError:
                return False
        return True

    # ── Delete ───────────────────────────────────────────────────────────

    def invalidate(self, doctor_id: int, date_string: str) -> int:
        """Delete the cached entry of one day. Returns number of deleted keys."""
        # Bump first: a write checked after this fails, one checked before is deleted
        self.redis.incr(self._generation_key(doctor_id))
        return self.redis.delete(self._key(doctor_id, date_string))

    def invalidate_all(self, doctor_id: int) -> int:
        """Delete every cached day of a doctor. Returns number of deleted keys."""
        self.redis.incr(self._generation_key(doctor_id))
        keys = list(self.redis.scan_iter(match=self._doctor_pattern(doctor_id)))
        if not keys:
            return 0
        return self.redis.delete(*keys)


def _parse_generation(raw) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bytes):
        raw = raw.decode()
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0
