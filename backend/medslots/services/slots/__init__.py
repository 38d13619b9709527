# backend/medslots/services/slots/__init__.py
"""
Slots module.

Pattern matching → materialization (calculator) → Redis cache per
(doctor, date) → booking resolution with targeted invalidation.
"""

from .config import SlotsConfig, get_slots_config
from .matcher import select_applicable_patterns, weekday_code
from .calculator import calculate_day_slots, generate_pattern_slots
from .redis_store import AvailableSlotsCache
from .invalidator import invalidate_doctor_cache, invalidate_doctor_day
from .availability import get_available_slots
from .booking import book_slot

__all__ = [
    "SlotsConfig",
    "get_slots_config",
    "select_applicable_patterns",
    "weekday_code",
    "calculate_day_slots",
    "generate_pattern_slots",
    "AvailableSlotsCache",
    "invalidate_doctor_cache",
    "invalidate_doctor_day",
    "get_available_slots",
    "book_slot",
]
