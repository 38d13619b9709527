# backend/medslots/services/slots/matcher.py
"""
Pattern matching: which recurring patterns apply to a calendar date.

Rules (dates compared in the process timezone):
✓ one-time → start_date falls on the target date
✓ daily    → start_date <= date and (no end_date or end_date >= date)
✓ weekly   → daily bounds and date's weekday code in week_days

Weekday codes are ISO: Monday = 1 ... Sunday = 7.
Inactive patterns never apply.
"""

import json
from datetime import date
from typing import Iterable

from .config import SlotsConfig, get_slots_config, from_storage


PATTERN_ONE_TIME = "one-time"
PATTERN_DAILY = "daily"
PATTERN_WEEKLY = "weekly"
PATTERN_TYPES = (PATTERN_ONE_TIME, PATTERN_DAILY, PATTERN_WEEKLY)

MONDAY = 1
SUNDAY = 7


def weekday_code(target_date: date) -> int:
    """Weekday code of a date: 1 = Monday ... 7 = Sunday."""
    return target_date.isoweekday()


def pattern_week_days(pattern) -> list[int]:
    """Decode the stored week_days list of a pattern."""
    raw = pattern.week_days
    if isinstance(raw, list):
        return raw
    try:
        days = json.loads(raw) if raw else []
    except json.JSONDecodeError:
        days = []
    return [int(d) for d in days] if isinstance(days, list) else []


def pattern_applies(
    pattern,
    target_date: date,
    config: SlotsConfig | None = None,
) -> bool:
    """Check whether a single pattern yields slots on target_date."""
    config = config or get_slots_config()

    if not pattern.is_active:
        return False

    start_date = config.local_date(from_storage(pattern.start_date))

    if pattern.type == PATTERN_ONE_TIME:
        return start_date == target_date

    if pattern.type not in (PATTERN_DAILY, PATTERN_WEEKLY):
        return False

    if start_date > target_date:
        return False
    if pattern.end_date:
        end_date = config.local_date(from_storage(pattern.end_date))
        if end_date < target_date:
            return False

    if pattern.type == PATTERN_WEEKLY:
        return weekday_code(target_date) in pattern_week_days(pattern)

    return True


def select_applicable_patterns(
    patterns: Iterable,
    target_date: date,
    config: SlotsConfig | None = None,
) -> list:
    """Return the subset of patterns applicable to target_date, order preserved."""
    config = config or get_slots_config()
    return [p for p in patterns if pattern_applies(p, target_date, config)]
