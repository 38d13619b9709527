# backend/medslots/services/slots/slot_ref.py
"""
Slot references.

A bookable interval is addressed in one of two ways:
- Real: the numeric key of a persisted slot row ("42")
- Virtual: "{pattern_id}-{ISO start instant}" for an interval computed from a
  pattern that was never persisted ("7-2025-01-15T09:00:00+00:00")

The identifier is parsed once, at the booking entry point.
"""

from dataclasses import dataclass
from datetime import datetime

from ...errors import BadRequestError
from .config import SlotsConfig, get_slots_config


VIRTUAL_ID_SEPARATOR = "-"


@dataclass(frozen=True)
class RealSlotRef:
    slot_id: int


@dataclass(frozen=True)
class VirtualSlotRef:
    pattern_id: int
    start: datetime  # aware, process timezone


SlotRef = RealSlotRef | VirtualSlotRef


def format_virtual_id(
    pattern_id: int,
    start: datetime,
    config: SlotsConfig | None = None,
) -> str:
    config = config or get_slots_config()
    return f"{pattern_id}{VIRTUAL_ID_SEPARATOR}{config.format_instant(start)}"


def parse_slot_ref(slot_id: str, config: SlotsConfig | None = None) -> SlotRef:
    """
    Parse a slot identifier into a real or virtual reference.

    Raises:
        BadRequestError: identifier is neither a slot key nor a valid virtual id
    """
    config = config or get_slots_config()
    slot_id = slot_id.strip()

    if VIRTUAL_ID_SEPARATOR not in slot_id:
        try:
            return RealSlotRef(slot_id=int(slot_id))
        except ValueError:
            raise BadRequestError(f"Invalid slot id: {slot_id}")

    # ISO instants contain the separator too: split on the first one only
    pattern_part, start_part = slot_id.split(VIRTUAL_ID_SEPARATOR, 1)

    try:
        pattern_id = int(pattern_part)
    except ValueError:
        raise BadRequestError(f"Invalid virtual slot id: {slot_id}")

    try:
        start = datetime.fromisoformat(start_part)
    except ValueError:
        raise BadRequestError("Invalid slot time format")

    return VirtualSlotRef(pattern_id=pattern_id, start=config.localize(start))
