# backend/medslots/services/slots/validators.py
"""
Request validation for the slots API.

Shape (field presence and JSON types) is checked by the pydantic schemas;
the rules here need parsing or cross-field checks and raise BadRequestError
naming the violated rule.
"""

from dataclasses import dataclass
from datetime import date, datetime

from ...errors import BadRequestError
from .config import SlotsConfig, get_slots_config
from .matcher import MONDAY, PATTERN_TYPES, PATTERN_WEEKLY, SUNDAY


DATE_PARAM_FORMAT = "YYYY-MM-DD"


@dataclass(frozen=True)
class PatternRequest:
    """Validated and parsed pattern creation request."""
    start_time: datetime
    end_time: datetime
    duration: int
    type: str
    week_days: list[int]
    end_date: datetime | None


def parse_date_param(
    value: str | None,
    config: SlotsConfig | None = None,
    name: str = "date",
) -> date:
    """
    Parse a calendar date query parameter.

    Accepts a plain date or a full ISO datetime (its date in the process
    timezone is used).
    """
    config = config or get_slots_config()

    if not value:
        raise BadRequestError(f"{name.capitalize()} parameter is required")

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise BadRequestError(
            f"Invalid {name}: {value!r}. Use ISO format ({DATE_PARAM_FORMAT})"
        )
    return config.local_date(parsed)


def parse_date_range(
    start_value: str | None,
    end_value: str | None,
    config: SlotsConfig | None = None,
) -> tuple[date, date]:
    config = config or get_slots_config()
    start = parse_date_param(start_value, config, name="start_date")
    end = parse_date_param(end_value, config, name="end_date")
    if end < start:
        raise BadRequestError("end_date must not be before start_date")
    return start, end


def _parse_instant(value: str, label: str, config: SlotsConfig) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise BadRequestError(f"Invalid {label}: {e}")
    return config.localize(parsed)


def validate_pattern_request(
    start_time: str,
    end_time: str,
    duration: int,
    recurrence_type: str,
    week_days: list[int] | None = None,
    end_date: str | None = None,
    config: SlotsConfig | None = None,
) -> PatternRequest:
    """
    Validate a slot pattern creation request.

    Rules:
        - start_time, end_time and recurrence end_date parse as ISO-8601
        - start_time < end_time
        - duration in allowed durations (15 / 30)
        - weekly recurrence has a non-empty week_days set of codes 1..7
        - recurrence type is one-time / daily / weekly
        - recurrence end_date is not before the start date
    """
    config = config or get_slots_config()

    start = _parse_instant(start_time, "start time", config)
    end = _parse_instant(end_time, "end time", config)
    recurrence_end = (
        _parse_instant(end_date, "recurrence end date", config) if end_date else None
    )

    if start >= end:
        raise BadRequestError("Start time must be before end time")

    if duration not in config.allowed_durations:
        allowed = " or ".join(str(d) for d in config.allowed_durations)
        raise BadRequestError(f"Duration must be either {allowed} minutes")

    if recurrence_type == PATTERN_WEEKLY and not week_days:
        raise BadRequestError("Weekly recurrence requires specified week days")

    if recurrence_type not in PATTERN_TYPES:
        raise BadRequestError("Recurrence type must be 'daily', 'weekly', or 'one-time'")

    if week_days and any(d < MONDAY or d > SUNDAY for d in week_days):
        raise BadRequestError("Week days must be between 1 (Monday) and 7 (Sunday)")

    if recurrence_end is not None and recurrence_end.date() < start.date():
        raise BadRequestError("Recurrence end date must not be before the start date")

    return PatternRequest(
        start_time=start,
        end_time=end,
        duration=duration,
        type=recurrence_type,
        week_days=sorted(set(week_days)) if recurrence_type == PATTERN_WEEKLY else [],
        end_date=recurrence_end,
    )
