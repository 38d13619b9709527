"""Tests for request validation."""

from datetime import date, datetime, timezone

import pytest

from medslots.errors import BadRequestError
from medslots.services.slots.config import SlotsConfig
from medslots.services.slots.validators import (
    parse_date_param,
    parse_date_range,
    validate_pattern_request,
)


START = "2025-01-13T09:00:00Z"
END = "2025-01-13T17:00:00Z"


class TestValidatePatternRequest:
    def test_valid_daily(self, config):
        request = validate_pattern_request(START, END, 30, "daily", config=config)

        assert request.start_time == datetime(2025, 1, 13, 9, tzinfo=timezone.utc)
        assert request.duration == 30
        assert request.type == "daily"
        assert request.week_days == []
        assert request.end_date is None

    def test_weekly_days_sorted_and_deduplicated(self, config):
        request = validate_pattern_request(START, END, 15, "weekly", [5, 1, 3, 1], config=config)
        assert request.week_days == [1, 3, 5]

    def test_week_days_dropped_for_non_weekly(self, config):
        request = validate_pattern_request(START, END, 30, "one-time", [1, 2], config=config)
        assert request.week_days == []

    def test_end_date_parsed(self, config):
        request = validate_pattern_request(
            START, END, 30, "daily", end_date="2025-02-01T00:00:00Z", config=config
        )
        assert request.end_date == datetime(2025, 2, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"duration": 20}, "Duration must be either 15 or 30 minutes"),
            ({"end_time": START}, "Start time must be before end time"),
            ({"end_time": "2025-01-13T08:00:00Z"}, "Start time must be before end time"),
            ({"recurrence_type": "weekly", "week_days": []}, "Weekly recurrence requires specified week days"),
            ({"recurrence_type": "weekly"}, "Weekly recurrence requires specified week days"),
            ({"recurrence_type": "monthly"}, "Recurrence type must be 'daily', 'weekly', or 'one-time'"),
            ({"recurrence_type": "weekly", "week_days": [1, 8]}, "Week days must be between 1 (Monday) and 7 (Sunday)"),
            ({"recurrence_type": "weekly", "week_days": [0]}, "Week days must be between 1 (Monday) and 7 (Sunday)"),
            ({"end_date": "2025-01-12T00:00:00Z"}, "Recurrence end date must not be before the start date"),
        ],
    )
    def test_rejected(self, config, kwargs, message):
        args = {
            "start_time": START,
            "end_time": END,
            "duration": 30,
            "recurrence_type": "daily",
            "config": config,
        }
        args.update(kwargs)

        with pytest.raises(BadRequestError) as exc_info:
            validate_pattern_request(**args)

        assert exc_info.value.message == message

    def test_unparseable_start(self, config):
        with pytest.raises(BadRequestError, match="Invalid start time"):
            validate_pattern_request("nine o'clock", END, 30, "daily", config=config)

    def test_unparseable_end_date(self, config):
        with pytest.raises(BadRequestError, match="Invalid recurrence end date"):
            validate_pattern_request(START, END, 30, "daily", end_date="soon", config=config)

    def test_end_date_on_start_date_allowed(self, config):
        request = validate_pattern_request(
            START, END, 30, "daily", end_date="2025-01-13T00:00:00Z", config=config
        )
        assert request.end_date.date() == date(2025, 1, 13)

    def test_naive_times_use_process_timezone(self):
        berlin = SlotsConfig(timezone="Europe/Berlin")

        request = validate_pattern_request(
            "2025-01-13T09:00:00", "2025-01-13T17:00:00", 30, "daily", config=berlin
        )

        assert request.start_time.astimezone(timezone.utc).hour == 8


class TestParseDateParam:
    def test_plain_date(self, config):
        assert parse_date_param("2025-01-13", config) == date(2025, 1, 13)

    def test_datetime_uses_local_date(self):
        tokyo = SlotsConfig(timezone="Asia/Tokyo")
        assert parse_date_param("2025-01-13T20:00:00+00:00", tokyo) == date(2025, 1, 14)

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, config, value):
        with pytest.raises(BadRequestError, match="Date parameter is required"):
            parse_date_param(value, config)

    @pytest.mark.parametrize("value", ["13/01/2025", "tomorrow", "2025-13-01"])
    def test_invalid(self, config, value):
        with pytest.raises(BadRequestError, match="Use ISO format"):
            parse_date_param(value, config)


class TestParseDateRange:
    def test_valid(self, config):
        assert parse_date_range("2025-01-13", "2025-01-19", config) == (
            date(2025, 1, 13),
            date(2025, 1, 19),
        )

    def test_reversed(self, config):
        with pytest.raises(BadRequestError, match="end_date must not be before start_date"):
            parse_date_range("2025-01-19", "2025-01-13", config)

    def test_missing_end(self, config):
        with pytest.raises(BadRequestError, match="End_date parameter is required"):
            parse_date_range("2025-01-13", None, config)
