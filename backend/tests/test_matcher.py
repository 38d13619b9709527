"""Tests for pattern matching."""

from datetime import date

import pytest

from conftest import build_pattern
from medslots.services.slots.config import SlotsConfig
from medslots.services.slots.matcher import (
    pattern_applies,
    pattern_week_days,
    select_applicable_patterns,
    weekday_code,
)


class TestWeekdayCode:
    """Weekday codes are ISO: Monday = 1 ... Sunday = 7."""

    def test_monday_is_one(self):
        assert weekday_code(date(2025, 1, 13)) == 1

    def test_sunday_is_seven(self):
        assert weekday_code(date(2025, 1, 19)) == 7

    def test_full_week(self):
        codes = [weekday_code(date(2025, 1, d)) for d in range(13, 20)]
        assert codes == [1, 2, 3, 4, 5, 6, 7]


class TestOneTime:
    def test_applies_on_start_date(self, config):
        pattern = build_pattern(type="one-time")
        assert pattern_applies(pattern, date(2025, 1, 13), config)

    def test_not_on_other_dates(self, config):
        pattern = build_pattern(type="one-time")
        assert not pattern_applies(pattern, date(2025, 1, 12), config)
        assert not pattern_applies(pattern, date(2025, 1, 14), config)


class TestDaily:
    def test_unbounded(self, config):
        pattern = build_pattern(type="daily")
        assert pattern_applies(pattern, date(2025, 1, 13), config)
        assert pattern_applies(pattern, date(2026, 6, 1), config)

    def test_not_before_start(self, config):
        pattern = build_pattern(type="daily")
        assert not pattern_applies(pattern, date(2025, 1, 12), config)

    def test_end_date_inclusive(self, config):
        pattern = build_pattern(type="daily", end_date="2025-01-20T00:00:00+00:00")
        assert pattern_applies(pattern, date(2025, 1, 20), config)
        assert not pattern_applies(pattern, date(2025, 1, 21), config)

    def test_end_before_start_never_applies(self, config):
        pattern = build_pattern(type="daily", end_date="2025-01-10T00:00:00+00:00")
        assert not pattern_applies(pattern, date(2025, 1, 10), config)
        assert not pattern_applies(pattern, date(2025, 1, 13), config)


class TestWeekly:
    def test_weekday_filter(self, config):
        pattern = build_pattern(type="weekly", week_days=[1, 3, 5])
        assert pattern_applies(pattern, date(2025, 1, 13), config)  # Monday
        assert not pattern_applies(pattern, date(2025, 1, 14), config)  # Tuesday
        assert pattern_applies(pattern, date(2025, 1, 15), config)  # Wednesday

    def test_sunday_code(self, config):
        pattern = build_pattern(type="weekly", week_days=[7])
        assert pattern_applies(pattern, date(2025, 1, 19), config)
        assert not pattern_applies(pattern, date(2025, 1, 18), config)

    def test_bounds_still_apply(self, config):
        pattern = build_pattern(
            type="weekly", week_days=[1], end_date="2025-01-15T00:00:00+00:00"
        )
        assert pattern_applies(pattern, date(2025, 1, 13), config)
        assert not pattern_applies(pattern, date(2025, 1, 20), config)


class TestInactiveAndUnknown:
    def test_inactive_never_applies(self, config):
        pattern = build_pattern(type="daily", is_active=False)
        assert not pattern_applies(pattern, date(2025, 1, 13), config)

    def test_unknown_type_never_applies(self, config):
        pattern = build_pattern(type="monthly")
        assert not pattern_applies(pattern, date(2025, 1, 13), config)


class TestTimezone:
    def test_start_date_compared_in_process_timezone(self):
        # 23:30 UTC on Sunday is already Monday in Berlin
        pattern = build_pattern(
            type="one-time",
            start="2025-01-12T23:30:00+00:00",
            end="2025-01-13T01:00:00+00:00",
        )
        berlin = SlotsConfig(timezone="Europe/Berlin")
        utc = SlotsConfig(timezone="UTC")

        assert pattern_applies(pattern, date(2025, 1, 13), berlin)
        assert pattern_applies(pattern, date(2025, 1, 12), utc)


def test_select_applicable_patterns_preserves_order(config):
    daily = build_pattern(type="daily", id=1)
    weekly_tue = build_pattern(type="weekly", week_days=[2], id=2)
    one_time = build_pattern(type="one-time", id=3)

    selected = select_applicable_patterns([daily, weekly_tue, one_time], date(2025, 1, 13), config)

    assert [p.id for p in selected] == [1, 3]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("[1, 3, 5]", [1, 3, 5]),
        ("[]", []),
        ("", []),
        ("not json", []),
    ],
)
def test_pattern_week_days_decoding(raw, expected):
    pattern = build_pattern(type="weekly")
    pattern.week_days = raw
    assert pattern_week_days(pattern) == expected
