# backend/medslots/services/slots/config.py
"""
Slots configuration and time helpers.

All date arithmetic happens in one process-wide timezone. Instants are
persisted as canonical UTC strings so that equality and ordering can be
checked by the store with plain text comparison.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...config import get_settings


STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S+00:00"
DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class SlotsConfig:
    """
    Configuration for the slots subsystem.

    Attributes:
        timezone: IANA name of the process-wide timezone
        cache_ttl_seconds: TTL of a cached (doctor, date) slot list
        allowed_durations: Slot durations a pattern may declare, in minutes
    """
    timezone: str = "UTC"
    cache_ttl_seconds: int = 30 * 24 * 60 * 60  # 30 days
    allowed_durations: tuple[int, ...] = (15, 30)

    def __post_init__(self):
        """Validate configuration."""
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {self.timezone}")
        if self.cache_ttl_seconds <= 0:
            raise ValueError(f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def localize(self, dt: datetime) -> datetime:
        """Express dt in the process timezone. Naive values are taken as local wall time."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self.tzinfo)
        return dt.astimezone(self.tzinfo)

    def day_start(self, target_date: date) -> datetime:
        """Midnight of target_date in the process timezone."""
        return datetime.combine(target_date, time.min, tzinfo=self.tzinfo)

    def day_bounds(self, target_date: date) -> tuple[datetime, datetime]:
        """[start, end) instants of a calendar day."""
        next_day = target_date + timedelta(days=1)
        return self.day_start(target_date), self.day_start(next_day)

    def local_date(self, dt: datetime) -> date:
        return self.localize(dt).date()

    def date_string(self, dt: datetime | date) -> str:
        """Canonical yyyy-MM-dd of an instant (or date) in the process timezone."""
        if isinstance(dt, datetime):
            dt = self.local_date(dt)
        return dt.strftime(DATE_FORMAT)

    def format_instant(self, dt: datetime) -> str:
        """ISO-8601 rendering used for virtual ids and booked-start lookups."""
        return self.localize(dt).isoformat()


@lru_cache
def get_slots_config() -> SlotsConfig:
    """Slots configuration built from application settings (singleton)."""
    settings = get_settings()
    return SlotsConfig(
        timezone=settings.timezone,
        cache_ttl_seconds=settings.slots_cache_ttl_seconds,
    )


def to_storage(dt: datetime, config: SlotsConfig | None = None) -> str:
    """Convert an instant to its canonical stored form."""
    if dt.tzinfo is None:
        config = config or get_slots_config()
        dt = config.localize(dt)
    return dt.astimezone(timezone.utc).strftime(STORAGE_FORMAT)


def from_storage(value: str) -> datetime:
    """Parse a stored instant back into an aware UTC datetime."""
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
