# File: src/farmreg/utils/datetime.py
"""Timezone-aware datetime utilities for Kenya local time."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

# Kenya timezone: UTC+3 year-round (no DST)
APP_TIMEZONE = ZoneInfo("Africa/Nairobi")


def now_utc() -> datetime:
    """Get current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def now_local(tz: ZoneInfo | str | None = None) -> datetime:
    """Get current datetime in the service timezone (or the one given)."""
    if tz is None:
        return datetime.now(APP_TIMEZONE)
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    return datetime.now(tz)


def format_local_timestamp(value: datetime) -> str:
    """Format a datetime as en-KE locale text, e.g. 19/10/2026, 14:03:05."""
    return value.strftime("%d/%m/%Y, %H:%M:%S")


def elapsed_ms(since: datetime, now: datetime | None = None) -> int:
    """Milliseconds elapsed between `since` and `now` (default: current UTC)."""
    now = now or now_utc()
    return int((now - since).total_seconds() * 1000)
