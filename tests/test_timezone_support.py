"""Test timezone helpers used for registration timestamps."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from farmreg.utils.datetime import (
    APP_TIMEZONE,
    elapsed_ms,
    format_local_timestamp,
    now_local,
    now_utc,
)


class TestDatetimeUtilities:
    def test_now_utc_returns_timezone_aware(self):
        dt = now_utc()

        assert dt.tzinfo == timezone.utc
        assert abs((datetime.now(timezone.utc) - dt).total_seconds()) < 1

    def test_now_local_defaults_to_nairobi(self):
        dt = now_local()

        assert dt.tzinfo == APP_TIMEZONE
        assert dt.utcoffset() == timedelta(hours=3)

    def test_now_local_with_custom_timezone(self):
        dt = now_local("Asia/Tokyo")

        assert dt.utcoffset() == timedelta(hours=9)

    def test_format_local_timestamp_uses_day_first(self):
        value = datetime(2026, 3, 7, 14, 5, 9, tzinfo=ZoneInfo("Africa/Nairobi"))

        assert format_local_timestamp(value) == "07/03/2026, 14:05:09"

    def test_elapsed_ms(self):
        start = now_utc()

        assert elapsed_ms(start, start + timedelta(seconds=1.5)) == 1500
