"""Tests for the calendar-day helpers behind live and history views."""

from datetime import datetime

import pytz
from freezegun import freeze_time

from djsync.utils.dates import parse_datetime, today_bounds


class TestTodayBounds:
    @freeze_time("2026-03-14 15:30:00")
    def test_utc_day(self):
        start, end = today_bounds("UTC")

        assert start == datetime(2026, 3, 14, tzinfo=pytz.UTC)
        assert end == datetime(2026, 3, 14, 23, 59, 59, 999999, tzinfo=pytz.UTC)

    @freeze_time("2026-03-14 02:00:00")
    def test_local_day_differs_from_utc_day(self):
        """At 02:00 UTC it is still the previous evening in New York (EDT)."""
        start, end = today_bounds("America/New_York")

        assert start == datetime(2026, 3, 13, 4, 0, tzinfo=pytz.UTC)
        assert end == datetime(2026, 3, 14, 3, 59, 59, 999999, tzinfo=pytz.UTC)

    def test_explicit_now(self):
        now = datetime(2026, 7, 1, 23, 0, tzinfo=pytz.UTC)

        start, _ = today_bounds("Europe/Berlin", now=now)

        assert start == datetime(2026, 7, 1, 22, 0, tzinfo=pytz.UTC)


class TestParseDatetime:
    def test_zulu_suffix(self):
        assert parse_datetime("2026-07-01T20:00:00Z") == datetime(2026, 7, 1, 20, 0, tzinfo=pytz.UTC)

    def test_naive_value_uses_given_timezone(self):
        parsed = parse_datetime("2026-07-01T20:00:00", "Europe/Berlin")

        assert parsed == datetime(2026, 7, 1, 18, 0, tzinfo=pytz.UTC)
        assert parsed.tzinfo == pytz.UTC

    def test_offset_is_respected(self):
        assert parse_datetime("2026-07-01T20:00:00+05:30") == datetime(
            2026, 7, 1, 14, 30, tzinfo=pytz.UTC
        )
