from datetime import datetime
import pytz


def parse_datetime(value, tz_name: str = "UTC") -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive values are interpreted in ``tz_name``.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = pytz.timezone(tz_name).localize(parsed)
    return parsed.astimezone(pytz.UTC)


def today_bounds(tz_name: str = "UTC", now: datetime | None = None):
    """Return (start, end) of the current calendar day in ``tz_name``, as UTC."""
    tz = pytz.timezone(tz_name)
    now = now or datetime.now(pytz.UTC)
    local_now = now.astimezone(tz)
    start = tz.localize(datetime(local_now.year, local_now.month, local_now.day))
    end = tz.localize(
        datetime(local_now.year, local_now.month, local_now.day, 23, 59, 59, 999999)
    )
    return start.astimezone(pytz.UTC), end.astimezone(pytz.UTC)
