"""Nanosecond instant conversions and display formatting.

Instants are integer nanoseconds since the Unix epoch (UTC). All conversions
use integer arithmetic; going through float seconds would silently drop
precision on current timestamps.
"""

import time
from datetime import date, datetime, timedelta, timezone, tzinfo
from datetime import time as dt_time

NANOS_PER_MICRO = 1_000
NANOS_PER_SECOND = 1_000_000_000

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Instants are stored in a signed 64-bit BIGINT column: 1677-09-21 to 2262-04-11 UTC.
MIN_INSTANT = -(2**63)
MAX_INSTANT = 2**63 - 1


def now_nanos() -> int:
    return time.time_ns()


def is_valid_instant(nanos: int) -> bool:
    return MIN_INSTANT <= nanos <= MAX_INSTANT


def nanos_to_datetime(nanos: int, tz: tzinfo | None = None) -> datetime:
    """Convert a nanosecond instant to an aware datetime in ``tz`` (UTC by default).

    Sub-microsecond precision is floored since datetime cannot hold it.
    """
    dt = EPOCH + timedelta(microseconds=nanos // NANOS_PER_MICRO)
    return dt.astimezone(tz) if tz is not None else dt


def datetime_to_nanos(dt: datetime) -> int:
    if dt.tzinfo is None:
        raise ValueError("datetime_to_nanos requires a timezone-aware datetime")
    delta = dt - EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return seconds * NANOS_PER_SECOND + delta.microseconds * NANOS_PER_MICRO


def date_string_to_nanos(date_str: str, time_str: str | None = None, tz: tzinfo = timezone.utc) -> int:
    """Convert form input ("2026-03-15", optional "17:30") to an instant in ``tz``.

    A missing time means local midnight.
    """
    day = date.fromisoformat(date_str)
    at = dt_time.fromisoformat(time_str or "00:00")
    return datetime_to_nanos(datetime.combine(day, at, tzinfo=tz))


def local_date(nanos: int, tz: tzinfo) -> date:
    return nanos_to_datetime(nanos, tz).date()


def format_date_for_input(nanos: int, tz: tzinfo = timezone.utc) -> str:
    return nanos_to_datetime(nanos, tz).strftime("%Y-%m-%d")


def format_time_for_input(nanos: int, tz: tzinfo = timezone.utc) -> str:
    return nanos_to_datetime(nanos, tz).strftime("%H:%M")


def format_display_date(nanos: int, tz: tzinfo = timezone.utc) -> str:
    """Format as "Mar 5, 2026"."""
    dt = nanos_to_datetime(nanos, tz)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_display_time(nanos: int, tz: tzinfo = timezone.utc) -> str:
    """Format as "5:30 PM"."""
    dt = nanos_to_datetime(nanos, tz)
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_day_header(day: date) -> str:
    """Format as "Saturday, March 15"."""
    return f"{day:%A}, {day:%B} {day.day}"
