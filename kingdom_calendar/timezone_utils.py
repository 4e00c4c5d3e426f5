"""
Timezone utilities for Kingdom Calendar.

Storage records carry UTC timestamps; the calendar only cares about the
calendar date a timestamp falls on in the configured timezone.
"""

from datetime import date, datetime

import pytz


# UTC matches the dates the dashboard derives from its ISO timestamps.
DEFAULT_TIMEZONE = "UTC"

# Application timezone - can be overridden by config. The calendar core
# never reads it; callers pass their timezone explicitly.
_local_timezone_name: str = DEFAULT_TIMEZONE


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    pytz.timezone(timezone_name)  # raises UnknownTimeZoneError early
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    return _local_timezone_name


def get_local_timezone(timezone_name: str = None):
    """
    Get the local timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the given or configured timezone.
    """
    return pytz.timezone(timezone_name or _local_timezone_name)


def to_utc_datetime(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are taken to be UTC already, which is how the
    dashboard API serializes its timestamps.
    """
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_local_datetime(dt: datetime, timezone_name: str = None) -> datetime:
    """Convert a datetime to the local timezone (naive input counts as UTC)."""
    return to_utc_datetime(dt).astimezone(get_local_timezone(timezone_name))


def to_local_date(dt: datetime, timezone_name: str = None) -> date:
    """Calendar date of a timestamp in the local timezone."""
    return to_local_datetime(dt, timezone_name).date()


def parse_timestamp(value) -> datetime:
    """
    Parse an ISO-8601 timestamp as produced by the dashboard API.

    Accepts a trailing ``Z``, a bare date, or an existing datetime/date.
    The result is always timezone-aware (UTC when no offset is given).
    """
    if isinstance(value, datetime):
        return to_utc_datetime(value)
    if isinstance(value, date):
        return pytz.UTC.localize(datetime.combine(value, datetime.min.time()))
    if not isinstance(value, str):
        raise ValueError(f"Unsupported timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc_datetime(datetime.fromisoformat(text))
