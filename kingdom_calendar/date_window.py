"""
Calendar-date arithmetic for visible windows.

Everything here works on plain ``datetime.date`` values; there is no
time-of-day or timezone involved. Weekday numbers follow Python's
``date.weekday()`` (Monday=0 .. Sunday=6).
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Union

from .errors import InvalidWindowError


MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

# The dashboard grid starts its weeks on Sunday
DEFAULT_WEEK_START = SUNDAY

DAYS_PER_WEEK = 7

WEEKDAY_NAMES = {
    "monday": MONDAY,
    "tuesday": TUESDAY,
    "wednesday": WEDNESDAY,
    "thursday": THURSDAY,
    "friday": FRIDAY,
    "saturday": SATURDAY,
    "sunday": SUNDAY,
}


def parse_date(value: Union[date, datetime, str]) -> date:
    """Convert a date, datetime or ISO string (date part only) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Cannot interpret {value!r} as a date")


def parse_week_start(value: Union[int, str]) -> int:
    """Accept a weekday number or an English weekday name."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid week start: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"Week start must be between 0 and 6, got {value}")
    name = str(value).strip().lower()
    if name not in WEEKDAY_NAMES:
        raise ValueError(f"Unknown week start day: {value!r}")
    return WEEKDAY_NAMES[name]


def days_between(start: date, end: date) -> int:
    """Signed number of calendar days from start to end."""
    return (end - start).days


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    current = start
    one_day = timedelta(days=1)
    while current <= end:
        yield current
        current += one_day


def validate_window(start: date, end: date) -> None:
    if end < start:
        raise InvalidWindowError(f"Window end {end} lies before window start {start}")


def week_start_for(day: date, week_start: int = DEFAULT_WEEK_START) -> date:
    """First day of the week containing day."""
    offset = (day.weekday() - week_start) % DAYS_PER_WEEK
    return day - timedelta(days=offset)


def week_end_for(day: date, week_start: int = DEFAULT_WEEK_START) -> date:
    """Last day of the week containing day."""
    return week_start_for(day, week_start) + timedelta(days=DAYS_PER_WEEK - 1)


def week_window(day: date, week_start: int = DEFAULT_WEEK_START) -> tuple[date, date]:
    start = week_start_for(day, week_start)
    return start, start + timedelta(days=DAYS_PER_WEEK - 1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_grid_window(year: int, month: int, week_start: int = DEFAULT_WEEK_START) -> tuple[date, date]:
    """
    Visible range of a month grid.

    Starts at the beginning of the week holding the 1st and ends at the end
    of the week holding the last day of the month, so the range always
    covers whole weeks.
    """
    first, last = month_bounds(year, month)
    return week_start_for(first, week_start), week_end_for(last, week_start)


def week_starts(window_start: date, window_end: date, week_start: int = DEFAULT_WEEK_START) -> list[date]:
    """Start dates of all weeks touching [window_start, window_end]."""
    validate_window(window_start, window_end)
    current = week_start_for(window_start, week_start)
    starts = []
    while current <= window_end:
        starts.append(current)
        current += timedelta(days=DAYS_PER_WEEK)
    return starts


def shift_month(day: date, delta: int) -> date:
    """Move day by delta months, clamping the day of month (Jan 31 -> Feb 28)."""
    month_index = day.year * 12 + (day.month - 1) + delta
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
