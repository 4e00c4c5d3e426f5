"""
Groups event spans into the week rows of a calendar grid.
"""

from datetime import date, timedelta
from typing import Iterable

from .date_window import (
    DAYS_PER_WEEK, DEFAULT_WEEK_START,
    month_grid_window, validate_window, week_starts,
)
from .models import EventSpan, WeekRow


def group_window_by_week(
    spans: Iterable[EventSpan],
    window_start: date,
    window_end: date,
    week_start: int = DEFAULT_WEEK_START,
) -> list[WeekRow]:
    """
    Build one WeekRow per week touching [window_start, window_end].

    A span joins every row it overlaps, even partially; clipping to the
    row happens in the packer. Spans keep their input order.

    Raises:
        InvalidWindowError: if window_end is before window_start
    """
    validate_window(window_start, window_end)
    spans = list(spans)
    rows = []
    for start in week_starts(window_start, window_end, week_start):
        end = start + timedelta(days=DAYS_PER_WEEK - 1)
        rows.append(WeekRow(
            week_start=start,
            week_end=end,
            spans=tuple(s for s in spans if s.overlaps(start, end)),
        ))
    return rows


def group_by_week(
    spans: Iterable[EventSpan],
    month_start: date,
    week_start: int = DEFAULT_WEEK_START,
) -> list[WeekRow]:
    """Week rows covering the month grid of the month containing month_start."""
    grid_start, grid_end = month_grid_window(month_start.year, month_start.month, week_start)
    return group_window_by_week(spans, grid_start, grid_end, week_start)
