"""
Recurrence expansion.

Turns CalendarEvents into dated EventInstances (one per occurrence day)
or EventSpans (one per occurrence) for a bounded, inclusive window.

Iteration rules:

- ``once`` and unknown frequencies occur exactly once, at the anchor.
- Repeating patterns walk an occurrence cursor from the anchor in steps
  of the interval while the cursor lies strictly before the window end.

The walk is fast-forwarded to the first occurrence that can still reach
the window, which yields the same output as stepping from the anchor.
"""

import sys
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Mapping, Optional

from .date_window import validate_window
from .models import CalendarEvent, EventInstance, EventSpan, RecurrencePattern


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] EXPAND: {msg}", file=sys.stderr)


def _first_relevant_start(anchor: date, interval: int, duration: int, window_start: date) -> date:
    """Earliest occurrence start whose last day is on or after window_start."""
    last_day = anchor + timedelta(days=duration - 1)
    if last_day >= window_start:
        return anchor
    gap = (window_start - last_day).days
    steps = -(-gap // interval)  # ceil division
    return anchor + timedelta(days=steps * interval)


def iter_occurrences(
    pattern: RecurrencePattern,
    window_start: date,
    window_end: date,
    intervals: Optional[Mapping[str, int]] = None,
) -> Iterator[date]:
    """
    Yield the start date of every occurrence that may touch the window.

    Occurrences that end before window_start are skipped; callers still
    intersect each occurrence's days with the window.
    """
    validate_window(window_start, window_end)
    interval = pattern.interval_days(intervals)

    if interval == 0:
        yield pattern.anchor_date
        return

    cursor = _first_relevant_start(pattern.anchor_date, interval, pattern.duration_days, window_start)
    step = timedelta(days=interval)
    while cursor < window_end:
        yield cursor
        cursor += step


def _occurrence_days(start: date, duration: int, window_start: date, window_end: date) -> Iterator[date]:
    for offset in range(duration):
        day = start + timedelta(days=offset)
        if day > window_end:
            break
        if day >= window_start:
            yield day


def _report_unknown_frequencies(events: Iterable[CalendarEvent], intervals: Optional[Mapping[str, int]]) -> None:
    for event in events:
        for pattern in event.patterns:
            if not pattern.is_known_frequency(intervals):
                _debug_print(
                    f"Unknown frequency {pattern.frequency!r} in {event.title!r}; treating as 'once'"
                )


def expand(
    events: Iterable[CalendarEvent],
    window_start: date,
    window_end: date,
    intervals: Optional[Mapping[str, int]] = None,
) -> list[EventInstance]:
    """
    Expand events into per-day instances inside [window_start, window_end].

    Args:
        events: Event definitions (never modified)
        window_start: First visible day (inclusive)
        window_end: Last visible day (inclusive)
        intervals: Optional frequency -> days table overriding the default

    Returns:
        Instances ordered by event, pattern, occurrence and day.

    Raises:
        InvalidWindowError: if window_end is before window_start
    """
    validate_window(window_start, window_end)
    events = list(events)
    _report_unknown_frequencies(events, intervals)

    instances = []
    for event in events:
        for pattern in event.patterns:
            for start in iter_occurrences(pattern, window_start, window_end, intervals):
                for day in _occurrence_days(start, pattern.duration_days, window_start, window_end):
                    instances.append(EventInstance(date=day, event=event))
    return instances


def occurrence_spans(
    events: Iterable[CalendarEvent],
    window_start: date,
    window_end: date,
    intervals: Optional[Mapping[str, int]] = None,
) -> list[EventSpan]:
    """
    One unclipped EventSpan per occurrence that touches the window.

    Uses the same occurrence rules as expand(), so every day of a returned
    span that lies inside the window is also an instance from expand().
    """
    validate_window(window_start, window_end)
    spans = []
    for event in events:
        for pattern in event.patterns:
            for start in iter_occurrences(pattern, window_start, window_end, intervals):
                end = start + timedelta(days=pattern.duration_days - 1)
                if end < window_start or start > window_end:
                    continue
                spans.append(EventSpan(start_date=start, end_date=end, event=event))
    return spans


def group_by_date(instances: Iterable[EventInstance]) -> dict[date, list[EventInstance]]:
    """Map each date to its instances, preserving expansion order."""
    by_date: dict[date, list[EventInstance]] = defaultdict(list)
    for instance in instances:
        by_date[instance.date].append(instance)
    return dict(by_date)
