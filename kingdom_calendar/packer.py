"""
Lane packing for multi-day event bars within one week row.

Each span is clipped to the week and turned into a column range 0..6.
Segments are placed greedily, first fit, into lanes (horizontal rows);
a lane tracks which of its seven columns are taken. Sorting by start
column and then by length (longest first) keeps fragmentation low and
makes the result independent of input order.
"""

from datetime import date
from typing import Iterable

from .date_window import DAYS_PER_WEEK, days_between, validate_window
from .errors import InvalidWindowError, LayoutInvariantError
from .models import EventSpan, SegmentLayout

LAST_COLUMN = DAYS_PER_WEEK - 1


def _clamp_column(value: int) -> int:
    return max(0, min(LAST_COLUMN, value))


def _clip(span: EventSpan, week_start: date, week_end: date) -> tuple[int, int]:
    """Column range of span inside the week."""
    if not span.overlaps(week_start, week_end):
        raise LayoutInvariantError(
            f"Span {span.start_date}..{span.end_date} ({span.event.title!r}) "
            f"does not touch week {week_start}..{week_end}"
        )
    seg_start = max(span.start_date, week_start)
    seg_end = min(span.end_date, week_end)
    start_column = _clamp_column(days_between(week_start, seg_start))
    end_column = max(start_column, _clamp_column(days_between(week_start, seg_end)))
    return start_column, end_column


def _content_key(span: EventSpan) -> tuple:
    event = span.event
    return (span.start_date, span.end_date, event.title, event.color, event.description, event.event_id or "")


def pack(week_start: date, week_end: date, spans: Iterable[EventSpan]) -> list[SegmentLayout]:
    """
    Assign a lane to every span overlapping the week.

    Args:
        week_start: First day of the week row (column 0)
        week_end: Last day of the week row
        spans: Unclipped occurrence spans; each must overlap the week

    Returns:
        One SegmentLayout per span, in placement order.

    Raises:
        InvalidWindowError: for an inverted window or one longer than a week
        LayoutInvariantError: for a span outside the week
    """
    validate_window(week_start, week_end)
    if days_between(week_start, week_end) > LAST_COLUMN:
        raise InvalidWindowError(f"Week window {week_start}..{week_end} is longer than {DAYS_PER_WEEK} days")

    segments = []
    for position, span in enumerate(spans):
        start_column, end_column = _clip(span, week_start, week_end)
        segments.append((start_column, end_column, position, span))

    # start column ascending, length descending; the content key and the
    # input position only separate otherwise identical segments
    segments.sort(key=lambda s: (s[0], -(s[1] - s[0]), _content_key(s[3]), s[2]))

    lanes: list[list[bool]] = []
    placed = []
    for start_column, end_column, _, span in segments:
        columns = range(start_column, end_column + 1)
        lane = 0
        while lane < len(lanes):
            occupied = lanes[lane]
            if not any(occupied[c] for c in columns):
                break
            lane += 1
        if lane == len(lanes):
            lanes.append([False] * DAYS_PER_WEEK)
        for c in columns:
            lanes[lane][c] = True
        placed.append(SegmentLayout(span=span, start_column=start_column, end_column=end_column, lane=lane))

    return placed


def lane_count(layouts: Iterable[SegmentLayout]) -> int:
    """Number of lanes used by a packed week (0 for an empty week)."""
    return max((layout.lane + 1 for layout in layouts), default=0)


def check_layout(layouts: Iterable[SegmentLayout]) -> None:
    """Verify that no two segments share both a lane and a column."""
    taken: dict[tuple[int, int], SegmentLayout] = {}
    for layout in layouts:
        if not 0 <= layout.start_column <= layout.end_column <= LAST_COLUMN:
            raise LayoutInvariantError(f"Invalid column range {layout.start_column}..{layout.end_column}")
        for column in range(layout.start_column, layout.end_column + 1):
            other = taken.get((layout.lane, column))
            if other is not None:
                raise LayoutInvariantError(
                    f"{layout.event.title!r} and {other.event.title!r} share lane {layout.lane}, column {column}"
                )
            taken[(layout.lane, column)] = layout
