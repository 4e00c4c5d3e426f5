"""
Plain-text rendering of a CalendarView for the terminal.

Each week prints a line of day numbers followed by one line per lane,
with every event drawn as a bar across the columns it covers.
"""

from typing import Optional

from .calendar_view import CalendarView, ViewType
from .config import LocalizationConfig
from .date_window import DAYS_PER_WEEK
from .models import SegmentLayout
from .packer import lane_count

CELL_WIDTH = 12


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[:width - 1] + '…' if width > 1 else text[:width]
    return text.ljust(width)


def _bar(layout: SegmentLayout, cell_width: int) -> str:
    width = layout.column_span * cell_width - 1
    return '[' + _fit(layout.event.title, width - 2) + ']'


def render_title(view: CalendarView, localization: LocalizationConfig) -> str:
    start, end = view.date_range()
    if view.view == ViewType.WEEK:
        return f"{start.isoformat()} - {end.isoformat()}"
    current = view.current_date
    return f"{localization.get_month_name(current.month)} {current.year}"


def render_lane(layouts: list[SegmentLayout], lane: int, cell_width: int = CELL_WIDTH) -> str:
    """One text line with the bars of a single lane."""
    line = [' '] * (DAYS_PER_WEEK * cell_width)
    for layout in layouts:
        if layout.lane != lane:
            continue
        offset = layout.start_column * cell_width
        bar = _bar(layout, cell_width)
        line[offset:offset + len(bar)] = bar
    return ''.join(line).rstrip()


def render_month(
    view: CalendarView,
    localization: Optional[LocalizationConfig] = None,
    cell_width: int = CELL_WIDTH,
) -> str:
    """Render the view's visible weeks with their event bars."""
    localization = localization or LocalizationConfig()
    lines = [render_title(view, localization)]
    header = ''.join(_fit(name, cell_width) for name in localization.day_names_for_week(view.week_start))
    lines.append(header.rstrip())
    lines.append('-' * (DAYS_PER_WEEK * cell_width))

    for row, layouts in view.week_layouts():
        day_cells = []
        for day in row.days():
            label = f"{day.day:>2}" if view.is_current_month(day) else f"({day.day})"
            day_cells.append(_fit(label, cell_width))
        lines.append(''.join(day_cells).rstrip())
        for lane in range(lane_count(layouts)):
            lines.append(render_lane(layouts, lane, cell_width))
        lines.append('-' * (DAYS_PER_WEEK * cell_width))

    return '\n'.join(lines)
