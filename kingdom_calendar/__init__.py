"""
Kingdom Calendar

This package provides the calendar core of the kingdom dashboard:
- Event model (models.py) - patterns, events, instances, spans, layouts
- Recurrence expansion (expander.py)
- Storage record adapters (adapter.py)
- Week grouping (grouper.py) and lane packing (packer.py)
- Month/week view façade (calendar_view.py)
- Configuration parsing (config.py)
- Event feeds (event_source.py) and ICS import/export (ics_io.py)
"""

from .models import (
    CalendarEvent, EventInstance, EventSpan, Frequency, RecurrencePattern,
    SegmentLayout, WeekRow, DEFAULT_EVENT_COLOR, FREQUENCY_INTERVALS,
)
from .errors import (
    CalendarError, EventRecordError, EventSourceError,
    InvalidPatternError, InvalidWindowError, LayoutInvariantError,
)
from .expander import expand, group_by_date, occurrence_spans
from .adapter import DatabaseEvent, adapt, adapt_all, load_records
from .grouper import group_by_week, group_window_by_week
from .packer import pack
from .calendar_view import CalendarView, ViewType, build_calendar
from .config import Config

__all__ = [
    'CalendarEvent',
    'EventInstance',
    'EventSpan',
    'Frequency',
    'RecurrencePattern',
    'SegmentLayout',
    'WeekRow',
    'DEFAULT_EVENT_COLOR',
    'FREQUENCY_INTERVALS',
    'CalendarError',
    'EventRecordError',
    'EventSourceError',
    'InvalidPatternError',
    'InvalidWindowError',
    'LayoutInvariantError',
    'expand',
    'group_by_date',
    'occurrence_spans',
    'DatabaseEvent',
    'adapt',
    'adapt_all',
    'load_records',
    'group_by_week',
    'group_window_by_week',
    'pack',
    'CalendarView',
    'ViewType',
    'build_calendar',
    'Config',
]
