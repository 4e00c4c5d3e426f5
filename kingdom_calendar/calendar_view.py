"""
Calendar façade for month and week views.

Keeps the current view type, the reference date and the title filter,
and derives from them the visible window, the per-day instances (chips
in a day cell) and the per-week lane layouts (continuous bars). The two
outputs are computed independently from the same events.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Mapping, Optional

from .adapter import load_records
from .date_window import (
    DAYS_PER_WEEK, DEFAULT_WEEK_START,
    iter_days, month_grid_window, shift_month, week_window,
)
from .expander import expand, group_by_date, occurrence_spans
from .grouper import group_window_by_week
from .models import CalendarEvent, EventInstance, EventSpan, SegmentLayout, WeekRow
from .packer import pack
from .timezone_utils import DEFAULT_TIMEZONE


class ViewType(Enum):
    MONTH = "month"
    WEEK = "week"


class CalendarView:
    """
    Computes what a month or week calendar screen displays.

    The event list is never modified; every query recomputes from it.
    """

    def __init__(
        self,
        events: Iterable[CalendarEvent],
        current_date: Optional[date] = None,
        view: ViewType = ViewType.MONTH,
        week_start: int = DEFAULT_WEEK_START,
        intervals: Optional[Mapping[str, int]] = None,
        filter_text: str = "",
    ):
        self._events: tuple[CalendarEvent, ...] = tuple(events)
        self._current_date = current_date or date.today()
        self._view = ViewType(view)
        self._week_start = week_start
        self._intervals = intervals
        self._filter_text = ""
        self.set_filter(filter_text)

    # ==================== State ====================

    @property
    def events(self) -> tuple[CalendarEvent, ...]:
        return self._events

    @property
    def current_date(self) -> date:
        return self._current_date

    @property
    def view(self) -> ViewType:
        return self._view

    @property
    def week_start(self) -> int:
        return self._week_start

    @property
    def filter_text(self) -> str:
        return self._filter_text

    def set_events(self, events: Iterable[CalendarEvent]):
        self._events = tuple(events)

    def set_view(self, view: ViewType):
        self._view = ViewType(view)

    def set_date(self, d: date):
        self._current_date = d

    def set_filter(self, text: str):
        """Only show events whose title contains text (case-insensitive)."""
        self._filter_text = (text or "").strip().lower()

    def visible_events(self) -> list[CalendarEvent]:
        if not self._filter_text:
            return list(self._events)
        return [e for e in self._events if self._filter_text in e.title.lower()]

    # ==================== Navigation ====================

    def go_today(self):
        self.set_date(date.today())

    def go_previous(self):
        if self._view == ViewType.WEEK:
            self.set_date(self._current_date - timedelta(weeks=1))
        else:
            self.set_date(shift_month(self._current_date, -1))

    def go_next(self):
        if self._view == ViewType.WEEK:
            self.set_date(self._current_date + timedelta(weeks=1))
        else:
            self.set_date(shift_month(self._current_date, 1))

    # ==================== Window ====================

    def date_range(self) -> tuple[date, date]:
        """First and last visible day (whole weeks)."""
        if self._view == ViewType.WEEK:
            return week_window(self._current_date, self._week_start)
        return month_grid_window(self._current_date.year, self._current_date.month, self._week_start)

    def visible_days(self) -> list[date]:
        return list(iter_days(*self.date_range()))

    def weeks(self) -> list[list[date]]:
        days = self.visible_days()
        return [days[i:i + DAYS_PER_WEEK] for i in range(0, len(days), DAYS_PER_WEEK)]

    def is_current_month(self, d: date) -> bool:
        """Whether d belongs to the displayed month (always True in week view)."""
        if self._view == ViewType.WEEK:
            return True
        return (d.year, d.month) == (self._current_date.year, self._current_date.month)

    # ==================== Day instances ====================

    def instances(self) -> list[EventInstance]:
        start, end = self.date_range()
        return expand(self.visible_events(), start, end, self._intervals)

    def instances_by_date(self) -> dict[date, list[EventInstance]]:
        return group_by_date(self.instances())

    # ==================== Week layouts ====================

    def spans(self) -> list[EventSpan]:
        start, end = self.date_range()
        return occurrence_spans(self.visible_events(), start, end, self._intervals)

    def week_rows(self) -> list[WeekRow]:
        start, end = self.date_range()
        return group_window_by_week(self.spans(), start, end, self._week_start)

    def week_layouts(self) -> list[tuple[WeekRow, list[SegmentLayout]]]:
        """
        Lane layout for every visible week.

        Errors from the packer propagate; a partial layout is never returned.
        """
        return [(row, pack(row.week_start, row.week_end, row.spans)) for row in self.week_rows()]


def build_calendar(
    records: Iterable[dict],
    current_date: Optional[date] = None,
    view: ViewType = ViewType.MONTH,
    week_start: int = DEFAULT_WEEK_START,
    intervals: Optional[Mapping[str, int]] = None,
    timezone_name: str = DEFAULT_TIMEZONE,
) -> tuple[CalendarView, list]:
    """
    Build a CalendarView straight from raw storage records.

    Returns:
        (view, skipped) with skipped holding one EventRecordError per bad record
    """
    events, skipped = load_records(records, timezone_name)
    view = CalendarView(events, current_date=current_date, view=view,
                        week_start=week_start, intervals=intervals)
    return view, skipped
