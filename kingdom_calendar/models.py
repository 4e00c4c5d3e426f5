"""
Value types shared by the recurrence expander and the layout packer.

All types are frozen dataclasses: an event list can be expanded over
several windows, from several threads, without anyone mutating it.
Instances and spans hold a plain reference back to their CalendarEvent.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Mapping, Optional

from .date_window import iter_days
from .errors import InvalidPatternError


DEFAULT_EVENT_COLOR = "#3B82F6"  # Dashboard blue


class Frequency(Enum):
    ONCE = "once"
    EVERY_4_WEEKS = "every-4-weeks"
    EVERY_8_WEEKS = "every-8-weeks"


# Interval in days per frequency name. Unknown names repeat never.
FREQUENCY_INTERVALS: dict[str, int] = {
    Frequency.ONCE.value: 0,
    Frequency.EVERY_4_WEEKS.value: 28,
    Frequency.EVERY_8_WEEKS.value: 56,
    # Names used by the dashboard's events.json
    "four-weeks": 28,
    "eight-weeks": 56,
}


def _coerce_anchor(value) -> date:
    if isinstance(value, datetime):
        raise InvalidPatternError(f"anchor_date must be a calendar date, not a timestamp: {value!r}")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise InvalidPatternError(f"Unparseable anchor_date: {value!r}") from None
    raise InvalidPatternError(f"Unsupported anchor_date type: {type(value).__name__}")


@dataclass(frozen=True)
class RecurrencePattern:
    """
    One recurrence rule of an event.

    The first occurrence starts on anchor_date and lasts duration_days
    consecutive days (anchor day included). The frequency is kept as the
    raw string so that unknown names survive a round trip; they resolve
    to a zero interval, i.e. a single occurrence.
    """
    anchor_date: date
    frequency: str = Frequency.ONCE.value
    duration_days: int = 1

    def __post_init__(self):
        object.__setattr__(self, 'anchor_date', _coerce_anchor(self.anchor_date))
        if isinstance(self.frequency, Frequency):
            object.__setattr__(self, 'frequency', self.frequency.value)
        if not isinstance(self.frequency, str):
            raise InvalidPatternError(f"frequency must be a string, got {self.frequency!r}")
        if isinstance(self.duration_days, bool) or not isinstance(self.duration_days, int):
            raise InvalidPatternError(f"duration_days must be an integer, got {self.duration_days!r}")
        if self.duration_days < 1:
            raise InvalidPatternError(f"duration_days must be >= 1, got {self.duration_days}")

    def interval_days(self, intervals: Optional[Mapping[str, int]] = None) -> int:
        """Resolve the repeat interval; 0 means the pattern occurs once."""
        table = FREQUENCY_INTERVALS if intervals is None else intervals
        return max(0, int(table.get(self.frequency, 0)))

    def is_known_frequency(self, intervals: Optional[Mapping[str, int]] = None) -> bool:
        table = FREQUENCY_INTERVALS if intervals is None else intervals
        return self.frequency in table


@dataclass(frozen=True)
class CalendarEvent:
    """A titled, colored event made of one or more recurrence patterns."""
    title: str
    patterns: tuple[RecurrencePattern, ...]
    description: str = ""
    color: str = DEFAULT_EVENT_COLOR
    event_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.title, str) or not self.title.strip():
            raise InvalidPatternError("Event title must be a non-empty string")
        patterns = tuple(self.patterns)
        if not patterns:
            raise InvalidPatternError(f"Event {self.title!r} has no recurrence patterns")
        for pattern in patterns:
            if not isinstance(pattern, RecurrencePattern):
                raise InvalidPatternError(f"Event {self.title!r} has an invalid pattern: {pattern!r}")
        object.__setattr__(self, 'patterns', patterns)
        # records from JSON may carry numbers here; keep both fields strings
        if self.description is None:
            object.__setattr__(self, 'description', "")
        elif not isinstance(self.description, str):
            object.__setattr__(self, 'description', str(self.description))
        if not self.color:
            object.__setattr__(self, 'color', DEFAULT_EVENT_COLOR)
        elif not isinstance(self.color, str):
            object.__setattr__(self, 'color', str(self.color))

    @property
    def is_recurring(self) -> bool:
        return any(p.interval_days() > 0 for p in self.patterns)

    def __repr__(self):
        return f"CalendarEvent(title={self.title!r}, patterns={len(self.patterns)})"


@dataclass(frozen=True)
class EventInstance:
    """A single day on which an event occurs."""
    date: date
    event: CalendarEvent


@dataclass(frozen=True)
class EventSpan:
    """The inclusive date range of one occurrence, used for bar layout."""
    start_date: date
    end_date: date
    event: CalendarEvent

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidPatternError(
                f"Span for {self.event.title!r} ends ({self.end_date}) before it starts ({self.start_date})"
            )

    @property
    def length_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


@dataclass(frozen=True)
class SegmentLayout:
    """
    Placement of one span inside one week row.

    Columns are 0..6 counted from the configured week start; lane is a
    zero-based vertical row inside the week.
    """
    span: EventSpan
    start_column: int
    end_column: int
    lane: int

    @property
    def column_span(self) -> int:
        return self.end_column - self.start_column + 1

    @property
    def event(self) -> CalendarEvent:
        return self.span.event


@dataclass(frozen=True)
class WeekRow:
    """One visible week of the grid and the spans that touch it."""
    week_start: date
    week_end: date
    spans: tuple[EventSpan, ...] = ()

    def days(self) -> list[date]:
        return list(iter_days(self.week_start, self.week_end))
