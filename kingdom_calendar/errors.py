"""
Exception types raised by the calendar core.

Validation problems with patterns, windows and storage records are
``ValueError`` subclasses so callers can catch them generically.
Layout invariant violations are programming defects and derive from
``AssertionError``.
"""

from typing import Optional


class CalendarError(Exception):
    """Base class for all calendar errors."""


class InvalidPatternError(CalendarError, ValueError):
    """A recurrence pattern or event definition failed validation."""


class InvalidWindowError(CalendarError, ValueError):
    """A date window whose end lies before its start."""


class EventRecordError(CalendarError, ValueError):
    """A storage record could not be turned into a CalendarEvent."""

    def __init__(self, message: str, index: Optional[int] = None, record_id: Optional[str] = None):
        super().__init__(message)
        self.index = index
        self.record_id = record_id

    def __str__(self):
        where = []
        if self.index is not None:
            where.append(f"record #{self.index}")
        if self.record_id:
            where.append(f"id={self.record_id}")
        prefix = f"{' '.join(where)}: " if where else ""
        return f"{prefix}{self.args[0]}"


class LayoutInvariantError(CalendarError, AssertionError):
    """The layout packer produced or received an impossible segment."""


class EventSourceError(CalendarError):
    """Loading event records from a file or URL failed."""
