"""
Adapters from storage-shaped records to CalendarEvents.

Two record shapes reach the calendar:

- pattern-based definitions as kept in ``events.json``
  (``title``, ``color``, ``pattern: [{startDate, frequency, duration}]``)
- one-shot database events from the events API
  (``id``, ``name``, ``startDate``, ``endDate``, ``isArchived``, ...)

Database events become a CalendarEvent with a single ``once`` pattern.
"""

import math
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from .errors import CalendarError, EventRecordError, InvalidPatternError
from .models import DEFAULT_EVENT_COLOR, CalendarEvent, Frequency, RecurrencePattern
from .timezone_utils import DEFAULT_TIMEZONE, parse_timestamp, to_local_date


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] ADAPT: {msg}", file=sys.stderr)


ONE_DAY_SECONDS = timedelta(days=1).total_seconds()


@dataclass
class DatabaseEvent:
    """Event as returned by the events API (no recurrence)."""
    id: str
    name: str
    start_date: datetime
    end_date: Optional[datetime] = None
    description: str = ""
    color: Optional[str] = None
    is_archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'DatabaseEvent':
        """Build from the API's camelCase payload."""
        def _optional_ts(key):
            value = data.get(key)
            return parse_timestamp(value) if value else None

        return cls(
            id=str(data.get("id", "")),
            name=data["name"],
            start_date=parse_timestamp(data["startDate"]),
            end_date=_optional_ts("endDate"),
            description=data.get("description") or "",
            color=data.get("color") or None,
            is_archived=bool(data.get("isArchived", False)),
            created_at=_optional_ts("createdAt"),
            updated_at=_optional_ts("updatedAt"),
            closed_at=_optional_ts("closedAt"),
        )


def duration_in_days(start: datetime, end: Optional[datetime]) -> int:
    """Days covered by [start, end]: max(1, ceil(elapsed days) + 1)."""
    if end is None:
        end = start
    elapsed = (end - start).total_seconds() / ONE_DAY_SECONDS
    return max(1, math.ceil(elapsed) + 1)


def adapt(
    db_event: DatabaseEvent,
    timezone_name: str = DEFAULT_TIMEZONE,
    default_color: str = DEFAULT_EVENT_COLOR,
) -> CalendarEvent:
    """
    Convert a one-shot database event to a CalendarEvent.

    Args:
        db_event: The storage record
        timezone_name: Timezone used to pick the anchor's calendar date
        default_color: Color for records that carry none

    Returns:
        CalendarEvent with a single ``once`` pattern
    """
    start = parse_timestamp(db_event.start_date)
    end = parse_timestamp(db_event.end_date) if db_event.end_date else start
    pattern = RecurrencePattern(
        anchor_date=to_local_date(start, timezone_name or DEFAULT_TIMEZONE),
        frequency=Frequency.ONCE.value,
        duration_days=duration_in_days(start, end),
    )
    return CalendarEvent(
        title=db_event.name,
        patterns=(pattern,),
        description=db_event.description or "",
        color=db_event.color or default_color,
        event_id=db_event.id or None,
    )


def adapt_all(
    db_events: Iterable[DatabaseEvent],
    timezone_name: str = DEFAULT_TIMEZONE,
    default_color: str = DEFAULT_EVENT_COLOR,
) -> list[CalendarEvent]:
    """Adapt every non-archived database event."""
    return [adapt(e, timezone_name, default_color) for e in db_events if not e.is_archived]


def _pattern_from_dict(data) -> RecurrencePattern:
    if not isinstance(data, dict):
        raise InvalidPatternError(f"Pattern entry must be an object, got {type(data).__name__}")
    anchor = data.get("anchorDate", data.get("startDate"))
    if anchor is None:
        raise KeyError("startDate")
    return RecurrencePattern(
        anchor_date=anchor,
        frequency=data.get("frequency") or Frequency.ONCE.value,
        duration_days=data.get("durationDays", data.get("duration", 1)),
    )


def pattern_event_from_dict(data: dict, default_color: str = DEFAULT_EVENT_COLOR) -> CalendarEvent:
    """Build a CalendarEvent from an ``events.json`` style definition."""
    raw_patterns = data.get("patterns", data.get("pattern"))
    if isinstance(raw_patterns, dict):
        raw_patterns = [raw_patterns]
    elif raw_patterns is not None and not isinstance(raw_patterns, (list, tuple)):
        raise InvalidPatternError(f"'pattern' must be a list of objects, got {type(raw_patterns).__name__}")
    return CalendarEvent(
        title=data["title"],
        patterns=tuple(_pattern_from_dict(p) for p in raw_patterns or ()),
        description=data.get("description") or "",
        color=data.get("color") or default_color,
        event_id=str(data["id"]) if data.get("id") is not None else None,
    )


def is_pattern_record(data: dict) -> bool:
    return "pattern" in data or "patterns" in data


def event_from_record(
    data: dict,
    timezone_name: str = DEFAULT_TIMEZONE,
    default_color: str = DEFAULT_EVENT_COLOR,
) -> Optional[CalendarEvent]:
    """
    Build a CalendarEvent from either record shape.

    Returns None for archived database events.
    """
    if is_pattern_record(data):
        return pattern_event_from_dict(data, default_color)
    db_event = DatabaseEvent.from_dict(data)
    if db_event.is_archived:
        return None
    return adapt(db_event, timezone_name, default_color)


def load_records(
    records: Iterable[Any],
    timezone_name: str = DEFAULT_TIMEZONE,
    default_color: str = DEFAULT_EVENT_COLOR,
) -> tuple[list[CalendarEvent], list[EventRecordError]]:
    """
    Build events from raw records, skipping and reporting bad ones.

    A bad record never aborts the rest of the batch.

    Returns:
        (events, skipped) where skipped holds one EventRecordError per
        record that could not be converted.
    """
    events = []
    skipped = []
    for index, record in enumerate(records):
        record_id = None
        try:
            if not isinstance(record, dict):
                raise EventRecordError(f"expected an object, got {type(record).__name__}", index)
            if record.get("id") is not None:
                record_id = str(record["id"])
            event = event_from_record(record, timezone_name, default_color)
        except EventRecordError as e:
            skipped.append(e)
            _debug_print(f"Skipping {e}")
            continue
        except KeyError as e:
            error = EventRecordError(f"missing field {e.args[0]!r}", index, record_id)
            skipped.append(error)
            _debug_print(f"Skipping {error}")
            continue
        except (CalendarError, ValueError, TypeError) as e:
            error = EventRecordError(str(e), index, record_id)
            skipped.append(error)
            _debug_print(f"Skipping {error}")
            continue

        if event is not None:
            events.append(event)

    _debug_print(f"Loaded {len(events)} events, skipped {len(skipped)} records")
    return events, skipped
