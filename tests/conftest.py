from datetime import date
from typing import Callable

import pytest

from kingdom_calendar.models import CalendarEvent, EventSpan, RecurrencePattern
from kingdom_calendar import timezone_utils


@pytest.fixture(autouse=True)
def reset_timezone():
    """Every test starts (and ends) with the UTC default timezone."""
    timezone_utils.set_timezone("UTC")
    yield
    timezone_utils.set_timezone("UTC")


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Factory for single-pattern events."""
    def _make(title="Event", anchor=date(2024, 1, 1), frequency="once", duration=1, color="#123456"):
        return CalendarEvent(
            title=title,
            patterns=(RecurrencePattern(anchor_date=anchor, frequency=frequency, duration_days=duration),),
            color=color,
        )
    return _make


@pytest.fixture
def make_span(make_event) -> Callable[..., EventSpan]:
    """Factory for spans with their own single-day event."""
    def _make(start: date, end: date, title: str = "Span"):
        return EventSpan(start_date=start, end_date=end, event=make_event(title=title, anchor=start))
    return _make


@pytest.fixture
def pattern_records() -> list[dict]:
    """Definitions in the shape of the dashboard's events.json."""
    return [
        {
            "title": "KvK Training",
            "description": "Practice fights",
            "color": "#FF0000",
            "pattern": [
                {"startDate": "2024-01-01", "frequency": "four-weeks", "duration": 3},
            ],
        },
        {
            "title": "Ark of Osiris",
            "color": "#00AA00",
            "patterns": [
                {"anchorDate": "2024-01-06", "frequency": "every-8-weeks", "durationDays": 2},
            ],
        },
    ]


@pytest.fixture
def database_records() -> list[dict]:
    """Events as returned by the events API."""
    return [
        {
            "id": "evt-1",
            "name": "Kingdom Meeting",
            "startDate": "2024-01-10T18:00:00.000Z",
            "endDate": "2024-01-10T19:00:00.000Z",
            "description": "Weekly council",
            "color": "#112233",
            "createdAt": "2023-12-01T00:00:00.000Z",
            "updatedAt": "2023-12-01T00:00:00.000Z",
            "isArchived": False,
        },
        {
            "id": "evt-2",
            "name": "Old Event",
            "startDate": "2024-01-12T00:00:00.000Z",
            "isArchived": True,
        },
    ]
