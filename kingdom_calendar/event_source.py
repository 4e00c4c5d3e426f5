"""
Event feeds: JSON event records from a local file or the dashboard API.

A feed only fetches and caches the raw records. Turning them into
CalendarEvents (and skipping bad ones) is done by adapter.load_records.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytz
import requests

from .adapter import adapt_all, load_records
from .errors import EventRecordError, EventSourceError
from .ics_io import database_events_from_ics
from .models import DEFAULT_EVENT_COLOR, CalendarEvent
from .timezone_utils import DEFAULT_TIMEZONE


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] SOURCE: {msg}", file=sys.stderr)


@dataclass
class LoadResult:
    """Events built from a feed plus the records that were skipped."""
    events: list[CalendarEvent] = field(default_factory=list)
    skipped: list[EventRecordError] = field(default_factory=list)

    def extend(self, other: 'LoadResult') -> None:
        self.events.extend(other.events)
        self.skipped.extend(other.skipped)


def _records_from_document(document) -> list:
    """Accept a bare list of records or an object with an ``events`` list."""
    if isinstance(document, list):
        return document
    if isinstance(document, dict) and isinstance(document.get("events"), list):
        return document["events"]
    raise EventSourceError("Expected a JSON list of events or an object with an 'events' list")


class EventFeed:
    """
    Source of raw event records.

    Exactly one of path or url must be given. Records are cached after a
    successful fetch; the last failure is kept in ``error``.
    """

    def __init__(self, path: Optional[Path] = None, url: Optional[str] = None, timeout: int = 30):
        if bool(path) == bool(url):
            raise ValueError("EventFeed needs exactly one of path or url")
        self.path = Path(path) if path else None
        self.url = url
        self.timeout = timeout

        self._records: Optional[list] = None
        self._last_fetch: Optional[datetime] = None
        self._error: Optional[str] = None

    @property
    def name(self) -> str:
        return str(self.path) if self.path else self.url

    def _read_document(self):
        if self.path is not None:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)

        response = requests.get(
            self.url,
            timeout=self.timeout,
            headers={
                'User-Agent': 'Kingdom-Calendar/1.0',
                'Accept': 'application/json'
            }
        )
        response.raise_for_status()
        return response.json()

    def fetch(self) -> list:
        """
        Read the records from the file or URL.

        Returns:
            The list of raw records.

        Raises:
            EventSourceError: if reading or decoding fails
        """
        try:
            records = _records_from_document(self._read_document())
        except ValueError as e:
            # json.JSONDecodeError, also raised by response.json()
            self._error = f"Invalid JSON from {self.name}: {e}"
        except requests.RequestException as e:
            self._error = f"Network error: {e}"
        except OSError as e:
            self._error = f"Cannot read {self.path}: {e}"
        except EventSourceError as e:
            self._error = str(e)
        else:
            self._records = records
            self._last_fetch = datetime.now(pytz.UTC)
            self._error = None
            _debug_print(f"Fetched {len(records)} records from {self.name}")
            return records

        _debug_print(self._error)
        raise EventSourceError(self._error)

    def get_records(self, force_fetch: bool = False) -> list:
        """Cached records, fetching on first use or when forced."""
        if force_fetch or self._records is None:
            return self.fetch()
        return self._records

    def load(
        self,
        timezone_name: str = DEFAULT_TIMEZONE,
        default_color: str = DEFAULT_EVENT_COLOR,
        force_fetch: bool = False,
    ) -> LoadResult:
        """Fetch (if needed) and convert the records to CalendarEvents."""
        events, skipped = load_records(self.get_records(force_fetch), timezone_name, default_color)
        return LoadResult(events=events, skipped=skipped)

    @property
    def last_fetch(self) -> Optional[datetime]:
        return self._last_fetch

    @property
    def error(self) -> Optional[str]:
        return self._error


def load_ics_file(path: Path, timezone_name: str = DEFAULT_TIMEZONE,
                  default_color: str = DEFAULT_EVENT_COLOR) -> LoadResult:
    """Import the VEVENTs of an ICS file as one-shot events."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise EventSourceError(f"Cannot read {path}: {e}") from e

    db_events, skipped = database_events_from_ics(text)
    events = adapt_all(db_events, timezone_name, default_color)
    _debug_print(f"Imported {len(events)} events from {path}")
    return LoadResult(events=events, skipped=skipped)


def load_configured_events(config) -> LoadResult:
    """
    Load events from every source named in the configuration.

    Raises:
        EventSourceError: if no source is configured or one cannot be read
    """
    sources = config.sources
    if sources.is_empty():
        raise EventSourceError("No event source configured (events_file, events_url or ics_file)")

    timezone_name = config.general.timezone
    default_color = config.colors.default_event_color
    result = LoadResult()

    if sources.events_file:
        feed = EventFeed(path=sources.events_file)
        result.extend(feed.load(timezone_name, default_color))
    if sources.events_url:
        feed = EventFeed(url=sources.events_url, timeout=sources.timeout)
        result.extend(feed.load(timezone_name, default_color))
    if sources.ics_file:
        result.extend(load_ics_file(sources.ics_file, timezone_name, default_color))

    return result
