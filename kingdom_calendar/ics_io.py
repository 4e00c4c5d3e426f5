"""
iCalendar import and export.

Import turns the VEVENTs of an ICS document into one-shot DatabaseEvents
(recurrence rules in the feed are not interpreted). Export writes one
all-day VEVENT per occurrence span, so the expanded calendar can be
subscribed to from other clients.
"""

import re
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import pytz
from icalendar import Calendar as ICalCalendar, Event as ICalEvent

from .adapter import DatabaseEvent
from .errors import EventRecordError
from .models import EventSpan

PRODID = '-//Kingdom Calendar//EN'
COLOR_PROPERTIES = ('X-KINGDOM-COLOR', 'COLOR')


def parse_icalendar(ical_text: str) -> ICalCalendar:
    """
    Parse iCalendar text into an icalendar.Calendar object.

    Raises:
        ValueError: if the text is not a valid VCALENDAR
    """
    return ICalCalendar.from_ical(ical_text)


def _as_utc_datetime(value) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pytz.UTC.localize(value)
        return value.astimezone(pytz.UTC)
    return pytz.UTC.localize(datetime.combine(value, datetime.min.time()))


def _text(component, name: str) -> str:
    value = component.get(name)
    return str(value) if value else ''


def _color(component) -> Optional[str]:
    for name in COLOR_PROPERTIES:
        value = component.get(name)
        if value:
            return str(value)
    return None


def database_event_from_vevent(component) -> DatabaseEvent:
    """
    Convert one VEVENT to a DatabaseEvent.

    All-day DTEND values are exclusive in iCalendar; the stored end date
    is the last day the event covers.
    """
    dtstart = component.get('DTSTART')
    if dtstart is None:
        raise KeyError('DTSTART')
    start_val = dtstart.dt

    end = None
    dtend = component.get('DTEND')
    if dtend is not None:
        end_val = dtend.dt
        if isinstance(end_val, date) and not isinstance(end_val, datetime):
            end_val = end_val - timedelta(days=1)
        end = _as_utc_datetime(end_val)

    summary = _text(component, 'SUMMARY')
    if not summary:
        raise EventRecordError("VEVENT has no SUMMARY", record_id=_text(component, 'UID') or None)

    return DatabaseEvent(
        id=_text(component, 'UID'),
        name=summary,
        start_date=_as_utc_datetime(start_val),
        end_date=end,
        description=_text(component, 'DESCRIPTION'),
        color=_color(component),
        is_archived=_text(component, 'STATUS').upper() == 'CANCELLED',
    )


def database_events_from_ics(ical_text: str) -> tuple[list[DatabaseEvent], list[EventRecordError]]:
    """
    Import every VEVENT of an ICS document.

    Bad VEVENTs are skipped and reported, like bad JSON records.

    Raises:
        EventRecordError: if the document itself cannot be parsed
    """
    try:
        vcal = parse_icalendar(ical_text)
    except ValueError as e:
        raise EventRecordError(f"Invalid iCalendar data: {e}") from e

    events = []
    skipped = []
    for index, component in enumerate(vcal.walk('VEVENT')):
        try:
            events.append(database_event_from_vevent(component))
        except EventRecordError as e:
            e.index = index
            skipped.append(e)
        except KeyError as e:
            skipped.append(EventRecordError(f"missing property {e.args[0]}", index, _text(component, 'UID') or None))
        except (TypeError, ValueError) as e:
            skipped.append(EventRecordError(str(e), index, _text(component, 'UID') or None))
    return events, skipped


def _slug(text: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-') or 'event'


def span_uid(span: EventSpan) -> str:
    """Stable UID for an occurrence: event id (or title) plus start date."""
    base = span.event.event_id or _slug(span.event.title)
    return f"{base}-{span.start_date:%Y%m%d}@kingdom-calendar"


def span_to_vevent(span: EventSpan, stamp: Optional[datetime] = None) -> ICalEvent:
    event = ICalEvent()
    event.add('uid', span_uid(span))
    event.add('summary', span.event.title)
    event.add('dtstamp', stamp or datetime.now(pytz.UTC))
    event.add('dtstart', span.start_date)
    # DTEND is exclusive for all-day events
    event.add('dtend', span.end_date + timedelta(days=1))
    if span.event.description:
        event.add('description', span.event.description)
    if span.event.color:
        event.add('x-kingdom-color', span.event.color)
    return event


def spans_to_ics(spans: Iterable[EventSpan], stamp: Optional[datetime] = None) -> str:
    """Serialize occurrence spans as a VCALENDAR document."""
    vcal = ICalCalendar()
    vcal.add('prodid', PRODID)
    vcal.add('version', '2.0')
    for span in spans:
        vcal.add_component(span_to_vevent(span, stamp))
    return vcal.to_ical().decode('utf-8')
