"""Unit tests for kingdom_calendar.timezone_utils."""

from datetime import date, datetime

import pytest
import pytz

from kingdom_calendar import timezone_utils
from kingdom_calendar.timezone_utils import parse_timestamp, set_timezone, to_local_date

pytestmark = pytest.mark.unit


def test_parse_timestamp_with_z_suffix():
    assert parse_timestamp("2024-01-10T18:00:00.000Z") == pytz.UTC.localize(datetime(2024, 1, 10, 18, 0))


def test_parse_timestamp_naive_is_utc():
    parsed = parse_timestamp("2024-01-10T18:00:00")
    assert parsed.tzinfo is not None
    assert parsed.hour == 18


def test_parse_timestamp_date():
    assert parse_timestamp(date(2024, 1, 10)) == pytz.UTC.localize(datetime(2024, 1, 10))


def test_parse_timestamp_rejects_numbers():
    with pytest.raises(ValueError):
        parse_timestamp(1704909600)


def test_to_local_date_follows_configured_timezone():
    stamp = parse_timestamp("2024-01-10T23:30:00Z")
    assert to_local_date(stamp) == date(2024, 1, 10)
    set_timezone("Asia/Tokyo")
    assert timezone_utils.get_timezone_name() == "Asia/Tokyo"
    assert to_local_date(stamp) == date(2024, 1, 11)


def test_set_timezone_rejects_unknown_name():
    with pytest.raises(pytz.UnknownTimeZoneError):
        set_timezone("Mars/Olympus")
    assert timezone_utils.get_timezone_name() == "UTC"
