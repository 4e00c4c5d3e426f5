"""Unit tests for kingdom_calendar.grouper."""

from datetime import date

import pytest

from kingdom_calendar.date_window import MONDAY
from kingdom_calendar.errors import InvalidWindowError
from kingdom_calendar.grouper import group_by_week, group_window_by_week

pytestmark = pytest.mark.unit


class TestGroupByWeek:

    def test_january_2024_has_five_rows(self):
        rows = group_by_week([], date(2024, 1, 15))
        assert [row.week_start for row in rows] == [
            date(2023, 12, 31), date(2024, 1, 7), date(2024, 1, 14),
            date(2024, 1, 21), date(2024, 1, 28),
        ]
        assert rows[-1].week_end == date(2024, 2, 3)
        assert all(row.spans == () for row in rows)

    def test_span_crossing_weeks_joins_both_rows(self, make_span):
        span = make_span(date(2024, 1, 12), date(2024, 1, 15), "crossing")
        rows = group_by_week([span], date(2024, 1, 1))
        holding = [row.week_start for row in rows if span in row.spans]
        assert holding == [date(2024, 1, 7), date(2024, 1, 14)]

    def test_span_from_previous_month_is_kept(self, make_span):
        span = make_span(date(2023, 12, 25), date(2024, 1, 2), "new year")
        rows = group_by_week([span], date(2024, 1, 1))
        assert rows[0].spans == (span,)
        assert all(span not in row.spans for row in rows[1:])

    def test_monday_week_start(self):
        rows = group_by_week([], date(2024, 1, 1), MONDAY)
        assert rows[0].week_start == date(2024, 1, 1)
        assert rows[-1].week_end == date(2024, 2, 4)

    def test_keeps_input_order(self, make_span):
        b = make_span(date(2024, 1, 10), date(2024, 1, 10), "b")
        a = make_span(date(2024, 1, 8), date(2024, 1, 8), "a")
        rows = group_by_week([b, a], date(2024, 1, 1))
        assert rows[1].spans == (b, a)


class TestGroupWindowByWeek:

    def test_single_week_window(self, make_span):
        span = make_span(date(2024, 1, 9), date(2024, 1, 9))
        rows = group_window_by_week([span], date(2024, 1, 7), date(2024, 1, 13))
        assert len(rows) == 1
        assert rows[0].spans == (span,)

    def test_partial_weeks_are_widened(self):
        rows = group_window_by_week([], date(2024, 1, 10), date(2024, 1, 15))
        assert [(r.week_start, r.week_end) for r in rows] == [
            (date(2024, 1, 7), date(2024, 1, 13)),
            (date(2024, 1, 14), date(2024, 1, 20)),
        ]

    def test_rejects_inverted_window(self):
        with pytest.raises(InvalidWindowError):
            group_window_by_week([], date(2024, 1, 13), date(2024, 1, 7))
