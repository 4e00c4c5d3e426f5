"""Tests for the CalendarView façade."""

from datetime import date, timedelta

import pytest

from kingdom_calendar.calendar_view import CalendarView, ViewType, build_calendar
from kingdom_calendar.packer import check_layout

pytestmark = pytest.mark.unit


@pytest.fixture
def events(make_event):
    return [
        make_event(title="KvK Training", anchor=date(2024, 1, 1), frequency="every-4-weeks", duration=3),
        make_event(title="Ark of Osiris", anchor=date(2024, 1, 6), frequency="every-8-weeks", duration=2),
        make_event(title="Council", anchor=date(2024, 1, 10)),
    ]


class TestWindow:

    def test_month_range(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 15))
        assert view.date_range() == (date(2023, 12, 31), date(2024, 2, 3))
        assert len(view.visible_days()) == 35
        assert len(view.weeks()) == 5
        assert all(len(week) == 7 for week in view.weeks())

    def test_week_range(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 10), view=ViewType.WEEK)
        assert view.date_range() == (date(2024, 1, 7), date(2024, 1, 13))
        assert len(view.weeks()) == 1

    def test_is_current_month(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 15))
        assert view.is_current_month(date(2024, 1, 31))
        assert not view.is_current_month(date(2023, 12, 31))
        view.set_view(ViewType.WEEK)
        assert view.is_current_month(date(2023, 12, 31))

    def test_view_accepts_string(self, events):
        view = CalendarView(events, view="week")
        assert view.view is ViewType.WEEK


class TestNavigation:

    def test_month_steps_clamp_day(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 31))
        view.go_next()
        assert view.current_date == date(2024, 2, 29)
        view.go_previous()
        view.go_previous()
        assert view.current_date == date(2023, 12, 29)

    def test_week_steps(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 10), view=ViewType.WEEK)
        view.go_next()
        assert view.current_date == date(2024, 1, 17)
        view.go_previous()
        view.go_previous()
        assert view.current_date == date(2024, 1, 3)

    def test_go_today(self, events):
        view = CalendarView(events, current_date=date(2000, 1, 1))
        view.go_today()
        assert view.current_date == date.today()


class TestOutputs:

    def test_instances_by_date(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 15))
        by_date = view.instances_by_date()
        assert [i.event.title for i in by_date[date(2024, 1, 1)]] == ["KvK Training"]
        assert [i.event.title for i in by_date[date(2024, 1, 10)]] == ["Council"]
        assert [i.event.title for i in by_date[date(2024, 1, 29)]] == ["KvK Training"]

    def test_filter_is_case_insensitive(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 15), filter_text="  kvk ")
        assert view.filter_text == "kvk"
        assert {i.event.title for i in view.instances()} == {"KvK Training"}
        view.set_filter("")
        assert len(view.visible_events()) == 3

    def test_events_are_not_modified(self, events):
        before = [repr(e) for e in events]
        view = CalendarView(events, current_date=date(2024, 1, 15))
        view.instances()
        view.week_layouts()
        assert [repr(e) for e in events] == before

    def test_week_layouts_are_valid(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 15))
        layouts = view.week_layouts()
        assert len(layouts) == 5
        for row, week in layouts:
            check_layout(week)
            assert {layout.span for layout in week} == set(row.spans)

    def test_layout_days_match_instances(self, events):
        view = CalendarView(events, current_date=date(2024, 1, 15))
        from_layouts = set()
        for row, week in view.week_layouts():
            for layout in week:
                for column in range(layout.start_column, layout.end_column + 1):
                    from_layouts.add((layout.event.title, row.week_start + timedelta(days=column)))
        from_instances = {(i.event.title, i.date) for i in view.instances()}
        assert from_layouts == from_instances

    def test_once_event_outside_window_is_absent_from_both(self, make_event):
        event = make_event(title="Later", anchor=date(2024, 3, 15))
        view = CalendarView([event], current_date=date(2024, 1, 15))
        assert view.instances() == []
        assert view.spans() == []


def test_build_calendar(pattern_records, database_records):
    view, skipped = build_calendar(
        pattern_records + database_records + [{"title": "broken", "pattern": [{}]}],
        current_date=date(2024, 1, 15),
    )
    assert skipped[0].index == 4
    assert [e.title for e in view.events] == ["KvK Training", "Ark of Osiris", "Kingdom Meeting"]
    assert date(2024, 1, 10) in view.instances_by_date()
