"""End-to-end tests of the command line entry point."""

import json

import pytest

import kingdom_calendar_app

pytestmark = pytest.mark.integration


@pytest.fixture
def events_file(tmp_path, pattern_records):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(pattern_records + [{"title": "Broken", "pattern": [{"duration": 2}]}]), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def test_renders_month_from_events_file(events_file, capsys):
    assert kingdom_calendar_app.main(["--events", str(events_file), "--month", "2024-01"]) == 0
    captured = capsys.readouterr()
    assert captured.out.startswith("January 2024")
    assert "[KvK" in captured.out
    assert "Skipped record #2" in captured.err


def test_week_view_with_filter(events_file, capsys):
    args = ["--events", str(events_file), "--week", "2024-01-07", "--filter", "ark"]
    assert kingdom_calendar_app.main(args) == 0
    out = capsys.readouterr().out
    assert out.startswith("2024-01-07 - 2024-01-13")
    assert "[Ark" in out
    assert "[KvK" not in out


def test_export_ics(events_file, tmp_path, capsys):
    target = tmp_path / "out.ics"
    args = ["--events", str(events_file), "--month", "2024-01", "--export-ics", str(target)]
    assert kingdom_calendar_app.main(args) == 0
    text = target.read_text(encoding="utf-8")
    assert "BEGIN:VCALENDAR" in text
    assert "SUMMARY:KvK Training" in text


def test_config_file_sources(tmp_path, events_file, capsys):
    config_path = tmp_path / "kingdom-calendar.toml"
    config_path.write_text('[General]\nweek_start = "monday"\n\n[Sources]\nevents_file = "events.json"\n',
                           encoding="utf-8")
    assert kingdom_calendar_app.main(["-c", str(config_path), "--month", "2024-01"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[1].split()[0] == "Mon"


def test_missing_config_without_sources(capsys):
    assert kingdom_calendar_app.main(["--month", "2024-01"]) == 1
    assert "Configuration file not found" in capsys.readouterr().out


def test_invalid_month(events_file, capsys):
    assert kingdom_calendar_app.main(["--events", str(events_file), "--month", "2024-13"]) == 1
    assert "invalid date" in capsys.readouterr().out


def test_unreadable_events_file(tmp_path, capsys):
    assert kingdom_calendar_app.main(["--events", str(tmp_path / "absent.json"), "--month", "2024-01"]) == 1
    assert "Error loading events" in capsys.readouterr().out
