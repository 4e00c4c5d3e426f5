#!/usr/bin/env python3
"""
Kingdom Calendar - terminal view of the kingdom dashboard calendar.

This is the main entry point for the application.
"""

import sys
import argparse
from datetime import date
from pathlib import Path

from kingdom_calendar.calendar_view import CalendarView, ViewType
from kingdom_calendar.config import Config
from kingdom_calendar.errors import CalendarError
from kingdom_calendar.event_source import load_configured_events
from kingdom_calendar.ics_io import spans_to_ics
from kingdom_calendar.text_render import render_month
from kingdom_calendar.timezone_utils import set_timezone


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Kingdom Calendar - month and week view of recurring kingdom events"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--events",
        type=Path,
        help="JSON file with event records (overrides the configured source)"
    )
    parser.add_argument(
        "--ics",
        type=Path,
        help="ICS file to import as one-shot events"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--month",
        help="Month to show as YYYY-MM (default: current month)"
    )
    group.add_argument(
        "--week",
        help="Show the week containing this YYYY-MM-DD date"
    )
    parser.add_argument(
        "--filter",
        default="",
        help="Only show events whose title contains this text"
    )
    parser.add_argument(
        "--export-ics",
        type=Path,
        help="Write the visible occurrences to this ICS file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args(argv)


def load_config(args) -> Config:
    """Load the configuration, falling back to defaults when sources come from the command line."""
    try:
        config = Config.load(args.config)
    except FileNotFoundError:
        if args.config is not None or not (args.events or args.ics):
            raise
        config = Config()

    if args.events or args.ics:
        config.sources.events_file = args.events
        config.sources.events_url = None
        config.sources.ics_file = args.ics
    return config


def resolve_view(args, config: Config) -> tuple[date, ViewType]:
    if args.week:
        return date.fromisoformat(args.week), ViewType.WEEK
    if args.month:
        year, month = args.month.split("-")
        return date(int(year), int(month), 1), ViewType.MONTH
    return date.today(), ViewType(config.general.default_view)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("\nPlease create a configuration file at:")
        print(f"  - {Config.get_default_config_path()}")
        print("or pass --events / --ics on the command line.")
        print("\nExample configuration:")
        print("""
[General]
timezone = "UTC"
week_start = "sunday"

[Sources]
events_file = "events.json"

[Frequencies]
every-2-weeks = 14
""")
        return 1
    except (ValueError, OSError) as e:
        print(f"Error loading configuration: {e}")
        return 1

    if args.debug:
        print(f"Loaded configuration from: {args.config or Config.get_default_config_path()}", file=sys.stderr)
        print(f"  Timezone: {config.general.timezone}", file=sys.stderr)
        print(f"  Week start: {config.localization.get_day_name(config.general.week_start)}", file=sys.stderr)
        print(f"  Frequencies: {sorted(config.frequencies)}", file=sys.stderr)

    set_timezone(config.general.timezone)

    try:
        current_date, view_type = resolve_view(args, config)
    except ValueError as e:
        print(f"Error: invalid date: {e}")
        return 1

    try:
        result = load_configured_events(config)
    except CalendarError as e:
        print(f"Error loading events: {e}")
        return 1

    for error in result.skipped:
        print(f"Skipped {error}", file=sys.stderr)

    view = CalendarView(
        result.events,
        current_date=current_date,
        view=view_type,
        week_start=config.general.week_start,
        intervals=config.frequencies,
        filter_text=args.filter,
    )

    try:
        print(render_month(view, config.localization))
    except CalendarError as e:
        print(f"Error laying out calendar: {e}")
        return 1

    if args.export_ics:
        with open(args.export_ics, 'w', encoding='utf-8') as f:
            f.write(spans_to_ics(view.spans()))
        print(f"Wrote {args.export_ics}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
