"""
Configuration parser for Kingdom Calendar.

Handles TOML file parsing. Every section is optional; missing keys fall
back to the dataclass defaults.
"""

import os
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytz

from .date_window import DEFAULT_WEEK_START, parse_week_start
from .models import DEFAULT_EVENT_COLOR, FREQUENCY_INTERVALS


VIEW_NAMES = ("month", "week")


@dataclass
class GeneralConfig:
    """General calendar settings."""
    timezone: str = "UTC"
    week_start: int = DEFAULT_WEEK_START  # Python weekday number, Sunday by default
    default_view: str = "month"


@dataclass
class SourcesConfig:
    """Where event records come from."""
    events_file: Optional[Path] = None  # JSON list of records
    events_url: Optional[str] = None    # HTTP endpoint returning JSON records
    ics_file: Optional[Path] = None     # ICS file imported as one-shot events
    timeout: int = 30                   # HTTP timeout in seconds

    def is_empty(self) -> bool:
        return not (self.events_file or self.events_url or self.ics_file)


@dataclass
class ColorsConfig:
    """Configuration for event colors."""
    default_event_color: str = DEFAULT_EVENT_COLOR


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Default to English abbreviated day names
    day_names: list[str] = None  # Mon Tue Wed Thu Fri Sat Sun
    # Default to English full month names
    month_names: list[str] = None  # January February ... December

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        if self.month_names is None:
            self.month_names = [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December"
            ]

    def get_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Monday, 6=Sunday)."""
        return self.day_names[weekday] if 0 <= weekday < len(self.day_names) else ""

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""

    def day_names_for_week(self, week_start: int = DEFAULT_WEEK_START) -> list[str]:
        """Day names in grid column order for the given week start."""
        return [self.get_day_name((week_start + i) % 7) for i in range(7)]


def _optional_path(value) -> Optional[Path]:
    return Path(value).expanduser() if value else None


@dataclass
class Config:
    """Main configuration container for Kingdom Calendar."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    frequencies: dict[str, int] = field(default_factory=lambda: dict(FREQUENCY_INTERVALS))

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'kingdom-calendar' / 'kingdom-calendar.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()

        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        return cls.from_dict(data, base_dir=config_path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_dir: Optional[Path] = None) -> 'Config':
        """Build a Config from parsed TOML data."""
        # Parse General section
        general_data = data.get('General', {})
        timezone = general_data.get('timezone', GeneralConfig.timezone)
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone in configuration: {timezone!r}") from None
        default_view = general_data.get('default_view', GeneralConfig.default_view)
        if default_view not in VIEW_NAMES:
            raise ValueError(f"default_view must be one of {VIEW_NAMES}, got {default_view!r}")
        general = GeneralConfig(
            timezone=timezone,
            week_start=parse_week_start(general_data.get('week_start', DEFAULT_WEEK_START)),
            default_view=default_view,
        )

        # Parse Sources section; relative paths are taken from the config file's directory
        sources_data = data.get('Sources', {})

        def _resolve(value) -> Optional[Path]:
            path = _optional_path(value)
            if path is not None and base_dir is not None and not path.is_absolute():
                path = base_dir / path
            return path

        sources = SourcesConfig(
            events_file=_resolve(sources_data.get('events_file')),
            events_url=sources_data.get('events_url') or None,
            ics_file=_resolve(sources_data.get('ics_file')),
            timeout=int(sources_data.get('timeout', SourcesConfig.timeout)),
        )

        # Parse Frequencies section: name = interval in days
        frequencies = dict(FREQUENCY_INTERVALS)
        for name, days in data.get('Frequencies', {}).items():
            if isinstance(days, bool) or not isinstance(days, int) or days < 0:
                raise ValueError(f"Frequency {name!r} needs a non-negative day count, got {days!r}")
            frequencies[name] = days

        # Parse Colors section
        colors_data = data.get('Colors', {})
        colors = ColorsConfig(
            default_event_color=colors_data.get('default_event_color', ColorsConfig.default_event_color),
        )

        # Parse Localization section
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')

        # Parse space-separated day names (if provided)
        day_names = day_names_str.split() if day_names_str else None
        # Parse space-separated month names (if provided)
        month_names = month_names_str.split() if month_names_str else None

        if day_names is not None and len(day_names) != 7:
            print(f"WARNING: expected 7 day names, got {len(day_names)}; using defaults", file=sys.stderr)
            day_names = None
        if month_names is not None and len(month_names) != 12:
            print(f"WARNING: expected 12 month names, got {len(month_names)}; using defaults", file=sys.stderr)
            month_names = None

        localization = LocalizationConfig(
            day_names=day_names,
            month_names=month_names
        )

        return cls(
            general=general,
            sources=sources,
            colors=colors,
            localization=localization,
            frequencies=frequencies,
        )
