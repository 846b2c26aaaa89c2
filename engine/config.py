"""
Configuration parser for the planner calendar.

Handles TOML file parsing and turns the settings into the converter, locale
and store the engine runs on.

Example:

    [General]
    display_calendar = "jalali"
    first_weekday = 0          # index into the week, 0 is the week origin
    week_origin = 5            # Python weekday of the week origin (5 = Saturday)
    timezone = "Asia/Tehran"

    [Localization]
    weekday_labels = "ش ی د س چ پ ج"
    month_names = "فروردین اردیبهشت خرداد تیر مرداد شهریور مهر آبان آذر دی بهمن اسفند"
    digits = "latin"

    [Storage]
    path = "~/.local/share/planner-calendar/items.json"
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .calendar_system import CalendarSystem, DEFAULT_WEEK_ORIGIN
from .calendars import CalendarConverter
from .debug import debug_print
from .localization import DIGIT_TABLES, Locale, default_month_names, default_weekday_labels
from .storage import JsonEventStore, get_default_storage_path
from .timezone_utils import set_timezone


def _weekday_number(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 6:
        raise ValueError(f"{name} must be an integer 0..6, got {value!r}")
    return value


@dataclass
class CalendarConfig:
    """Which calendar is shown and how weeks are laid out."""
    display_calendar: CalendarSystem = CalendarSystem.JALALI
    first_weekday: int = 0  # Leftmost grid column, counted from week_origin
    week_origin: int = DEFAULT_WEEK_ORIGIN  # Python weekday (Monday=0) numbered 0
    timezone: str = "Asia/Tehran"


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    weekday_labels: Optional[list[str]] = None  # Starting at the week origin
    month_names: Optional[list[str]] = None  # Months 1..12 of the display calendar
    digits: str = "latin"

    def __post_init__(self):
        if self.weekday_labels is not None and len(self.weekday_labels) != 7:
            raise ValueError(f"weekday_labels needs 7 names, got {len(self.weekday_labels)}")
        if self.month_names is not None and len(self.month_names) != 12:
            raise ValueError(f"month_names needs 12 names, got {len(self.month_names)}")
        if self.digits not in DIGIT_TABLES:
            raise ValueError(f"digits must be one of {', '.join(DIGIT_TABLES)}, got {self.digits!r}")


@dataclass
class StorageConfig:
    path: Path = field(default_factory=get_default_storage_path)


@dataclass
class Config:
    """Main configuration container for the planner calendar."""

    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'planner-calendar' / 'planner-calendar.toml'

    @classmethod
    def default(cls) -> 'Config':
        """Jalali calendar, weeks starting on Saturday, Persian names."""
        return cls()

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
        debug_print("CONFIG", f"Loaded {config_path} (sections: {', '.join(data) or 'none'})")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from parsed TOML tables; missing keys keep their defaults."""
        # Parse General section
        general = data.get('General', {})
        calendar = CalendarConfig(
            display_calendar=CalendarSystem.from_name(general.get('display_calendar', 'jalali')),
            first_weekday=_weekday_number(general.get('first_weekday', 0), 'first_weekday'),
            week_origin=_weekday_number(general.get('week_origin', DEFAULT_WEEK_ORIGIN), 'week_origin'),
            timezone=general.get('timezone', CalendarConfig.timezone),
        )

        # Parse Localization section (space-separated name lists)
        localization_data = data.get('Localization', {})
        weekday_labels_str = localization_data.get('weekday_labels', '')
        month_names_str = localization_data.get('month_names', '')
        localization = LocalizationConfig(
            weekday_labels=weekday_labels_str.split() if weekday_labels_str else None,
            month_names=month_names_str.split() if month_names_str else None,
            digits=localization_data.get('digits', 'latin'),
        )

        # Parse Storage section
        storage_data = data.get('Storage', {})
        storage = StorageConfig()
        if storage_data.get('path'):
            storage = StorageConfig(path=Path(os.path.expanduser(storage_data['path'])))

        return cls(calendar=calendar, localization=localization, storage=storage)

    # ==================== Engine objects ====================

    def build_locale(self) -> Locale:
        persian = self.calendar.display_calendar is CalendarSystem.JALALI
        labels = self.localization.weekday_labels or default_weekday_labels(
            self.calendar.week_origin, persian=persian)
        months = self.localization.month_names or default_month_names(
            self.calendar.display_calendar, persian=persian)
        return Locale(tuple(labels), tuple(months), self.localization.digits)

    def build_converter(self) -> CalendarConverter:
        return CalendarConverter(self.calendar.display_calendar, self.build_locale(),
                                 self.calendar.week_origin)

    def build_store(self) -> JsonEventStore:
        return JsonEventStore(self.storage.path)

    def apply(self):
        """Install process-wide settings (the local timezone)."""
        set_timezone(self.calendar.timezone)
