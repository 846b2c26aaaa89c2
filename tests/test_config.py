"""Tests for TOML configuration loading."""

from pathlib import Path

import pytest

from engine.calendar_system import CalendarSystem
from engine.config import Config
from engine.localization import MONDAY, SATURDAY
from engine.timezone_utils import get_timezone_name


EXAMPLE = """
[General]
display_calendar = "gregorian"
first_weekday = 0
week_origin = 0
timezone = "Europe/Berlin"

[Localization]
weekday_labels = "Mo Di Mi Do Fr Sa So"
month_names = "Jan Feb Mar Apr Mai Jun Jul Aug Sep Okt Nov Dez"
digits = "latin"

[Storage]
path = "{path}"
"""


def write_config(tmp_path, text) -> Path:
    config_path = tmp_path / "planner-calendar.toml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_defaults_are_jalali():
    config = Config.default()
    assert config.calendar.display_calendar is CalendarSystem.JALALI
    assert config.calendar.week_origin == SATURDAY
    assert config.calendar.first_weekday == 0
    converter = config.build_converter()
    assert converter.locale.weekday_labels == ("ش", "ی", "د", "س", "چ", "پ", "ج")
    assert converter.locale.month_name(1) == "فروردین"


def test_load_example(tmp_path):
    store_path = tmp_path / "items.json"
    config = Config.load(write_config(tmp_path, EXAMPLE.format(path=store_path)))

    assert config.calendar.display_calendar is CalendarSystem.GREGORIAN
    assert config.calendar.week_origin == MONDAY
    assert config.storage.path == store_path

    converter = config.build_converter()
    d = converter.make_date(2024, 6, 15)
    assert converter.format(d, "dddd D MMMM YYYY") == "Sa 15 Jun 2024"
    assert config.build_store().path == store_path

    config.apply()
    assert get_timezone_name() == "Europe/Berlin"


def test_missing_sections_keep_defaults(tmp_path):
    config = Config.load(write_config(tmp_path, "[General]\nfirst_weekday = 2\n"))
    assert config.calendar.display_calendar is CalendarSystem.JALALI
    assert config.calendar.first_weekday == 2
    assert config.localization.weekday_labels is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load(tmp_path / "nope.toml")


def test_default_path_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert Config.get_default_config_path() == tmp_path / "planner-calendar" / "planner-calendar.toml"


@pytest.mark.parametrize("text", [
    '[General]\ndisplay_calendar = "lunar"\n',
    "[General]\nfirst_weekday = 7\n",
    '[General]\nweek_origin = "saturday"\n',
    '[Localization]\nweekday_labels = "a b c"\n',
    '[Localization]\ndigits = "roman"\n',
    "[General\n",
])
def test_invalid_values(tmp_path, text):
    with pytest.raises(ValueError):
        Config.load(write_config(tmp_path, text))
