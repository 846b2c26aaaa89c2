"""
Locale tables: digits, weekday names and month names.

Weekday labels are indexed by the engine's weekday number, which counts from
the configured week origin (Saturday by default). The tables below are kept
Monday-first, the way Python's date.weekday() counts, and rotated on demand.
"""

from dataclasses import dataclass
from typing import Sequence

from .calendar_system import CalendarSystem


# Python weekday numbers (date.weekday())
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

LATIN_DIGITS = "0123456789"
PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"

DIGIT_TABLES = {
    "latin": LATIN_DIGITS,
    "persian": PERSIAN_DIGITS,
}

_TO_PERSIAN = str.maketrans(LATIN_DIGITS, PERSIAN_DIGITS)
_TO_LATIN = str.maketrans(PERSIAN_DIGITS + ARABIC_INDIC_DIGITS, LATIN_DIGITS * 2)

# Monday-first
_WEEKDAYS_FA_SHORT = ["د", "س", "چ", "پ", "ج", "ش", "ی"]
_WEEKDAYS_FA = ["دوشنبه", "سه‌شنبه", "چهارشنبه", "پنجشنبه", "جمعه", "شنبه", "یکشنبه"]
_WEEKDAYS_EN_SHORT = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_WEEKDAYS_EN = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

JALALI_MONTHS_FA = [
    "فروردین", "اردیبهشت", "خرداد", "تیر", "مرداد", "شهریور",
    "مهر", "آبان", "آذر", "دی", "بهمن", "اسفند",
]
JALALI_MONTHS_EN = [
    "Farvardin", "Ordibehesht", "Khordad", "Tir", "Mordad", "Shahrivar",
    "Mehr", "Aban", "Azar", "Dey", "Bahman", "Esfand",
]
GREGORIAN_MONTHS_FA = [
    "ژانویه", "فوریه", "مارس", "آوریل", "مه", "ژوئن",
    "ژوئیه", "اوت", "سپتامبر", "اکتبر", "نوامبر", "دسامبر",
]
GREGORIAN_MONTHS_EN = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def localize_digits(text: str, digits: str = "latin") -> str:
    """Render ASCII digits in `text` with the named digit table."""
    if digits not in DIGIT_TABLES:
        raise ValueError(f"Unknown digit table: {digits!r}")
    if digits == "persian":
        return text.translate(_TO_PERSIAN)
    return text


def delocalize_digits(text: str) -> str:
    """Turn Persian and Arabic-Indic digits into ASCII digits."""
    return text.translate(_TO_LATIN)


def rotate_weekdays(monday_first: Sequence[str], week_origin: int) -> list[str]:
    """Reorder a Monday-first table so index 0 is `week_origin`."""
    return [monday_first[(week_origin + i) % 7] for i in range(7)]


def default_weekday_labels(week_origin: int = SATURDAY, persian: bool = True, short: bool = True) -> list[str]:
    if persian:
        table = _WEEKDAYS_FA_SHORT if short else _WEEKDAYS_FA
    else:
        table = _WEEKDAYS_EN_SHORT if short else _WEEKDAYS_EN
    return rotate_weekdays(table, week_origin)


def default_month_names(calendar: CalendarSystem, persian: bool = True) -> list[str]:
    if calendar is CalendarSystem.JALALI:
        return list(JALALI_MONTHS_FA if persian else JALALI_MONTHS_EN)
    return list(GREGORIAN_MONTHS_FA if persian else GREGORIAN_MONTHS_EN)


@dataclass(frozen=True)
class Locale:
    """Display tables handed to the conversion service."""
    weekday_labels: tuple[str, ...]
    month_names: tuple[str, ...]
    digits: str = "latin"

    def __post_init__(self):
        if len(self.weekday_labels) != 7:
            raise ValueError(f"weekday_labels needs 7 entries, got {len(self.weekday_labels)}")
        if len(self.month_names) != 12:
            raise ValueError(f"month_names needs 12 entries, got {len(self.month_names)}")
        if self.digits not in DIGIT_TABLES:
            raise ValueError(f"Unknown digit table: {self.digits!r}")

    @classmethod
    def persian(cls, calendar: CalendarSystem = CalendarSystem.JALALI,
                week_origin: int = SATURDAY, digits: str = "persian") -> 'Locale':
        return cls(
            weekday_labels=tuple(default_weekday_labels(week_origin, persian=True)),
            month_names=tuple(default_month_names(calendar, persian=True)),
            digits=digits,
        )

    @classmethod
    def english(cls, calendar: CalendarSystem = CalendarSystem.GREGORIAN,
                week_origin: int = SATURDAY) -> 'Locale':
        return cls(
            weekday_labels=tuple(default_weekday_labels(week_origin, persian=False)),
            month_names=tuple(default_month_names(calendar, persian=False)),
            digits="latin",
        )

    def weekday_name(self, weekday: int) -> str:
        """Label for an engine weekday number (0 is the week origin)."""
        return self.weekday_labels[weekday] if 0 <= weekday < 7 else ""

    def month_name(self, month: int) -> str:
        """Name for month 1..12 of the display calendar."""
        return self.month_names[month - 1] if 1 <= month <= 12 else ""

    def digits_of(self, text: str) -> str:
        return localize_digits(text, self.digits)
