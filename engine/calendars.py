"""
Calendar conversion service.

Converts canonical Gregorian instants to dates of the display calendar
(Gregorian or Jalali) and back, and formats/parses display dates with a
small pattern vocabulary:

    YYYY    four-digit year         MMMM    month name
    MM      zero-padded month       dddd    weekday name
    DD      zero-padded day         HH      zero-padded hour
    D       unpadded day            mm      zero-padded minute
    [...]   literal text

Numbers are rendered with the locale's digit table. All methods are pure;
a converter holds only its immutable configuration.
"""

import re
from datetime import date, datetime, time as dt_time
from typing import Optional

from .calendar_system import (
    CalendarSystem, CalendarDate, DEFAULT_WEEK_ORIGIN,
    gregorian_to_jalali, jalali_days_in_month, jalali_is_leap,
)
from .errors import InvalidDate
from .instant import Instant
from .localization import Locale, delocalize_digits
from .timezone_utils import local_today


_TOKEN_RE = re.compile(r"YYYY|MMMM|MM|dddd|DD|D|HH|mm|\[[^\]]*\]")

_NUMERIC_PARSE = {
    "YYYY": r"(?P<year>\d{4})",
    "MM": r"(?P<month>\d{1,2})",
    "DD": r"(?P<day>\d{1,2})",
    "D": r"(?P<day>\d{1,2})",
    "HH": r"(?P<hour>\d{1,2})",
    "mm": r"(?P<minute>\d{1,2})",
}


def _tokenize(pattern: str) -> list[tuple[bool, str]]:
    """Split a pattern into (is_token, text) pieces."""
    pieces = []
    pos = 0
    for match in _TOKEN_RE.finditer(pattern):
        if match.start() > pos:
            pieces.append((False, pattern[pos:match.start()]))
        text = match.group(0)
        if text.startswith("["):
            pieces.append((False, text[1:-1]))
        else:
            pieces.append((True, text))
        pos = match.end()
    if pos < len(pattern):
        pieces.append((False, pattern[pos:]))
    return pieces


class CalendarConverter:
    """
    Conversion between canonical instants and display-calendar dates.

    Args:
        calendar: the display calendar
        locale: digit, weekday and month tables used by format()/parse()
        week_origin: Python weekday number (Monday=0) counted as weekday 0
    """

    def __init__(
        self,
        calendar: CalendarSystem = CalendarSystem.JALALI,
        locale: Optional[Locale] = None,
        week_origin: int = DEFAULT_WEEK_ORIGIN,
    ):
        if not 0 <= week_origin <= 6:
            raise ValueError(f"week_origin must be 0..6, got {week_origin}")
        self.calendar = calendar
        self.week_origin = week_origin
        if locale is None:
            if calendar is CalendarSystem.JALALI:
                locale = Locale.persian(calendar, week_origin)
            else:
                locale = Locale.english(calendar, week_origin)
        self.locale = locale

    # ==================== Dates ====================

    def make_date(self, year: int, month: int, day: int, time: Optional[dt_time] = None) -> CalendarDate:
        """Build a display-calendar date; raises InvalidDate for illegal tuples."""
        return CalendarDate(self.calendar, year, month, day, time, self.week_origin)

    def days_in_month(self, year: int, month: int) -> int:
        if self.calendar is CalendarSystem.JALALI:
            return jalali_days_in_month(year, month)
        if not 1 <= month <= 12:
            raise InvalidDate.for_tuple("gregorian", year, month, 1, "month must be 1..12")
        if month == 12:
            return 31
        return (date(year, month + 1, 1) - date(year, month, 1)).days

    def is_leap_year(self, year: int) -> bool:
        if self.calendar is CalendarSystem.JALALI:
            return jalali_is_leap(year)
        return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)

    def weekday_of(self, d: CalendarDate) -> int:
        """0..6 counted from this converter's week origin."""
        return (d.gregorian.weekday() - self.week_origin) % 7

    # ==================== Conversion ====================

    def to_display(self, instant: Instant) -> CalendarDate:
        """Display-calendar date of `instant`; the time of day is carried along."""
        g = instant.day
        if self.calendar is CalendarSystem.JALALI:
            j = gregorian_to_jalali(g)
            year, month, day = j.year, j.month, j.day
        else:
            year, month, day = g.year, g.month, g.day
        return CalendarDate(self.calendar, year, month, day, instant.time_of_day, self.week_origin)

    def from_display(self, d: CalendarDate) -> Instant:
        """Exact inverse of to_display()."""
        if d.time is None:
            return Instant.of_date(d.gregorian)
        return Instant.of_datetime(datetime.combine(d.gregorian, d.time))

    def add_days(self, d: CalendarDate, days: int) -> CalendarDate:
        return self.to_display(self.from_display(d).add_days(days))

    def month_start(self, d: CalendarDate, offset: int = 0) -> CalendarDate:
        """Day 1 of the month `offset` months after the month of `d`."""
        index = d.year * 12 + (d.month - 1) + offset
        return self.make_date(index // 12, index % 12 + 1, 1)

    def today(self) -> CalendarDate:
        return self.to_display(Instant.of_date(local_today()))

    # ==================== Formatting ====================

    def format(self, d: CalendarDate, pattern: str = "YYYY/MM/DD") -> str:
        out = []
        for is_token, text in _tokenize(pattern):
            if not is_token:
                out.append(text)
            elif text == "MMMM":
                out.append(self.locale.month_name(d.month))
            elif text == "dddd":
                out.append(self.locale.weekday_name(self.weekday_of(d)))
            else:
                out.append(self.locale.digits_of(self._number(d, text)))
        return "".join(out)

    @staticmethod
    def _number(d: CalendarDate, token: str) -> str:
        clock = d.time or dt_time()
        if token == "YYYY":
            return f"{d.year:04d}"
        if token == "MM":
            return f"{d.month:02d}"
        if token == "DD":
            return f"{d.day:02d}"
        if token == "D":
            return str(d.day)
        if token == "HH":
            return f"{clock.hour:02d}"
        return f"{clock.minute:02d}"

    def parse(self, text: str, pattern: str = "YYYY/MM/DD") -> CalendarDate:
        """
        Parse `text` written in `pattern`; inverse of format().

        Persian and Arabic-Indic digits are accepted. Raises InvalidDate if the
        text does not match the pattern or names an impossible date.
        """
        regex = []
        seen = set()
        for is_token, piece in _tokenize(pattern):
            if not is_token:
                regex.append(re.escape(piece))
                continue
            if piece == "MMMM":
                names = "|".join(re.escape(n) for n in self.locale.month_names)
                group, expr = "month_name", f"(?P<month_name>{names})"
            elif piece == "dddd":
                names = "|".join(re.escape(n) for n in self.locale.weekday_labels)
                group, expr = "weekday_name", f"(?P<weekday_name>{names})"
            else:
                expr = _NUMERIC_PARSE[piece]
                group = expr[4:expr.index(">")]
            if group in seen:
                raise ValueError(f"Pattern {pattern!r} uses the {group} field twice")
            seen.add(group)
            regex.append(expr)

        match = re.fullmatch("".join(regex), delocalize_digits(text.strip()))
        if not match:
            raise InvalidDate(f"{text!r} does not match pattern {pattern!r}", self.calendar.value)
        fields = match.groupdict()
        if "year" not in fields or not ({"month", "month_name"} & fields.keys()) or "day" not in fields:
            raise ValueError(f"Pattern {pattern!r} must contain a year, a month and a day")

        year = int(fields["year"])
        if fields.get("month_name"):
            month = self.locale.month_names.index(fields["month_name"]) + 1
        else:
            month = int(fields["month"])
        day = int(fields["day"])

        clock = None
        if fields.get("hour") is not None:
            try:
                clock = dt_time(int(fields["hour"]), int(fields.get("minute") or 0))
            except ValueError as e:
                raise InvalidDate(f"{text!r} has an impossible time of day", self.calendar.value) from e

        parsed = self.make_date(year, month, day, clock)
        if fields.get("weekday_name") and self.locale.weekday_name(parsed.weekday) != fields["weekday_name"]:
            raise InvalidDate.for_tuple(self.calendar.value, year, month, day,
                                        f"is not a {fields['weekday_name']}")
        return parsed

    def for_calendar(self, calendar: CalendarSystem) -> 'CalendarConverter':
        """A converter for `calendar` sharing this one's week origin and digit table."""
        if calendar is self.calendar:
            return self
        if calendar is CalendarSystem.JALALI:
            locale = Locale.persian(calendar, self.week_origin, self.locale.digits)
        else:
            locale = Locale.english(calendar, self.week_origin)
        return CalendarConverter(calendar, locale, self.week_origin)
