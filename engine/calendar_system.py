"""
Calendar systems and calendar dates.

A CalendarDate is always a legal date of its calendar: the constructor
validates the tuple and raises InvalidDate otherwise. The weekday is derived
from the Gregorian proleptic day number, so it does not depend on which
calendar the date was written in.

The Jalali arithmetic (33-year leap cycle) is delegated to jdatetime.
"""

from dataclasses import dataclass, field
from datetime import date, time as dt_time
from enum import Enum
from typing import Optional

import jdatetime

from .errors import InvalidDate


class CalendarSystem(Enum):
    GREGORIAN = "gregorian"
    JALALI = "jalali"

    @classmethod
    def from_name(cls, name: str) -> 'CalendarSystem':
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown calendar {name!r}, expected one of: {', '.join(c.value for c in cls)}"
            ) from None


# Python weekday number of Saturday (date.weekday() counts from Monday)
DEFAULT_WEEK_ORIGIN = 5

JALALI_MIN_YEAR = 1
JALALI_MAX_YEAR = 9377


def gregorian_to_jalali(d: date) -> jdatetime.date:
    try:
        return jdatetime.date.fromgregorian(date=d)
    except ValueError as e:
        raise InvalidDate.for_tuple(
            "gregorian", d.year, d.month, d.day, "outside the supported Jalali range"
        ) from e


def jalali_days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDate.for_tuple("jalali", year, month, 1, "month must be 1..12")
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if jalali_is_leap(year) else 29


def jalali_is_leap(year: int) -> bool:
    if not JALALI_MIN_YEAR <= year <= JALALI_MAX_YEAR:
        raise InvalidDate.for_tuple("jalali", year, 1, 1, "year out of range")
    return jdatetime.date(year, 1, 1).isleap()


@dataclass(frozen=True)
class CalendarDate:
    """
    A date in a specific calendar, optionally with a time of day.

    `week_origin` is the Python weekday number (Monday=0) that the engine
    counts as weekday 0; the default is Saturday.
    """
    calendar: CalendarSystem
    year: int
    month: int
    day: int
    time: Optional[dt_time] = None
    week_origin: int = field(default=DEFAULT_WEEK_ORIGIN, compare=False)
    gregorian: date = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'gregorian', self._to_gregorian())

    def _to_gregorian(self) -> date:
        if self.calendar is CalendarSystem.GREGORIAN:
            try:
                return date(self.year, self.month, self.day)
            except ValueError as e:
                raise InvalidDate.for_tuple("gregorian", self.year, self.month, self.day, str(e)) from e
        try:
            return jdatetime.date(self.year, self.month, self.day).togregorian()
        except ValueError as e:
            raise InvalidDate.for_tuple("jalali", self.year, self.month, self.day, str(e)) from e

    @property
    def ordinal(self) -> int:
        """Gregorian proleptic day number."""
        return self.gregorian.toordinal()

    @property
    def weekday(self) -> int:
        """0..6, counted from the week origin."""
        return (self.gregorian.weekday() - self.week_origin) % 7

    @property
    def ymd(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)

    def same_month(self, other: 'CalendarDate') -> bool:
        return (self.calendar, self.year, self.month) == (other.calendar, other.year, other.month)

    def __str__(self):
        return f"{self.year:04d}/{self.month:02d}/{self.day:02d}"
