"""
Canonical instants.

Every calendar item stores its times as an Instant: a naive Gregorian date
with an optional time of day. The wire form is sortable text:

    2024-06-15                  date-only instant
    2024-06-15T10:30:00.000Z    timed instant (millisecond precision)

The trailing "Z" is part of the canonical form and is read back verbatim;
instants are naive local values. Wire strings carrying a numeric UTC offset
are converted to the configured local timezone.
"""

import re
from dataclasses import dataclass
from datetime import datetime, date, time as dt_time, timedelta, timezone
from typing import Optional, Union

from .errors import InvalidDate, MalformedInstant
from .timezone_utils import to_local_naive


_WIRE_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,6}))?)?)?"
    r"(Z|[+-]\d{2}:?\d{2})?$"
)


@dataclass(frozen=True, order=True)
class Instant:
    """
    A point in time at day or millisecond granularity.

    Ordering is chronological; a date-only instant sorts just before the
    timed instant at midnight of the same day.
    """
    moment: datetime
    has_time: bool = True

    def __post_init__(self):
        if self.moment.tzinfo is not None:
            raise ValueError("Instant values are naive local datetimes")

    # ==================== Construction ====================

    @classmethod
    def of_date(cls, d: date) -> 'Instant':
        """Date-only instant for `d`."""
        return cls(datetime(d.year, d.month, d.day), has_time=False)

    @classmethod
    def of_datetime(cls, dt: datetime) -> 'Instant':
        """Timed instant; aware values are converted to local time, precision is cut to milliseconds."""
        dt = to_local_naive(dt)
        return cls(dt.replace(microsecond=(dt.microsecond // 1000) * 1000), has_time=True)

    @classmethod
    def coerce(cls, value: Union['Instant', datetime, date, str]) -> 'Instant':
        """Accept an Instant, datetime, date or wire string."""
        if isinstance(value, Instant):
            return value
        if isinstance(value, datetime):
            return cls.of_datetime(value)
        if isinstance(value, date):
            return cls.of_date(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise TypeError(f"Cannot make an Instant from {type(value).__name__}")

    @classmethod
    def parse(cls, text: str) -> 'Instant':
        """
        Parse the wire form.

        Raises:
            MalformedInstant: the text is not in the wire form
            InvalidDate: the text is well-formed but names an impossible date
        """
        match = _WIRE_RE.match(text.strip())
        if not match:
            raise MalformedInstant(text)
        year, month, day, hour, minute, second, fraction, offset = match.groups()
        y, m, d = int(year), int(month), int(day)
        try:
            day_value = date(y, m, d)
        except ValueError as e:
            raise InvalidDate.for_tuple("gregorian", y, m, d, str(e)) from e

        if hour is None:
            if offset is not None:
                raise MalformedInstant(text)
            return cls.of_date(day_value)

        micro = int((fraction or "0").ljust(6, "0"))
        try:
            clock = dt_time(int(hour), int(minute), int(second or 0), micro)
        except ValueError as e:
            raise MalformedInstant(text) from e
        moment = datetime.combine(day_value, clock)

        if offset and offset != "Z":
            sign = 1 if offset[0] == "+" else -1
            digits = offset[1:].replace(":", "")
            delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
            moment = moment.replace(tzinfo=timezone(sign * delta))
        return cls.of_datetime(moment)

    # ==================== Views ====================

    @property
    def day(self) -> date:
        return self.moment.date()

    @property
    def time_of_day(self) -> Optional[dt_time]:
        return self.moment.time() if self.has_time else None

    @property
    def ordinal(self) -> int:
        """Gregorian proleptic day number (0001-01-01 is 1)."""
        return self.moment.toordinal()

    @property
    def day_key(self) -> str:
        """Canonical per-day key, sortable as text."""
        return self.day.isoformat()

    def to_wire(self) -> str:
        if not self.has_time:
            return self.day_key
        return self.moment.isoformat(timespec="milliseconds") + "Z"

    # ==================== Arithmetic ====================

    def truncate_to_day(self) -> 'Instant':
        return Instant.of_date(self.day)

    def add_days(self, days: int) -> 'Instant':
        try:
            return Instant(self.moment + timedelta(days=days), self.has_time)
        except OverflowError as e:
            raise InvalidDate(f"{self.day_key} + {days} days is outside the supported range") from e

    def with_time(self, clock: Optional[dt_time]) -> 'Instant':
        """Same day, with `clock` as time of day (None makes it date-only)."""
        if clock is None:
            return self.truncate_to_day()
        return Instant.of_datetime(datetime.combine(self.day, clock))

    def __str__(self):
        return self.to_wire()
