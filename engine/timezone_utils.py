"""
Timezone utilities for the planner calendar.

The engine works on naive local values. The only places a timezone matters
are "what day is today" and wire strings that carry an explicit UTC offset;
both are resolved against the configured local timezone here.
"""

from datetime import datetime, date
from typing import Callable, Optional
import time as _time
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "Asia/Tehran"

# Test hook: when set, replaces the wall clock
_clock_override: Optional[Callable[[], datetime]] = None


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    return _local_timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Falls back to the system's fixed UTC offset if the configured name is
    unknown to pytz.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        is_dst = _time.localtime().tm_isdst
        if is_dst:
            offset_seconds = -_time.altzone
        else:
            offset_seconds = -_time.timezone
        return pytz.FixedOffset(offset_seconds // 60)


def set_clock(clock: Optional[Callable[[], datetime]]):
    """
    Replace the wall clock with `clock` (returns a naive local datetime).

    Pass None to restore the real clock.
    """
    global _clock_override
    _clock_override = clock


def local_now() -> datetime:
    """Current local time as a naive datetime."""
    if _clock_override is not None:
        return _clock_override()
    return datetime.now(pytz.UTC).astimezone(get_local_timezone()).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def to_local_naive(dt: datetime) -> datetime:
    """
    Convert an aware datetime to a naive local datetime.

    Naive input is assumed to be local already and returned unchanged.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(get_local_timezone()).replace(tzinfo=None)
    return dt

