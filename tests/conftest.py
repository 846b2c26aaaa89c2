"""Shared fixtures for the engine tests."""

from datetime import datetime

import pytest

from engine.calendar_system import CalendarSystem
from engine.calendars import CalendarConverter
from engine.debug import set_debug
from engine.instant import Instant
from engine.items import CalendarItem, ItemKind, PointSchedule, RangeSchedule
from engine.localization import Locale
from engine.store import MemoryEventStore
from engine.timezone_utils import set_clock, set_timezone


# Wednesday 2024-03-20 is 1403/01/01
NOWRUZ_1403 = datetime(2024, 3, 20, 10, 0)


@pytest.fixture(autouse=True)
def engine_globals():
    set_timezone("Asia/Tehran")
    set_debug(False)
    yield
    set_clock(None)
    set_timezone("Asia/Tehran")
    set_debug(False)


@pytest.fixture
def frozen_clock():
    set_clock(lambda: NOWRUZ_1403)
    return NOWRUZ_1403


@pytest.fixture
def jalali():
    """Jalali converter with Persian names and Latin digits."""
    return CalendarConverter(CalendarSystem.JALALI, Locale.persian(digits="latin"))


@pytest.fixture
def jalali_fa_digits():
    return CalendarConverter(CalendarSystem.JALALI)


@pytest.fixture
def gregorian():
    return CalendarConverter(CalendarSystem.GREGORIAN)


@pytest.fixture
def store():
    return MemoryEventStore()


class CountingStore(MemoryEventStore):
    """Memory store that records every mutating call."""

    def __init__(self, fail_with=None):
        super().__init__()
        self.calls = []
        self.fail_with = fail_with

    def create(self, item):
        self.calls.append(("create", item.id))
        if self.fail_with:
            raise self.fail_with
        return super().create(item)

    def update(self, item_id, patch, expected_version=None):
        self.calls.append(("update", item_id))
        if self.fail_with:
            raise self.fail_with
        return super().update(item_id, patch, expected_version)


@pytest.fixture
def counting_store():
    return CountingStore()


def point(item_id, when, title=None, kind=ItemKind.MEETING):
    return CalendarItem(item_id, kind, title or item_id, PointSchedule(Instant.coerce(when)))


def span(item_id, start, end, title=None, kind=ItemKind.EVENT):
    return CalendarItem(item_id, kind, title or item_id,
                        RangeSchedule(Instant.coerce(start), Instant.coerce(end)))
