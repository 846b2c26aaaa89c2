"""Tests for the Instant wire format and ordering."""

from datetime import date, datetime, timezone

import pytest

from engine.errors import InvalidDate, MalformedInstant
from engine.instant import Instant


def test_date_only_wire():
    instant = Instant.parse("2024-06-15")
    assert not instant.has_time
    assert instant.day == date(2024, 6, 15)
    assert instant.time_of_day is None
    assert instant.to_wire() == "2024-06-15"


def test_timed_wire_reads_z_verbatim():
    instant = Instant.parse("2024-06-15T10:30:00.000Z")
    assert instant.has_time
    assert instant.moment == datetime(2024, 6, 15, 10, 30)
    assert instant.to_wire() == "2024-06-15T10:30:00.000Z"


def test_fraction_is_kept_to_milliseconds():
    assert Instant.parse("2024-06-15T10:30:00.5Z").to_wire() == "2024-06-15T10:30:00.500Z"
    assert Instant.parse("2024-06-15T10:30:00.123456Z").to_wire() == "2024-06-15T10:30:00.123Z"


@pytest.mark.parametrize("moment, wire", [
    (datetime(1, 1, 1, 0, 0), "0001-01-01T00:00:00.000Z"),
    (datetime(999, 5, 1, 10, 0), "0999-05-01T10:00:00.000Z"),
    (datetime(1582, 10, 15, 8, 5, 3, 42000), "1582-10-15T08:05:03.042Z"),
    (datetime(9999, 12, 31, 23, 59, 59, 999000), "9999-12-31T23:59:59.999Z"),
])
def test_wire_year_is_four_digits(moment, wire):
    timed = Instant.of_datetime(moment)
    assert timed.to_wire() == wire
    assert Instant.parse(wire) == timed

    day = timed.truncate_to_day()
    assert day.to_wire() == wire[:10]
    assert Instant.parse(day.to_wire()) == day


def test_wire_text_sorts_like_instants():
    instants = [
        Instant.of_datetime(datetime(999, 5, 1, 10)),
        Instant.of_datetime(datetime(1000, 1, 1, 9)),
        Instant.of_datetime(datetime(2024, 6, 15, 10, 30)),
    ]
    wires = [instant.to_wire() for instant in instants]
    assert sorted(wires) == wires


def test_seconds_are_optional():
    assert Instant.parse("2024-06-15T10:30").moment == datetime(2024, 6, 15, 10, 30)


def test_numeric_offset_converts_to_local_time():
    # Asia/Tehran is UTC+03:30 in January
    instant = Instant.parse("2024-01-15T10:00:00+00:00")
    assert instant.moment == datetime(2024, 1, 15, 13, 30)


def test_aware_datetime_converts_to_local_time():
    instant = Instant.of_datetime(datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc))
    assert instant.moment == datetime(2024, 1, 15, 13, 30)


@pytest.mark.parametrize("text", ["15/06/2024", "2024-6-15", "2024-06-15Z", "2024-06-15T25:00:00Z", ""])
def test_malformed_text_raises(text):
    with pytest.raises(MalformedInstant) as excinfo:
        Instant.parse(text)
    assert isinstance(excinfo.value, InvalidDate)


def test_impossible_date_raises_invalid_date():
    with pytest.raises(InvalidDate):
        Instant.parse("2024-02-30")


def test_aware_moment_is_rejected():
    with pytest.raises(ValueError):
        Instant(datetime(2024, 1, 1, tzinfo=timezone.utc))


def test_ordering_is_chronological():
    day = Instant.of_date(date(2024, 6, 15))
    midnight = Instant.of_datetime(datetime(2024, 6, 15))
    morning = Instant.parse("2024-06-15T09:00:00.000Z")
    next_day = Instant.of_date(date(2024, 6, 16))
    assert sorted([next_day, morning, midnight, day]) == [day, midnight, morning, next_day]


def test_day_helpers():
    instant = Instant.parse("2024-06-15T23:59:59.999Z")
    assert instant.day_key == "2024-06-15"
    assert instant.truncate_to_day() == Instant.of_date(date(2024, 6, 15))
    assert instant.add_days(1).to_wire() == "2024-06-16T23:59:59.999Z"
    assert instant.ordinal == date(2024, 6, 15).toordinal()


def test_add_days_out_of_range():
    with pytest.raises(InvalidDate):
        Instant.of_date(date(9999, 12, 31)).add_days(1)


def test_coerce():
    assert Instant.coerce(date(2024, 6, 15)) == Instant.parse("2024-06-15")
    assert Instant.coerce("2024-06-15T10:00:00.000Z") == Instant.of_datetime(datetime(2024, 6, 15, 10))
    with pytest.raises(TypeError):
        Instant.coerce(20240615)
