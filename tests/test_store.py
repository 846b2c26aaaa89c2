"""Tests for the in-memory event store and the item model."""

from datetime import date

import pytest

from engine.errors import ConflictError, InvalidRange, ItemNotFound, ValidationFailed
from engine.instant import Instant
from engine.items import CalendarItem, ItemKind, PointSchedule, RangeSchedule, Stage
from engine.store import NEW_ITEM_ID

from conftest import point, span


def test_create_assigns_id_and_version(store):
    created = store.create(point(NEW_ITEM_ID, "2024-06-15"))
    assert created.id
    assert created.version == 1
    assert store.get(created.id) == created
    assert len(store) == 1


def test_create_keeps_given_id(store):
    assert store.create(point("fixed", "2024-06-15")).id == "fixed"
    with pytest.raises(ValueError):
        store.create(point("fixed", "2024-06-16"))


def test_update_bumps_version(store):
    created = store.create(point("a", "2024-06-15", title="Old"))
    updated = store.update("a", {"title": "New"}, expected_version=1)
    assert updated.title == "New"
    assert updated.version == 2
    assert store.get("a") == updated


def test_update_with_stale_version_conflicts(store):
    store.create(point("a", "2024-06-15"))
    store.update("a", {"title": "Second"})
    with pytest.raises(ConflictError) as excinfo:
        store.update("a", {"title": "Third"}, expected_version=1)
    assert excinfo.value.actual_version == 2
    assert store.get("a").title == "Second"


def test_unknown_ids(store):
    with pytest.raises(ItemNotFound):
        store.get("missing")
    with pytest.raises(ItemNotFound):
        store.update("missing", {"title": "x"})
    with pytest.raises(ItemNotFound):
        store.delete("missing")


def test_patch_cannot_touch_identity(store):
    store.create(point("a", "2024-06-15"))
    with pytest.raises(KeyError):
        store.update("a", {"id": "b"})
    with pytest.raises(KeyError):
        store.update("a", {"color": "red"})


def test_list_in_range_keeps_creation_order(store):
    late = store.create(point("late", "2024-06-20"))
    trip = store.create(span("trip", "2024-06-01", "2024-06-30"))
    early = store.create(point("early", "2024-06-02"))
    store.create(point("july", "2024-07-02"))

    listed = store.list_in_range(Instant.of_date(date(2024, 6, 1)), Instant.of_date(date(2024, 6, 30)))
    assert listed == [late, trip, early]


def test_delete(store):
    store.create(point("a", "2024-06-15"))
    store.delete("a")
    assert len(store) == 0


class TestItems:

    def test_blank_title_is_rejected(self):
        with pytest.raises(ValidationFailed) as excinfo:
            point("a", "2024-06-15", title="   ")
        assert excinfo.value.reason == ValidationFailed.MISSING_TITLE
        assert excinfo.value.field == "title"

    def test_inverted_range_is_rejected(self):
        with pytest.raises(InvalidRange) as excinfo:
            RangeSchedule(Instant.parse("2024-06-16"), Instant.parse("2024-06-15"))
        assert excinfo.value.reason == ValidationFailed.INVERTED_RANGE
        assert excinfo.value.field == "end"

    def test_single_day_range_is_allowed(self):
        day = Instant.parse("2024-06-15")
        assert RangeSchedule(day, day).covers(day.ordinal)

    def test_kind_colors(self):
        assert ItemKind.MEETING.color == "#2563eb"
        assert ItemKind.DEADLINE.color == "#ef4444"

    def test_dict_form(self):
        item = CalendarItem(
            "a", ItemKind.ASSIGNMENT, "Review", PointSchedule(Instant.parse("2024-06-15T10:00:00.000Z")),
            project_ref="p1", person_ref="u7", stage=Stage.UNDER_REVIEW, note="bring notes", version=3,
        )
        data = item.to_dict()
        assert data["date"] == "2024-06-15T10:00:00.000Z"
        assert "start" not in data
        assert data["projectId"] == "p1"
        assert CalendarItem.from_dict(data) == item

    def test_dict_form_rejects_double_schedule(self):
        data = span("a", "2024-06-01", "2024-06-02").to_dict()
        data["date"] = "2024-06-01"
        with pytest.raises(ValueError):
            CalendarItem.from_dict(data)
