"""Tests for the JSON file store."""

import json
from datetime import date

import pytest

from engine.errors import ConflictError, ItemNotFound, StoreUnavailable
from engine.instant import Instant
from engine.items import CalendarItem, ItemKind, PointSchedule, Stage
from engine.storage import JsonEventStore
from engine.store import NEW_ITEM_ID

from conftest import point, span


@pytest.fixture
def path(tmp_path):
    return tmp_path / "data" / "items.json"


def test_missing_file_is_an_empty_store(path):
    store = JsonEventStore(path)
    assert store.all_items() == []
    assert not path.exists()


def test_items_persist_across_instances(path):
    item = CalendarItem(
        NEW_ITEM_ID, ItemKind.ASSIGNMENT, "Review", PointSchedule(Instant.parse("2024-06-15T10:30:00.250Z")),
        project_ref="p1", person_ref="u7", stage=Stage.CERTIFICATE_ISSUED, note="bring notes",
    )
    created = JsonEventStore(path).create(item)
    trip = JsonEventStore(path).create(span("trip", "2024-06-14", "2024-06-16"))

    reopened = JsonEventStore(path)
    assert reopened.get(created.id) == created
    assert reopened.all_items() == [created, trip]


def test_file_holds_vevent_text(path):
    JsonEventStore(path).create(point("a", "2024-06-15", title="Standup"))
    data = json.loads(path.read_text(encoding="utf-8"))
    [record] = data["items"]
    assert record["id"] == "a"
    assert record["version"] == 1
    assert "BEGIN:VEVENT" in record["raw_ical"]
    assert "SUMMARY:Standup" in record["raw_ical"]


def test_update_and_conflict(path):
    store = JsonEventStore(path)
    store.create(point("a", "2024-06-15", title="Old"))
    updated = store.update("a", {"title": "New"}, expected_version=1)
    assert updated.version == 2
    assert JsonEventStore(path).get("a").title == "New"
    with pytest.raises(ConflictError):
        store.update("a", {"title": "Stale"}, expected_version=1)


def test_delete_and_unknown_ids(path):
    store = JsonEventStore(path)
    store.create(point("a", "2024-06-15"))
    store.delete("a")
    with pytest.raises(ItemNotFound):
        store.get("a")
    with pytest.raises(ItemNotFound):
        store.delete("a")


def test_list_in_range(path):
    store = JsonEventStore(path)
    inside = store.create(point("in", "2024-06-15"))
    store.create(point("out", "2024-07-15"))
    trip = store.create(span("trip", "2024-05-30", "2024-06-01"))
    listed = store.list_in_range(Instant.of_date(date(2024, 6, 1)), Instant.of_date(date(2024, 6, 30)))
    assert listed == [inside, trip]


def test_import_items_renames_taken_ids(path):
    store = JsonEventStore(path)
    store.create(point("a", "2024-06-15"))
    created = store.import_items([point("a", "2024-06-16"), point("b", "2024-06-17")])
    assert created[0].id != "a"
    assert created[1].id == "b"
    assert len(store.all_items()) == 3


def test_corrupt_file_raises_store_unavailable(path):
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreUnavailable):
        JsonEventStore(path).all_items()


def test_unwritable_location_raises_store_unavailable(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    with pytest.raises(StoreUnavailable):
        JsonEventStore(blocker / "items.json").create(point("a", "2024-06-15"))


def test_items_before_year_1000_stay_readable(path):
    store = JsonEventStore(path)
    early = store.create(point("", "0999-05-01T10:00:00.000Z", title="Early"))
    first = store.create(span("", "0001-01-01", "0001-01-03", title="First"))

    reopened = JsonEventStore(path)
    assert reopened.get(early.id) == early
    assert reopened.get(first.id) == first
    assert "X-PLANNER-DATE:0999-05-01T10:00:00.000Z" in path.read_text(encoding="utf-8")


def test_failed_write_leaves_no_temp_file(path, monkeypatch):
    store = JsonEventStore(path)
    store.create(point("a", "2024-06-15"))

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("engine.storage.os.replace", failing_replace)
    with pytest.raises(StoreUnavailable):
        store.create(point("b", "2024-06-16"))
    monkeypatch.undo()

    assert not path.with_name(path.name + ".tmp").exists()
    assert [item.id for item in JsonEventStore(path).all_items()] == ["a"]
