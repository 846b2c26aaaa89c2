"""Tests for the month view session."""

from datetime import date

import pytest

from engine.config import Config
from engine.draft import DraftState
from engine.errors import ItemNotFound
from engine.instant import Instant
from engine.items import ItemKind
from engine.planner import PlannerSession
from engine.storage import JsonEventStore

from conftest import point, span


@pytest.fixture
def session(store, jalali, frozen_clock):
    return PlannerSession(store, jalali)


def test_starts_on_current_month(session):
    assert session.anchor.ymd == (1403, 1, 1)
    assert session.title == "1403 فروردین"


def test_navigation(session):
    assert session.go_next().ymd == (1403, 2, 1)
    assert session.go_previous().ymd == (1403, 1, 1)
    assert session.go_previous().ymd == (1402, 12, 1)
    assert session.go_to(1404, 7).ymd == (1404, 7, 1)
    assert session.go_today().ymd == (1403, 1, 1)


def test_month_view_indexes_store_items(session, store):
    meeting = store.create(point("m", "2024-03-25T10:00:00.000Z"))
    trip = store.create(span("t", "2024-03-24", "2024-03-26"))
    store.create(point("far", "2024-09-01"))

    grid, index = session.month_view()
    assert len(grid) == 42
    assert grid.cell_for("2024-03-20").is_today
    assert index["2024-03-25"] == [meeting, trip]
    assert index["2024-03-24"] == [trip]
    assert "2024-09-01" not in index


def test_day_items_and_kind_filter(session, store):
    meeting = store.create(point("m", "2024-03-25", kind=ItemKind.MEETING))
    deadline = store.create(point("d", "2024-03-27", kind=ItemKind.DEADLINE))
    assert session.day_items(date(2024, 3, 25)) == [meeting]
    assert session.items_between(date(2024, 3, 20), date(2024, 3, 30)) == [meeting, deadline]
    assert session.items_between(date(2024, 3, 20), date(2024, 3, 30), ItemKind.DEADLINE) == [deadline]


def test_new_draft_from_cell(session, store):
    grid, _ = session.month_view()
    draft = session.new_draft(grid.cell_for("2024-03-22"))
    assert draft.instant == Instant.of_date(date(2024, 3, 22))
    draft.set_field("title", "Kickoff")
    item = draft.save(store)
    assert session.day_items(date(2024, 3, 22)) == [item]


def test_new_draft_from_display_date(session, jalali):
    draft = session.new_draft(jalali.make_date(1403, 1, 13))
    assert draft.instant == Instant.of_date(date(2024, 4, 1))


def test_edit_and_remove(session, store):
    store.create(point("m", "2024-03-25", title="Old"))
    draft = session.edit_draft("m")
    assert draft.state is DraftState.EDITING
    draft.set_field("title", "New")
    draft.commit(store)
    assert store.get("m").title == "New"

    session.remove("m")
    with pytest.raises(ItemNotFound):
        session.edit_draft("m")


def test_from_config(tmp_path, frozen_clock):
    config = Config.default()
    config.storage.path = tmp_path / "items.json"
    session = PlannerSession.from_config(config)
    assert isinstance(session.store, JsonEventStore)
    assert session.title == "1403 فروردین"
