"""
Draft editor: the in-progress create/edit form.

A draft starts EMPTY (new item) or EDITING (copy of a stored item). Every
field change re-runs validation and leaves the draft VALID or INVALID. A VALID
draft can be committed to an EventStore; only a successful store call moves
it to COMMITTED. A failed or cancelled commit leaves it VALID so the user can
retry without losing their edits. DISCARDED and COMMITTED are terminal.

The schedule is either a point (one instant) or a range (start and end). The
range-mode toggle derives the other shape from the instant already set, so the
anchor date survives switching back and forth.

A draft is single-writer: one user edits one draft at a time.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, Union

from .debug import debug_print
from .errors import DraftStateError, InvalidRange, ValidationFailed
from .instant import Instant
from .items import CalendarItem, ItemKind, PointSchedule, RangeSchedule, Stage
from .store import EventStore, NEW_ITEM_ID


class DraftState(Enum):
    EMPTY = "empty"
    EDITING = "editing"
    VALID = "valid"
    INVALID = "invalid"
    COMMITTED = "committed"
    DISCARDED = "discarded"


TERMINAL_STATES = (DraftState.COMMITTED, DraftState.DISCARDED)


@dataclass(frozen=True)
class DraftRange:
    """Range as typed by the user; may still be inverted."""
    start: Instant
    end: Instant


DraftSchedule = Union[PointSchedule, DraftRange]

TEXT_FIELDS = ("title", "project_ref", "person_ref", "note")
SCHEDULE_FIELDS = ("instant", "start", "end")


class DraftEditor:
    """State machine around one draft item."""

    def __init__(self, schedule: DraftSchedule, base: Optional[CalendarItem] = None,
                 kind: ItemKind = ItemKind.MEETING, title: str = "",
                 project_ref: Optional[str] = None, person_ref: Optional[str] = None,
                 stage: Optional[Stage] = None, note: str = ""):
        self.base = base
        self.kind = kind
        self.title = title
        self.project_ref = project_ref
        self.person_ref = person_ref
        self.stage = stage
        self.note = note
        self._schedule: DraftSchedule = schedule
        self._state = DraftState.EMPTY if base is None else DraftState.EDITING
        self._problems: list[ValidationFailed] = []
        self._in_flight = False
        self.committed: Optional[CalendarItem] = None

    @classmethod
    def new(cls, day: Union[Instant, date, str], kind: ItemKind = ItemKind.MEETING,
            stage: Optional[Stage] = Stage.REGISTERED) -> 'DraftEditor':
        """Blank draft scheduled at `day` (e.g. the day cell the user clicked)."""
        return cls(PointSchedule(Instant.coerce(day)), kind=kind, stage=stage)

    @classmethod
    def from_item(cls, item: CalendarItem) -> 'DraftEditor':
        """Draft pre-filled from a stored item, for editing."""
        if isinstance(item.schedule, RangeSchedule):
            schedule: DraftSchedule = DraftRange(item.schedule.start, item.schedule.end)
        else:
            schedule = item.schedule
        return cls(schedule, base=item, kind=item.kind, title=item.title,
                   project_ref=item.project_ref, person_ref=item.person_ref,
                   stage=item.stage, note=item.note)

    # ==================== Inspection ====================

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def is_new(self) -> bool:
        return self.base is None

    @property
    def is_range(self) -> bool:
        return isinstance(self._schedule, DraftRange)

    @property
    def is_committing(self) -> bool:
        return self._in_flight

    @property
    def schedule(self) -> DraftSchedule:
        return self._schedule

    @property
    def instant(self) -> Optional[Instant]:
        return None if self.is_range else self._schedule.instant

    @property
    def start(self) -> Optional[Instant]:
        return self._schedule.start if self.is_range else None

    @property
    def end(self) -> Optional[Instant]:
        return self._schedule.end if self.is_range else None

    @property
    def problems(self) -> list[ValidationFailed]:
        return list(self._problems)

    def field_errors(self) -> dict[str, str]:
        """Validation messages keyed by the field they belong to."""
        return {p.field: str(p) for p in self._problems}

    # ==================== Editing ====================

    def _ensure_editable(self):
        if self._state in TERMINAL_STATES:
            raise DraftStateError(f"Draft is {self._state.value} and can no longer change")
        if self._in_flight:
            raise DraftStateError("Draft is being committed")

    def set_field(self, name: str, value: Any):
        """Update one field and revalidate; never switches point/range mode."""
        self._ensure_editable()
        if name == "kind":
            self.kind = value if isinstance(value, ItemKind) else ItemKind(value)
        elif name == "stage":
            self.stage = None if value is None or isinstance(value, Stage) else Stage(value)
        elif name in TEXT_FIELDS:
            if name == "title":
                value = value or ""
            setattr(self, name, value)
        elif name in SCHEDULE_FIELDS:
            self._set_schedule_field(name, Instant.coerce(value))
        else:
            raise KeyError(f"Unknown draft field: {name}")
        self.validate()

    def _set_schedule_field(self, name: str, value: Instant):
        if name == "instant":
            if self.is_range:
                raise ValueError("instant can only be set in point mode")
            self._schedule = PointSchedule(value)
            return
        if not self.is_range:
            raise ValueError(f"{name} can only be set in range mode")
        if name == "start":
            self._schedule = DraftRange(value, self._schedule.end)
        else:
            self._schedule = DraftRange(self._schedule.start, value)

    def set_instant(self, value: Union[Instant, date, str]):
        self.set_field("instant", value)

    def set_start(self, value: Union[Instant, date, str]):
        self.set_field("start", value)

    def set_end(self, value: Union[Instant, date, str]):
        self.set_field("end", value)

    def toggle_range_mode(self, enable: bool):
        """
        Switch between point and range mode.

        Point to range: start = instant, end = instant + 1 day.
        Range to point: instant = start.
        Asking for the current mode changes nothing.
        """
        self._ensure_editable()
        if enable and not self.is_range:
            anchor = self._schedule.instant
            self._schedule = DraftRange(anchor, anchor.add_days(1))
        elif not enable and self.is_range:
            self._schedule = PointSchedule(self._schedule.start)
        else:
            return
        self.validate()

    # ==================== Validation ====================

    def validate(self) -> list[ValidationFailed]:
        """Recompute the problem list and move to VALID or INVALID."""
        if self._state in TERMINAL_STATES:
            raise DraftStateError(f"Draft is {self._state.value}")
        problems: list[ValidationFailed] = []
        if not self.title or not self.title.strip():
            problems.append(ValidationFailed(ValidationFailed.MISSING_TITLE, "title", "Title is required"))
        if self.is_range and self._schedule.end < self._schedule.start:
            problems.append(InvalidRange(self._schedule.start, self._schedule.end))
        self._problems = problems
        self._state = DraftState.INVALID if problems else DraftState.VALID
        return list(problems)

    def check(self):
        """Validate and raise the first problem, if any."""
        problems = self.validate()
        if problems:
            raise problems[0]

    def to_item(self) -> CalendarItem:
        """The item this draft would commit. Raises if the draft is not valid."""
        self.check()
        if isinstance(self._schedule, DraftRange):
            schedule = RangeSchedule(self._schedule.start, self._schedule.end)
        else:
            schedule = self._schedule
        return CalendarItem(
            id=self.base.id if self.base else NEW_ITEM_ID,
            kind=self.kind,
            title=self.title.strip(),
            schedule=schedule,
            project_ref=self.project_ref,
            person_ref=self.person_ref,
            stage=self.stage,
            note=self.note or "",
            version=self.base.version if self.base else 1,
        )

    # ==================== Commit ====================

    def _store_call(self, store: EventStore, item: CalendarItem) -> CalendarItem:
        if self.base is None:
            return store.create(item)
        patch = {
            "kind": item.kind,
            "title": item.title,
            "schedule": item.schedule,
            "project_ref": item.project_ref,
            "person_ref": item.person_ref,
            "stage": item.stage,
            "note": item.note,
        }
        return store.update(self.base.id, patch, expected_version=self.base.version)

    def _begin_commit(self) -> CalendarItem:
        if self._state is not DraftState.VALID:
            raise DraftStateError(f"Only a valid draft can be committed (draft is {self._state.value})")
        if self._in_flight:
            raise DraftStateError("Draft is already being committed")
        item = self.to_item()
        self._in_flight = True
        return item

    def _finish_commit(self, result: CalendarItem) -> CalendarItem:
        self._in_flight = False
        self.committed = result
        self._state = DraftState.COMMITTED
        debug_print("DRAFT", f"committed {result.id} v{result.version}")
        return result

    def _abort_commit(self, error: BaseException):
        self._in_flight = False
        debug_print("DRAFT", f"commit failed, draft stays valid: {type(error).__name__}: {error}")

    def commit(self, store: EventStore) -> CalendarItem:
        """
        Hand the draft to `store` (create for new drafts, update for edits).

        Store errors (ConflictError, StoreUnavailable, ...) propagate and the
        draft stays VALID.
        """
        item = self._begin_commit()
        try:
            result = self._store_call(store, item)
        except BaseException as e:
            self._abort_commit(e)
            raise
        return self._finish_commit(result)

    def save(self, store: EventStore) -> CalendarItem:
        """Validate, then commit. Validation errors are raised before the store is touched."""
        self._ensure_editable()
        self.check()
        return self.commit(store)

    def commit_in_background(
        self,
        worker,
        store: EventStore,
        on_done: Optional[Callable[[CalendarItem], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> str:
        """
        Run commit() on a StoreWorker thread.

        Returns the operation id (usable with worker.cancel()). Callbacks run
        on the worker thread after the draft state has been updated. A
        cancelled commit reports CancelledError through `on_error`.
        """
        item = self._begin_commit()

        def _finished(result: CalendarItem):
            self._finish_commit(result)
            if on_done:
                on_done(result)

        def _failed(error: BaseException):
            self._abort_commit(error)
            if on_error:
                on_error(error)

        operation_id = f"commit:{item.id or 'new'}:{id(self)}"
        try:
            worker.submit(operation_id, self._store_call, store, item,
                          on_finished=_finished, on_error=_failed)
        except BaseException as e:
            self._abort_commit(e)
            raise
        return operation_id

    def discard(self):
        """Drop the draft without touching any store."""
        if self._state in TERMINAL_STATES:
            raise DraftStateError(f"Draft is already {self._state.value}")
        if self._in_flight:
            raise DraftStateError("Draft is being committed")
        self._state = DraftState.DISCARDED
