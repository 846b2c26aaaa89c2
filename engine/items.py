"""
Calendar items: the scheduling records the engine indexes and edits.

An item is scheduled either at a single instant (PointSchedule) or over an
inclusive range of instants (RangeSchedule), never both. Committed items are
immutable; changes go through the store, which hands back a new version.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .errors import InvalidRange, ValidationFailed
from .instant import Instant


class ItemKind(Enum):
    MEETING = "meeting"
    ASSIGNMENT = "assignment"
    DEADLINE = "deadline"
    EVENT = "event"

    @property
    def color(self) -> str:
        return KIND_COLORS[self]


KIND_COLORS = {
    ItemKind.MEETING: "#2563eb",
    ItemKind.ASSIGNMENT: "#10b981",
    ItemKind.DEADLINE: "#ef4444",
    ItemKind.EVENT: "#8b5cf6",
}


class Stage(Enum):
    """Project workflow stage an item may be attached to. Opaque to the engine."""
    REGISTERED = "registered"
    UNDER_REVIEW = "under_review"
    RETURNED_FOR_FIX = "returned_for_fix"
    INITIAL_APPROVAL = "initial_approval"
    CERTIFICATE_ISSUED = "certificate_issued"


@dataclass(frozen=True)
class PointSchedule:
    instant: Instant

    is_range = False

    @property
    def first_day(self) -> int:
        return self.instant.ordinal

    @property
    def last_day(self) -> int:
        return self.instant.ordinal

    @property
    def anchor(self) -> Instant:
        return self.instant

    def covers(self, day_ordinal: int) -> bool:
        return self.instant.ordinal == day_ordinal


@dataclass(frozen=True)
class RangeSchedule:
    """Inclusive range; `start <= end` always holds."""
    start: Instant
    end: Instant

    is_range = True

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidRange(self.start, self.end)

    @property
    def first_day(self) -> int:
        return self.start.ordinal

    @property
    def last_day(self) -> int:
        return self.end.ordinal

    @property
    def anchor(self) -> Instant:
        return self.start

    def covers(self, day_ordinal: int) -> bool:
        return self.start.ordinal <= day_ordinal <= self.end.ordinal


Schedule = Union[PointSchedule, RangeSchedule]


@dataclass(frozen=True)
class CalendarItem:
    """
    A committed scheduling record.

    `id` is assigned by the store and never changes; `version` is bumped by
    the store on every update and is used to detect concurrent edits.
    """
    id: str
    kind: ItemKind
    title: str
    schedule: Schedule
    project_ref: Optional[str] = None
    person_ref: Optional[str] = None
    stage: Optional[Stage] = None
    note: str = ""
    version: int = 1

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValidationFailed(ValidationFailed.MISSING_TITLE, "title", "Title must not be empty")

    @property
    def is_range(self) -> bool:
        return self.schedule.is_range

    def with_changes(self, patch: dict[str, Any]) -> 'CalendarItem':
        """Copy with the fields in `patch` replaced; `id` and `version` cannot be patched."""
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise KeyError(f"Cannot patch field(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **patch)

    # ==================== Wire form ====================

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "projectId": self.project_ref,
            "personId": self.person_ref,
            "stage": self.stage.value if self.stage else None,
            "note": self.note,
            "version": self.version,
        }
        if isinstance(self.schedule, RangeSchedule):
            data["start"] = self.schedule.start.to_wire()
            data["end"] = self.schedule.end.to_wire()
        else:
            data["date"] = self.schedule.instant.to_wire()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'CalendarItem':
        if data.get("date") and (data.get("start") or data.get("end")):
            raise ValueError(f"Item {data.get('id')!r} has both a date and a range")
        if data.get("date"):
            schedule = PointSchedule(Instant.parse(data["date"]))
        elif data.get("start") and data.get("end"):
            schedule = RangeSchedule(Instant.parse(data["start"]), Instant.parse(data["end"]))
        else:
            raise ValueError(f"Item {data.get('id')!r} has no schedule")

        stage = data.get("stage")
        return cls(
            id=data["id"],
            kind=ItemKind(data["kind"]),
            title=data["title"],
            schedule=schedule,
            project_ref=data.get("projectId"),
            person_ref=data.get("personId"),
            stage=Stage(stage) if stage else None,
            note=data.get("note") or "",
            version=int(data.get("version", 1)),
        )

    def __repr__(self):
        return f"CalendarItem(id={self.id!r}, title={self.title!r}, schedule={self.schedule})"


PATCHABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(CalendarItem) if f.name not in ("id", "version")
)
