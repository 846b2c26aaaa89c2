"""
Event store contract and the in-memory reference store.

The engine never owns calendar items; it borrows them from an EventStore to
build grids and indexes, and hands finished drafts back to it. Any backend
(memory, file, remote service) can be plugged in by implementing the
abstract methods below.
"""

import dataclasses
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

from .debug import debug_print
from .errors import ConflictError, ItemNotFound
from .instant import Instant
from .items import CalendarItem


NEW_ITEM_ID = ""


class EventStore(ABC):
    """
    Abstract base class for calendar item stores.

    Implementations raise ItemNotFound for unknown ids, ConflictError when an
    update's expected version does not match, and StoreUnavailable for
    transport or I/O failures.
    """

    @abstractmethod
    def create(self, item: CalendarItem) -> CalendarItem:
        """Store a new item; the returned copy carries the assigned id and version 1."""
        pass

    @abstractmethod
    def update(self, item_id: str, patch: dict[str, Any],
               expected_version: Optional[int] = None) -> CalendarItem:
        """Apply `patch` to the stored item and return the new version."""
        pass

    @abstractmethod
    def delete(self, item_id: str) -> None:
        """Remove an item."""
        pass

    @abstractmethod
    def get(self, item_id: str) -> CalendarItem:
        """Get a single item by id."""
        pass

    @abstractmethod
    def list_in_range(self, start: Instant, end: Instant) -> list[CalendarItem]:
        """Items touching any day in [start, end], in creation order."""
        pass


def overlaps_days(item: CalendarItem, start: Instant, end: Instant) -> bool:
    return item.schedule.last_day >= start.ordinal and item.schedule.first_day <= end.ordinal


def new_item_id() -> str:
    return str(uuid.uuid4())


def apply_patch(current: CalendarItem, patch: dict[str, Any],
                expected_version: Optional[int]) -> CalendarItem:
    """Shared update rule: version check, patch, version bump."""
    if expected_version is not None and expected_version != current.version:
        raise ConflictError(current.id, expected_version, current.version)
    updated = current.with_changes(patch)
    return dataclasses.replace(updated, version=current.version + 1)


class MemoryEventStore(EventStore):
    """
    In-memory store.

    Items live in a dict keyed by id, which keeps creation order. All
    operations take a lock so a background commit cannot interleave with a
    listing.
    """

    def __init__(self, items: Optional[list[CalendarItem]] = None):
        self._items: dict[str, CalendarItem] = {}
        self._lock = threading.RLock()
        for item in items or []:
            self._items[item.id] = item

    def create(self, item: CalendarItem) -> CalendarItem:
        with self._lock:
            item_id = item.id or new_item_id()
            if item_id in self._items:
                raise ValueError(f"Item id already in use: {item_id}")
            stored = dataclasses.replace(item, id=item_id, version=1)
            self._items[item_id] = stored
        debug_print("STORE", f"created {item_id} ({stored.title!r})")
        return stored

    def update(self, item_id: str, patch: dict[str, Any],
               expected_version: Optional[int] = None) -> CalendarItem:
        with self._lock:
            current = self.get(item_id)
            updated = apply_patch(current, patch, expected_version)
            self._items[item_id] = updated
        debug_print("STORE", f"updated {item_id} -> v{updated.version}")
        return updated

    def delete(self, item_id: str) -> None:
        with self._lock:
            if item_id not in self._items:
                raise ItemNotFound(item_id)
            del self._items[item_id]
        debug_print("STORE", f"deleted {item_id}")

    def get(self, item_id: str) -> CalendarItem:
        with self._lock:
            try:
                return self._items[item_id]
            except KeyError:
                raise ItemNotFound(item_id) from None

    def list_in_range(self, start: Instant, end: Instant) -> list[CalendarItem]:
        with self._lock:
            return [item for item in self._items.values() if overlaps_days(item, start, end)]

    def __len__(self) -> int:
        return len(self._items)
