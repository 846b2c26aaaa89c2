"""
Persistent item storage for the planner calendar.

JsonEventStore keeps items in one JSON file. Each record holds the item id,
its version and the raw VEVENT text, so the file stays readable by any
iCalendar tool and survives app restarts.

Structure:
    {
      "updated": "2024-03-20T10:00:00",
      "items": [{"id": ..., "version": ..., "raw_ical": ...}, ...]
    }
"""

import dataclasses
import json
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .debug import debug_print
from .errors import ItemNotFound, StoreUnavailable
from .ical_codec import items_from_ics, item_to_vevent, wrap_vcalendar
from .instant import Instant
from .items import CalendarItem
from .store import EventStore, apply_patch, new_item_id, overlaps_days


class StoredItem:
    """
    Item as stored on disk.

    Separate from CalendarItem, which is the in-memory representation.
    """
    def __init__(self, item_id: str, version: int, raw_ical: str):
        self.item_id = item_id
        self.version = version
        self.raw_ical = raw_ical

    @classmethod
    def from_item(cls, item: CalendarItem) -> 'StoredItem':
        raw = wrap_vcalendar([item_to_vevent(item)]).to_ical().decode('utf-8')
        return cls(item.id, item.version, raw)

    def to_item(self) -> CalendarItem:
        decoded = items_from_ics(self.raw_ical)
        if len(decoded) != 1:
            raise ValueError(f"Record {self.item_id!r} holds {len(decoded)} events")
        return dataclasses.replace(decoded[0], id=self.item_id, version=self.version)

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "version": self.version,
            "raw_ical": self.raw_ical,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'StoredItem':
        return cls(
            item_id=data["id"],
            version=int(data.get("version", 1)),
            raw_ical=data["raw_ical"],
        )


class JsonEventStore(EventStore):
    """
    JSON file-based item store.

    Every operation reads the file, and every change rewrites it through a
    temporary file so a crash never leaves a half-written store behind. I/O
    and decoding failures are raised as StoreUnavailable.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()
        debug_print("STORAGE", f"Using JSON store at {self.path}")

    # ==================== File access ====================

    def _load(self) -> list[CalendarItem]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            items = [StoredItem.from_dict(record).to_item() for record in data.get("items", [])]
        except (OSError, ValueError, KeyError) as e:
            raise StoreUnavailable(f"Cannot read {self.path}: {e}") from e
        debug_print("STORAGE", f"Loaded {len(items)} items from {self.path}")
        return items

    def _save(self, items: list[CalendarItem]) -> None:
        data = {
            "updated": datetime.now().isoformat(timespec='seconds'),
            "items": [StoredItem.from_item(item).to_dict() for item in items],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailable(f"Cannot write {self.path}: {e}") from e
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            # Never leave a partial temp file next to the store
            if tmp_path.exists():
                tmp_path.unlink()
            raise StoreUnavailable(f"Cannot write {self.path}: {e}") from e
        debug_print("STORAGE", f"Saved {len(items)} items to {self.path}")

    @staticmethod
    def _position(items: list[CalendarItem], item_id: str) -> int:
        for i, item in enumerate(items):
            if item.id == item_id:
                return i
        raise ItemNotFound(item_id)

    # ==================== EventStore ====================

    def create(self, item: CalendarItem) -> CalendarItem:
        with self._lock:
            items = self._load()
            item_id = item.id or new_item_id()
            if any(existing.id == item_id for existing in items):
                raise ValueError(f"Item id already in use: {item_id}")
            stored = dataclasses.replace(item, id=item_id, version=1)
            items.append(stored)
            self._save(items)
        return stored

    def update(self, item_id: str, patch: dict[str, Any],
               expected_version: Optional[int] = None) -> CalendarItem:
        with self._lock:
            items = self._load()
            i = self._position(items, item_id)
            updated = apply_patch(items[i], patch, expected_version)
            items[i] = updated
            self._save(items)
        return updated

    def delete(self, item_id: str) -> None:
        with self._lock:
            items = self._load()
            del items[self._position(items, item_id)]
            self._save(items)

    def get(self, item_id: str) -> CalendarItem:
        with self._lock:
            items = self._load()
            return items[self._position(items, item_id)]

    def list_in_range(self, start: Instant, end: Instant) -> list[CalendarItem]:
        with self._lock:
            return [item for item in self._load() if overlaps_days(item, start, end)]

    def all_items(self) -> list[CalendarItem]:
        with self._lock:
            return self._load()

    def import_items(self, items: list[CalendarItem]) -> list[CalendarItem]:
        """Create every item in one write; items whose id is taken get a fresh id."""
        with self._lock:
            current = self._load()
            taken = {existing.id for existing in current}
            created = []
            for item in items:
                item_id = item.id if item.id and item.id not in taken else new_item_id()
                taken.add(item_id)
                created.append(dataclasses.replace(item, id=item_id, version=1))
            self._save(current + created)
        return created


def get_default_storage_path() -> Path:
    """Get the default store file respecting XDG."""
    xdg_data = os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))
    return Path(xdg_data) / 'planner-calendar' / 'items.json'
