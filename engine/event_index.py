"""
Day index: which items appear on which day.

A point item appears on the day of its instant; a range item appears on every
day from the day of its start to the day of its end, both inclusive. Within a
day, items keep the order in which they were given, so identical input always
yields an identical index.

build_index() is the straightforward O(days x items) join; IntervalIndex
answers the same questions from an interval tree and can stand in for it
when item counts grow.
"""

from datetime import date
from typing import Iterable, Optional, Sequence, Union

from .instant import Instant
from .interval_tree import IntervalTree
from .items import CalendarItem
from .month_grid import DayCell


DayLike = Union[DayCell, Instant, date, str]
DayIndex = dict[str, list[CalendarItem]]


def day_of(value: DayLike) -> Instant:
    """Normalize to the day's date-only instant."""
    if isinstance(value, DayCell):
        return value.instant.truncate_to_day()
    if isinstance(value, (Instant, date, str)):
        return Instant.coerce(value).truncate_to_day()
    raise TypeError(f"Not a day: {value!r}")


def build_index(items: Sequence[CalendarItem], days: Iterable[DayLike]) -> DayIndex:
    """
    Map each day key to the items scheduled on that day.

    Days without items are left out of the mapping.
    """
    index: DayIndex = {}
    for value in days:
        day = day_of(value)
        ordinal = day.ordinal
        for item in items:
            if item.schedule.covers(ordinal):
                index.setdefault(day.day_key, []).append(item)
    return index


def items_for_day(items: Sequence[CalendarItem], day: DayLike) -> list[CalendarItem]:
    ordinal = day_of(day).ordinal
    return [item for item in items if item.schedule.covers(ordinal)]


def filter_by_date_range(
    items: Sequence[CalendarItem],
    from_day: Optional[DayLike] = None,
    to_day: Optional[DayLike] = None,
) -> list[CalendarItem]:
    """
    Items that touch the day range [from_day, to_day].

    Either bound may be omitted. Raises ValueError if both are given and
    to_day is before from_day.
    """
    low = day_of(from_day).ordinal if from_day is not None else None
    high = day_of(to_day).ordinal if to_day is not None else None
    if low is not None and high is not None and high < low:
        raise ValueError(f"Filter range ends ({to_day}) before it starts ({from_day})")

    result = []
    for item in items:
        if low is not None and item.schedule.last_day < low:
            continue
        if high is not None and item.schedule.first_day > high:
            continue
        result.append(item)
    return result


class IntervalIndex:
    """
    Interval-tree backed day index.

    Built once from a list of items; each lookup costs O(log n + k).
    Results match build_index() exactly, including order.
    """

    def __init__(self, items: Iterable[CalendarItem] = ()):
        self._tree: IntervalTree[CalendarItem] = IntervalTree()
        self._handles: dict[str, tuple[int, int]] = {}
        # Initial items are all kept, even when ids repeat or are empty
        for item in items:
            self._insert(item)

    def __len__(self) -> int:
        return len(self._tree)

    def _insert(self, item: CalendarItem):
        handle = self._tree.insert(item.schedule.first_day, item.schedule.last_day, item)
        if item.id:
            self._handles[item.id] = (item.schedule.first_day, handle)

    def add(self, item: CalendarItem):
        """Index `item`; an indexed item with the same non-empty id is replaced."""
        if item.id:
            self.discard(item.id)
        self._insert(item)

    def discard(self, item_id: str) -> bool:
        entry = self._handles.pop(item_id, None)
        if entry is None:
            return False
        return self._tree.remove(*entry)

    def items_for_day(self, day: DayLike) -> list[CalendarItem]:
        return self._tree.stab(day_of(day).ordinal)

    def items_between(self, from_day: DayLike, to_day: DayLike) -> list[CalendarItem]:
        return self._tree.overlapping(day_of(from_day).ordinal, day_of(to_day).ordinal)

    def build_index(self, days: Iterable[DayLike]) -> DayIndex:
        index: DayIndex = {}
        for value in days:
            day = day_of(value)
            hits = self._tree.stab(day.ordinal)
            if hits:
                index[day.day_key] = hits
        return index
