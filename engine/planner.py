"""
PlannerSession - one user's view onto the calendar.

Holds the display converter, the month being shown and the store, and ties
the grid builder, the day index and the draft editor together the way a
month view needs them.
"""

from datetime import date
from typing import Optional, Union

from .calendar_system import CalendarDate
from .calendars import CalendarConverter
from .debug import debug_print
from .draft import DraftEditor
from .event_index import DayIndex, DayLike, IntervalIndex, day_of, filter_by_date_range
from .items import CalendarItem, ItemKind
from .month_grid import DayCell, MonthGrid, MonthGridBuilder
from .store import EventStore


class PlannerSession:
    """
    Month navigation plus item access over an EventStore.

    Args:
        store: where items live
        converter: display calendar, week origin and locale
        first_weekday: leftmost grid column, in the converter's week numbering
    """

    def __init__(self, store: EventStore, converter: Optional[CalendarConverter] = None,
                 first_weekday: int = 0):
        self.store = store
        self.converter = converter or CalendarConverter()
        self.first_weekday = first_weekday
        self.builder = MonthGridBuilder(self.converter)
        self.anchor: CalendarDate = self.builder.current_month()

    @classmethod
    def from_config(cls, config, store: Optional[EventStore] = None) -> 'PlannerSession':
        config.apply()
        return cls(store or config.build_store(), config.build_converter(),
                   config.calendar.first_weekday)

    # ==================== Navigation ====================

    def go_previous(self) -> CalendarDate:
        self.anchor = self.builder.previous_month(self.anchor)
        return self.anchor

    def go_next(self) -> CalendarDate:
        self.anchor = self.builder.next_month(self.anchor)
        return self.anchor

    def go_today(self) -> CalendarDate:
        self.anchor = self.builder.current_month()
        return self.anchor

    def go_to(self, year: int, month: int) -> CalendarDate:
        """Show month `month` of `year` in the display calendar."""
        self.anchor = self.converter.make_date(year, month, 1)
        return self.anchor

    @property
    def title(self) -> str:
        return self.builder.month_title(self.anchor)

    # ==================== Views ====================

    def month_view(self, today: Optional[date] = None) -> tuple[MonthGrid, DayIndex]:
        """The grid for the current anchor and the items on each of its days."""
        grid = self.builder.build_grid(self.anchor, self.first_weekday, today)
        items = self.store.list_in_range(grid.start, grid.end)
        index = IntervalIndex(items).build_index(grid)
        debug_print("PLANNER", f"{self.title}: {len(items)} items on {len(index)} days")
        return grid, index

    def day_items(self, day: DayLike) -> list[CalendarItem]:
        instant = day_of(day)
        return self.store.list_in_range(instant, instant)

    def items_between(self, from_day: DayLike, to_day: DayLike,
                      kind: Optional[ItemKind] = None) -> list[CalendarItem]:
        """Items touching [from_day, to_day], optionally of one kind only."""
        start, end = day_of(from_day), day_of(to_day)
        items = filter_by_date_range(self.store.list_in_range(start, end), start, end)
        if kind is not None:
            items = [item for item in items if item.kind is kind]
        return items

    # ==================== Editing ====================

    def new_draft(self, day: Union[DayLike, CalendarDate]) -> DraftEditor:
        """Blank draft for a clicked day cell or date."""
        if isinstance(day, CalendarDate):
            day = self.converter.from_display(day)
        elif isinstance(day, DayCell):
            day = day.instant
        return DraftEditor.new(day)

    def edit_draft(self, item_id: str) -> DraftEditor:
        return DraftEditor.from_item(self.store.get(item_id))

    def remove(self, item_id: str):
        self.store.delete(item_id)
        debug_print("PLANNER", f"removed {item_id}")
