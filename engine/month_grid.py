"""
Month grid builder.

A month grid is always 42 day cells (six weeks of seven days), starting on
the configured first weekday of the week that contains day 1 of the anchor
month. Months that need only four or five rows are padded with days of the
adjacent months so the layout never changes height.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional

from .calendar_system import CalendarDate
from .calendars import CalendarConverter
from .errors import InvalidDate
from .instant import Instant
from .timezone_utils import local_today


GRID_WEEKS = 6
GRID_DAYS = GRID_WEEKS * 7


@dataclass(frozen=True)
class DayCell:
    """One day of a month grid."""
    date: CalendarDate          # display calendar
    instant: Instant            # the day's canonical, date-only anchor
    in_current_month: bool
    is_today: bool

    @property
    def key(self) -> str:
        return self.instant.day_key


@dataclass(frozen=True)
class MonthGrid:
    """The 42 cells of a month view, in chronological order."""
    anchor: CalendarDate        # day 1 of the target month
    first_weekday: int
    cells: tuple[DayCell, ...]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[DayCell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> DayCell:
        return self.cells[index]

    @property
    def start(self) -> Instant:
        return self.cells[0].instant

    @property
    def end(self) -> Instant:
        return self.cells[-1].instant

    def weeks(self) -> list[tuple[DayCell, ...]]:
        """Six rows of seven cells."""
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    def month_cells(self) -> list[DayCell]:
        return [c for c in self.cells if c.in_current_month]

    def cell_for(self, key: str) -> Optional[DayCell]:
        for cell in self.cells:
            if cell.key == key:
                return cell
        return None


class MonthGridBuilder:
    """Builds month grids and navigates between months of the display calendar."""

    def __init__(self, converter: CalendarConverter):
        self.converter = converter

    def build_grid(self, anchor: CalendarDate, first_weekday: int,
                   today: Optional[date] = None) -> MonthGrid:
        """
        Build the grid for the month containing `anchor`.

        The anchor may be written in either calendar; its own calendar decides
        which month is meant. `today` defaults to the local date.
        """
        if not 0 <= first_weekday <= 6:
            raise ValueError(f"first_weekday must be 0..6, got {first_weekday}")
        converter = self.converter.for_calendar(anchor.calendar)
        if today is None:
            today = local_today()

        first = converter.month_start(anchor)
        offset = (converter.weekday_of(first) - first_weekday + 7) % 7
        start_ordinal = first.ordinal - offset
        if start_ordinal < 1 or start_ordinal + GRID_DAYS - 1 > date.max.toordinal():
            raise InvalidDate.for_tuple(first.calendar.value, first.year, first.month, first.day,
                                        "month grid extends outside the supported range")

        cells = []
        for i in range(GRID_DAYS):
            day = date.fromordinal(start_ordinal + i)
            instant = Instant.of_date(day)
            shown = converter.to_display(instant)
            cells.append(DayCell(
                date=shown,
                instant=instant,
                in_current_month=shown.same_month(first),
                is_today=day == today,
            ))
        return MonthGrid(anchor=first, first_weekday=first_weekday, cells=tuple(cells))

    # ==================== Navigation ====================

    def current_month(self) -> CalendarDate:
        return self.converter.month_start(self.converter.today())

    def previous_month(self, anchor: CalendarDate) -> CalendarDate:
        return self.converter.for_calendar(anchor.calendar).month_start(anchor, -1)

    def next_month(self, anchor: CalendarDate) -> CalendarDate:
        return self.converter.for_calendar(anchor.calendar).month_start(anchor, 1)

    def month_title(self, anchor: CalendarDate, pattern: str = "YYYY MMMM") -> str:
        return self.converter.for_calendar(anchor.calendar).format(anchor, pattern)
