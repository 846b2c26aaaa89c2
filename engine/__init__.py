"""
Planner Calendar Engine Module

This module provides the core functionality for the month planner:
- Calendar conversion and formatting (calendars.py, calendar_system.py)
- Month grid building and navigation (month_grid.py)
- Day index over calendar items (event_index.py, interval_tree.py)
- Draft editing and commit (draft.py)
- Item stores: in-memory (store.py) and JSON file (storage.py)
- iCalendar codec (ical_codec.py) - items as icalendar.Event
- Configuration parsing (config.py)
- Month view session (planner.py)
"""

from .calendar_system import CalendarDate, CalendarSystem
from .calendars import CalendarConverter
from .config import Config
from .draft import DraftEditor, DraftState
from .errors import (
    CalendarError, ConflictError, DraftStateError, InvalidDate, InvalidRange,
    ItemNotFound, StoreUnavailable, ValidationFailed,
)
from .event_index import IntervalIndex, build_index, filter_by_date_range
from .instant import Instant
from .items import CalendarItem, ItemKind, PointSchedule, RangeSchedule, Stage
from .localization import Locale
from .month_grid import DayCell, MonthGrid, MonthGridBuilder
from .planner import PlannerSession
from .storage import JsonEventStore
from .store import EventStore, MemoryEventStore
from .worker import StoreWorker, get_store_worker, shutdown_store_worker

__all__ = [
    'CalendarDate',
    'CalendarSystem',
    'CalendarConverter',
    'Config',
    'DraftEditor',
    'DraftState',
    'CalendarError',
    'ConflictError',
    'DraftStateError',
    'InvalidDate',
    'InvalidRange',
    'ItemNotFound',
    'StoreUnavailable',
    'ValidationFailed',
    'IntervalIndex',
    'build_index',
    'filter_by_date_range',
    'Instant',
    'CalendarItem',
    'ItemKind',
    'PointSchedule',
    'RangeSchedule',
    'Stage',
    'Locale',
    'DayCell',
    'MonthGrid',
    'MonthGridBuilder',
    'PlannerSession',
    'JsonEventStore',
    'EventStore',
    'MemoryEventStore',
    'StoreWorker',
    'get_store_worker',
    'shutdown_store_worker',
]
