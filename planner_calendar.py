#!/usr/bin/env python3
"""
Planner Calendar - a month planner over Jalali or Gregorian calendars.

This is the main entry point for the command line tool.
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from engine.calendar_system import CalendarDate
from engine.config import Config
from engine.debug import set_debug, debug_print
from engine.errors import CalendarError
from engine.ical_codec import items_to_ics
from engine.instant import Instant
from engine.items import CalendarItem, ItemKind, RangeSchedule
from engine.planner import PlannerSession


DATE_PATTERN = "YYYY/MM/DD"
DATETIME_PATTERN = "YYYY/MM/DD HH:mm"


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Planner Calendar - a month planner for Jalali and Gregorian calendars"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    month = commands.add_parser("month", help="Show a month grid")
    month.add_argument("year", type=int, nargs="?", help="Display-calendar year (default: current)")
    month.add_argument("month", type=int, nargs="?", help="Display-calendar month 1..12")

    add = commands.add_parser("add", help="Add an item")
    add.add_argument("title")
    add.add_argument("date", help="YYYY/MM/DD or \"YYYY/MM/DD HH:mm\" in the display calendar")
    add.add_argument("--end", help="Make the item a range ending on this date")
    add.add_argument("--kind", choices=[k.value for k in ItemKind], default=ItemKind.MEETING.value)
    add.add_argument("--note", default="")

    listing = commands.add_parser("list", help="List items between two dates (inclusive)")
    listing.add_argument("start")
    listing.add_argument("end")
    listing.add_argument("--kind", choices=[k.value for k in ItemKind])

    remove = commands.add_parser("remove", help="Remove an item")
    remove.add_argument("item_id")

    commands.add_parser("export", help="Print every item as iCalendar text")

    args = parser.parse_args(argv)
    if args.command == "month" and (args.year is None) != (args.month is None):
        parser.error("month takes both YEAR and MONTH, or neither")
    return args


def load_config(path: Optional[Path]) -> Config:
    """An explicit path must exist; without one the default file is optional."""
    if path is not None:
        return Config.load(path)
    try:
        return Config.load()
    except FileNotFoundError:
        debug_print("CONFIG", f"No file at {Config.get_default_config_path()}, using defaults")
        return Config.default()


def parse_display(session: PlannerSession, text: str) -> CalendarDate:
    pattern = DATETIME_PATTERN if " " in text.strip() else DATE_PATTERN
    return session.converter.parse(text, pattern)


def describe(session: PlannerSession, instant: Instant) -> str:
    shown = session.converter.to_display(instant)
    return session.converter.format(shown, DATETIME_PATTERN if instant.has_time else DATE_PATTERN)


def describe_item(session: PlannerSession, item: CalendarItem) -> str:
    if isinstance(item.schedule, RangeSchedule):
        when = f"{describe(session, item.schedule.start)} - {describe(session, item.schedule.end)}"
    else:
        when = describe(session, item.schedule.instant)
    return f"{when}  [{item.kind.value}] {item.title}  ({item.id})"


# ==================== Commands ====================

def cmd_month(session: PlannerSession, args) -> None:
    if args.year is not None:
        session.go_to(args.year, args.month)
    grid, index = session.month_view()
    converter = session.converter

    print(session.title)
    labels = [converter.locale.weekday_name((session.first_weekday + i) % 7) for i in range(7)]
    print(" ".join(f"{label:>5}" for label in labels))
    for week in grid.weeks():
        row = []
        for cell in week:
            if not cell.in_current_month:
                row.append(f"{'.':>5}")
                continue
            day = converter.format(cell.date, "D")
            marks = ("*" if cell.is_today else "") + (f"+{len(index[cell.key])}" if cell.key in index else "")
            row.append(f"{day + marks:>5}")
        print(" ".join(row))

    listed = set()
    for cell in grid.month_cells():
        for item in index.get(cell.key, []):
            if item.id not in listed:
                listed.add(item.id)
                print(describe_item(session, item))


def cmd_add(session: PlannerSession, args) -> None:
    draft = session.new_draft(parse_display(session, args.date))
    draft.set_field("kind", ItemKind(args.kind))
    draft.set_field("title", args.title)
    draft.set_field("note", args.note)
    if args.end:
        draft.toggle_range_mode(True)
        draft.set_end(session.converter.from_display(parse_display(session, args.end)))
    item = draft.save(session.store)
    print(f"Created {describe_item(session, item)}")


def cmd_list(session: PlannerSession, args) -> None:
    start = session.converter.from_display(parse_display(session, args.start))
    end = session.converter.from_display(parse_display(session, args.end))
    kind = ItemKind(args.kind) if args.kind else None
    items = session.items_between(start, end, kind)
    for item in items:
        print(describe_item(session, item))
    if not items:
        print("No items")


def cmd_remove(session: PlannerSession, args) -> None:
    session.remove(args.item_id)
    print(f"Removed {args.item_id}")


def cmd_export(session: PlannerSession, args) -> None:
    sys.stdout.write(items_to_ics(session.store.all_items()))


COMMANDS = {
    "month": cmd_month,
    "add": cmd_add,
    "list": cmd_list,
    "remove": cmd_remove,
    "export": cmd_export,
}


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    set_debug(args.debug)

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"\nCreate a configuration file, e.g. {Config.get_default_config_path()}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    session = PlannerSession.from_config(config)
    debug_print("MAIN", f"Calendar {config.calendar.display_calendar.value}, store {config.storage.path}")

    try:
        COMMANDS[args.command](session, args)
    except CalendarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
