"""
iCalendar (RFC 5545) codec for calendar items.

Each item becomes one VEVENT. Standard properties carry what other calendar
software understands (UID, SUMMARY, DESCRIPTION, DTSTART/DTEND, SEQUENCE);
X-PLANNER-* properties carry the rest, including the exact wire form of the
schedule, since DTSTART cannot hold milliseconds.

Foreign events (no X-PLANNER-* properties) are read from DTSTART/DTEND or
DURATION. All-day DTEND is exclusive, so an all-day event ending the day after
it starts is a single-day point item.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from icalendar import Calendar as ICalCalendar, Event as ICalEvent
import pytz

from .debug import debug_print
from .instant import Instant
from .items import CalendarItem, ItemKind, PointSchedule, RangeSchedule, Stage


PRODID = '-//Planner Calendar//planner-calendar//'

X_KIND = 'X-PLANNER-KIND'
X_STAGE = 'X-PLANNER-STAGE'
X_PROJECT = 'X-PLANNER-PROJECT'
X_PERSON = 'X-PLANNER-PERSON'
X_DATE = 'X-PLANNER-DATE'
X_START = 'X-PLANNER-START'
X_END = 'X-PLANNER-END'


def _ical_value(instant: Instant) -> Union[date, datetime]:
    """Floating DATE or DATE-TIME value for an instant."""
    return instant.moment if instant.has_time else instant.day


def _instant_from_ical(value: Union[date, datetime]) -> Instant:
    if isinstance(value, datetime):
        return Instant.of_datetime(value)
    return Instant.of_date(value)


def _text(event: ICalEvent, name: str) -> Optional[str]:
    value = event.get(name)
    if value is None:
        return None
    text = str(value)
    return text or None


# ==================== Encoding ====================

def item_to_vevent(item: CalendarItem, stamp: Optional[datetime] = None) -> ICalEvent:
    """Build the VEVENT for `item`."""
    event = ICalEvent()
    event.add('uid', item.id)
    event.add('summary', item.title)
    event.add('dtstamp', stamp or datetime.now(pytz.UTC))
    event.add('sequence', max(item.version - 1, 0))
    if item.note:
        event.add('description', item.note)

    schedule = item.schedule
    if isinstance(schedule, RangeSchedule):
        event.add('dtstart', _ical_value(schedule.start))
        if schedule.end.has_time:
            event.add('dtend', schedule.end.moment)
        else:
            # All-day DTEND is exclusive
            event.add('dtend', schedule.end.day + timedelta(days=1))
        event.add(X_START, schedule.start.to_wire())
        event.add(X_END, schedule.end.to_wire())
    else:
        event.add('dtstart', _ical_value(schedule.instant))
        event.add(X_DATE, schedule.instant.to_wire())

    event.add(X_KIND, item.kind.value)
    if item.stage:
        event.add(X_STAGE, item.stage.value)
    if item.project_ref:
        event.add(X_PROJECT, item.project_ref)
    if item.person_ref:
        event.add(X_PERSON, item.person_ref)
    return event


def wrap_vcalendar(events: Iterable[ICalEvent]) -> ICalCalendar:
    vcal = ICalCalendar()
    vcal.add('prodid', PRODID)
    vcal.add('version', '2.0')
    for event in events:
        vcal.add_component(event)
    return vcal


def items_to_ics(items: Iterable[CalendarItem]) -> str:
    """Serialize items as one VCALENDAR text."""
    return wrap_vcalendar(item_to_vevent(item) for item in items).to_ical().decode('utf-8')


# ==================== Decoding ====================

def _planner_schedule(event: ICalEvent):
    point = _text(event, X_DATE)
    if point:
        return PointSchedule(Instant.parse(point))
    start, end = _text(event, X_START), _text(event, X_END)
    if start and end:
        return RangeSchedule(Instant.parse(start), Instant.parse(end))
    return None


def _foreign_schedule(event: ICalEvent):
    dtstart = event.get('DTSTART')
    if dtstart is None:
        raise ValueError(f"VEVENT {_text(event, 'UID')!r} has no DTSTART")
    start = _instant_from_ical(dtstart.dt)

    dtend = event.get('DTEND')
    duration = event.get('DURATION')
    if dtend is not None:
        end_value = dtend.dt
    elif duration is not None:
        end_value = dtstart.dt + duration.dt
    else:
        return PointSchedule(start)

    if isinstance(end_value, datetime):
        end = Instant.of_datetime(end_value)
        if not start.has_time:
            # Mixed value types; treat the end as a whole day
            end = end.truncate_to_day()
    else:
        # Exclusive all-day end
        end = Instant.of_date(end_value - timedelta(days=1))

    if end <= start:
        return PointSchedule(start)
    return RangeSchedule(start, end)


def vevent_to_item(event: ICalEvent) -> CalendarItem:
    """
    Read a VEVENT back into an item.

    Events missing the planner properties default to kind EVENT; a missing
    SUMMARY becomes 'Untitled'.
    """
    schedule = _planner_schedule(event) or _foreign_schedule(event)

    kind = _text(event, X_KIND)
    stage = _text(event, X_STAGE)
    sequence = event.get('SEQUENCE')
    return CalendarItem(
        id=_text(event, 'UID') or "",
        kind=ItemKind(kind) if kind else ItemKind.EVENT,
        title=_text(event, 'SUMMARY') or 'Untitled',
        schedule=schedule,
        project_ref=_text(event, X_PROJECT),
        person_ref=_text(event, X_PERSON),
        stage=Stage(stage) if stage else None,
        note=_text(event, 'DESCRIPTION') or "",
        version=int(sequence) + 1 if sequence is not None else 1,
    )


def parse_icalendar(ical_text: str) -> ICalCalendar:
    """
    Parse iCalendar text into an icalendar.Calendar object.

    Raises ValueError if the text is not valid iCalendar data.
    """
    return ICalCalendar.from_ical(ical_text)


def items_from_ics(ical_text: str) -> list[CalendarItem]:
    """All VEVENTs of a VCALENDAR text, in document order."""
    vcal = parse_icalendar(ical_text)
    items = [vevent_to_item(component) for component in vcal.walk('VEVENT')]
    debug_print("ICAL", f"Decoded {len(items)} items")
    return items
