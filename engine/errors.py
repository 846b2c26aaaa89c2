"""
Error types raised by the planner calendar engine.

All errors derive from CalendarError so callers can catch the whole family.
Nothing in the engine swallows these; they propagate to the caller.
"""

from typing import Optional


class CalendarError(Exception):
    """Base class for every engine error."""


class InvalidDate(CalendarError, ValueError):
    """A (year, month, day) tuple is not a legal date in the stated calendar."""

    def __init__(self, message: str, calendar: Optional[str] = None,
                 year: Optional[int] = None, month: Optional[int] = None, day: Optional[int] = None):
        self.calendar = calendar
        self.year = year
        self.month = month
        self.day = day
        super().__init__(message)

    @classmethod
    def for_tuple(cls, calendar: str, year: int, month: int, day: int, detail: str = "") -> "InvalidDate":
        message = f"Invalid {calendar} date: {year:04d}/{month:02d}/{day:02d}"
        if detail:
            message = f"{message} ({detail})"
        return cls(message, calendar, year, month, day)


class MalformedInstant(InvalidDate):
    """A wire string could not be parsed as an instant."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Malformed instant: {text!r}", "gregorian")


class ValidationFailed(CalendarError, ValueError):
    """
    A draft failed a business rule before commit.

    `reason` is one of the class constants below, `field` names the draft field
    the message should be attached to.
    """

    MISSING_TITLE = "MissingTitle"
    INVERTED_RANGE = "InvertedRange"

    def __init__(self, reason: str, field: str, message: Optional[str] = None):
        self.reason = reason
        self.field = field
        super().__init__(message or f"{reason} ({field})")


class InvalidRange(ValidationFailed):
    """A range item ends before it starts."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(
            ValidationFailed.INVERTED_RANGE,
            "end",
            f"Range end {end} is before start {start}",
        )


class ItemNotFound(CalendarError, KeyError):
    """The store holds no item with the given id."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(item_id)

    def __str__(self):
        return f"No calendar item with id {self.item_id!r}"


class ConflictError(CalendarError):
    """The stored item changed since the draft was opened."""

    def __init__(self, item_id: str, expected_version: int, actual_version: int):
        self.item_id = item_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Item {item_id!r} is at version {actual_version}, "
            f"draft was opened at version {expected_version}"
        )


class StoreUnavailable(CalendarError):
    """The backing store failed for transport or availability reasons. Retryable."""


class DraftStateError(CalendarError):
    """An operation was attempted from a state that does not allow it."""
