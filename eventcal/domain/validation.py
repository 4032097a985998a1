"""
Event validation.

``is_event_valid`` answers yes/no and never raises: the resolvers assume
the events they get have passed it.

Rules:
  - originalDate names a real calendar day
  - time of day within the day; end strictly after start when both set
  - no recurrence: nothing else to check
  - interval is a positive integer
  - WEEKLY: at least one weekday, each an integer 0..6
  - end COUNT: positive integer
  - end UNTIL: readable date, not before originalDate
"""
import calendar
import logging
from collections.abc import Mapping
from typing import Any

from eventcal.domain.dates import parse_until
from eventcal.domain.event import (
    CalendarEvent, CountEnd, UntilEnd, WeeklyRecurrence,
    EventParseError, event_from_dict,
)

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return _is_int(value) and value >= 1


def _is_real_day(year: int, month: int, day: int) -> bool:
    if not (_is_int(year) and _is_int(month) and _is_int(day)):
        return False
    if month < 0 or month > 11 or year < 1 or year > 9999:
        return False
    return 1 <= day <= calendar.monthrange(year, month + 1)[1]


def is_event_valid(event: CalendarEvent | Mapping[str, Any]) -> bool:
    """True when the event can be stored and scheduled."""
    if not isinstance(event, CalendarEvent):
        try:
            event = event_from_dict(event)
        except EventParseError:
            logger.debug("Rejected event payload that does not parse")
            return False

    original = event.original_date
    if not _is_real_day(original.year, original.month, original.day):
        return False

    start, end = event.start_time_in_minutes, event.end_time_in_minutes
    if start is not None and not (0 <= start < MINUTES_PER_DAY):
        return False
    if end is not None and not (0 < end <= MINUTES_PER_DAY):
        return False
    if start is not None and end is not None and end <= start:
        return False

    recurrence = event.recurrence
    if recurrence is None:
        return True

    if not _is_positive_int(recurrence.interval):
        return False

    if isinstance(recurrence, WeeklyRecurrence):
        if not recurrence.days_of_week:
            return False
        if any(not _is_int(d) or d < 0 or d > 6 for d in recurrence.days_of_week):
            return False

    if isinstance(recurrence.end, CountEnd):
        if not _is_positive_int(recurrence.end.value):
            return False
    elif isinstance(recurrence.end, UntilEnd):
        until = parse_until(recurrence.end.value)
        if until is None:
            return False
        if until < event.anchor_date():
            return False

    return True
