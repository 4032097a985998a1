"""
Range expansion - which occurrences fall inside [start, end].

Calendar views call this with the window they display. Events are an opaque
list supplied by the caller; nothing is stored.
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from eventcal.domain.dates import add_days, as_date
from eventcal.domain.event import CalendarEvent, Occurrence
from eventcal.domain.recurrence import MAX_SEARCH_STEPS, next_occurrence

logger = logging.getLogger(__name__)

# Occurrences collected per event and query before the event is cut off
MAX_OCCURRENCES_PER_EVENT = 1000


@dataclass(frozen=True)
class RangeExpansion:
    occurrences: list[Occurrence] = field(default_factory=list)
    # Events that hit the per-event cap with more in-range occurrences left
    truncated_event_ids: list[str] = field(default_factory=list)

    @property
    def is_truncated(self) -> bool:
        return bool(self.truncated_event_ids)


def _sort_key(occ: Occurrence) -> tuple:
    start = occ.event.start_time_in_minutes
    # All-day occurrences first within a day
    return (occ.date, -1 if start is None else start, occ.event.id, occ.event.title)


def _expand_event(
    event: CalendarEvent,
    start: date,
    end: date,
    max_occurrences: int,
    max_steps: int,
) -> tuple[list[Occurrence], bool]:
    anchor = event.anchor_date()

    if not event.is_recurring:
        if start <= anchor <= end:
            return [Occurrence(event=event, date=anchor)], False
        return [], False

    current: date | None = anchor
    if anchor < start:
        # Fast-forward to the first occurrence on or after start
        current = next_occurrence(event, add_days(start, -1), max_steps=max_steps)

    found: list[Occurrence] = []
    iterations = 0
    while current is not None and current <= end and iterations < max_occurrences:
        if current >= start:
            found.append(Occurrence(event=event, date=current))
        current = next_occurrence(event, current, max_steps=max_steps)
        iterations += 1

    truncated = current is not None and current <= end
    return found, truncated


def expand_range(
    events: Iterable[CalendarEvent],
    start: date,
    end: date,
    *,
    max_occurrences: int = MAX_OCCURRENCES_PER_EVENT,
    max_steps: int = MAX_SEARCH_STEPS,
) -> RangeExpansion:
    """Expand events into occurrences within [start, end], both inclusive.

    Datetimes are reduced to their day, so ``end`` covers its whole day.
    Events hitting ``max_occurrences`` are reported in
    ``truncated_event_ids`` instead of failing the query.
    """
    start, end = as_date(start), as_date(end)
    if start > end:
        return RangeExpansion()

    occurrences: list[Occurrence] = []
    truncated: list[str] = []
    for event in events:
        found, was_truncated = _expand_event(event, start, end, max_occurrences, max_steps)
        occurrences.extend(found)
        if was_truncated:
            logger.warning(
                "Too many occurrences for event %s (%s), stopped after %d",
                event.id, event.title, max_occurrences,
            )
            truncated.append(event.id)

    occurrences.sort(key=_sort_key)
    return RangeExpansion(occurrences=occurrences, truncated_event_ids=sorted(truncated))


def occurrences_in_range(
    events: Iterable[CalendarEvent],
    start: date,
    end: date,
    *,
    max_occurrences: int = MAX_OCCURRENCES_PER_EVENT,
    max_steps: int = MAX_SEARCH_STEPS,
) -> list[Occurrence]:
    """Sorted occurrences of ``events`` within [start, end]."""
    return expand_range(
        events, start, end,
        max_occurrences=max_occurrences, max_steps=max_steps,
    ).occurrences
