"""Calendar grid windows (month, 6-week month grid, week, year) over range expansion."""
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from eventcal.domain.dates import (
    add_days_clamped, as_date, make_date, month_end, month_index, weekday_index,
)
from eventcal.domain.event import CalendarEvent, Occurrence
from eventcal.domain.recurrence import MAX_SEARCH_STEPS
from eventcal.application.occurrences import (
    MAX_OCCURRENCES_PER_EVENT, occurrences_in_range,
)

GRID_DAYS = 42  # 6 weeks


@dataclass(frozen=True)
class HighlightedDay:
    id: str
    year: int
    month: int  # 0-11
    day: int
    title: str
    start_time_in_minutes: int | None = None
    end_time_in_minutes: int | None = None

    @classmethod
    def from_occurrence(cls, occ: Occurrence) -> "HighlightedDay":
        return cls(
            id=occ.event.id,
            year=occ.date.year,
            month=month_index(occ.date),
            day=occ.date.day,
            title=occ.event.title,
            start_time_in_minutes=occ.event.start_time_in_minutes,
            end_time_in_minutes=occ.event.end_time_in_minutes,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "title": self.title,
        }
        if self.start_time_in_minutes is not None:
            payload["startTimeInMinutes"] = self.start_time_in_minutes
        if self.end_time_in_minutes is not None:
            payload["endTimeInMinutes"] = self.end_time_in_minutes
        return payload


def _highlight(
    events: Iterable[CalendarEvent], start: date, end: date,
    max_occurrences: int, max_steps: int,
) -> list[HighlightedDay]:
    return [
        HighlightedDay.from_occurrence(occ)
        for occ in occurrences_in_range(
            events, start, end,
            max_occurrences=max_occurrences, max_steps=max_steps,
        )
    ]


def _sunday_on_or_before(d: date) -> date:
    return add_days_clamped(d, -weekday_index(d))


def month_window(year: int, month: int) -> tuple[date, date]:
    return make_date(year, month, 1), month_end(year, month)


def month_grid_window(year: int, month: int) -> tuple[date, date]:
    """Sunday on or before the 1st, through 6 full weeks.

    Clamped to the first and last representable days.
    """
    start = _sunday_on_or_before(make_date(year, month, 1))
    return start, add_days_clamped(start, GRID_DAYS - 1)


def week_window(base: date) -> tuple[date, date]:
    start = _sunday_on_or_before(as_date(base))
    return start, add_days_clamped(start, 6)


def month_highlighted_days(
    events: Iterable[CalendarEvent], year: int, month: int,
    *, max_occurrences: int = MAX_OCCURRENCES_PER_EVENT,
    max_steps: int = MAX_SEARCH_STEPS,
) -> list[HighlightedDay]:
    """Occurrences inside one calendar month (year list view)."""
    start, end = month_window(year, month)
    return _highlight(events, start, end, max_occurrences, max_steps)


def month_view_days(
    events: Iterable[CalendarEvent], year: int, month: int,
    *, max_occurrences: int = MAX_OCCURRENCES_PER_EVENT,
    max_steps: int = MAX_SEARCH_STEPS,
) -> list[HighlightedDay]:
    """Occurrences for a month grid, including spill-over days of adjacent months."""
    start, end = month_grid_window(year, month)
    return _highlight(events, start, end, max_occurrences, max_steps)


def week_view_days(
    events: Iterable[CalendarEvent], base: date,
    *, max_occurrences: int = MAX_OCCURRENCES_PER_EVENT,
    max_steps: int = MAX_SEARCH_STEPS,
) -> list[HighlightedDay]:
    """Occurrences in the Sunday-Saturday week containing ``base``."""
    start, end = week_window(base)
    return _highlight(events, start, end, max_occurrences, max_steps)


def year_highlighted_days(
    events: Iterable[CalendarEvent], year: int,
    *, max_occurrences: int = MAX_OCCURRENCES_PER_EVENT,
    max_steps: int = MAX_SEARCH_STEPS,
) -> dict[int, list[HighlightedDay]]:
    events = list(events)
    return {
        month: month_highlighted_days(
            events, year, month,
            max_occurrences=max_occurrences, max_steps=max_steps,
        )
        for month in range(12)
    }
