"""
Deterministic next-occurrence resolver.

Uses date only (no timezone). ``next_occurrence(event, after)`` returns the
first occurrence strictly after ``after``, or None when the recurrence has
ended (count / until bound reached) or nothing was found in the search
horizon.

Frequencies:
- DAILY: every N days from the anchor
- WEEKLY: chosen weekdays in every N-th calendar week (weeks start Sunday)
- MONTHLY: every N months, on the anchor's day of month, on its n-th weekday,
  or on its last weekday
- YEARLY: same rules, every N years, in the anchor's month

Days that do not exist in a month (31 April, 29 February) are skipped,
never clamped. Skipped steps still consume a count index.
"""
import logging
from collections.abc import Iterator
from datetime import date
from typing import Callable

from eventcal.domain.dates import (
    add_days, as_date, make_date, month_index, months_between,
    week_start, weekday_index,
)
from eventcal.domain.event import (
    CalendarEvent, DailyRecurrence, WeeklyRecurrence,
    MonthlyRecurrence, YearlyRecurrence,
)
from eventcal.domain.nth_weekday import (
    WeekdayPosition, nth_weekday_of_month, occurrence_of_weekday_in_month,
)

logger = logging.getLogger(__name__)

# Interval steps searched per lookup before giving up
MAX_SEARCH_STEPS = 100


def _exceeds_bounds(candidate: date, index: int, until: date | None, count: int | None) -> bool:
    if until is not None and candidate > until:
        return True
    if count is not None and index > count:
        return True
    return False


# --- Daily ---

def _next_daily(
    rec: DailyRecurrence, anchor: date, after: date,
    until: date | None, count: int | None, max_steps: int,
) -> date | None:
    steps = (after - anchor).days // rec.interval + 1
    candidate = add_days(anchor, steps * rec.interval)
    # Anchor is occurrence #1
    if _exceeds_bounds(candidate, steps + 1, until, count):
        return None
    return candidate


# --- Weekly ---

def _weekly_occurrence_index(
    anchor: date, days: list[int], interval: int, candidate: date,
) -> int:
    """1-based position of ``candidate`` among the occurrences since the anchor."""
    weeks = (week_start(candidate) - week_start(anchor)).days // 7
    anchor_wd = weekday_index(anchor)
    candidate_wd = weekday_index(candidate)
    # The anchor is occurrence #1 even on an unselected weekday
    off_pattern = 0 if anchor_wd in days else 1

    if weeks == 0:
        return off_pattern + sum(1 for d in days if anchor_wd <= d <= candidate_wd)

    # Anchor week counts only from the anchor's weekday on
    index = off_pattern + sum(1 for d in days if d >= anchor_wd)
    # Active weeks strictly between the anchor week and the candidate week
    index += (weeks // interval - 1) * len(days)
    index += sum(1 for d in days if d <= candidate_wd)
    return index


def _next_weekly(
    rec: WeeklyRecurrence, anchor: date, after: date,
    until: date | None, count: int | None, max_steps: int,
) -> date | None:
    days = sorted({d for d in rec.days_of_week if 0 <= d <= 6})
    if not days:
        return None

    search_from = max(add_days(after, 1), anchor)
    anchor_week = week_start(anchor)
    weeks_elapsed = (week_start(search_from) - anchor_week).days // 7
    block = weeks_elapsed // rec.interval

    for _ in range(max_steps):
        block_start = add_days(anchor_week, block * rec.interval * 7)
        for wd in days:
            candidate = add_days(block_start, wd)
            if candidate < search_from:
                continue
            index = _weekly_occurrence_index(anchor, days, rec.interval, candidate)
            if _exceeds_bounds(candidate, index, until, count):
                return None
            return candidate

        # Nothing left this week; the next active week starts after until
        if until is not None and add_days(block_start, 6) >= until:
            return None
        block += 1

    logger.debug("Weekly search horizon exhausted after %d weeks (anchor=%s)", max_steps, anchor)
    return None


# --- Monthly / yearly ---

def _candidate_in_month(
    rule_type: str, year: int, month: int, anchor_day: int, position: WeekdayPosition,
) -> date | None:
    """Occurrence of a month-keyed rule inside one zero-based month."""
    if rule_type == "dayOfMonth":
        candidate = make_date(year, month, anchor_day)
        # Rolled into the next month: this month has no such day
        if month_index(candidate) != month % 12:
            return None
        return candidate
    if rule_type == "nthWeekday":
        return nth_weekday_of_month(year, month, position.weekday, position.n)
    if rule_type == "lastWeekday":
        return nth_weekday_of_month(year, month, position.weekday, "last")
    return None


def _next_monthly(
    rec: MonthlyRecurrence, anchor: date, after: date,
    until: date | None, count: int | None, max_steps: int,
) -> date | None:
    position = occurrence_of_weekday_in_month(anchor)
    first_step = max(0, months_between(anchor, after) // rec.interval)

    for step in range(first_step, first_step + max_steps):
        offset = month_index(anchor) + step * rec.interval
        year, month = anchor.year + offset // 12, offset % 12
        candidate = _candidate_in_month(rec.monthly_type, year, month, anchor.day, position)
        if candidate is None or candidate <= after:
            continue
        if _exceeds_bounds(candidate, step + 1, until, count):
            return None
        return candidate

    logger.debug("Monthly search horizon exhausted after %d steps (anchor=%s)", max_steps, anchor)
    return None


def _next_yearly(
    rec: YearlyRecurrence, anchor: date, after: date,
    until: date | None, count: int | None, max_steps: int,
) -> date | None:
    position = occurrence_of_weekday_in_month(anchor)
    month = month_index(anchor)
    first_step = max(0, (after.year - anchor.year) // rec.interval)

    for step in range(first_step, first_step + max_steps):
        year = anchor.year + step * rec.interval
        candidate = _candidate_in_month(rec.yearly_type, year, month, anchor.day, position)
        if candidate is None or candidate <= after:
            continue
        if _exceeds_bounds(candidate, step + 1, until, count):
            return None
        return candidate

    logger.debug("Yearly search horizon exhausted after %d steps (anchor=%s)", max_steps, anchor)
    return None


_RESOLVERS: dict[str, Callable[..., date | None]] = {
    "daily": _next_daily,
    "weekly": _next_weekly,
    "monthly": _next_monthly,
    "yearly": _next_yearly,
}


def next_occurrence(
    event: CalendarEvent,
    after: date,
    *,
    max_steps: int = MAX_SEARCH_STEPS,
) -> date | None:
    """First occurrence of ``event`` strictly after ``after``.

    A reference date before the anchor yields the anchor itself.
    Returns None for one-time events, once the count/until bound is reached,
    for an unknown frequency, or when ``max_steps`` interval steps hold no
    valid date.
    """
    recurrence = event.recurrence
    if recurrence is None:
        return None

    interval = recurrence.interval
    if not isinstance(interval, int) or isinstance(interval, bool) or interval < 1:
        return None

    resolver = _RESOLVERS.get(recurrence.frequency)
    if resolver is None:
        return None

    after = as_date(after)
    until = recurrence.until_date()
    if until is not None and after >= until:
        return None
    count = recurrence.count_limit()

    try:
        anchor = event.anchor_date()
        if after < anchor:
            # Anchor is occurrence #1, whatever the pattern selects
            if (until is not None and anchor > until) or (count is not None and count < 1):
                return None
            return anchor
        return resolver(recurrence, anchor, after, until, count, max_steps)
    except (ValueError, OverflowError):
        # Next candidate lies past date.max
        logger.debug("Search for event %s ran off the calendar after %s", event.id, after)
        return None


def iter_occurrences(
    event: CalendarEvent,
    *,
    limit: int,
    max_steps: int = MAX_SEARCH_STEPS,
) -> Iterator[date]:
    """Yield the anchor, then each following occurrence, at most ``limit`` dates."""
    if limit < 1:
        return
    current: date | None = event.anchor_date()
    produced = 0
    while current is not None and produced < limit:
        yield current
        produced += 1
        current = next_occurrence(event, current, max_steps=max_steps)
