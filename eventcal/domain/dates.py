"""
Neutral calendar helpers.

All recurrence math works on plain ``datetime.date`` values: no timezone,
no wall clock, so results do not depend on where the caller runs.

Conventions shared with the wire format:
- months are zero-based (0 = January .. 11 = December)
- weekdays are 0 = Sunday .. 6 = Saturday
"""
import calendar
from datetime import date, datetime, timedelta, timezone


def make_date(year: int, month: int, day: int) -> date:
    """Build a date from a zero-based month.

    Out-of-range months and days roll over instead of failing:
    ``make_date(2024, 12, 1)`` is 2025-01-01, ``make_date(2024, 2, 0)``
    is the last day of February 2024.

    Raises ValueError / OverflowError past ``date.min`` or ``date.max``.
    """
    extra_years, month = divmod(month, 12)
    first = date(year + extra_years, month + 1, 1)
    return first + timedelta(days=day - 1)


def days_in_month(year: int, month: int) -> int:
    extra_years, month = divmod(month, 12)
    return calendar.monthrange(year + extra_years, month + 1)[1]


def month_end(year: int, month: int) -> date:
    """Last day of a zero-based month."""
    return make_date(year, month, days_in_month(year, month))


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def add_days_clamped(d: date, days: int) -> date:
    """``add_days`` that stops at the ends of the calendar."""
    try:
        return add_days(d, days)
    except OverflowError:
        return date.max if days > 0 else date.min


def as_date(value: date) -> date:
    """Drop the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_index(d: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return d.isoweekday() % 7


def week_start(d: date) -> date:
    """Sunday that opens the week of ``d``."""
    return add_days(d, -weekday_index(d))


def month_index(d: date) -> int:
    return d.month - 1


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start``'s month to ``end``'s month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def parse_until(value) -> date | None:
    """Normalize a stored "until" value to a date.

    Accepts a date, a datetime or an ISO string (``2025-03-01`` or
    ``2025-03-01T00:00:00.000Z``). Datetimes carrying an offset are reduced
    to their UTC calendar day. Anything else gives None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _utc_day(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return _utc_day(datetime.fromisoformat(text))
    except ValueError:
        return None


def _utc_day(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()
