"""
Nth-weekday math: "the 4th Thursday of November", "the last Monday of May".

Monthly and yearly recurrences keyed to a weekday store no rule of their
own; the rule is read back from the anchor date with
``occurrence_of_weekday_in_month`` and resolved per month with
``nth_weekday_of_month``.
"""
from datetime import date
from typing import Literal, NamedTuple

from eventcal.domain.dates import (
    add_days, days_in_month, make_date, month_end, weekday_index,
)


class WeekdayPosition(NamedTuple):
    n: int  # 1..5
    weekday: int  # 0 = Sunday
    is_last: bool


def nth_weekday_of_month(
    year: int,
    month: int,
    weekday: int,
    n: int | Literal["last"],
) -> date | None:
    """Date of the n-th (or last) ``weekday`` of a zero-based month.

    Returns None when the weekday is out of range or the month has no such
    occurrence (e.g. no 5th Tuesday).
    """
    if weekday < 0 or weekday > 6:
        return None

    if n == "last":
        last_day = month_end(year, month)
        return add_days(last_day, -((weekday_index(last_day) - weekday) % 7))

    if n < 1:
        return None

    first_day = make_date(year, month, 1)
    day = 1 + (weekday - weekday_index(first_day)) % 7 + (n - 1) * 7
    if day > days_in_month(year, month):
        return None
    return first_day.replace(day=day)


def occurrence_of_weekday_in_month(d: date) -> WeekdayPosition:
    """Which occurrence of its weekday ``d`` is within its month.

    2024-11-28 -> WeekdayPosition(n=4, weekday=4, is_last=True)
    """
    n = (d.day + 6) // 7
    is_last = d.day + 7 > days_in_month(d.year, d.month - 1)
    return WeekdayPosition(n=n, weekday=weekday_index(d), is_last=is_last)
