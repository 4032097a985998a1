"""
Structured event description.

The calendar UI says things like "Starts on November 28th, 2024 at 9:00 and
repeats every year on the 4th Thursday of November forever." Rendering that
text is the job of the localization layer; this module only gathers the
values its templates need and names the templates in the order they are
joined.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from eventcal.domain.event import (
    CalendarEvent, CountEnd, UntilEnd,
    WeeklyRecurrence, MonthlyRecurrence, YearlyRecurrence,
)
from eventcal.domain.nth_weekday import occurrence_of_weekday_in_month

# Template keys of the language dictionary (``calendarEvents`` section)
T_STARTS_ON = "Starts on {{date}}"
T_AT_TIME = "at {{time}}"
T_NO_REPEAT = "and does not repeat."
T_REPEATS = "and repeats {{interval}} {{frequency}}"
T_ON_DAYS = "on {{days}}"
T_ON_NTH_DAY = "on the {{nth}} day"
T_ON_NTH_WEEKDAY = "on the {{nth}} {{weekday}}"
T_ON_MONTH_DAY = "on {{month}} {{day}}"
T_ON_NTH_WEEKDAY_OF_MONTH = "on the {{nth}} {{weekday}} of {{month}}"
T_FOR_COUNT = "for {{count}} occurrences."
T_UNTIL = "until {{date}}."
T_FOREVER = "forever."

FREQUENCY_UNITS = {"daily": "day", "weekly": "week", "monthly": "month", "yearly": "year"}


def minutes_to_clock(minutes: int) -> tuple[int, int]:
    """540 -> (9, 0)."""
    return divmod(minutes, 60)


@dataclass(frozen=True)
class EventDescription:
    start_date: date
    start_time: tuple[int, int] | None = None
    end_time: tuple[int, int] | None = None
    repeats: bool = False
    frequency: str | None = None
    unit: str | None = None  # day / week / month / year
    interval: int | None = None
    days_of_week: list[int] = field(default_factory=list)
    rule_type: str | None = None  # dayOfMonth / nthWeekday / lastWeekday
    day_of_month: int | None = None
    nth: int | None = None
    is_last_weekday: bool = False
    weekday: int | None = None
    month: int | None = None  # 0-11
    end_type: str | None = None  # count / until
    end_count: int | None = None
    end_until: date | None = None
    templates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "startTime": list(self.start_time) if self.start_time else None,
            "endTime": list(self.end_time) if self.end_time else None,
            "repeats": self.repeats,
            "frequency": self.frequency,
            "unit": self.unit,
            "interval": self.interval,
            "daysOfWeek": self.days_of_week,
            "ruleType": self.rule_type,
            "dayOfMonth": self.day_of_month,
            "nth": self.nth,
            "isLastWeekday": self.is_last_weekday,
            "weekday": self.weekday,
            "month": self.month,
            "endType": self.end_type,
            "endCount": self.end_count,
            "endUntil": self.end_until.isoformat() if self.end_until else None,
            "templates": self.templates,
        }


def describe_event(event: CalendarEvent) -> EventDescription:
    anchor = event.anchor_date()
    start = event.start_time_in_minutes
    end = event.end_time_in_minutes

    values: dict[str, Any] = {
        "start_date": anchor,
        "start_time": minutes_to_clock(start) if start is not None else None,
        # End time is only shown next to a start time
        "end_time": minutes_to_clock(end) if start is not None and end is not None else None,
    }
    templates = [T_STARTS_ON]
    if start is not None:
        templates.append(T_AT_TIME)

    recurrence = event.recurrence
    if recurrence is None:
        templates.append(T_NO_REPEAT)
        return EventDescription(templates=templates, **values)

    values.update(
        repeats=True,
        frequency=recurrence.frequency,
        unit=FREQUENCY_UNITS.get(recurrence.frequency),
        interval=recurrence.interval,
    )
    templates.append(T_REPEATS)

    if isinstance(recurrence, WeeklyRecurrence):
        values["days_of_week"] = sorted(recurrence.days_of_week)
        templates.append(T_ON_DAYS)
    elif isinstance(recurrence, (MonthlyRecurrence, YearlyRecurrence)):
        yearly = isinstance(recurrence, YearlyRecurrence)
        rule_type = recurrence.yearly_type if yearly else recurrence.monthly_type
        values["rule_type"] = rule_type
        if yearly:
            values["month"] = event.original_date.month
        if rule_type == "dayOfMonth":
            values["day_of_month"] = event.original_date.day
            templates.append(T_ON_MONTH_DAY if yearly else T_ON_NTH_DAY)
        else:
            position = occurrence_of_weekday_in_month(anchor)
            values["weekday"] = position.weekday
            if rule_type == "nthWeekday":
                values["nth"] = position.n
            else:
                values["is_last_weekday"] = True
            templates.append(T_ON_NTH_WEEKDAY_OF_MONTH if yearly else T_ON_NTH_WEEKDAY)

    if isinstance(recurrence.end, CountEnd):
        values.update(end_type="count", end_count=recurrence.end.value)
        templates.append(T_FOR_COUNT)
    elif isinstance(recurrence.end, UntilEnd):
        values["end_type"] = "until"
        until = recurrence.until_date()
        # Unreadable until: the sentence simply ends without a bound
        if until is not None:
            values["end_until"] = until
            templates.append(T_UNTIL)
    else:
        templates.append(T_FOREVER)

    return EventDescription(templates=templates, **values)
