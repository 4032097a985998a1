"""
Calendar event model and its wire format.

Wire shape (camelCase, zero-based month):

    {"id": "...", "title": "...",
     "originalDate": {"year": 2024, "month": 0, "day": 31},
     "startTimeInMinutes": 540, "endTimeInMinutes": 600,
     "recurrence": {"frequency": "monthly", "interval": 1,
                    "monthlyType": "dayOfMonth",
                    "end": {"type": "count", "value": 5}}}

Recurrence is a tagged union on ``frequency``; the end bound is a tagged
union on ``type``. Field types are structural only (integers are strict:
booleans, floats and numeric strings do not parse). Whether an event makes
sense (positive interval, weekdays in range, until not before the anchor)
is decided by ``eventcal.domain.validation.is_event_valid``.
"""
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError
from pydantic.alias_generators import to_camel

from eventcal.domain.dates import make_date, parse_until


RuleType = Literal["dayOfMonth", "nthWeekday", "lastWeekday"]


class EventParseError(ValueError):
    pass


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class OriginalDate(_WireModel):
    year: StrictInt
    month: StrictInt  # 0-11
    day: StrictInt  # 1-31

    def to_date(self) -> date:
        return make_date(self.year, self.month, self.day)


class CountEnd(_WireModel):
    type: Literal["count"] = "count"
    value: StrictInt


class UntilEnd(_WireModel):
    type: Literal["until"] = "until"
    # Kept as received: stored events carry an ISO string (or null)
    value: date | str | None = None


RecurrenceEnd = Annotated[Union[CountEnd, UntilEnd], Field(discriminator="type")]


class _BaseRecurrence(_WireModel):
    interval: StrictInt = 1
    end: RecurrenceEnd | None = None

    def until_date(self) -> date | None:
        """Normalized until bound, or None when absent or unreadable."""
        if isinstance(self.end, UntilEnd):
            return parse_until(self.end.value)
        return None

    def count_limit(self) -> int | None:
        if isinstance(self.end, CountEnd):
            return self.end.value
        return None


class DailyRecurrence(_BaseRecurrence):
    frequency: Literal["daily"] = "daily"


class WeeklyRecurrence(_BaseRecurrence):
    frequency: Literal["weekly"] = "weekly"
    days_of_week: tuple[StrictInt, ...] = ()  # 0 = Sunday .. 6 = Saturday


class MonthlyRecurrence(_BaseRecurrence):
    frequency: Literal["monthly"] = "monthly"
    monthly_type: RuleType = "dayOfMonth"


class YearlyRecurrence(_BaseRecurrence):
    frequency: Literal["yearly"] = "yearly"
    yearly_type: RuleType = "dayOfMonth"


RecurrencePattern = Annotated[
    Union[DailyRecurrence, WeeklyRecurrence, MonthlyRecurrence, YearlyRecurrence],
    Field(discriminator="frequency"),
]


class CalendarEvent(_WireModel):
    id: str
    title: str
    original_date: OriginalDate
    # Minutes since midnight
    start_time_in_minutes: StrictInt | None = None
    end_time_in_minutes: StrictInt | None = None
    recurrence: RecurrencePattern | None = None

    def anchor_date(self) -> date:
        return self.original_date.to_date()

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


@dataclass(frozen=True)
class Occurrence:
    """One concrete calendar instance of an event."""
    event: CalendarEvent
    date: date

    def to_dict(self) -> dict[str, Any]:
        payload = event_to_dict(self.event)
        payload["date"] = self.date.isoformat()
        return payload


# --- Wire format ---

def event_from_dict(data: Any) -> CalendarEvent:
    """Parse the wire shape. Raises EventParseError if it is not an event."""
    if isinstance(data, CalendarEvent):
        return data
    try:
        return CalendarEvent.model_validate(data)
    except ValidationError as e:
        raise EventParseError(f"invalid event payload: {e}") from e


def event_to_dict(event: CalendarEvent) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": event.id,
        "title": event.title,
        "originalDate": {
            "year": event.original_date.year,
            "month": event.original_date.month,
            "day": event.original_date.day,
        },
    }
    if event.start_time_in_minutes is not None:
        payload["startTimeInMinutes"] = event.start_time_in_minutes
    if event.end_time_in_minutes is not None:
        payload["endTimeInMinutes"] = event.end_time_in_minutes
    if event.recurrence is not None:
        payload["recurrence"] = recurrence_to_dict(event.recurrence)
    return payload


def recurrence_to_dict(recurrence: _BaseRecurrence) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "frequency": recurrence.frequency,
        "interval": recurrence.interval,
    }
    if isinstance(recurrence, WeeklyRecurrence):
        payload["daysOfWeek"] = list(recurrence.days_of_week)
    elif isinstance(recurrence, MonthlyRecurrence):
        payload["monthlyType"] = recurrence.monthly_type
    elif isinstance(recurrence, YearlyRecurrence):
        payload["yearlyType"] = recurrence.yearly_type

    end = recurrence.end
    if isinstance(end, CountEnd):
        payload["end"] = {"type": "count", "value": end.value}
    elif isinstance(end, UntilEnd):
        value = end.value.isoformat() if isinstance(end.value, date) else end.value
        payload["end"] = {"type": "until", "value": value}
    return payload
