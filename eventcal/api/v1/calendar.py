"""
Calendar API endpoints

Stateless: the caller sends its events with every request.
"""
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from eventcal.api.deps import get_settings, load_event, load_events
from eventcal.config import Settings
from eventcal.domain.recurrence import next_occurrence
from eventcal.domain.validation import is_event_valid
from eventcal.application.occurrences import expand_range
from eventcal.application.views import month_view_days, week_view_days
from eventcal.application.description import describe_event


router = APIRouter(prefix="/api/v1/calendar", tags=["calendar"])


# === Request/Response models ===

class ValidateRequest(BaseModel):
    event: Any


class ValidateResponse(BaseModel):
    valid: bool


class NextOccurrenceRequest(BaseModel):
    event: dict[str, Any]
    after: date


class NextOccurrenceResponse(BaseModel):
    date: str | None  # YYYY-MM-DD


class RangeRequest(BaseModel):
    events: list[dict[str, Any]]
    start: date
    end: date


class MonthViewRequest(BaseModel):
    events: list[dict[str, Any]]
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=0, le=11)


class WeekViewRequest(BaseModel):
    events: list[dict[str, Any]]
    base_date: date  # any day of the week


class DescribeRequest(BaseModel):
    event: dict[str, Any]


# === Endpoints ===

@router.post("/validate", response_model=ValidateResponse)
def validate_event(req: ValidateRequest):
    """Check an event before storing it"""
    return ValidateResponse(valid=is_event_valid(req.event))


@router.post("/next-occurrence", response_model=NextOccurrenceResponse)
def get_next_occurrence(
    req: NextOccurrenceRequest,
    settings: Settings = Depends(get_settings),
):
    """Next occurrence strictly after `after`, null when none remain"""
    event = load_event(req.event)
    found = next_occurrence(event, req.after, max_steps=settings.MAX_SEARCH_STEPS)
    return NextOccurrenceResponse(date=found.isoformat() if found else None)


@router.post("/occurrences")
def list_occurrences(
    req: RangeRequest,
    settings: Settings = Depends(get_settings),
):
    """All occurrences within [start, end], sorted by date"""
    events = load_events(req.events)
    result = expand_range(
        events, req.start, req.end,
        max_occurrences=settings.MAX_OCCURRENCES_PER_EVENT,
        max_steps=settings.MAX_SEARCH_STEPS,
    )
    return {
        "occurrences": [occ.to_dict() for occ in result.occurrences],
        "truncatedEventIds": result.truncated_event_ids,
    }


@router.post("/month-view")
def month_view(
    req: MonthViewRequest,
    settings: Settings = Depends(get_settings),
):
    """Month grid (6 weeks, adjacent-month days included)"""
    events = load_events(req.events)
    days = month_view_days(
        events, req.year, req.month,
        max_occurrences=settings.MAX_OCCURRENCES_PER_EVENT,
        max_steps=settings.MAX_SEARCH_STEPS,
    )
    return {"days": [d.to_dict() for d in days]}


@router.post("/week-view")
def week_view(
    req: WeekViewRequest,
    settings: Settings = Depends(get_settings),
):
    """Sunday-Saturday week containing `base_date`"""
    events = load_events(req.events)
    days = week_view_days(
        events, req.base_date,
        max_occurrences=settings.MAX_OCCURRENCES_PER_EVENT,
        max_steps=settings.MAX_SEARCH_STEPS,
    )
    return {"days": [d.to_dict() for d in days]}


@router.post("/describe")
def describe(req: DescribeRequest):
    """Structured description fields for the localization layer"""
    event = load_event(req.event)
    return describe_event(event).to_dict()
