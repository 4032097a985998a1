"""
FastAPI dependencies (settings, event loading)
"""
import logging
from typing import Any

from fastapi import HTTPException

from eventcal.config import get_settings as _get_settings
from eventcal.domain.event import CalendarEvent, EventParseError, event_from_dict
from eventcal.domain.validation import is_event_valid

logger = logging.getLogger(__name__)

# Re-export for Depends() and dependency_overrides in tests
get_settings = _get_settings


def load_event(payload: Any) -> CalendarEvent:
    """
    Parse and validate one event from a request body

    Raises:
        HTTPException(422): payload is not an event or fails validation
    """
    event_id = payload.get("id") if isinstance(payload, dict) else None
    try:
        event = event_from_dict(payload)
    except EventParseError:
        logger.debug("Unparseable event in request: id=%s", event_id)
        raise HTTPException(
            status_code=422,
            detail=f"Malformed event: {event_id}",
        )

    if not is_event_valid(event):
        raise HTTPException(
            status_code=422,
            detail=f"Invalid event: {event.id}",
        )
    return event


def load_events(payloads: list[Any]) -> list[CalendarEvent]:
    return [load_event(p) for p in payloads]
