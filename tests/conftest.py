"""
Pytest fixtures for testing
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from eventcal.domain.event import CalendarEvent, OriginalDate


@pytest.fixture
def make_event():
    """Factory: CalendarEvent anchored on a regular (1-based month) date."""
    def _make(
        anchor: date,
        recurrence=None,
        event_id: str = "ev-1",
        title: str = "Event",
        start: int | None = None,
        end: int | None = None,
    ) -> CalendarEvent:
        return CalendarEvent(
            id=event_id,
            title=title,
            original_date=OriginalDate(year=anchor.year, month=anchor.month - 1, day=anchor.day),
            start_time_in_minutes=start,
            end_time_in_minutes=end,
            recurrence=recurrence,
        )
    return _make


@pytest.fixture
def weekly_payload():
    """Wire-format weekly event: Mon/Wed/Fri from Monday 2024-01-01."""
    return {
        "id": "standup",
        "title": "Standup",
        "originalDate": {"year": 2024, "month": 0, "day": 1},
        "startTimeInMinutes": 540,
        "endTimeInMinutes": 555,
        "recurrence": {"frequency": "weekly", "interval": 1, "daysOfWeek": [1, 3, 5]},
    }


@pytest.fixture
def client():
    """Test client for FastAPI"""
    from eventcal.main import app
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
