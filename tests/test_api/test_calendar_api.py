"""
Tests for Calendar API endpoints
"""
from eventcal.api.deps import get_settings
from eventcal.config import Settings


def _daily(event_id="d", **recurrence):
    return {
        "id": event_id,
        "title": "Daily",
        "originalDate": {"year": 2024, "month": 0, "day": 1},
        "recurrence": {"frequency": "daily", "interval": 1, **recurrence},
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "ok"


def test_validate_valid(client, weekly_payload):
    response = client.post("/api/v1/calendar/validate", json={"event": weekly_payload})
    assert response.status_code == 200
    assert response.json() == {"valid": True}


def test_validate_invalid_times(client, weekly_payload):
    weekly_payload["endTimeInMinutes"] = weekly_payload["startTimeInMinutes"]
    response = client.post("/api/v1/calendar/validate", json={"event": weekly_payload})
    assert response.json() == {"valid": False}


def test_validate_boolean_interval(client):
    response = client.post("/api/v1/calendar/validate", json={"event": _daily(interval=True)})
    assert response.status_code == 200
    assert response.json() == {"valid": False}


def test_validate_garbage_is_invalid_not_error(client):
    for body in ({"event": "nope"}, {"event": {"id": 1}}, {"event": None}):
        response = client.post("/api/v1/calendar/validate", json=body)
        assert response.status_code == 200
        assert response.json() == {"valid": False}


def test_next_occurrence(client, weekly_payload):
    response = client.post(
        "/api/v1/calendar/next-occurrence",
        json={"event": weekly_payload, "after": "2024-01-05"},
    )
    assert response.status_code == 200
    assert response.json() == {"date": "2024-01-08"}


def test_next_occurrence_exhausted(client):
    event = _daily(end={"type": "count", "value": 2})
    response = client.post(
        "/api/v1/calendar/next-occurrence",
        json={"event": event, "after": "2024-01-02"},
    )
    assert response.json() == {"date": None}


def test_next_occurrence_rejects_invalid_event(client):
    event = _daily()
    event["recurrence"]["interval"] = 0
    response = client.post(
        "/api/v1/calendar/next-occurrence",
        json={"event": event, "after": "2024-01-02"},
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Invalid event: d"


def test_occurrences(client, weekly_payload):
    once = {"id": "once", "title": "Once", "originalDate": {"year": 2024, "month": 0, "day": 4}}
    response = client.post(
        "/api/v1/calendar/occurrences",
        json={"events": [weekly_payload, once], "start": "2024-01-01", "end": "2024-01-07"},
    )
    assert response.status_code == 200
    data = response.json()
    assert [(o["date"], o["id"]) for o in data["occurrences"]] == [
        ("2024-01-01", "standup"),
        ("2024-01-03", "standup"),
        ("2024-01-04", "once"),
        ("2024-01-05", "standup"),
    ]
    assert data["occurrences"][0]["recurrence"]["daysOfWeek"] == [1, 3, 5]
    assert data["truncatedEventIds"] == []


def test_occurrences_cap_from_settings(client):
    client.app.dependency_overrides[get_settings] = lambda: Settings(MAX_OCCURRENCES_PER_EVENT=5)
    response = client.post(
        "/api/v1/calendar/occurrences",
        json={"events": [_daily()], "start": "2024-01-01", "end": "2024-12-31"},
    )
    data = response.json()
    assert len(data["occurrences"]) == 5
    assert data["truncatedEventIds"] == ["d"]


def test_occurrences_malformed_event(client):
    response = client.post(
        "/api/v1/calendar/occurrences",
        json={"events": [{"id": "broken"}], "start": "2024-01-01", "end": "2024-01-31"},
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Malformed event: broken"


def test_month_view(client, weekly_payload):
    response = client.post(
        "/api/v1/calendar/month-view",
        json={"events": [weekly_payload], "year": 2024, "month": 1},
    )
    assert response.status_code == 200
    days = response.json()["days"]
    # Grid runs Jan 28 .. Mar 9: Mon/Wed/Fri of six weeks
    assert len(days) == 18
    assert days[0] == {
        "id": "standup", "year": 2024, "month": 0, "day": 29, "title": "Standup",
        "startTimeInMinutes": 540, "endTimeInMinutes": 555,
    }


def test_month_view_last_month_of_calendar(client):
    event = _daily()
    event["originalDate"] = {"year": 9999, "month": 11, "day": 30}
    response = client.post(
        "/api/v1/calendar/month-view",
        json={"events": [event], "year": 9999, "month": 11},
    )
    assert response.status_code == 200
    assert [d["day"] for d in response.json()["days"]] == [30, 31]


def test_month_view_rejects_month_out_of_range(client):
    response = client.post(
        "/api/v1/calendar/month-view",
        json={"events": [], "year": 2024, "month": 12},
    )
    assert response.status_code == 422


def test_month_view_search_steps_from_settings(client):
    client.app.dependency_overrides[get_settings] = lambda: Settings(MAX_SEARCH_STEPS=1)
    event = _daily()
    event["originalDate"] = {"year": 2024, "month": 0, "day": 31}
    event["recurrence"] = {"frequency": "monthly", "interval": 1, "monthlyType": "dayOfMonth"}
    response = client.post(
        "/api/v1/calendar/month-view",
        json={"events": [event], "year": 2024, "month": 4},
    )
    assert response.json() == {"days": []}


def test_week_view(client, weekly_payload):
    response = client.post(
        "/api/v1/calendar/week-view",
        json={"events": [weekly_payload], "base_date": "2024-01-10"},
    )
    assert [(d["month"], d["day"]) for d in response.json()["days"]] == [(0, 8), (0, 10), (0, 12)]


def test_describe(client, weekly_payload):
    response = client.post("/api/v1/calendar/describe", json={"event": weekly_payload})
    assert response.status_code == 200
    data = response.json()
    assert data["frequency"] == "weekly"
    assert data["daysOfWeek"] == [1, 3, 5]
    assert data["startTime"] == [9, 0]
    assert data["endTime"] == [9, 15]
