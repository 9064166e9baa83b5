# tests/test_api.py

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient

from taskzm.schemas.recurrence import RecurrenceRuleIn, StepRuleIn
from taskzm.services.recurrence_validator import local_today


def _series_body(**rule) -> dict:
    return {
        "template": {"title": "Gym", "priority": "high", "tags": ["health"]},
        "rule": {"frequency": "daily", "interval": 2, **rule},
        "start_date": "2025-01-01",
    }


def test_health_and_root(client: TestClient) -> None:
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["docs"] == "/docs"


def test_task_crud(client: TestClient) -> None:
    created = client.post("/api/u1/tasks", json={"title": "Call mom", "scheduled_date": "2025-01-05"})
    assert created.status_code == 201
    task_id = created.json()["id"]
    assert created.json()["recurring_group_id"] is None

    updated = client.put(f"/api/u1/tasks/{task_id}", json={"priority": "low"})
    assert updated.json()["priority"] == "low"
    assert updated.json()["title"] == "Call mom"

    toggled = client.patch(f"/api/u1/tasks/{task_id}/complete")
    assert toggled.json()["completed"] is True

    assert client.get(f"/api/u2/tasks/{task_id}").status_code == 404
    assert client.delete(f"/api/u1/tasks/{task_id}").status_code == 204
    assert client.get(f"/api/u1/tasks/{task_id}").status_code == 404


def test_validate_endpoint_reports_all_errors(client: TestClient) -> None:
    response = client.post(
        "/api/recurrence/validate",
        json={"frequency": "daily", "interval": 0, "end_date": "2020-01-01", "count": 5},
    )

    assert response.status_code == 200
    assert response.json() == {
        "valid": False,
        "errors": [
            "Interval must be at least 1",
            "Cannot specify both end date and count",
            "End date must be in the future",
        ],
    }


def test_validate_endpoint_accepts_future_end_date(client: TestClient) -> None:
    end_date = (local_today() + timedelta(days=10)).isoformat()

    response = client.post("/api/recurrence/validate", json={"frequency": "weekly", "end_date": end_date})

    assert response.json() == {"valid": True, "errors": []}


def test_days_of_week_range_is_checked_by_schema(client: TestClient) -> None:
    response = client.post(
        "/api/recurrence/validate",
        json={"frequency": "weekly", "count": 3, "days_of_week": [7]},
    )

    assert response.status_code == 422


def test_preview_does_not_persist(client: TestClient) -> None:
    response = client.post("/api/recurrence/preview", json=_series_body(count=3))

    assert response.status_code == 200
    assert [o["scheduled_date"] for o in response.json()] == ["2025-01-01", "2025-01-03", "2025-01-05"]
    assert client.get("/api/u1/tasks").json()["count"] == 0


def test_series_lifecycle(client: TestClient) -> None:
    created = client.post("/api/u1/series", json=_series_body(count=3))
    assert created.status_code == 201
    body = created.json()
    group_id = body["recurring_group_id"]
    assert body["count"] == 3
    assert all(t["recurring_group_id"] == group_id for t in body["tasks"])

    week = client.get("/api/u1/tasks", params={"date_from": "2025-01-02", "date_to": "2025-01-05"}).json()
    assert [t["scheduled_date"] for t in week["tasks"]] == ["2025-01-03", "2025-01-05"]

    summaries = client.get("/api/u1/series").json()
    assert summaries == [
        {"recurring_group_id": group_id, "count": 3, "first_date": "2025-01-01", "last_date": "2025-01-05"}
    ]

    updated = client.put(f"/api/u1/series/{group_id}", json={"title": "Gym (legs)"})
    assert updated.status_code == 200
    assert {t["title"] for t in updated.json()["tasks"]} == {"Gym (legs)"}

    extended = client.post(f"/api/u1/series/{group_id}/extend", json={"frequency": "daily", "interval": 2})
    assert extended.status_code == 201
    assert extended.json()["scheduled_date"] == "2025-01-07"
    assert extended.json()["title"] == "Gym (legs)"

    assert client.get(f"/api/u1/series/{group_id}").json()["count"] == 4
    assert client.delete(f"/api/u1/series/{group_id}").status_code == 204
    assert client.get(f"/api/u1/series/{group_id}").status_code == 404

    counters = client.get("/metrics").json()["counters"]
    assert counters["series_created_total"] == 1
    assert counters["series_extended_total"] == 1
    assert counters["series_deleted_total"] == 1


def test_create_series_with_invalid_rule(client: TestClient) -> None:
    response = client.post("/api/u1/series", json=_series_body(count=100))

    assert response.status_code == 400
    assert response.json()["detail"] == {"errors": ["Count must be between 1 and 52"]}
    assert client.get("/api/u1/tasks").json()["count"] == 0


def test_create_series_with_impossible_start_date(client: TestClient) -> None:
    body = _series_body(count=2)
    body["start_date"] = "2025-02-30"

    response = client.post("/api/u1/series", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == {"errors": ["Invalid start date: 2025-02-30"]}


def test_unknown_series_is_404(client: TestClient) -> None:
    assert client.put("/api/u1/series/nope", json={"title": "x"}).status_code == 404
    assert client.delete("/api/u1/series/nope").status_code == 404
    assert client.post("/api/u1/series/nope/extend", json={"frequency": "daily"}).status_code == 404


def test_series_ending_before_it_starts_is_rejected(client: TestClient) -> None:
    today = local_today()
    body = _series_body(end_date=(today + timedelta(days=5)).isoformat())
    body["start_date"] = (today + timedelta(days=30)).isoformat()

    response = client.post("/api/u1/series", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == {"errors": ["End date is before start date"]}
    assert client.get("/api/u1/tasks").json()["count"] == 0
    counters = client.get("/metrics").json()["counters"]
    assert counters["series_created_total"] == 0
    assert counters["validation_failures_total"] == 1


def test_rule_payload_keeps_every_field() -> None:
    rule = RecurrenceRuleIn(
        frequency="weekly", interval=2, end_date="2025-03-01", days_of_week=[1, 3]
    ).to_rule()
    step = StepRuleIn(frequency="monthly", interval=3).to_rule()

    assert rule.end_date.isoformat() == "2025-03-01"
    assert rule.count is None
    assert rule.days_of_week == [1, 3]
    assert (step.frequency.value, step.interval, step.days_of_week) == ("monthly", 3, [])
