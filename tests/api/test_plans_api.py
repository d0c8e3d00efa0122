"""HTTP tests for the plan endpoints."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.plans.calendar_days import start_of_day, utc_now


@pytest.fixture
def client(db_engine):
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_plan(client, make_user, catalog):
    user = make_user()

    response = client.post(f"/api/users/{user.id}/workouts/generate", json={"months": 2, "frequency_per_week": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "plan_created"
    assert len(body["workouts"]) == 16
    tomorrow = start_of_day(utc_now().date() + timedelta(days=1))
    assert body["workouts"][0]["scheduled_date"].startswith(tomorrow.date().isoformat())
    assert {w["workout_id"] for w in body["workouts"]} <= {catalog["A"].id, catalog["B"].id}
    assert all(w["is_done"] is False for w in body["workouts"])


def test_generate_plan_uses_defaults_without_body(client, make_user, catalog):
    user = make_user()

    response = client.post(f"/api/users/{user.id}/workouts/generate")

    assert response.status_code == 200
    # one 4-week month at three sessions per week
    assert len(response.json()["workouts"]) == 12


def test_generate_plan_unknown_user(client, catalog):
    response = client.post("/api/users/999/workouts/generate", json={})

    assert response.status_code == 404
    assert response.json()["detail"] == "user not found"


def test_generate_plan_without_templates(client, make_user, catalog):
    user = make_user(aim=2, difficult=3)

    response = client.post(f"/api/users/{user.id}/workouts/generate", json={})

    assert response.status_code == 404
    assert response.json()["detail"] == "No suitable workouts found for your level/aim"


@pytest.mark.parametrize("payload", [{"frequency_per_week": 8}, {"frequency_per_week": 0}, {"months": 0}])
def test_generate_plan_rejects_out_of_range(client, make_user, catalog, payload):
    user = make_user()

    response = client.post(f"/api/users/{user.id}/workouts/generate", json=payload)

    assert response.status_code == 422


def test_schedule_and_completion_flow(client, make_user, catalog):
    user = make_user()
    created = client.post(f"/api/users/{user.id}/workouts/generate", json={"frequency_per_week": 1}).json()["workouts"]
    first = created[0]

    response = client.patch(
        f"/api/users/{user.id}/workouts/complete",
        json={"workout_id": first["workout_id"], "date": first["scheduled_date"][:10]},
    )

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": "workout marked as completed",
        "workout_id": first["workout_id"],
    }

    schedule = client.get(f"/api/users/{user.id}/workouts").json()
    assert len(schedule) == 4
    assert schedule[0]["is_done"] is True
    assert [w["is_done"] for w in schedule[1:]] == [False, False, False]
    assert schedule[0]["exercises"]

    stats = client.get(f"/api/users/{user.id}/stats").json()
    assert stats["total_workouts"] == 1
    assert stats["completion_rate"] == 25.0
    assert stats["current_streak"] == 1


def test_complete_unknown_assignment(client, make_user, catalog):
    user = make_user()

    response = client.patch(
        f"/api/users/{user.id}/workouts/complete",
        json={"workout_id": catalog["A"].id, "date": "2026-02-07"},
    )

    assert response.status_code == 404


def test_complete_rejects_bad_date(client, make_user, catalog):
    user = make_user()

    response = client.patch(
        f"/api/users/{user.id}/workouts/complete",
        json={"workout_id": catalog["A"].id, "date": "next tuesday"},
    )

    assert response.status_code == 422


def test_stats_for_empty_user(client, make_user):
    user = make_user()

    response = client.get(f"/api/users/{user.id}/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total_workouts": 0,
        "completion_rate": 0.0,
        "total_exercises": 0,
        "current_streak": 0,
        "favorite_workout": None,
    }
