"""HTTP tests for the profile endpoints."""

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client(db_engine):
    return TestClient(app)


def test_read_profile(client, make_user):
    user = make_user(aim=2, difficult=1, name="Sam")

    response = client.get(f"/api/users/{user.id}/profile")

    assert response.status_code == 200
    assert response.json()["name"] == "Sam"
    assert response.json()["aim"] == 2


def test_patch_profile(client, make_user):
    user = make_user(aim=1, difficult=1)

    response = client.patch(f"/api/users/{user.id}/profile", json={"difficult": 3, "weight": 80})

    assert response.status_code == 200
    assert response.json()["difficult"] == 3
    assert response.json()["weight"] == 80.0
    assert response.json()["aim"] == 1


def test_patch_profile_rejects_unknown_field(client, make_user):
    user = make_user()

    response = client.patch(f"/api/users/{user.id}/profile", json={"email": "x@example.com"})

    assert response.status_code == 422


def test_profile_unknown_user(client):
    assert client.get("/api/users/999/profile").status_code == 404
    assert client.patch("/api/users/999/profile", json={"name": "Ghost"}).status_code == 404
