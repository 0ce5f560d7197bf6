"""Tests for Player CRUD endpoints."""
from tests.conftest import create_test_user


class TestUserCRUD:
    """Player create / get / update / list."""

    def test_create_user(self, client):
        data = create_test_user(client, name="Alice", tz="Australia/Sydney")
        assert data["display_name"] == "Alice"
        assert data["default_timezone"] == "Australia/Sydney"
        assert data["email"] == "alice@example.com"
        assert "user_id" in data

    def test_create_user_with_skill(self, client):
        resp = client.post("/api/users/", json={"display_name": "Rafa", "skill_level": 4.5})
        assert resp.status_code == 201
        assert resp.json()["skill_level"] == 4.5

    def test_duplicate_display_name_conflict(self, client):
        create_test_user(client, name="Alice")
        resp = client.post("/api/users/", json={"display_name": "Alice"})
        assert resp.status_code == 409

    def test_get_user(self, client):
        user = create_test_user(client)
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Test User"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_update_user(self, client):
        user = create_test_user(client)
        resp = client.patch(f"/api/users/{user['user_id']}", json={
            "display_name": "Updated Name",
            "default_timezone": "Europe/London",
        })
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Updated Name"
        assert resp.json()["default_timezone"] == "Europe/London"

    def test_update_null_required_field_rejected(self, client):
        user = create_test_user(client, name="Alice")
        for field in ("display_name", "default_timezone"):
            resp = client.patch(f"/api/users/{user['user_id']}", json={field: None})
            assert resp.status_code == 422
        assert client.get(f"/api/users/{user['user_id']}").json()["display_name"] == "Alice"

    def test_update_clears_optional_field(self, client):
        user = create_test_user(client, name="Alice")
        resp = client.patch(f"/api/users/{user['user_id']}", json={"email": None})
        assert resp.status_code == 200
        assert resp.json()["email"] is None

    def test_rename_to_taken_name_conflict(self, client):
        create_test_user(client, name="Alice")
        bob = create_test_user(client, name="Bob")
        resp = client.patch(f"/api/users/{bob['user_id']}", json={"display_name": "Alice"})
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Display name is already taken"

    def test_list_users(self, client):
        create_test_user(client, name="Bob")
        create_test_user(client, name="Alice")
        resp = client.get("/api/users/")
        assert resp.status_code == 200
        names = [u["display_name"] for u in resp.json()]
        assert names == ["Alice", "Bob"]


def test_health_check(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
