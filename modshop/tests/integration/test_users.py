"""
tests/integration/test_users.py — User administration and group-based access.

401 vs 403:
  No token            → 401 TOKEN_MISSING
  Token, wrong group  → 403 FORBIDDEN
"""

from __future__ import annotations

from .conftest import auth_headers, count, register


class TestListAndGet:

    def test_list_requires_token(self, client):
        resp = client.get("/api/v1/users")
        assert resp.status_code == 401
        assert resp.get_json()["error"]["code"] == "TOKEN_MISSING"

    def test_any_authenticated_user_can_list(self, client, user_token):
        resp = client.get("/api/v1/users", headers=auth_headers(user_token))
        assert resp.status_code == 200
        usernames = [u["username"] for u in resp.get_json()["data"]]
        assert usernames == ["admin", "manager", "user"]

    def test_list_never_exposes_password_hash(self, client, user_token):
        resp = client.get("/api/v1/users", headers=auth_headers(user_token))
        for user in resp.get_json()["data"]:
            assert "password_hash" not in user

    def test_get_user_includes_groups(self, client, user_token):
        resp = client.get("/api/v1/users/1", headers=auth_headers(user_token))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["groups"] == ["Administrators"]

    def test_get_missing_user_returns_404(self, client, user_token):
        resp = client.get("/api/v1/users/999", headers=auth_headers(user_token))
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "USER_NOT_FOUND"


class TestCreate:

    def test_admin_creates_user_without_groups(self, client, admin_token):
        resp = client.post(
            "/api/v1/users",
            json={"username": "carol", "email": "carol@test.com", "password": "Password1"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["username"] == "carol"
        assert data["groups"] == []

    def test_password_over_72_bytes_returns_400(self, client, admin_token):
        resp = client.post(
            "/api/v1/users",
            json={"username": "carol", "email": "carol@test.com", "password": "a1" * 40},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"]["field"] == "password"

    def test_manager_cannot_create_user(self, client, manager_token):
        resp = client.post(
            "/api/v1/users",
            json={"username": "carol", "email": "carol@test.com", "password": "Password1"},
            headers=auth_headers(manager_token),
        )
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "FORBIDDEN"

    def test_duplicate_username_returns_409(self, client, admin_token):
        resp = client.post(
            "/api/v1/users",
            json={"username": "user", "email": "new@test.com", "password": "Password1"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 409
        assert resp.get_json()["error"]["code"] == "DUPLICATE_USERNAME"


class TestUpdate:

    def test_manager_can_update(self, client, manager_token):
        resp = client.put(
            "/api/v1/users/3",
            json={"first_name": "Renamed"},
            headers=auth_headers(manager_token),
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["first_name"] == "Renamed"

    def test_plain_user_cannot_update(self, client, user_token):
        resp = client.put(
            "/api/v1/users/3",
            json={"first_name": "Renamed"},
            headers=auth_headers(user_token),
        )
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "FORBIDDEN"

    def test_partial_update_leaves_other_fields_unchanged(self, client, admin_token):
        headers = auth_headers(admin_token)
        before = client.get("/api/v1/users/3", headers=headers).get_json()["data"]

        resp = client.put("/api/v1/users/3", json={"last_name": "Jones"}, headers=headers)
        after = resp.get_json()["data"]

        assert after["last_name"] == "Jones"
        for key in ("username", "email", "first_name", "is_active", "created_at", "groups"):
            assert after[key] == before[key]

    def test_email_taken_by_other_user_returns_409(self, client, admin_token):
        resp = client.put(
            "/api/v1/users/3",
            json={"email": "admin@example.com"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 409
        assert resp.get_json()["error"]["code"] == "DUPLICATE_EMAIL"

    def test_keeping_own_email_is_not_a_conflict(self, client, admin_token):
        resp = client.put(
            "/api/v1/users/3",
            json={"email": "user@example.com"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 200

    def test_non_boolean_is_active_returns_400(self, client, admin_token):
        resp = client.put(
            "/api/v1/users/3",
            json={"is_active": "no"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"]["field"] == "is_active"

    def test_update_missing_user_returns_404(self, client, admin_token):
        resp = client.put(
            "/api/v1/users/999",
            json={"first_name": "Ghost"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 404


class TestDelete:

    def test_non_admin_delete_returns_403_and_keeps_user(self, client, user_token, admin_token):
        before = count(client, "/api/v1/users", auth_headers(admin_token))
        resp = client.delete("/api/v1/users/2", headers=auth_headers(user_token))
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "FORBIDDEN"
        assert count(client, "/api/v1/users", auth_headers(admin_token)) == before

    def test_admin_delete_returns_200_and_removes_user(self, client, admin_token):
        headers = auth_headers(admin_token)
        before = count(client, "/api/v1/users", headers)
        resp = client.delete("/api/v1/users/3", headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()["data"] == {"deleted": True, "id": 3}
        assert count(client, "/api/v1/users", headers) == before - 1

    def test_delete_removes_memberships(self, client, admin_token):
        alice = register(client, "alice")
        client.delete(f"/api/v1/users/{alice['id']}", headers=auth_headers(admin_token))

        members = client.get("/api/v1/usergroups/3/users").get_json()["data"]
        assert alice["id"] not in [m["id"] for m in members]

    def test_delete_without_token_returns_401(self, client):
        resp = client.delete("/api/v1/users/3")
        assert resp.status_code == 401

    def test_delete_missing_user_returns_404(self, client, admin_token):
        resp = client.delete("/api/v1/users/999", headers=auth_headers(admin_token))
        assert resp.status_code == 404
