"""
tests/integration/test_user_groups.py — User groups and memberships.

Reads are public; every write requires Administrators.
"""

from __future__ import annotations

from .conftest import auth_headers, login, register


def _member_ids(client, group_id: int) -> list[int]:
    resp = client.get(f"/api/v1/usergroups/{group_id}/users")
    assert resp.status_code == 200
    return [m["id"] for m in resp.get_json()["data"]]


class TestReads:

    def test_list_groups_is_public_with_member_counts(self, client):
        resp = client.get("/api/v1/usergroups")
        assert resp.status_code == 200
        groups = {g["name"]: g["member_count"] for g in resp.get_json()["data"]}
        assert groups == {"Administrators": 1, "Managers": 1, "Users": 2}

    def test_get_group(self, client):
        resp = client.get("/api/v1/usergroups/2")
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["name"] == "Managers"
        assert data["description"] == "Management team members"

    def test_get_missing_group_returns_404(self, client):
        resp = client.get("/api/v1/usergroups/999")
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "GROUP_NOT_FOUND"

    def test_list_members(self, client):
        assert sorted(_member_ids(client, 3)) == [2, 3]


class TestGroupWrites:

    def test_admin_creates_group(self, client, admin_token):
        resp = client.post(
            "/api/v1/usergroups",
            json={"name": "Auditors", "description": "Read-only reviewers"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["name"] == "Auditors"
        assert data["member_count"] == 0

    def test_duplicate_group_name_returns_409(self, client, admin_token):
        resp = client.post(
            "/api/v1/usergroups",
            json={"name": "Managers"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 409
        assert resp.get_json()["error"]["code"] == "DUPLICATE_GROUP_NAME"

    def test_blank_group_name_returns_400(self, client, admin_token):
        resp = client.post(
            "/api/v1/usergroups",
            json={"name": "   "},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"]["field"] == "name"

    def test_manager_cannot_create_group(self, client, manager_token):
        resp = client.post(
            "/api/v1/usergroups",
            json={"name": "Auditors"},
            headers=auth_headers(manager_token),
        )
        assert resp.status_code == 403

    def test_create_group_without_token_returns_401(self, client):
        resp = client.post("/api/v1/usergroups", json={"name": "Auditors"})
        assert resp.status_code == 401

    def test_update_description_keeps_name(self, client, admin_token):
        resp = client.put(
            "/api/v1/usergroups/2",
            json={"description": "Team leads"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["name"] == "Managers"
        assert data["description"] == "Team leads"

    def test_rename_to_existing_name_returns_409(self, client, admin_token):
        resp = client.put(
            "/api/v1/usergroups/2",
            json={"name": "Users"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 409

    def test_delete_group_removes_memberships(self, client, admin_token):
        resp = client.delete("/api/v1/usergroups/2", headers=auth_headers(admin_token))
        assert resp.status_code == 200
        assert client.get("/api/v1/usergroups/2").status_code == 404

        manager = client.get(
            "/api/v1/users/2", headers=auth_headers(admin_token)
        ).get_json()["data"]
        assert manager["groups"] == ["Users"]


class TestMembership:

    def test_admin_adds_member(self, client, admin_token):
        alice = register(client, "alice")
        resp = client.post(
            "/api/v1/usergroups/2/users",
            json={"user_id": alice["id"]},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["group_name"] == "Managers"
        assert data["username"] == "alice"
        assert alice["id"] in _member_ids(client, 2)

    def test_adding_same_member_twice_returns_409_once_stored(self, client, admin_token):
        headers = auth_headers(admin_token)
        before = len(_member_ids(client, 1))

        first = client.post("/api/v1/usergroups/1/users", json={"user_id": 3}, headers=headers)
        second = client.post("/api/v1/usergroups/1/users", json={"user_id": 3}, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.get_json()["error"]["code"] == "ALREADY_MEMBER"
        assert len(_member_ids(client, 1)) == before + 1

    def test_add_unknown_user_returns_404(self, client, admin_token):
        resp = client.post(
            "/api/v1/usergroups/1/users",
            json={"user_id": 999},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "USER_NOT_FOUND"

    def test_add_to_unknown_group_returns_404(self, client, admin_token):
        resp = client.post(
            "/api/v1/usergroups/999/users",
            json={"user_id": 3},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "GROUP_NOT_FOUND"

    def test_non_integer_user_id_returns_400(self, client, admin_token):
        resp = client.post(
            "/api/v1/usergroups/1/users",
            json={"user_id": "3"},
            headers=auth_headers(admin_token),
        )
        assert resp.status_code == 400

    def test_remove_member(self, client, admin_token):
        resp = client.delete("/api/v1/usergroups/3/users/3", headers=auth_headers(admin_token))
        assert resp.status_code == 200
        assert resp.get_json()["data"] == {"removed": True, "group_id": 3, "user_id": 3}
        assert 3 not in _member_ids(client, 3)

    def test_remove_non_member_returns_404(self, client, admin_token):
        resp = client.delete("/api/v1/usergroups/1/users/3", headers=auth_headers(admin_token))
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "NOT_A_MEMBER"

    def test_new_membership_grants_access_on_next_login(self, client, admin_token):
        client.post(
            "/api/v1/usergroups/1/users",
            json={"user_id": 3},
            headers=auth_headers(admin_token),
        )
        data = login(client, "user")
        assert "Administrators" in data["groups"]

        resp = client.post(
            "/api/v1/usergroups",
            json={"name": "Auditors"},
            headers=auth_headers(data["token"]),
        )
        assert resp.status_code == 201
