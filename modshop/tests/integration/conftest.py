"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Tests run against in-memory SQLite. Every test gets its own app, and
    therefore its own engine and its own empty database.
  - init_database() creates every package's tables and applies the seed rows,
    so each test starts from the same known state:
      products  1..3   (Premium Widget 29.99, Deluxe Gadget 49.99, Basic Tool 19.99)
      customers 1..2
      orders    1..2
      users     admin / manager / user  (password DEMO_PASSWORD)
      groups    Administrators / Managers / Users

Helper functions (not fixtures) are provided for common operations:
  - register(client, ...)    → registered user's profile
  - login(client, ...)       → {"token", "expires_at", "username", "email", "groups"}
  - auth_headers(token)      → {"Authorization": "Bearer <token>"}
  - token_for(client, name)  → bearer token of a seeded or registered user

These are plain functions (not pytest fixtures) so they can be called with
arbitrary arguments in any test.
"""

from __future__ import annotations

import pytest

from modshop.app import create_app
from modshop.app.database import init_database
from modshop.app.extensions import db as _db
from modshop.app.packages.accounts import DEMO_PASSWORD


@pytest.fixture
def app():
    """
    Creates the Flask application in 'testing' mode with a freshly seeded
    in-memory database.
    """
    flask_app = create_app("testing")
    init_database(flask_app)

    yield flask_app

    with flask_app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client (function-scoped)."""
    return app.test_client()


@pytest.fixture
def admin_token(client):
    return token_for(client, "admin")


@pytest.fixture
def manager_token(client):
    return token_for(client, "manager")


@pytest.fixture
def user_token(client):
    return token_for(client, "user")


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def register(
    client,
    username: str = "alice",
    email: str | None = None,
    password: str = "Password1",
) -> dict:
    """Registers a new user and returns the profile from the response."""
    if email is None:
        email = f"{username}@test.com"
    resp = client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert resp.status_code == 201, f"register failed: {resp.get_json()}"
    return resp.get_json()["data"]


def login(client, username: str, password: str = DEMO_PASSWORD) -> dict:
    resp = client.post(
        "/api/v1/auth/login",
        json={"username": username, "password": password},
    )
    assert resp.status_code == 200, f"login failed: {resp.get_json()}"
    return resp.get_json()["data"]


def token_for(client, username: str, password: str = DEMO_PASSWORD) -> str:
    return login(client, username, password)["token"]


def auth_headers(token: str) -> dict:
    """Returns the Authorization header dict for use in test requests."""
    return {"Authorization": f"Bearer {token}"}


def count(client, path: str, headers: dict | None = None) -> int:
    """Number of items returned by a list endpoint."""
    resp = client.get(path, headers=headers or {})
    assert resp.status_code == 200, f"list {path} failed: {resp.get_json()}"
    return len(resp.get_json()["data"])
