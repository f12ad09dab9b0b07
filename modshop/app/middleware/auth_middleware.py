"""
middleware/auth_middleware.py — Bearer-token authentication and group checks.

Two route decorators:

  @require_auth
      1. Reads the Authorization header (expected: "Bearer <token>")
      2. Validates the token via token_service (signature, issuer, audience, exp)
      3. Attaches user_id, username and groups to flask.g for the request
      4. Raises the appropriate 401 AppError if any step fails

  @require_groups("Administrators", "Managers")
      Runs require_auth, then requires that the caller's token carries at
      least one of the named groups. Raises 403 FORBIDDEN otherwise.

401 vs 403:
  TOKEN_MISSING  (401) — no Authorization header
  TOKEN_INVALID  (401) — malformed header, invalid signature, or bad payload
  TOKEN_EXPIRED  (401) — valid token but exp claim is in the past
  FORBIDDEN      (403) — authenticated, but not in any required group
"""

from __future__ import annotations

import functools
from typing import Callable

from flask import current_app, g, request

from modshop.app.errors import AppError, ErrorCode
from modshop.app.services import token_service


def require_auth(f: Callable) -> Callable:
    """
    Route decorator that enforces bearer-token authentication.

    Usage:
        @users_bp.route("/", methods=["GET"])
        @require_auth
        def list_users():
            caller = g.user_id  # always an int when this runs
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return decorated


def require_groups(*group_names: str) -> Callable:
    """
    Route decorator factory: authentication plus membership in any of
    `group_names` (as recorded in the token's groups claim).
    """
    required = frozenset(group_names)

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            _authenticate_request()
            _authorize_groups(required)
            return f(*args, **kwargs)

        return decorated

    return decorator


def _authenticate_request() -> None:
    """
    Performs the full authentication sequence and populates flask.g.

    Separated from the decorator wrapper so tests can call it directly inside
    a request context.
    """
    auth_header = request.headers.get("Authorization", "")

    # ── Step 1: Require Authorization header ──────────────────────────────
    if not auth_header:
        raise AppError(
            ErrorCode.TOKEN_MISSING,
            "Authentication required. Provide a Bearer token in the Authorization header.",
            401,
        )

    # ── Step 2: Parse "Bearer <token>" format ─────────────────────────────
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "Authorization header must be in the format: Bearer <token>.",
            401,
        )

    # ── Step 3: Validate the token ────────────────────────────────────────
    claims = token_service.validate_token(parts[1])

    # ── Step 4: Attach identity to flask.g ────────────────────────────────
    # Services never import flask.g; routes pass these values in as plain args.
    g.user_id = claims["user_id"]
    g.username = claims["username"]
    g.groups = claims["groups"]


def _authorize_groups(required: frozenset[str]) -> None:
    """Raises FORBIDDEN (403) unless g.groups intersects `required`."""
    if required.isdisjoint(g.groups):
        current_app.logger.info(
            "Authorization denied: user_id=%s path=%s required=%s",
            g.user_id,
            request.path,
            sorted(required),
        )
        raise AppError(
            ErrorCode.FORBIDDEN,
            f"This action requires membership in one of: {', '.join(sorted(required))}.",
            403,
        )
