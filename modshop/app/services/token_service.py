"""
services/token_service.py — Access token issuance and validation.

Token design:
  - JWT, HS256, signed with JWT_SECRET_KEY.
  - Claims: sub (user_id as str), username, groups (list of group names),
    iss, aud, iat, exp, jti.
  - Lifetime: JWT_EXPIRATION_MINUTES from config.
  - The secret, issuer, audience and lifetime are all read from config.
    This module never generates or rotates them.

The `groups` claim is a snapshot taken at login. Membership changes made
after the token was issued take effect on the next login.

Layer rules:
  - current_app.config is the single Flask dependency, used only to read
    JWT settings.
  - No DB access. Callers pass the group names in.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from modshop.app.errors import AppError, ErrorCode


def _settings() -> dict:
    config = current_app.config
    return {
        "secret": config["JWT_SECRET_KEY"],
        "algorithm": config.get("JWT_ALGORITHM", "HS256"),
        "issuer": config["JWT_ISSUER"],
        "audience": config["JWT_AUDIENCE"],
        "lifetime": timedelta(minutes=config["JWT_EXPIRATION_MINUTES"]),
    }


def issue_token(user_id: int, username: str, groups: list[str]) -> tuple[str, datetime]:
    """
    Creates a signed access token for the given identity.

    Returns: (token, expires_at) where expires_at is timezone-aware UTC.
    """
    settings = _settings()
    now = datetime.now(timezone.utc)
    expires_at = now + settings["lifetime"]
    payload = {
        "sub": str(user_id),
        "username": username,
        "groups": list(groups),
        "iss": settings["issuer"],
        "aud": settings["audience"],
        "iat": now,
        "exp": expires_at,
        # Guarantees each issued token is unique even if generated in the same second.
        "jti": secrets.token_hex(8),
    }
    token = jwt.encode(
        payload,
        settings["secret"],
        algorithm=settings["algorithm"],
    )
    return token, expires_at


def validate_token(raw_token: str) -> dict:
    """
    Verifies signature, issuer, audience and expiry; returns the claims.

    Raises:
      AppError(TOKEN_EXPIRED, 401) — signature valid but exp is in the past
      AppError(TOKEN_INVALID, 401) — anything else wrong with the token
    """
    settings = _settings()
    try:
        claims = jwt.decode(
            raw_token,
            settings["secret"],
            algorithms=[settings["algorithm"]],
            issuer=settings["issuer"],
            audience=settings["audience"],
            options={"require": ["exp", "iss", "aud", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AppError(
            ErrorCode.TOKEN_EXPIRED,
            "The access token has expired. Log in again to obtain a new one.",
            401,
        )
    except jwt.InvalidTokenError:
        # Covers: bad signature, wrong issuer/audience, malformed token, missing claims.
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "The access token is invalid or has been tampered with.",
            401,
        )

    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "The 'sub' claim in the access token is not a valid user ID.",
            401,
        )

    groups = claims.get("groups") or []
    if not isinstance(groups, list):
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "The 'groups' claim in the access token must be a list.",
            401,
        )

    return {
        "user_id": user_id,
        "username": claims.get("username"),
        "groups": [str(name) for name in groups],
        "expires_at": datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    }
