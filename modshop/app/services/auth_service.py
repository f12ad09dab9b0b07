"""
services/auth_service.py — Registration, login and the credential store.

Responsibilities:
  - User registration (uniqueness checks, bcrypt hashing, default group)
  - Credential validation and last-login bookkeeping
  - Handing the user's current groups to token_service at login

Layer rules:
  - No imports from routes or schemas
  - No use of flask.request, flask.g, or HTTP status codes outside AppError
  - current_app.config is read for BCRYPT_LOG_ROUNDS and DEFAULT_USER_GROUP only
  - Commits are the route's responsibility — only flush here.

Password storage:
  - Hashed with bcrypt (cost factor from config BCRYPT_LOG_ROUNDS, default 12)
  - Raw password is never stored, never logged
"""

from __future__ import annotations

from datetime import datetime, timezone

import bcrypt
from flask import current_app
from sqlalchemy import select
from sqlalchemy.orm import Session

from modshop.app.errors import AppError, ErrorCode
from modshop.app.models.membership import Membership
from modshop.app.models.user import User
from modshop.app.models.user_group import UserGroup
from modshop.app.services import token_service

# bcrypt rejects (5.x) or truncates (4.x) anything longer.
_BCRYPT_MAX_BYTES = 72


# ── Helpers shared with user_service ───────────────────────────────────────

def hash_password(password: str) -> str:
    rounds = current_app.config.get("BCRYPT_LOG_ROUNDS", 12)
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def ensure_unique_identity(
        session: Session,
        username: str | None = None,
        email: str | None = None,
        exclude_user_id: int | None = None,
) -> None:
    """
    Raises:
      AppError(DUPLICATE_USERNAME, 409) — username taken by another user
      AppError(DUPLICATE_EMAIL, 409)    — email taken by another user
    """
    if username is not None:
        stmt = select(User.id).where(User.username == username)
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        if session.execute(stmt).scalar_one_or_none() is not None:
            raise AppError(
                ErrorCode.DUPLICATE_USERNAME,
                f"The username '{username}' is already taken.",
                409,
                field="username",
            )

    if email is not None:
        stmt = select(User.id).where(User.email == email)
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        if session.execute(stmt).scalar_one_or_none() is not None:
            raise AppError(
                ErrorCode.DUPLICATE_EMAIL,
                f"The email address '{email}' is already registered.",
                409,
                field="email",
            )


def build_user_dict(user: User) -> dict:
    """Serialises a User to its transfer object. Never includes the hash."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "is_active": user.is_active,
        "created_at": user.created_at.isoformat(),
        "last_login_at": user.last_login_at.isoformat() if user.last_login_at else None,
        "groups": user.group_names,
    }


# ── Public service functions ───────────────────────────────────────────────

def register_user(
        username: str,
        email: str,
        password: str,
        session: Session,
        first_name: str = "",
        last_name: str = "",
) -> dict:
    """
    Creates a new active user and enrols it in the default group.

    The default group is DEFAULT_USER_GROUP from config ("Users"). If that
    group does not exist the user is created without memberships.

    Raises:
      AppError(DUPLICATE_USERNAME, 409)
      AppError(DUPLICATE_EMAIL, 409)

    Returns: the created user's transfer object.
    """
    ensure_unique_identity(session, username=username, email=email)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        is_active=True,
    )
    session.add(user)
    session.flush()  # populate user.id before creating the membership

    default_group_name = current_app.config.get("DEFAULT_USER_GROUP", "Users")
    default_group = session.execute(
        select(UserGroup).where(UserGroup.name == default_group_name)
    ).scalar_one_or_none()

    if default_group is not None:
        session.add(Membership(
            user_id=user.id,
            user_group_id=default_group.id,
            joined_at=datetime.now(timezone.utc),
        ))
        session.flush()
        # The new row was added by FK, not through the collection.
        session.expire(user, ["memberships"])
    else:
        current_app.logger.warning(
            "Default group %r not found; user %s registered without groups",
            default_group_name,
            user.id,
        )

    return build_user_dict(user)


def login_user(
        username: str,
        password: str,
        session: Session,
) -> dict:
    """
    Validates credentials and issues an access token.

    Sequence:
      1. Lookup by username.
      2. bcrypt password check.
      3. Active check.
      4. Record last_login_at.
      5. Issue a token carrying the user's current group names.

    Unknown username and wrong password share one error so a caller cannot
    tell which was wrong. ACCOUNT_INACTIVE is only reported after the
    password has been verified.

    Raises:
      AppError(INVALID_CREDENTIALS, 401)
      AppError(ACCOUNT_INACTIVE, 401)

    Returns: {"token", "expires_at", "username", "email", "groups"}
    """
    user = session.execute(
        select(User).where(User.username == username)
    ).scalar_one_or_none()

    # bcrypt.checkpw compares in constant time. A password too long to have
    # been registered can never match.
    raw_password = password.encode("utf-8")
    if (
            user is None
            or len(raw_password) > _BCRYPT_MAX_BYTES
            or not bcrypt.checkpw(raw_password, user.password_hash.encode("utf-8"))
    ):
        current_app.logger.info("Login failed: invalid credentials for %r", username)
        raise AppError(
            ErrorCode.INVALID_CREDENTIALS,
            "The username or password is incorrect.",
            401,
        )

    if not user.is_active:
        current_app.logger.info("Login refused: account %s is inactive", user.id)
        raise AppError(
            ErrorCode.ACCOUNT_INACTIVE,
            "This account is inactive.",
            401,
        )

    user.last_login_at = datetime.now(timezone.utc)
    session.flush()

    groups = user.group_names
    token, expires_at = token_service.issue_token(user.id, user.username, groups)

    return {
        "token": token,
        "expires_at": expires_at.isoformat(),
        "username": user.username,
        "email": user.email,
        "groups": groups,
    }


def get_current_user(user_id: int, session: Session) -> dict:
    """
    Returns the profile of the currently authenticated user.

    Raises:
      AppError(USER_NOT_FOUND, 404) — user deleted after the token was issued.
    """
    user = session.get(User, user_id)
    if user is None:
        raise AppError(
            ErrorCode.USER_NOT_FOUND,
            f"User {user_id} not found.",
            404,
        )
    return build_user_dict(user)
