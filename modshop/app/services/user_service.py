"""
services/user_service.py — Administrative user management.

Authorization (which groups may call what) is enforced by the route
decorators; this module assumes the caller is allowed.

Layer rules:
  - No flask.request / flask.g. Commits are the route's job — only flush here.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from modshop.app.errors import AppError, ErrorCode
from modshop.app.models.membership import Membership
from modshop.app.models.user import User
from modshop.app.services.auth_service import (
    build_user_dict,
    ensure_unique_identity,
    hash_password,
)

# Fields PUT /users/:id may change. Anything else in `changes` is ignored.
_UPDATABLE_FIELDS = ("email", "first_name", "last_name", "is_active")


def _get_user_or_404(user_id: int, session: Session) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise AppError(
            ErrorCode.USER_NOT_FOUND,
            f"User {user_id} does not exist.",
            404,
        )
    return user


def list_users(session: Session) -> list[dict]:
    stmt = (
        select(User)
        .options(selectinload(User.memberships).selectinload(Membership.user_group))
        .order_by(User.id.asc())
    )
    return [build_user_dict(u) for u in session.execute(stmt).scalars().all()]


def get_user(user_id: int, session: Session) -> dict:
    return build_user_dict(_get_user_or_404(user_id, session))


def create_user(
        username: str,
        email: str,
        password: str,
        session: Session,
        first_name: str = "",
        last_name: str = "",
) -> dict:
    """
    Creates an active user with no group memberships.

    Unlike self-registration, administrators assign groups explicitly via
    /usergroups/:id/users.

    Raises:
      AppError(DUPLICATE_USERNAME, 409)
      AppError(DUPLICATE_EMAIL, 409)
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
    session.flush()
    return build_user_dict(user)


def update_user(user_id: int, changes: dict, session: Session) -> dict:
    """
    Partial update: only keys present in `changes` are applied.

    Raises:
      AppError(USER_NOT_FOUND, 404)
      AppError(DUPLICATE_EMAIL, 409) — email belongs to another user
    """
    user = _get_user_or_404(user_id, session)

    if "email" in changes:
        ensure_unique_identity(session, email=changes["email"], exclude_user_id=user_id)

    for name in _UPDATABLE_FIELDS:
        if name in changes:
            setattr(user, name, changes[name])

    session.flush()
    return build_user_dict(user)


def delete_user(user_id: int, session: Session) -> None:
    """
    Deletes the user. Its memberships go with it (ORM cascade).

    Raises:
      AppError(USER_NOT_FOUND, 404)
    """
    user = _get_user_or_404(user_id, session)
    session.delete(user)
    session.flush()
