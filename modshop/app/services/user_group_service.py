"""
services/user_group_service.py — User groups and membership business logic.

Invariants enforced here:
  - Group names are unique (DUPLICATE_GROUP_NAME, 409) on create and rename.
  - A (user, group) pair appears at most once (ALREADY_MEMBER, 409). The
    composite primary key on user_user_groups is the DB-level backstop.
  - Adding a member requires both the group and the user to exist (404).

Authorization (Administrators only for writes) is enforced by the routes.

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from modshop.app.errors import AppError, ErrorCode
from modshop.app.models.membership import Membership
from modshop.app.models.user import User
from modshop.app.models.user_group import UserGroup
from modshop.app.services.auth_service import build_user_dict


# ── Private helpers ────────────────────────────────────────────────────────

def _get_group_or_404(group_id: int, session: Session) -> UserGroup:
    """Returns the UserGroup or raises GROUP_NOT_FOUND (404)."""
    group = session.get(UserGroup, group_id)
    if group is None:
        raise AppError(
            ErrorCode.GROUP_NOT_FOUND,
            f"User group {group_id} does not exist.",
            404,
        )
    return group


def _get_membership(group_id: int, user_id: int, session: Session) -> Membership | None:
    return session.get(Membership, (user_id, group_id))


def _ensure_unique_name(name: str, session: Session, exclude_group_id: int | None = None) -> None:
    stmt = select(UserGroup.id).where(UserGroup.name == name)
    if exclude_group_id is not None:
        stmt = stmt.where(UserGroup.id != exclude_group_id)
    if session.execute(stmt).scalar_one_or_none() is not None:
        raise AppError(
            ErrorCode.DUPLICATE_GROUP_NAME,
            f"A user group named '{name}' already exists.",
            409,
            field="name",
        )


def _member_count(group_id: int, session: Session) -> int:
    return session.execute(
        select(func.count())
        .select_from(Membership)
        .where(Membership.user_group_id == group_id)
    ).scalar_one()


def _build_group_dict(group: UserGroup, member_count: int) -> dict:
    """Serialises a UserGroup to a plain dict."""
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "created_at": group.created_at.isoformat(),
        "member_count": member_count,
    }


# ── Public service functions ───────────────────────────────────────────────

def list_groups(session: Session) -> list[dict]:
    """All groups with their member counts, ordered by id."""
    counts = (
        select(Membership.user_group_id, func.count().label("member_count"))
        .group_by(Membership.user_group_id)
        .subquery()
    )
    stmt = (
        select(UserGroup, func.coalesce(counts.c.member_count, 0))
        .outerjoin(counts, counts.c.user_group_id == UserGroup.id)
        .order_by(UserGroup.id.asc())
    )
    return [
        _build_group_dict(group, count)
        for group, count in session.execute(stmt).all()
    ]


def get_group(group_id: int, session: Session) -> dict:
    group = _get_group_or_404(group_id, session)
    return _build_group_dict(group, _member_count(group_id, session))


def create_group(name: str, description: str, session: Session) -> dict:
    """
    Raises:
      AppError(DUPLICATE_GROUP_NAME, 409)
    """
    _ensure_unique_name(name, session)

    group = UserGroup(name=name, description=description)
    session.add(group)
    session.flush()
    return _build_group_dict(group, 0)


def update_group(group_id: int, changes: dict, session: Session) -> dict:
    """
    Partial update of name and/or description.

    Raises:
      AppError(GROUP_NOT_FOUND, 404)
      AppError(DUPLICATE_GROUP_NAME, 409) — name used by another group
    """
    group = _get_group_or_404(group_id, session)

    if "name" in changes:
        _ensure_unique_name(changes["name"], session, exclude_group_id=group_id)
        group.name = changes["name"]

    if "description" in changes:
        group.description = changes["description"]

    session.flush()
    return _build_group_dict(group, _member_count(group_id, session))


def delete_group(group_id: int, session: Session) -> None:
    """Deletes the group and its memberships (ORM cascade)."""
    group = _get_group_or_404(group_id, session)
    session.delete(group)
    session.flush()


def list_members(group_id: int, session: Session) -> list[dict]:
    """Members of a group, in join order, as user transfer objects."""
    _get_group_or_404(group_id, session)

    stmt = (
        select(User)
        .join(Membership, User.id == Membership.user_id)
        .where(Membership.user_group_id == group_id)
        .options(selectinload(User.memberships).selectinload(Membership.user_group))
        .order_by(Membership.joined_at.asc(), User.id.asc())
    )
    return [build_user_dict(u) for u in session.execute(stmt).scalars().all()]


def add_member(group_id: int, user_id: int, session: Session) -> dict:
    """
    Adds a user to a group.

    Raises:
      AppError(GROUP_NOT_FOUND, 404) — group does not exist
      AppError(USER_NOT_FOUND, 404)  — user does not exist
      AppError(ALREADY_MEMBER, 409)  — pair already present

    Returns: dict with the new membership details.
    """
    group = _get_group_or_404(group_id, session)

    user = session.get(User, user_id)
    if user is None:
        raise AppError(
            ErrorCode.USER_NOT_FOUND,
            f"User {user_id} does not exist.",
            404,
        )

    if _get_membership(group_id, user_id, session) is not None:
        raise AppError(
            ErrorCode.ALREADY_MEMBER,
            f"User {user_id} is already a member of group {group_id}.",
            409,
        )

    membership = Membership(
        user_id=user_id,
        user_group_id=group_id,
        joined_at=datetime.now(timezone.utc),
    )
    session.add(membership)
    session.flush()

    return {
        "group_id": group.id,
        "group_name": group.name,
        "user_id": user.id,
        "username": user.username,
        "joined_at": membership.joined_at.isoformat(),
    }


def remove_member(group_id: int, user_id: int, session: Session) -> None:
    """
    Removes a user from a group.

    Raises:
      AppError(GROUP_NOT_FOUND, 404) — group does not exist
      AppError(NOT_A_MEMBER, 404)    — user is not in the group
    """
    _get_group_or_404(group_id, session)

    membership = _get_membership(group_id, user_id, session)
    if membership is None:
        raise AppError(
            ErrorCode.NOT_A_MEMBER,
            f"User {user_id} is not a member of group {group_id}.",
            404,
        )

    session.delete(membership)
    session.flush()
