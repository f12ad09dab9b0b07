"""
models/membership.py — User/UserGroup junction table (accounts package).

The composite primary key (user_id, user_group_id) is what makes a duplicate
membership impossible at the DB level; user_group_service checks first so the
client gets ALREADY_MEMBER (409) instead of an IntegrityError.

FK policy: both ON DELETE CASCADE — a membership row does not outlive its
user or its group.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modshop.app.extensions import db


class Membership(db.Model):
    __tablename__ = "user_user_groups"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    user_group_id: Mapped[int] = mapped_column(
        ForeignKey("user_groups.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="memberships",
    )

    user_group: Mapped["UserGroup"] = relationship(  # noqa: F821
        "UserGroup",
        back_populates="memberships",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Membership user_id={self.user_id} "
            f"user_group_id={self.user_group_id}>"
        )
