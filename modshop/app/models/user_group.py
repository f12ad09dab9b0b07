"""
models/user_group.py — UserGroup table definition (accounts package).

Group names double as authorization roles: they are embedded in the access
token and checked by require_groups().
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modshop.app.extensions import db


class UserGroup(db.Model):
    __tablename__ = "user_groups"

    __table_args__ = (
        CheckConstraint(
            "LENGTH(TRIM(name)) > 0",
            name="ck_user_groups_name_nonempty",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    memberships: Mapped[list["Membership"]] = relationship(  # noqa: F821
        "Membership",
        back_populates="user_group",
        cascade="all, delete-orphan",
        order_by="Membership.joined_at",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<UserGroup id={self.id} name={self.name!r}>"
