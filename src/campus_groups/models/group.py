"""SQLAlchemy models for groups and their memberships."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_groups.db.session import Base
from campus_groups.db.time import utcnow

from .profile import new_id


class GroupVisibility(str, Enum):
    """Who can discover and view a group."""

    PUBLIC = "public"
    PRIVATE = "private"


class MemberRole(str, Enum):
    """Role carried by a membership row."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


# Roles allowed to bring new people into a group.
INVITER_ROLES = frozenset({MemberRole.ADMIN.value, MemberRole.MODERATOR.value})
ADMIN_ROLES = frozenset({MemberRole.ADMIN.value})


class Group(Base):
    """A named collaboration space.

    The creator is an implicit admin even when no membership row exists for
    them; authorization treats ``created_by`` as a standing bypass.
    """

    __tablename__ = "groups"
    __table_args__ = (
        CheckConstraint("visibility IN ('public', 'private')", name="ck_groups_visibility"),
        Index("idx_groups_visibility", "visibility"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    visibility: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=GroupVisibility.PRIVATE.value,
    )
    profile_pic_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    @property
    def is_public(self) -> bool:
        """Return True when anyone may view and join the group."""
        return self.visibility == GroupVisibility.PUBLIC.value


class GroupMember(Base):
    """Role-tagged association between a profile and a group."""

    __tablename__ = "group_members"
    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'moderator', 'member')",
            name="ck_group_members_role",
        ),
        Index("idx_group_members_user", "user_id"),
    )

    # Composite primary key doubles as the (group, user) uniqueness constraint.
    group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=MemberRole.MEMBER.value,
    )
    joined_at: Mapped[datetime] = mapped_column(default=utcnow)
