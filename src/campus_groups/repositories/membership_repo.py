"""Data access helpers for membership rows."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from campus_groups.models.group import GroupMember
from campus_groups.models.profile import Profile

__all__ = ["MembershipRepository"]


class MembershipRepository:
    """General-purpose query path for membership rows.

    Callers are expected to have passed an authorization check first; nothing
    here filters by the caller's identity.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, group_id: str, user_id: str) -> GroupMember | None:
        """Return the membership row for a pair, if any."""
        return self.session.get(GroupMember, (group_id, user_id))

    def list_with_profiles(self, group_id: str) -> list[tuple[GroupMember, Profile]]:
        """Return memberships of a group joined to member profiles, oldest first."""
        stmt = (
            select(GroupMember, Profile)
            .join(Profile, Profile.id == GroupMember.user_id)
            .where(GroupMember.group_id == group_id)
            .order_by(GroupMember.joined_at, GroupMember.user_id)
        )
        return [(row[0], row[1]) for row in self.session.execute(stmt).all()]

    def list_for_user(self, user_id: str) -> list[GroupMember]:
        """Return every membership held by a user."""
        stmt = select(GroupMember).where(GroupMember.user_id == user_id)
        return list(self.session.scalars(stmt))

    def count(self, group_id: str) -> int:
        """Return the number of explicit membership rows of a group."""
        stmt = select(func.count()).select_from(GroupMember).where(GroupMember.group_id == group_id)
        return int(self.session.scalar(stmt) or 0)

    def add(self, group_id: str, user_id: str, role: str) -> GroupMember:
        """Stage a new membership row; uniqueness is checked at flush time."""
        membership = GroupMember(group_id=group_id, user_id=user_id, role=role)
        self.session.add(membership)
        return membership

    def remove(self, group_id: str, user_id: str) -> int:
        """Delete the row for a pair and return the number of rows removed."""
        result = self.session.execute(
            delete(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id,
            )
        )
        return int(result.rowcount or 0)

    def remove_all(self, group_id: str) -> None:
        """Delete every membership of a group."""
        self.session.execute(delete(GroupMember).where(GroupMember.group_id == group_id))
