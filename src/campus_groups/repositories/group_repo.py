"""Data access helpers for working with groups."""
from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from campus_groups.db.time import utcnow
from campus_groups.models.group import Group, GroupMember, GroupVisibility

__all__ = ["GroupRepository"]


class GroupRepository:
    """Thin wrapper around database access for group entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, group_id: str) -> Group | None:
        """Return a group by identifier."""
        return self.session.get(Group, group_id)

    def create(
        self,
        *,
        name: str,
        description: str | None,
        visibility: str,
        created_by: str,
        profile_pic_url: str | None = None,
    ) -> Group:
        """Stage a new group and flush so its identifier is assigned."""
        group = Group(
            name=name,
            description=description,
            visibility=visibility,
            created_by=created_by,
            profile_pic_url=profile_pic_url,
        )
        self.session.add(group)
        self.session.flush()
        return group

    def list_public(self, limit: int, offset: int = 0) -> list[Group]:
        """Return public groups, newest first."""
        stmt = (
            select(Group)
            .where(Group.visibility == GroupVisibility.PUBLIC.value)
            .order_by(Group.created_at.desc(), Group.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def list_for_user(self, user_id: str) -> list[Group]:
        """Return groups a user created or holds a membership in, most recently active first."""
        member_of = select(GroupMember.group_id).where(GroupMember.user_id == user_id)
        stmt = (
            select(Group)
            .where(or_(Group.created_by == user_id, Group.id.in_(member_of)))
            .order_by(Group.updated_at.desc(), Group.id)
        )
        return list(self.session.scalars(stmt))

    def touch(self, group: Group) -> None:
        """Bump ``updated_at`` so activity sorts the group to the top."""
        group.updated_at = utcnow()

    def delete(self, group: Group) -> None:
        self.session.delete(group)
