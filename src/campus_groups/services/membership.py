"""Membership mutations: join, add, remove and role changes.

Every operation follows the same shape: look the group up, ask the
authorization evaluator once, then make a single write. Duplicate rows are
rejected by the (group, user) primary key rather than by the pre-check alone,
so two concurrent joins can never both succeed.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campus_groups.core.errors import AlreadyMember, InvalidRequest, NotFound
from campus_groups.models.group import Group, GroupMember, MemberRole
from campus_groups.repositories.group_repo import GroupRepository
from campus_groups.repositories.membership_repo import MembershipRepository
from campus_groups.services.authorization import AuthorizationEvaluator
from campus_groups.services.profiles import require_profile

logger = logging.getLogger(__name__)

__all__ = ["MembershipService"]

VALID_ROLES = frozenset(role.value for role in MemberRole)


def _check_role(role: str) -> None:
    if role not in VALID_ROLES:
        raise InvalidRequest(f"Unknown role: {role}")


class MembershipService:
    """Apply membership changes approved by the evaluator."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.groups = GroupRepository(session)
        self.members = MembershipRepository(session)
        self.evaluator = AuthorizationEvaluator(session)

    def _group(self, group_id: str) -> Group:
        group = self.groups.get_by_id(group_id)
        if group is None:
            raise NotFound("Group not found")
        return group

    def _insert(self, group_id: str, user_id: str, role: str) -> GroupMember:
        _check_role(role)
        membership = self.members.add(group_id, user_id, role)
        try:
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            # Only a clash on the (group, user) key means the row already exists.
            if self.members.get(group_id, user_id) is not None:
                raise AlreadyMember() from err
            raise
        self.session.refresh(membership)
        return membership

    def join(self, group_id: str, user_id: str) -> GroupMember:
        """Join a public group as a plain member.

        Raises:
            NotFound: The group does not exist.
            AlreadyMember: The user already holds a membership row.
            Unauthorized: The group is private.
        """
        group = self._group(group_id)
        self.evaluator.can_join(group, user_id).enforce()
        membership = self._insert(group.id, user_id, MemberRole.MEMBER.value)
        logger.info("User %s joined group %s", user_id, group.id)
        return membership

    def add_member(
        self,
        group_id: str,
        actor_id: str,
        target_id: str,
        role: str = MemberRole.MEMBER.value,
    ) -> GroupMember:
        """Add ``target_id`` to a group on behalf of ``actor_id``.

        An already-present target is reported as ``AlreadyMember`` rather than
        treated as a silent success, so callers always learn that no row was
        written.
        """
        group = self._group(group_id)
        require_profile(self.session, target_id)
        self.evaluator.can_add_member(group, actor_id, target_id, role).enforce()
        membership = self._insert(group.id, target_id, role)
        logger.info("User %s added %s to group %s as %s", actor_id, target_id, group.id, role)
        return membership

    def remove_member(self, group_id: str, actor_id: str, target_id: str) -> bool:
        """Remove a membership; returns False when there was nothing to remove.

        Removing an absent member is not an error. The creator keeps their
        implicit admin rights even after their own row is removed.
        """
        group = self._group(group_id)
        self.evaluator.can_remove_member(group, actor_id, target_id).enforce()
        removed = self.members.remove(group.id, target_id)
        self.session.commit()
        if removed:
            logger.info("User %s removed %s from group %s", actor_id, target_id, group.id)
        return bool(removed)

    def leave(self, group_id: str, user_id: str) -> bool:
        """Self-leave; a thin alias over :meth:`remove_member`."""
        return self.remove_member(group_id, user_id, user_id)

    def change_role(self, group_id: str, actor_id: str, target_id: str, role: str) -> GroupMember:
        """Change the role on an existing membership row."""
        _check_role(role)
        group = self._group(group_id)
        self.evaluator.can_change_role(group, actor_id, target_id).enforce()
        membership = self.members.get(group.id, target_id)
        if membership is None:
            raise NotFound("User is not a member of this group")
        membership.role = role
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(membership)
        logger.info(
            "User %s changed role of %s in group %s to %s", actor_id, target_id, group.id, role
        )
        return membership
