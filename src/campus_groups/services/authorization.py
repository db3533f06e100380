"""Authorization decisions for group membership.

The evaluator answers "may user U do A on group G" and nothing else. It is
read-only, never raises for a business-rule denial and never calls back into
itself: the only data it consults are the group row handed to it (creator and
visibility) and the boolean answers of :class:`MembershipProbe`.

Rules:
    view:          public, or creator, or member
    join:          public and not yet a member
    add member:    creator, or admin/moderator (only creator/admin may grant admin)
    remove member: creator, or admin, or self-leave
    change role:   creator or admin
    manage group:  creator or admin
    delete group:  creator
    chat:          creator or member
    workspaces:    creator or member
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_groups.core.errors import AlreadyMember, GroupsError, Unauthorized
from campus_groups.models.group import ADMIN_ROLES, INVITER_ROLES, Group, MemberRole
from campus_groups.repositories.membership_probe import MembershipProbe

logger = logging.getLogger(__name__)

__all__ = ["AuthorizationEvaluator", "Decision"]


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check.

    Truthy when allowed. A denial carries a human-readable reason and the
    failure type a mutating caller should raise.
    """

    allowed: bool
    reason: str = ""
    failure: type[GroupsError] = Unauthorized

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self) -> None:
        """Raise the typed failure for a denial; no-op when allowed."""
        if not self.allowed:
            raise self.failure(self.reason)


ALLOW = Decision(True)


def _deny(reason: str, failure: type[GroupsError] = Unauthorized) -> Decision:
    logger.debug("Authorization denied: %s", reason)
    return Decision(False, reason, failure)


class AuthorizationEvaluator:
    """Pure decision function over groups and membership facts."""

    def __init__(self, session: Session) -> None:
        self._probe = MembershipProbe(session)

    # The creator check never touches the membership table, so it is always
    # evaluated first and survives a missing or deleted membership row.
    @staticmethod
    def _is_creator(group: Group, user_id: str) -> bool:
        return group.created_by == user_id

    def _is_admin(self, group: Group, user_id: str) -> bool:
        return self._is_creator(group, user_id) or self._probe.has_role(
            group.id, user_id, ADMIN_ROLES
        )

    def is_participant(self, group: Group, user_id: str) -> bool:
        """Return True for the creator and for anyone holding a membership row."""
        return self._is_creator(group, user_id) or self._probe.is_member(group.id, user_id)

    def can_view(self, group: Group, user_id: str) -> Decision:
        if group.is_public or self.is_participant(group, user_id):
            return ALLOW
        return _deny("This group is private")

    def can_join(self, group: Group, user_id: str) -> Decision:
        if self._probe.is_member(group.id, user_id):
            return _deny("Already a member of this group", AlreadyMember)
        if not group.is_public:
            return _deny("Private groups can only be joined by invitation")
        return ALLOW

    def can_add_member(
        self,
        group: Group,
        actor_id: str,
        target_id: str,
        role: str = MemberRole.MEMBER.value,
    ) -> Decision:
        """Decide whether ``actor_id`` may add ``target_id`` with ``role``.

        Whether the target is already present is left to the mutator, which
        relies on the store's uniqueness constraint.
        """
        if role == MemberRole.ADMIN.value:
            if self._is_admin(group, actor_id):
                return ALLOW
            return _deny("Only the group creator or an admin can add admins")
        if self._is_creator(group, actor_id) or self._probe.has_role(
            group.id, actor_id, INVITER_ROLES
        ):
            return ALLOW
        return _deny("Not authorized to add members to this group")

    def can_remove_member(self, group: Group, actor_id: str, target_id: str) -> Decision:
        if actor_id == target_id or self._is_admin(group, actor_id):
            return ALLOW
        return _deny("Not authorized to remove members from this group")

    def can_change_role(self, group: Group, actor_id: str, target_id: str) -> Decision:
        if self._is_admin(group, actor_id):
            return ALLOW
        return _deny("Only the group creator or an admin can change roles")

    def can_manage_group(self, group: Group, actor_id: str) -> Decision:
        if self._is_admin(group, actor_id):
            return ALLOW
        return _deny("Only the group creator or an admin can update this group")

    def can_delete_group(self, group: Group, actor_id: str) -> Decision:
        if self._is_creator(group, actor_id):
            return ALLOW
        return _deny("Only the group creator can delete this group")

    def can_post(self, group: Group, user_id: str) -> Decision:
        if self.is_participant(group, user_id):
            return ALLOW
        return _deny("Only group members can send messages")

    def can_read_messages(self, group: Group, user_id: str) -> Decision:
        if self.is_participant(group, user_id):
            return ALLOW
        return _deny("Only group members can read messages")

    def can_collaborate(self, group: Group, user_id: str) -> Decision:
        """Workspaces and their task boards are open to every participant."""
        if self.is_participant(group, user_id):
            return ALLOW
        return _deny("Only group members can use this group's workspaces")
