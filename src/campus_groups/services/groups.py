"""Group registry: creation, lookup, discovery and administration."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_groups.core.errors import NotFound
from campus_groups.core.settings import settings
from campus_groups.models.group import Group, MemberRole
from campus_groups.models.message import GroupMessage, WorkspaceMessage
from campus_groups.models.workspace import Workspace, WorkspaceTask
from campus_groups.repositories.group_repo import GroupRepository
from campus_groups.repositories.membership_repo import MembershipRepository
from campus_groups.schemas.group import (
    GroupCreate,
    GroupSummary,
    GroupUpdate,
    MemberResponse,
)
from campus_groups.schemas.profile import ProfileResponse
from campus_groups.services.authorization import AuthorizationEvaluator
from campus_groups.services.profiles import get_profile

logger = logging.getLogger(__name__)

__all__ = ["GroupService"]


class GroupService:
    """Service owning the group rows and their lifecycle."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.groups = GroupRepository(session)
        self.members = MembershipRepository(session)
        self.evaluator = AuthorizationEvaluator(session)

    def get(self, group_id: str) -> Group:
        """Return a group or raise ``NotFound``."""
        group = self.groups.get_by_id(group_id)
        if group is None:
            raise NotFound("Group not found")
        return group

    def create(self, owner_id: str, payload: GroupCreate) -> Group:
        """Create a group and its owner's admin membership in one transaction.

        Either both rows are committed or neither is, so the creator is
        always recognised as a member by membership-only checks too.
        """
        try:
            group = self.groups.create(
                name=payload.name,
                description=payload.description,
                visibility=payload.visibility,
                created_by=owner_id,
                profile_pic_url=payload.profile_pic_url,
            )
            self.members.add(group.id, owner_id, MemberRole.ADMIN.value)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(group)
        logger.info("Group %s created by %s (%s)", group.id, owner_id, group.visibility)
        return group

    def view(self, group_id: str, user_id: str) -> Group:
        """Return the group if the user may see it."""
        group = self.get(group_id)
        self.evaluator.can_view(group, user_id).enforce()
        return group

    def list_public(self, limit: int | None = None, offset: int = 0) -> list[GroupSummary]:
        """Return public groups for discovery, newest first."""
        page_size = limit or settings.public_groups_page_size
        return [
            self._summary(group)
            for group in self.groups.list_public(limit=page_size, offset=offset)
        ]

    def list_for_user(self, user_id: str) -> list[GroupSummary]:
        """Return the user's groups with the user's role in each."""
        roles = {m.group_id: m.role for m in self.members.list_for_user(user_id)}
        summaries = []
        for group in self.groups.list_for_user(user_id):
            role = roles.get(group.id)
            if group.created_by == user_id:
                role = MemberRole.ADMIN.value
            summaries.append(self._summary(group, role=role))
        return summaries

    def update(self, group_id: str, actor_id: str, payload: GroupUpdate) -> Group:
        """Apply partial updates to a group."""
        group = self.get(group_id)
        self.evaluator.can_manage_group(group, actor_id).enforce()
        changes = payload.model_dump(exclude_unset=True)
        for key, value in changes.items():
            if key in {"name", "visibility"} and value is None:
                continue
            setattr(group, key, value)
        self.session.commit()
        self.session.refresh(group)
        logger.info("Group %s updated by %s: %s", group.id, actor_id, sorted(changes))
        return group

    def delete(self, group_id: str, actor_id: str) -> None:
        """Delete a group with its memberships, chat, workspaces and tasks."""
        group = self.get(group_id)
        self.evaluator.can_delete_group(group, actor_id).enforce()
        workspace_ids = [
            w.id for w in self.session.query(Workspace).filter(Workspace.group_id == group.id)
        ]
        try:
            if workspace_ids:
                self.session.query(WorkspaceTask).filter(
                    WorkspaceTask.workspace_id.in_(workspace_ids)
                ).delete(synchronize_session=False)
                self.session.query(WorkspaceMessage).filter(
                    WorkspaceMessage.workspace_id.in_(workspace_ids)
                ).delete(synchronize_session=False)
                self.session.query(Workspace).filter(
                    Workspace.id.in_(workspace_ids)
                ).delete(synchronize_session=False)
            self.session.query(GroupMessage).filter(
                GroupMessage.group_id == group.id
            ).delete(synchronize_session=False)
            self.members.remove_all(group.id)
            self.groups.delete(group)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        logger.info("Group %s deleted by %s", group_id, actor_id)

    def list_members(self, group_id: str, user_id: str) -> list[MemberResponse]:
        """List members of a visible group.

        The creator is always listed as an admin, even without a row.
        """
        group = self.view(group_id, user_id)
        members: list[MemberResponse] = []
        seen_creator = False
        for membership, profile in self.members.list_with_profiles(group.id):
            role = membership.role
            if membership.user_id == group.created_by:
                seen_creator = True
                role = MemberRole.ADMIN.value
            members.append(
                MemberResponse(
                    group_id=membership.group_id,
                    user_id=membership.user_id,
                    role=role,
                    joined_at=membership.joined_at,
                    profile=ProfileResponse.model_validate(profile),
                )
            )
        if not seen_creator:
            creator = get_profile(self.session, group.created_by)
            members.insert(
                0,
                MemberResponse(
                    group_id=group.id,
                    user_id=group.created_by,
                    role=MemberRole.ADMIN.value,
                    profile=ProfileResponse.model_validate(creator) if creator else None,
                ),
            )
        return members

    def member_count(self, group: Group) -> int:
        """Count explicit members, plus the creator when they have no row."""
        count = self.members.count(group.id)
        if self.members.get(group.id, group.created_by) is None:
            count += 1
        return count

    def _summary(self, group: Group, role: str | None = None) -> GroupSummary:
        summary = GroupSummary.model_validate(group)
        summary.role = role
        summary.member_count = self.member_count(group)
        return summary


