"""Group and workspace chat.

Messages form an append-only log per scope. Reading and posting are gated by
the authorization evaluator against the owning group; editing and deleting
are restricted to the sender of the row.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from campus_groups.core.errors import InvalidRequest, NotFound, Unauthorized
from campus_groups.core.settings import settings
from campus_groups.db.time import utcnow
from campus_groups.models.group import Group
from campus_groups.models.message import GroupMessage, WorkspaceMessage
from campus_groups.repositories.group_repo import GroupRepository
from campus_groups.repositories.membership_repo import MembershipRepository
from campus_groups.services.authorization import AuthorizationEvaluator
from campus_groups.services.workspaces import WorkspaceService

logger = logging.getLogger(__name__)

__all__ = ["MessageScope", "MessageService"]

Message = Union[GroupMessage, WorkspaceMessage]


class MessageScope(str, Enum):
    """Where a message lives."""

    GROUP = "group"
    WORKSPACE = "workspace"

    @property
    def model(self) -> type[GroupMessage] | type[WorkspaceMessage]:
        return GroupMessage if self is MessageScope.GROUP else WorkspaceMessage

    @property
    def scope_column(self):  # type: ignore[no-untyped-def]
        if self is MessageScope.GROUP:
            return GroupMessage.group_id
        return WorkspaceMessage.workspace_id


class MessageService:
    """Send, list, edit and delete chat messages."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.groups = GroupRepository(session)
        self.members = MembershipRepository(session)
        self.evaluator = AuthorizationEvaluator(session)
        self.workspaces = WorkspaceService(session)

    def _group(self, group_id: str) -> Group:
        group = self.groups.get_by_id(group_id)
        if group is None:
            raise NotFound("Group not found")
        return group

    def _owning_group(self, scope: MessageScope, scope_id: str) -> Group:
        if scope is MessageScope.GROUP:
            return self._group(scope_id)
        workspace = self.workspaces.get(scope_id)
        return self._group(workspace.group_id)

    @staticmethod
    def _clean(content: str) -> str:
        text = content.strip()
        if not text:
            raise InvalidRequest("Message content cannot be empty")
        if len(text) > settings.message_max_length:
            raise InvalidRequest(
                f"Message content exceeds {settings.message_max_length} characters"
            )
        return text

    def send(
        self,
        scope: MessageScope,
        scope_id: str,
        sender_id: str,
        content: str,
        media_urls: list[str] | None = None,
    ) -> Message:
        """Append a message to a group or workspace chat."""
        group = self._owning_group(scope, scope_id)
        self.evaluator.can_post(group, sender_id).enforce()
        text = self._clean(content)
        if scope is MessageScope.GROUP:
            message: Message = GroupMessage(
                group_id=scope_id,
                sender_id=sender_id,
                content=text,
                media_urls=list(media_urls or []),
            )
        else:
            message = WorkspaceMessage(
                workspace_id=scope_id,
                sender_id=sender_id,
                content=text,
                media_urls=list(media_urls or []),
            )
            self.workspaces.get(scope_id).updated_at = utcnow()
        self.session.add(message)
        self.groups.touch(group)
        self.session.commit()
        self.session.refresh(message)
        return message

    def history(
        self,
        scope: MessageScope,
        scope_id: str,
        user_id: str,
        limit: int | None = None,
        before: int | None = None,
    ) -> list[Message]:
        """Return one page of messages, oldest first.

        ``before`` is a message id; only older messages are returned.
        """
        group = self._owning_group(scope, scope_id)
        self.evaluator.can_read_messages(group, user_id).enforce()
        model = scope.model
        stmt = select(model).where(scope.scope_column == scope_id)
        if before is not None:
            stmt = stmt.where(model.id < before)
        stmt = stmt.order_by(model.id.desc()).limit(limit or settings.message_page_size)
        page = list(self.session.scalars(stmt))
        page.reverse()
        return page

    def _own_message(self, scope: MessageScope, message_id: int, user_id: str) -> Message:
        message = self.session.get(scope.model, message_id)
        if message is None:
            raise NotFound("Message not found")
        if message.sender_id != user_id:
            raise Unauthorized("Only the sender can change this message")
        return message

    def edit(self, scope: MessageScope, message_id: int, user_id: str, content: str) -> Message:
        message = self._own_message(scope, message_id, user_id)
        message.content = self._clean(content)
        message.is_edited = True
        message.edited_at = utcnow()
        self.session.commit()
        self.session.refresh(message)
        return message

    def delete(self, scope: MessageScope, message_id: int, user_id: str) -> None:
        message = self._own_message(scope, message_id, user_id)
        self.session.delete(message)
        self.session.commit()
        logger.info("Message %s deleted from %s chat by %s", message_id, scope.value, user_id)

    def unread_count(self, group_id: str, user_id: str) -> int:
        """Count group messages newer than the user's join time.

        Without a membership row (a creator who left their own group) the
        window falls back to the last ``unread_fallback_days`` days.
        """
        group = self._group(group_id)
        self.evaluator.can_read_messages(group, user_id).enforce()
        membership = self.members.get(group.id, user_id)
        if membership is not None:
            since = membership.joined_at
        else:
            since = utcnow() - timedelta(days=settings.unread_fallback_days)
        stmt = (
            select(func.count())
            .select_from(GroupMessage)
            .where(GroupMessage.group_id == group.id, GroupMessage.created_at > since)
        )
        return int(self.session.scalar(stmt) or 0)
