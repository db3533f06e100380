"""Privileged membership existence checks.

The authorization evaluator is the only caller of this module. The probe
answers yes/no questions about the ``group_members`` table directly, without
passing through any access rule, and never hands a row back to its caller.
Keeping it apart from :mod:`campus_groups.repositories.membership_repo`
means a rule guarding membership rows never has to query those rows through
the path it is guarding.
"""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from campus_groups.models.group import GroupMember

__all__ = ["MembershipProbe"]


class MembershipProbe:
    """Boolean-only lookups over membership facts."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def is_member(self, group_id: str, user_id: str) -> bool:
        """Return True if a membership row exists for the pair."""
        stmt = select(
            exists().where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id,
            )
        )
        return bool(self._session.scalar(stmt))

    def has_role(self, group_id: str, user_id: str, roles: Iterable[str]) -> bool:
        """Return True if the pair exists with one of ``roles``."""
        stmt = select(
            exists().where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id,
                GroupMember.role.in_(list(roles)),
            )
        )
        return bool(self._session.scalar(stmt))
