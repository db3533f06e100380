# src/campus_groups/services/__init__.py
"""Business logic services for the CampusConnect Groups service."""

from .authorization import AuthorizationEvaluator, Decision
from .groups import GroupService
from .membership import MembershipService
from .messages import MessageScope, MessageService
from .workspaces import WorkspaceService

__all__ = [
    "AuthorizationEvaluator",
    "Decision",
    "GroupService",
    "MembershipService",
    "MessageScope",
    "MessageService",
    "WorkspaceService",
]
