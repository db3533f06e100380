# src/campus_groups/models/__init__.py
"""SQLAlchemy models for the CampusConnect Groups service."""

from .group import Group, GroupMember, GroupVisibility, MemberRole
from .message import GroupMessage, WorkspaceMessage
from .profile import Profile
from .workspace import TaskStatus, Workspace, WorkspaceTask

__all__ = [
    "Group", "GroupMember", "GroupVisibility", "MemberRole",
    "GroupMessage", "WorkspaceMessage",
    "Profile",
    "TaskStatus", "Workspace", "WorkspaceTask",
]
