# src/campus_groups/schemas/__init__.py
"""Pydantic schemas for request and response payloads."""

from .group import (
    GroupCreate,
    GroupResponse,
    GroupSummary,
    GroupUpdate,
    MemberAdd,
    MemberResponse,
    MemberRoleUpdate,
    MembershipResponse,
)
from .message import MessageCreate, MessageResponse, MessageUpdate, UnreadCountResponse
from .profile import ProfileResponse, RegisterRequest, TokenResponse
from .workspace import (
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    WorkspaceCreate,
    WorkspaceResponse,
    WorkspaceUpdate,
)

__all__ = [
    "GroupCreate", "GroupResponse", "GroupSummary", "GroupUpdate",
    "MemberAdd", "MemberResponse", "MemberRoleUpdate", "MembershipResponse",
    "MessageCreate", "MessageResponse", "MessageUpdate", "UnreadCountResponse",
    "ProfileResponse", "RegisterRequest", "TokenResponse",
    "TaskCreate", "TaskResponse", "TaskUpdate",
    "WorkspaceCreate", "WorkspaceResponse", "WorkspaceUpdate",
]
