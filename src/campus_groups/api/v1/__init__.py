# src/campus_groups/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    groups_router,
    messages_router,
    workspaces_router,
)

__all__ = [
    "auth_router",
    "groups_router",
    "messages_router",
    "workspaces_router",
]
