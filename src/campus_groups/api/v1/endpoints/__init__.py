# src/campus_groups/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .groups import router as groups_router
from .messages import router as messages_router
from .workspaces import router as workspaces_router

__all__ = [
    "auth_router",
    "groups_router",
    "messages_router",
    "workspaces_router",
]
