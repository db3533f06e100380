"""Typed failures raised by the group services.

Every failure is recoverable and reported to the caller; the API layer maps
each class to an HTTP status through ``status_code``.
"""

from __future__ import annotations

from fastapi import status


class GroupsError(RuntimeError):
    """Base exception for all group-service failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be completed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(GroupsError):
    """Raised when no caller identity is available."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class Unauthorized(GroupsError):
    """Raised when an authenticated caller lacks privilege for the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"


class AlreadyMember(GroupsError):
    """Raised on a duplicate join or add."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "User is already a member of this group"


class NotFound(GroupsError):
    """Raised when a group, profile, message or workspace is absent."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InvalidRequest(GroupsError):
    """Raised for malformed input the schemas cannot catch (e.g. blank content)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


__all__ = [
    "GroupsError",
    "Unauthenticated",
    "Unauthorized",
    "AlreadyMember",
    "NotFound",
    "InvalidRequest",
]
