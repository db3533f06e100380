"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from campus_groups.core.errors import Unauthenticated
from campus_groups.core.security import decode_subject
from campus_groups.db.session import get_db
from campus_groups.models import Profile
from campus_groups.services import (
    GroupService,
    MembershipService,
    MessageService,
    WorkspaceService,
)

# HTTP Bearer scheme; a missing header is reported as Unauthenticated below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Profile:
    """Get the current authenticated profile from the bearer token.

    Raises:
        Unauthenticated: If the token is missing or invalid, or the profile is gone.
    """
    if credentials is None:
        raise Unauthenticated("Missing bearer token")
    profile_id = decode_subject(credentials.credentials)
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise Unauthenticated("User not found")
    return profile


def get_group_service(db: SessionDep) -> GroupService:
    return GroupService(db)


def get_membership_service(db: SessionDep) -> MembershipService:
    return MembershipService(db)


def get_message_service(db: SessionDep) -> MessageService:
    return MessageService(db)


def get_workspace_service(db: SessionDep) -> WorkspaceService:
    return WorkspaceService(db)


# Type aliases for dependencies
CurrentUserDep = Annotated[Profile, Depends(get_current_user)]
GroupServiceDep = Annotated[GroupService, Depends(get_group_service)]
MembershipServiceDep = Annotated[MembershipService, Depends(get_membership_service)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
WorkspaceServiceDep = Annotated[WorkspaceService, Depends(get_workspace_service)]
