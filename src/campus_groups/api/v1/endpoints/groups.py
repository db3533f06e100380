# src/campus_groups/api/v1/endpoints/groups.py
"""Group, membership and group-chat endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Response, status

from campus_groups.schemas.group import (
    GroupCreate,
    GroupResponse,
    GroupSummary,
    GroupUpdate,
    MemberAdd,
    MemberResponse,
    MemberRoleUpdate,
    MembershipResponse,
)
from campus_groups.schemas.message import (
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from campus_groups.services.messages import MessageScope

from ..dependencies import (
    CurrentUserDep,
    GroupServiceDep,
    MembershipServiceDep,
    MessageServiceDep,
)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupCreate,
    current_user: CurrentUserDep,
    service: GroupServiceDep,
) -> Any:
    """Create a group; the caller becomes its admin."""
    return service.create(current_user.id, payload)


@router.get("/public", response_model=list[GroupSummary])
async def list_public_groups(
    _current_user: CurrentUserDep,
    service: GroupServiceDep,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[GroupSummary]:
    """Discover public groups, newest first."""
    return service.list_public(limit=limit, offset=offset)


@router.get("/mine", response_model=list[GroupSummary])
async def list_my_groups(
    current_user: CurrentUserDep,
    service: GroupServiceDep,
) -> list[GroupSummary]:
    """Groups the caller created or belongs to."""
    return service.list_for_user(current_user.id)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    current_user: CurrentUserDep,
    service: GroupServiceDep,
) -> Any:
    return service.view(group_id, current_user.id)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    payload: GroupUpdate,
    current_user: CurrentUserDep,
    service: GroupServiceDep,
) -> Any:
    """Update group details (creator or admin)."""
    return service.update(group_id, current_user.id, payload)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_group(
    group_id: str,
    current_user: CurrentUserDep,
    service: GroupServiceDep,
) -> Response:
    """Delete a group (creator only)."""
    service.delete(group_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{group_id}/join",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_group(
    group_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> Any:
    """Join a public group."""
    return service.join(group_id, current_user.id)


@router.delete(
    "/{group_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def leave_group(
    group_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> Response:
    """Leave a group; leaving a group you are not in is a no-op."""
    service.leave(group_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/members", response_model=list[MemberResponse])
async def list_members(
    group_id: str,
    current_user: CurrentUserDep,
    service: GroupServiceDep,
) -> list[MemberResponse]:
    return service.list_members(group_id, current_user.id)


@router.post(
    "/{group_id}/members",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    group_id: str,
    payload: MemberAdd,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> Any:
    """Add a member (creator, admin or moderator)."""
    return service.add_member(group_id, current_user.id, payload.user_id, payload.role)


@router.patch("/{group_id}/members/{user_id}", response_model=MembershipResponse)
async def change_member_role(
    group_id: str,
    user_id: str,
    payload: MemberRoleUpdate,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> Any:
    return service.change_role(group_id, current_user.id, user_id, payload.role)


@router.delete(
    "/{group_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_member(
    group_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> Response:
    """Remove a member; removing someone who is not a member is a no-op."""
    service.remove_member(group_id, current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/messages", response_model=list[MessageResponse])
async def list_group_messages(
    group_id: str,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
    limit: int | None = Query(None, ge=1, le=100),
    before: int | None = Query(None),
) -> Any:
    return service.history(MessageScope.GROUP, group_id, current_user.id, limit, before)


@router.post(
    "/{group_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_group_message(
    group_id: str,
    payload: MessageCreate,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
) -> Any:
    return service.send(
        MessageScope.GROUP, group_id, current_user.id, payload.content, payload.media_urls
    )


@router.get("/{group_id}/unread", response_model=UnreadCountResponse)
async def get_unread_count(
    group_id: str,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(
        group_id=group_id,
        unread_count=service.unread_count(group_id, current_user.id),
    )
