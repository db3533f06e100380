# src/campus_groups/api/v1/endpoints/messages.py
"""Edit and delete endpoints shared by group and workspace chat."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Response, status

from campus_groups.schemas.message import MessageResponse, MessageUpdate
from campus_groups.services.messages import MessageScope

from ..dependencies import CurrentUserDep, MessageServiceDep

router = APIRouter(prefix="/messages", tags=["messages"])


@router.patch("/{scope}/{message_id}", response_model=MessageResponse)
async def edit_message(
    scope: MessageScope,
    message_id: int,
    payload: MessageUpdate,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
) -> Any:
    """Edit one of your own messages."""
    return service.edit(scope, message_id, current_user.id, payload.content)


@router.delete(
    "/{scope}/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_message(
    scope: MessageScope,
    message_id: int,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
) -> Response:
    """Delete one of your own messages."""
    service.delete(scope, message_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
