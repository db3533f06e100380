# src/campus_groups/api/v1/endpoints/workspaces.py
"""Workspace, workspace-chat and task endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from campus_groups.schemas.message import MessageCreate, MessageResponse
from campus_groups.schemas.workspace import (
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    WorkspaceCreate,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from campus_groups.services.messages import MessageScope

from ..dependencies import CurrentUserDep, MessageServiceDep, WorkspaceServiceDep

router = APIRouter(tags=["workspaces"])


@router.get("/workspaces", response_model=list[WorkspaceResponse])
async def list_workspaces(
    current_user: CurrentUserDep,
    service: WorkspaceServiceDep,
) -> list[WorkspaceResponse]:
    """Workspaces of every group the caller participates in."""
    return service.list_for_user(current_user.id)


@router.post(
    "/workspaces",
    response_model=WorkspaceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_workspace(
    payload: WorkspaceCreate,
    current_user: CurrentUserDep,
    service: WorkspaceServiceDep,
) -> Any:
    return service.create(current_user.id, payload)


@router.patch("/workspaces/{workspace_id}", response_model=WorkspaceResponse)
async def update_workspace(
    workspace_id: str,
    payload: WorkspaceUpdate,
    current_user: CurrentUserDep,
    service: WorkspaceServiceDep,
) -> Any:
    """Update a workspace (workspace creator only)."""
    return service.update(workspace_id, current_user.id, payload)


@router.get("/workspaces/{workspace_id}/messages", response_model=list[MessageResponse])
async def list_workspace_messages(
    workspace_id: str,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
    limit: int | None = Query(None, ge=1, le=100),
    before: int | None = Query(None),
) -> Any:
    return service.history(MessageScope.WORKSPACE, workspace_id, current_user.id, limit, before)


@router.post(
    "/workspaces/{workspace_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_workspace_message(
    workspace_id: str,
    payload: MessageCreate,
    current_user: CurrentUserDep,
    service: MessageServiceDep,
) -> Any:
    return service.send(
        MessageScope.WORKSPACE,
        workspace_id,
        current_user.id,
        payload.content,
        payload.media_urls,
    )


@router.get("/workspaces/{workspace_id}/tasks", response_model=list[TaskResponse])
async def list_tasks(
    workspace_id: str,
    current_user: CurrentUserDep,
    service: WorkspaceServiceDep,
) -> Any:
    return service.list_tasks(workspace_id, current_user.id)


@router.post(
    "/workspaces/{workspace_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    workspace_id: str,
    payload: TaskCreate,
    current_user: CurrentUserDep,
    service: WorkspaceServiceDep,
) -> Any:
    return service.create_task(workspace_id, current_user.id, payload)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    current_user: CurrentUserDep,
    service: WorkspaceServiceDep,
) -> Any:
    """Move, reassign or edit a task."""
    return service.update_task(task_id, current_user.id, payload)
