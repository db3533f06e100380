"""Workspace and task Pydantic schemas."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Status = Literal["todo", "in_progress", "completed"]


class WorkspaceCreate(BaseModel):
    """Schema for creating a workspace inside a group."""

    group_id: str
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    workflow_steps: list[str] = Field(default_factory=list)

    model_config = ConfigDict(str_strip_whitespace=True)


class WorkspaceUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = None
    workflow_steps: list[str] | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class WorkspaceResponse(BaseModel):
    """Schema for workspace information returned by the API."""

    id: str
    group_id: str
    name: str
    description: str | None
    workflow_steps: list[str]
    created_by: str
    created_at: datetime
    updated_at: datetime
    # Share of completed tasks, 0.0 to 1.0.
    progress: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(BaseModel):
    """Schema for adding a task to a workspace board."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    assigned_to: str | None = None
    workflow_step: str | None = None
    status: Status = "todo"
    due_date: date | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class TaskUpdate(BaseModel):
    """Partial task update; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    assigned_to: str | None = None
    workflow_step: str | None = None
    status: Status | None = None
    due_date: date | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class TaskResponse(BaseModel):
    """Schema for a task returned by the API."""

    id: str
    workspace_id: str
    name: str
    description: str | None
    assigned_to: str | None
    assigned_by: str
    workflow_step: str | None
    status: Status
    due_date: date | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
