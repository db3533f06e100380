"""Workspaces and their task boards.

A workspace belongs to a group and inherits its access rule: anyone who
participates in the group (creator or member) can see and use it. Only the
workspace creator may edit the workspace itself.
"""

from __future__ import annotations

import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from campus_groups.core.errors import InvalidRequest, NotFound, Unauthorized
from campus_groups.db.time import utcnow
from campus_groups.models.group import Group
from campus_groups.models.workspace import TaskStatus, Workspace, WorkspaceTask
from campus_groups.repositories.group_repo import GroupRepository
from campus_groups.schemas.workspace import (
    TaskCreate,
    TaskUpdate,
    WorkspaceCreate,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from campus_groups.services.authorization import AuthorizationEvaluator
from campus_groups.services.profiles import require_profile

logger = logging.getLogger(__name__)

__all__ = ["WorkspaceService", "normalize_steps"]


def normalize_steps(steps: list[str]) -> list[str]:
    """Strip step names, drop blanks and keep the first occurrence of each."""
    seen: list[str] = []
    for step in steps:
        name = step.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class WorkspaceService:
    """Service managing workspaces and tasks inside groups."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.groups = GroupRepository(session)
        self.evaluator = AuthorizationEvaluator(session)

    def _group(self, group_id: str) -> Group:
        group = self.groups.get_by_id(group_id)
        if group is None:
            raise NotFound("Group not found")
        return group

    def get(self, workspace_id: str) -> Workspace:
        """Return a workspace or raise ``NotFound``."""
        workspace = self.session.get(Workspace, workspace_id)
        if workspace is None:
            raise NotFound("Workspace not found")
        return workspace

    def open(self, workspace_id: str, user_id: str) -> tuple[Workspace, Group]:
        """Return a workspace and its group after checking the user may use it."""
        workspace = self.get(workspace_id)
        group = self._group(workspace.group_id)
        self.evaluator.can_collaborate(group, user_id).enforce()
        return workspace, group

    def create(self, actor_id: str, payload: WorkspaceCreate) -> Workspace:
        group = self._group(payload.group_id)
        self.evaluator.can_collaborate(group, actor_id).enforce()
        workspace = Workspace(
            group_id=group.id,
            name=payload.name,
            description=payload.description,
            workflow_steps=normalize_steps(payload.workflow_steps),
            created_by=actor_id,
        )
        self.session.add(workspace)
        self.session.commit()
        self.session.refresh(workspace)
        logger.info("Workspace %s created in group %s by %s", workspace.id, group.id, actor_id)
        return workspace

    def list_for_user(self, user_id: str) -> list[WorkspaceResponse]:
        """Return workspaces of every group the user participates in, with progress."""
        group_ids = [group.id for group in self.groups.list_for_user(user_id)]
        if not group_ids:
            return []
        workspaces = list(
            self.session.scalars(
                select(Workspace)
                .where(Workspace.group_id.in_(group_ids))
                .order_by(Workspace.updated_at.desc(), Workspace.id)
            )
        )
        progress = self._progress([w.id for w in workspaces])
        results = []
        for workspace in workspaces:
            response = WorkspaceResponse.model_validate(workspace)
            response.progress = progress.get(workspace.id, 0.0)
            results.append(response)
        return results

    def _progress(self, workspace_ids: list[str]) -> dict[str, float]:
        if not workspace_ids:
            return {}
        completed = func.sum(
            case((WorkspaceTask.status == TaskStatus.COMPLETED.value, 1), else_=0)
        )
        rows = self.session.execute(
            select(WorkspaceTask.workspace_id, func.count(WorkspaceTask.id), completed)
            .where(WorkspaceTask.workspace_id.in_(workspace_ids))
            .group_by(WorkspaceTask.workspace_id)
        ).all()
        return {
            workspace_id: (int(done or 0) / total if total else 0.0)
            for workspace_id, total, done in rows
        }

    def update(self, workspace_id: str, actor_id: str, payload: WorkspaceUpdate) -> Workspace:
        """Apply partial updates; only the workspace creator may do this."""
        workspace = self.get(workspace_id)
        if workspace.created_by != actor_id:
            raise Unauthorized("Only the workspace creator can update it")
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("name") is not None:
            workspace.name = changes["name"]
        if "description" in changes:
            workspace.description = changes["description"]
        if changes.get("workflow_steps") is not None:
            workspace.workflow_steps = normalize_steps(changes["workflow_steps"])
        self.session.commit()
        self.session.refresh(workspace)
        return workspace

    def _check_assignee(self, group: Group, assignee_id: str | None) -> None:
        if assignee_id is None:
            return
        require_profile(self.session, assignee_id)
        if not self.evaluator.is_participant(group, assignee_id):
            raise InvalidRequest("Tasks can only be assigned to group members")

    @staticmethod
    def _check_step(workspace: Workspace, step: str | None) -> None:
        if step is not None and step not in (workspace.workflow_steps or []):
            raise InvalidRequest(f"Unknown workflow step: {step}")

    def create_task(self, workspace_id: str, actor_id: str, payload: TaskCreate) -> WorkspaceTask:
        workspace, group = self.open(workspace_id, actor_id)
        self._check_assignee(group, payload.assigned_to)
        self._check_step(workspace, payload.workflow_step)
        task = WorkspaceTask(
            workspace_id=workspace.id,
            name=payload.name,
            description=payload.description,
            assigned_to=payload.assigned_to,
            assigned_by=actor_id,
            workflow_step=payload.workflow_step,
            status=payload.status,
            due_date=payload.due_date,
            completed_at=utcnow() if payload.status == TaskStatus.COMPLETED.value else None,
        )
        self.session.add(task)
        workspace.updated_at = utcnow()
        self.session.commit()
        self.session.refresh(task)
        return task

    def list_tasks(self, workspace_id: str, user_id: str) -> list[WorkspaceTask]:
        workspace, _group = self.open(workspace_id, user_id)
        return list(
            self.session.scalars(
                select(WorkspaceTask)
                .where(WorkspaceTask.workspace_id == workspace.id)
                .order_by(WorkspaceTask.created_at, WorkspaceTask.id)
            )
        )

    def update_task(self, task_id: str, actor_id: str, payload: TaskUpdate) -> WorkspaceTask:
        """Apply partial updates to a task.

        ``completed_at`` is stamped when the status becomes completed and
        cleared when it moves back out of completed.
        """
        task = self.session.get(WorkspaceTask, task_id)
        if task is None:
            raise NotFound("Task not found")
        workspace, group = self.open(task.workspace_id, actor_id)
        changes = payload.model_dump(exclude_unset=True)
        if "assigned_to" in changes:
            self._check_assignee(group, changes["assigned_to"])
            task.assigned_to = changes["assigned_to"]
        if "workflow_step" in changes:
            self._check_step(workspace, changes["workflow_step"])
            task.workflow_step = changes["workflow_step"]
        if changes.get("name") is not None:
            task.name = changes["name"]
        if "description" in changes:
            task.description = changes["description"]
        if "due_date" in changes:
            task.due_date = changes["due_date"]
        new_status = changes.get("status")
        if new_status is not None and new_status != task.status:
            task.status = new_status
            task.completed_at = utcnow() if new_status == TaskStatus.COMPLETED.value else None
        workspace.updated_at = utcnow()
        self.session.commit()
        self.session.refresh(task)
        return task
