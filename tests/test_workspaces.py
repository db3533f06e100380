# tests/test_workspaces.py
"""Workspaces and task boards."""

import pytest
from pydantic import ValidationError
from sqlalchemy.orm import Session

from campus_groups.core.errors import InvalidRequest, Unauthorized
from campus_groups.schemas.workspace import (
    TaskCreate,
    TaskUpdate,
    WorkspaceCreate,
    WorkspaceUpdate,
)
from campus_groups.services.workspaces import WorkspaceService, normalize_steps
from tests.conftest import add_row


@pytest.fixture()
def workspace(db_session: Session, private_group, alice):
    return WorkspaceService(db_session).create(
        alice.id,
        WorkspaceCreate(
            group_id=private_group.id,
            name="Capstone",
            workflow_steps=["Research", " Draft ", "Research", "", "Review"],
        ),
    )


def test_normalize_steps() -> None:
    assert normalize_steps([" a", "b", "a ", "  "]) == ["a", "b"]


def test_create_workspace_requires_participant(db_session: Session, private_group, bob) -> None:
    with pytest.raises(Unauthorized):
        WorkspaceService(db_session).create(
            bob.id, WorkspaceCreate(group_id=private_group.id, name="Sneaky")
        )


def test_workflow_steps_are_normalized(workspace) -> None:
    assert workspace.workflow_steps == ["Research", "Draft", "Review"]


def test_only_creator_updates_workspace(db_session: Session, workspace, private_group, bob) -> None:
    add_row(db_session, private_group, bob)
    service = WorkspaceService(db_session)
    with pytest.raises(Unauthorized):
        service.update(workspace.id, bob.id, WorkspaceUpdate(name="Mine now"))

    updated = service.update(workspace.id, workspace.created_by, WorkspaceUpdate(name="Capstone II"))
    assert updated.name == "Capstone II"


def test_completed_at_tracks_status(db_session: Session, workspace, alice) -> None:
    service = WorkspaceService(db_session)
    task = service.create_task(workspace.id, alice.id, TaskCreate(name="Outline"))
    assert task.status == "todo"
    assert task.completed_at is None

    done = service.update_task(task.id, alice.id, TaskUpdate(status="completed"))
    assert done.completed_at is not None

    reopened = service.update_task(task.id, alice.id, TaskUpdate(status="in_progress"))
    assert reopened.completed_at is None


def test_unknown_step_rejected(db_session: Session, workspace, alice) -> None:
    with pytest.raises(InvalidRequest):
        WorkspaceService(db_session).create_task(
            workspace.id, alice.id, TaskCreate(name="Oops", workflow_step="Deploy")
        )


def test_assignee_must_be_group_participant(
    db_session: Session, workspace, private_group, alice, bob
) -> None:
    service = WorkspaceService(db_session)
    with pytest.raises(InvalidRequest):
        service.create_task(workspace.id, alice.id, TaskCreate(name="Read", assigned_to=bob.id))

    add_row(db_session, private_group, bob)
    task = service.create_task(
        workspace.id,
        alice.id,
        TaskCreate(name="Read", assigned_to=bob.id, workflow_step="Research"),
    )
    assert task.assigned_to == bob.id
    assert [t.id for t in service.list_tasks(workspace.id, bob.id)] == [task.id]


def test_progress_in_listing(db_session: Session, workspace, alice, bob) -> None:
    service = WorkspaceService(db_session)
    service.create_task(workspace.id, alice.id, TaskCreate(name="One", status="completed"))
    service.create_task(workspace.id, alice.id, TaskCreate(name="Two"))

    listed = service.list_for_user(alice.id)
    assert len(listed) == 1
    assert listed[0].progress == pytest.approx(0.5)
    assert service.list_for_user(bob.id) == []


def test_blank_names_rejected_after_stripping() -> None:
    with pytest.raises(ValidationError):
        WorkspaceCreate(group_id="g", name="   ")
    with pytest.raises(ValidationError):
        TaskCreate(name=" \t ")
    with pytest.raises(ValidationError):
        TaskUpdate(name="  ")


def test_names_stored_stripped(db_session: Session, workspace, alice) -> None:
    task = WorkspaceService(db_session).create_task(
        workspace.id, alice.id, TaskCreate(name="  Gather sources  ")
    )
    assert task.name == "Gather sources"
