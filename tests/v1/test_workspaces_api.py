# tests/v1/test_workspaces_api.py
"""Workspace, task and workspace-chat endpoints."""

from fastapi import status

from tests.conftest import auth_headers


def test_workspace_lifecycle(client, private_group, alice, bob) -> None:
    created = client.post(
        "/api/v1/workspaces",
        json={
            "group_id": private_group.id,
            "name": "Poster",
            "workflow_steps": ["Plan", "Build"],
        },
        headers=auth_headers(alice),
    )
    assert created.status_code == status.HTTP_201_CREATED
    workspace = created.json()
    assert workspace["progress"] == 0.0

    outsider = client.get(
        f"/api/v1/workspaces/{workspace['id']}/tasks", headers=auth_headers(bob)
    )
    assert outsider.status_code == status.HTTP_403_FORBIDDEN

    task = client.post(
        f"/api/v1/workspaces/{workspace['id']}/tasks",
        json={"name": "Sketch layout", "workflow_step": "Plan"},
        headers=auth_headers(alice),
    )
    assert task.status_code == status.HTTP_201_CREATED

    bad_step = client.post(
        f"/api/v1/workspaces/{workspace['id']}/tasks",
        json={"name": "Ship", "workflow_step": "Deploy"},
        headers=auth_headers(alice),
    )
    assert bad_step.status_code == status.HTTP_400_BAD_REQUEST

    done = client.patch(
        f"/api/v1/tasks/{task.json()['id']}",
        json={"status": "completed"},
        headers=auth_headers(alice),
    )
    assert done.status_code == status.HTTP_200_OK
    assert done.json()["completed_at"] is not None

    listed = client.get("/api/v1/workspaces", headers=auth_headers(alice)).json()
    assert listed[0]["id"] == workspace["id"]
    assert listed[0]["progress"] == 1.0

    renamed = client.patch(
        f"/api/v1/workspaces/{workspace['id']}",
        json={"name": "Poster v2"},
        headers=auth_headers(alice),
    )
    assert renamed.json()["name"] == "Poster v2"


def test_workspace_chat(client, private_group, alice) -> None:
    workspace = client.post(
        "/api/v1/workspaces",
        json={"group_id": private_group.id, "name": "Notes"},
        headers=auth_headers(alice),
    ).json()
    url = f"/api/v1/workspaces/{workspace['id']}/messages"

    sent = client.post(url, json={"content": "agenda"}, headers=auth_headers(alice))
    assert sent.status_code == status.HTTP_201_CREATED

    history = client.get(url, headers=auth_headers(alice)).json()
    assert [m["content"] for m in history] == ["agenda"]

    deleted = client.delete(
        f"/api/v1/messages/workspace/{sent.json()['id']}", headers=auth_headers(alice)
    )
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(url, headers=auth_headers(alice)).json() == []
