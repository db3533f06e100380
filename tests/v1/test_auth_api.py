# tests/v1/test_auth_api.py
"""Registration and bearer-token identity."""

from fastapi import status

from tests.conftest import auth_headers


def test_register_returns_token(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "dana", "full_name": "Dana Scully"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["profile"]["username"] == "dana"

    me = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == data["profile"]["id"]


def test_duplicate_username(client, alice) -> None:
    response = client.post("/api/v1/auth/register", json={"username": "alice"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Username is already taken"


def test_invalid_username_rejected(client) -> None:
    response = client.post("/api/v1/auth/register", json={"username": "no spaces"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_me_requires_token(client) -> None:
    assert client.get("/api/v1/auth/me").status_code == status.HTTP_401_UNAUTHORIZED
    bad = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_deleted_profile(client, db_session, make_profile) -> None:
    ghost = make_profile("ghost")
    headers = auth_headers(ghost)
    db_session.delete(ghost)
    db_session.commit()
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401
