# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from campus_groups.core.security import create_access_token  # noqa: E402
from campus_groups.db.session import Base  # noqa: E402
from campus_groups.db.session import get_db as app_get_session  # noqa: E402
from campus_groups.main import app as fastapi_app  # noqa: E402
from campus_groups.models import Group, GroupMember, Profile  # noqa: E402
from campus_groups.schemas.group import GroupCreate  # noqa: E402
from campus_groups.services.groups import GroupService  # noqa: E402

TEST_DB_URL = "sqlite://"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session that commits for real; every test gets a fresh schema."""
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[[str], Profile]:
    """Return a factory persisting profiles by username."""

    def _make(username: str) -> Profile:
        profile = Profile(username=username, full_name=username.title())
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture()
def alice(make_profile: Callable[[str], Profile]) -> Profile:
    return make_profile("alice")


@pytest.fixture()
def bob(make_profile: Callable[[str], Profile]) -> Profile:
    return make_profile("bob")


@pytest.fixture()
def carol(make_profile: Callable[[str], Profile]) -> Profile:
    return make_profile("carol")


@pytest.fixture()
def make_group(db_session: Session) -> Callable[..., Group]:
    """Return a factory creating groups through the registry."""

    def _make(owner: Profile, visibility: str = "private", name: str = "Study Group") -> Group:
        return GroupService(db_session).create(
            owner.id,
            GroupCreate(name=name, description="Weekly revision", visibility=visibility),
        )

    return _make


@pytest.fixture()
def private_group(make_group: Callable[..., Group], alice: Profile) -> Group:
    return make_group(alice, "private", "Algorithms Study")


@pytest.fixture()
def public_group(make_group: Callable[..., Group], alice: Profile) -> Group:
    return make_group(alice, "public", "Open Physics")


def add_row(session: Session, group: Group, user: Profile, role: str = "member") -> GroupMember:
    """Insert a membership row directly, bypassing authorization."""
    membership = GroupMember(group_id=group.id, user_id=user.id, role=role)
    session.add(membership)
    session.commit()
    return membership


def auth_headers(profile: Profile) -> dict[str, str]:
    """Return bearer headers for a profile."""
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}
