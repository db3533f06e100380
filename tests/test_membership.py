# tests/test_membership.py
"""Membership mutations, registry atomicity and the concurrent join race."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from campus_groups.core.errors import AlreadyMember, InvalidRequest, NotFound, Unauthorized
from campus_groups.db.session import Base, build_engine
from campus_groups.models import Group, GroupMember, Profile
from campus_groups.repositories.membership_probe import MembershipProbe
from campus_groups.repositories.membership_repo import MembershipRepository
from campus_groups.schemas.group import GroupCreate
from campus_groups.services.groups import GroupService
from campus_groups.services.membership import MembershipService
from tests.conftest import add_row


def _row_count(session: Session, group_id: str) -> int:
    stmt = select(func.count()).select_from(GroupMember).where(GroupMember.group_id == group_id)
    return int(session.scalar(stmt))


def test_create_group_adds_owner_as_admin(db_session: Session, private_group, alice) -> None:
    membership = MembershipRepository(db_session).get(private_group.id, alice.id)
    assert membership is not None
    assert membership.role == "admin"
    assert private_group.visibility == "private"


def test_create_group_rolls_back_when_owner_row_fails(
    db_session: Session, alice, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _boom(self, group_id: str, user_id: str, role: str) -> GroupMember:
        raise SQLAlchemyError("membership insert failed")

    monkeypatch.setattr(MembershipRepository, "add", _boom)
    with pytest.raises(SQLAlchemyError):
        GroupService(db_session).create(alice.id, GroupCreate(name="Doomed"))

    assert db_session.scalar(select(func.count()).select_from(Group)) == 0


def test_join_public_group_twice(db_session: Session, public_group, bob) -> None:
    service = MembershipService(db_session)
    membership = service.join(public_group.id, bob.id)
    assert membership.role == "member"

    with pytest.raises(AlreadyMember):
        service.join(public_group.id, bob.id)
    assert _row_count(db_session, public_group.id) == 2


def test_join_private_group_rejected(db_session: Session, private_group, bob) -> None:
    with pytest.raises(Unauthorized):
        MembershipService(db_session).join(private_group.id, bob.id)


def test_join_unknown_group(db_session: Session, bob) -> None:
    with pytest.raises(NotFound):
        MembershipService(db_session).join("missing", bob.id)


def test_private_group_scenario(db_session: Session, private_group, alice, bob, carol) -> None:
    """Owner adds a member; the member can view but not invite."""
    members = MembershipService(db_session)
    groups = GroupService(db_session)

    members.add_member(private_group.id, alice.id, bob.id)
    assert groups.view(private_group.id, bob.id).id == private_group.id

    with pytest.raises(Unauthorized):
        members.add_member(private_group.id, bob.id, carol.id)
    with pytest.raises(Unauthorized):
        groups.view(private_group.id, carol.id)


def test_add_existing_member_reports_already_member(
    db_session: Session, private_group, alice, bob
) -> None:
    service = MembershipService(db_session)
    service.add_member(private_group.id, alice.id, bob.id)
    with pytest.raises(AlreadyMember):
        service.add_member(private_group.id, alice.id, bob.id, "moderator")
    assert MembershipRepository(db_session).get(private_group.id, bob.id).role == "member"


def test_add_unknown_profile(db_session: Session, private_group, alice) -> None:
    with pytest.raises(NotFound):
        MembershipService(db_session).add_member(private_group.id, alice.id, "nobody")


def test_remove_twice_is_noop(db_session: Session, private_group, alice, bob) -> None:
    add_row(db_session, private_group, bob)
    service = MembershipService(db_session)
    assert service.remove_member(private_group.id, alice.id, bob.id) is True
    assert service.remove_member(private_group.id, alice.id, bob.id) is False
    assert MembershipRepository(db_session).get(private_group.id, bob.id) is None


def test_member_cannot_remove_others(db_session: Session, private_group, alice, bob) -> None:
    add_row(db_session, private_group, bob)
    with pytest.raises(Unauthorized):
        MembershipService(db_session).remove_member(private_group.id, bob.id, alice.id)


def test_creator_keeps_rights_after_leaving(db_session: Session, private_group, alice, bob) -> None:
    service = MembershipService(db_session)
    assert service.leave(private_group.id, alice.id) is True

    service.add_member(private_group.id, alice.id, bob.id)
    assert GroupService(db_session).member_count(private_group) == 2


def test_change_role(db_session: Session, private_group, alice, bob, carol) -> None:
    add_row(db_session, private_group, bob)
    service = MembershipService(db_session)

    updated = service.change_role(private_group.id, alice.id, bob.id, "moderator")
    assert updated.role == "moderator"

    # A moderator can now invite.
    service.add_member(private_group.id, bob.id, carol.id)

    with pytest.raises(Unauthorized):
        service.change_role(private_group.id, bob.id, carol.id, "admin")
    with pytest.raises(NotFound):
        service.change_role(private_group.id, alice.id, "stranger", "member")


def test_add_member_rejects_unknown_role(db_session: Session, private_group, alice, bob) -> None:
    service = MembershipService(db_session)
    with pytest.raises(InvalidRequest):
        service.add_member(private_group.id, alice.id, bob.id, "owner")
    assert MembershipRepository(db_session).get(private_group.id, bob.id) is None

    # The session is still usable afterwards.
    assert service.add_member(private_group.id, alice.id, bob.id).role == "member"


def test_change_role_rejects_unknown_role(db_session: Session, private_group, alice, bob) -> None:
    add_row(db_session, private_group, bob)
    service = MembershipService(db_session)
    with pytest.raises(InvalidRequest):
        service.change_role(private_group.id, alice.id, bob.id, "owner")

    assert MembershipRepository(db_session).get(private_group.id, bob.id).role == "member"
    assert service.change_role(private_group.id, alice.id, bob.id, "admin").role == "admin"


def test_duplicate_join_caught_by_primary_key(
    db_session: Session, public_group, bob, monkeypatch: pytest.MonkeyPatch
) -> None:
    """With the membership pre-check blinded, the store still rejects the duplicate."""
    monkeypatch.setattr(MembershipProbe, "is_member", lambda self, group_id, user_id: False)
    group_id, user_id = public_group.id, bob.id
    service = MembershipService(db_session)
    service.join(group_id, user_id)
    # Start from an empty identity map, as a separate request would.
    db_session.expunge_all()

    with pytest.raises(AlreadyMember):
        service.join(group_id, user_id)
    stmt = select(func.count()).select_from(GroupMember).where(
        GroupMember.group_id == group_id, GroupMember.user_id == user_id
    )
    assert db_session.scalar(stmt) == 1

def test_concurrent_join_yields_one_row(tmp_path: Path) -> None:
    engine = build_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    try:
        with SessionLocal() as setup:
            owner = Profile(username="owner")
            joiner = Profile(username="joiner")
            setup.add_all([owner, joiner])
            setup.commit()
            group = GroupService(setup).create(
                owner.id, GroupCreate(name="Race", visibility="public")
            )
            group_id, joiner_id = group.id, joiner.id

        barrier = threading.Barrier(2)
        outcomes: list[str] = []
        lock = threading.Lock()

        def _join() -> None:
            with SessionLocal() as session:
                service = MembershipService(session)
                barrier.wait()
                try:
                    service.join(group_id, joiner_id)
                    result = "joined"
                except AlreadyMember:
                    result = "duplicate"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=_join) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["duplicate", "joined"]
        with SessionLocal() as check:
            stmt = select(func.count()).select_from(GroupMember).where(
                GroupMember.group_id == group_id, GroupMember.user_id == joiner_id
            )
            assert check.scalar(stmt) == 1
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
