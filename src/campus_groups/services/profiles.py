"""CRUD-style helpers for managing profiles."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_groups.core.errors import InvalidRequest, NotFound
from campus_groups.models.profile import Profile
from campus_groups.schemas.profile import RegisterRequest

logger = logging.getLogger(__name__)

__all__ = [
    "get_profile",
    "require_profile",
    "create_profile",
]


def get_profile(db: Session, profile_id: str) -> Profile | None:
    """Return a single profile by primary key."""
    return db.get(Profile, profile_id)


def require_profile(db: Session, profile_id: str) -> Profile:
    """Return a profile or raise ``NotFound``."""
    profile = get_profile(db, profile_id)
    if profile is None:
        raise NotFound("User not found")
    return profile


def create_profile(db: Session, payload: RegisterRequest) -> Profile:
    """Persist a new profile; usernames are unique."""
    profile = Profile(
        username=payload.username,
        full_name=payload.full_name,
        profile_pic_url=payload.profile_pic_url,
    )
    db.add(profile)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise InvalidRequest("Username is already taken") from err
    db.refresh(profile)
    logger.info("Registered profile %s", profile.id)
    return profile
