"""SQLAlchemy model for user profiles."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_groups.db.session import Base
from campus_groups.db.time import utcnow


def new_id() -> str:
    """Return a fresh string UUID used as a primary key."""
    return str(uuid.uuid4())


class Profile(Base):
    """Authenticated identity; the opaque user id referenced everywhere else."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_pic_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
