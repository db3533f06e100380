"""Group and membership Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .profile import ProfileResponse

Visibility = Literal["public", "private"]
Role = Literal["admin", "moderator", "member"]


class GroupCreate(BaseModel):
    """Schema for creating a new group."""

    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    visibility: Visibility = "private"
    profile_pic_url: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class GroupUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = None
    visibility: Visibility | None = None
    profile_pic_url: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class GroupResponse(BaseModel):
    """Schema for group information returned by the API."""

    id: str
    name: str
    description: str | None
    visibility: Visibility
    profile_pic_url: str | None
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupSummary(GroupResponse):
    """Group listing entry with the caller's role and the member count."""

    role: Role | None = None
    member_count: int = 0


class MemberAdd(BaseModel):
    """Schema for adding a member to a group."""

    user_id: str
    role: Role = "member"


class MemberRoleUpdate(BaseModel):
    role: Role


class MembershipResponse(BaseModel):
    """Schema for a single membership row."""

    group_id: str
    user_id: str
    role: Role
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MemberResponse(MembershipResponse):
    """Membership joined to the member's profile.

    ``joined_at`` is None for a creator listed without an explicit row.
    """

    joined_at: datetime | None = None  # type: ignore[assignment]
    profile: ProfileResponse | None = None
