"""Profile and authentication Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for creating a profile."""

    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
    full_name: str | None = Field(None, max_length=200)
    profile_pic_url: str | None = None


class ProfileResponse(BaseModel):
    """Public profile information."""

    id: str
    username: str
    full_name: str | None
    profile_pic_url: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Response returned after registration."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (typically 'bearer')")
    profile: ProfileResponse
