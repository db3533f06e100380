# src/campus_groups/api/v1/endpoints/auth.py
"""Authentication endpoints for the CampusConnect Groups API."""

from __future__ import annotations

from fastapi import APIRouter, status

from campus_groups.core.security import create_access_token
from campus_groups.schemas.profile import ProfileResponse, RegisterRequest, TokenResponse
from campus_groups.services.profiles import create_profile

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> TokenResponse:
    """Create a profile and return a bearer token for it."""
    profile = create_profile(db, payload)
    return TokenResponse(
        access_token=create_access_token(profile.id),
        profile=ProfileResponse.model_validate(profile),
    )


@router.get("/me", response_model=ProfileResponse)
async def read_me(current_user: CurrentUserDep) -> ProfileResponse:
    """Return the caller's profile."""
    return ProfileResponse.model_validate(current_user)
