"""Chat message Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for posting a chat message."""

    content: str = Field(..., description="Message text; surrounding whitespace is stripped")
    media_urls: list[str] = Field(default_factory=list, description="References to uploaded media")


class MessageUpdate(BaseModel):
    content: str


class MessageResponse(BaseModel):
    """Schema for a chat message returned by the API."""

    id: int
    scope_id: str
    sender_id: str
    content: str
    media_urls: list[str]
    is_edited: bool
    edited_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    group_id: str
    unread_count: int
