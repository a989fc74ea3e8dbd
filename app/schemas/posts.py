"""Request/response schemas for posts and post attachments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.users import OwnerSummary


class PostCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    content: str = Field(..., min_length=10)
    published: bool = False


class PostUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=3, max_length=255)
    content: str | None = Field(default=None, min_length=10)
    published: bool | None = None


class AttachmentOut(BaseModel):
    """Stored attachment metadata. original_name is for display only."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    original_name: str
    stored_name: str
    path: str
    mime_type: str
    size: int = Field(..., ge=0, description="Size in bytes")
    created_at: datetime | None = None


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    published: bool
    author_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: OwnerSummary | None = None
    attachments: list[AttachmentOut] = Field(default_factory=list)
