"""Request/response schemas for todo endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.users import OwnerSummary


class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    completed: bool = False


class TodoUpdate(BaseModel):
    """Partial update; description=null clears the description."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    completed: bool | None = None


class TodoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    completed: bool
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: OwnerSummary | None = None
