"""Response envelope and pagination metadata shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from app.services.pagination import Page

DataT = TypeVar("DataT")


class PaginationMeta(BaseModel):
    """Pagination details returned with every list."""

    page: int = Field(..., ge=1, description="Current page (1-based)")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Number of matching items")
    total_pages: int = Field(..., ge=0, description="ceil(total / limit)")
    search: str | None = Field(default=None, description="Search term, when one was applied")

    @classmethod
    def from_page(cls, page: Page[Any]) -> "PaginationMeta":
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            search=page.search,
        )


class ApiResponse(BaseModel, Generic[DataT]):
    """Uniform success envelope: {success, message?, data?, meta?}."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None
    meta: PaginationMeta | None = None


class ErrorResponse(BaseModel):
    """Uniform error envelope produced by the exception handlers."""

    success: bool = False
    message: str
    errors: Any | None = None
