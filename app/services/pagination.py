"""Page arithmetic shared by every list operation."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total: int
    search: str | None = None

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def page_offset(page: int, limit: int) -> int:
    """Offset of the first row on a 1-based page."""
    return (max(page, 1) - 1) * limit
