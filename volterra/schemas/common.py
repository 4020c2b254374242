"""Pagination schemas and validators shared across resources."""

import math

from pydantic import BaseModel, Field

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def require_name(value: str) -> str:
    """Strip and reject blank names."""
    value = (value or "").strip()
    if not value:
        raise ValueError("name must be non-empty")
    return value


class PageMeta(BaseModel):
    """Pagination metadata returned beside a page of results."""

    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    pages: int = Field(..., ge=0)

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PageMeta":
        return cls(total=total, page=page, limit=limit, pages=math.ceil(total / limit))


class DeleteResponse(BaseModel):
    success: bool = True
