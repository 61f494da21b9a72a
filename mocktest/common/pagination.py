"""Page-based pagination helpers for listing endpoints."""

from __future__ import annotations

import math

from fastapi import Query, status
from pydantic import BaseModel, Field

from mocktest.core.app_exceptions import raise_app_error

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PageMeta(BaseModel):
    """Pagination block of the response envelope."""

    page: int
    page_size: int
    total: int
    pages: int

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "PageMeta":
        return cls(
            page=params.page,
            page_size=params.page_size,
            total=total,
            pages=math.ceil(total / params.page_size) if total else 0,
        )


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, description=f"Page size (max {MAX_PAGE_SIZE})"),
) -> PaginationParams:
    """Dependency for page-based pagination."""
    if page_size > MAX_PAGE_SIZE:
        raise_app_error(
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            f"page_size must be <= {MAX_PAGE_SIZE}",
        )
    return PaginationParams(page=page, page_size=page_size)
