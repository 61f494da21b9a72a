"""Success half of the response envelope: {success, data, message, pagination, timestamp}."""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from mocktest.common.pagination import PageMeta

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None
    pagination: PageMeta | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def ok(data: T | None = None, message: str | None = None, pagination: PageMeta | None = None) -> ApiResponse[T]:
    return ApiResponse(data=data, message=message, pagination=pagination)
