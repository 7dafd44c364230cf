"""Common API response schemas."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Consistent JSON envelope for API responses."""

    data: T


class ErrorDetail(BaseModel):
    """Typed failure carried in ``HTTPException.detail``."""

    error: str
    message: str
    cooldown_ends_at: datetime | None = None
