"""Price guess request/response schemas."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.fmv import FmvRead


class GuessCreate(BaseModel):
    """Guess submission payload."""

    # Raw JSON value; the submission gate rejects anything non-numeric as invalid input.
    guessed_price: Any = Field(description="The guessed price in euros")


class GuessRead(BaseModel):
    """Serialized price guess."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    user_id: int
    guessed_price: float
    is_outlier: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class GuessSubmissionRead(GuessRead):
    """Guess plus the outcome of the submission."""

    message: str
    editable_at: datetime


class KarmaRankRead(BaseModel):
    """Display tier for a karma score."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    level: int


class GuessAuthorRead(BaseModel):
    """Guess author decorated with their karma rank."""

    id: int
    username: str
    display_name: str | None
    karma: int
    karma_rank: KarmaRankRead


class GuessWithAuthorRead(GuessRead):
    """Guess row for property guess listings."""

    editable_at: datetime
    author: GuessAuthorRead


class PaginationRead(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class GuessListResponse(BaseModel):
    """Paginated guesses for a property plus its FMV."""

    items: list[GuessWithAuthorRead]
    pagination: PaginationRead
    fmv: FmvRead
