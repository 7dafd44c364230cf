"""User-facing karma schemas."""

from pydantic import BaseModel

from app.schemas.guess import KarmaRankRead


class UserKarmaRankRead(BaseModel):
    """Karma score and its display tier."""

    user_id: int
    karma: int
    karma_rank: KarmaRankRead
