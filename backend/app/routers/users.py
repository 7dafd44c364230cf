"""User karma rank routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.fmv.karma import resolve_karma_rank
from app.schemas.common import ApiResponse
from app.schemas.guess import KarmaRankRead
from app.schemas.user import UserKarmaRankRead
from app.services.catalog import get_user

router = APIRouter(prefix="/users/{user_id}")


@router.get("/karma-rank", response_model=ApiResponse[UserKarmaRankRead])
def get_karma_rank(
    user_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[UserKarmaRankRead]:
    """Return a user's karma and display tier."""

    user = get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return ApiResponse(
        data=UserKarmaRankRead(
            user_id=user.id,
            karma=user.karma,
            karma_rank=KarmaRankRead.model_validate(resolve_karma_rank(user.karma)),
        )
    )
