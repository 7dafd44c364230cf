"""Price guess submission and listing routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.db.dependencies import get_db
from app.schemas.common import ApiResponse, ErrorDetail
from app.schemas.guess import GuessCreate, GuessListResponse, GuessRead, GuessSubmissionRead
from app.services.errors import (
    CooldownActiveError,
    GuessEngineError,
    InvalidGuessError,
    PropertyNotFoundError,
    UnauthorizedError,
)
from app.services.guesses import list_property_guesses, submit_guess
from app.services.reference_cache import ReferenceCache, get_reference_cache

router = APIRouter(prefix="/properties/{property_id}")


def to_http_exception(exc: GuessEngineError) -> HTTPException:
    """Map a typed domain failure onto its HTTP status."""

    if isinstance(exc, PropertyNotFoundError):
        status_code = 404
    elif isinstance(exc, UnauthorizedError):
        status_code = 401
    elif isinstance(exc, InvalidGuessError):
        status_code = 400
    elif isinstance(exc, CooldownActiveError):
        status_code = 429
    else:
        status_code = 500
    detail = ErrorDetail(
        error=exc.code,
        message=str(exc),
        cooldown_ends_at=getattr(exc, "cooldown_ends_at", None),
    )
    return HTTPException(status_code=status_code, detail=detail.model_dump(mode="json", exclude_none=True))


@router.get("/guesses", response_model=ApiResponse[GuessListResponse])
def get_guesses(
    property_id: int = Path(..., ge=1),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    reference_cache: ReferenceCache = Depends(get_reference_cache),
) -> ApiResponse[GuessListResponse]:
    """List guesses oldest first, with author karma ranks and the current FMV."""

    try:
        payload = list_property_guesses(
            db,
            property_id,
            page=page,
            page_size=page_size,
            reference_cache=reference_cache,
        )
    except GuessEngineError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=payload)


@router.post("/guesses", response_model=ApiResponse[GuessSubmissionRead], status_code=201)
def post_guess(
    payload: GuessCreate,
    response: Response,
    property_id: int = Path(..., ge=1),
    user_id: int | None = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    reference_cache: ReferenceCache = Depends(get_reference_cache),
) -> ApiResponse[GuessSubmissionRead]:
    """Submit a guess (201) or update it after the 5-day cooldown (200)."""

    try:
        result = submit_guess(
            db,
            property_id,
            user_id,
            payload.guessed_price,
            reference_cache=reference_cache,
        )
    except GuessEngineError as exc:
        raise to_http_exception(exc) from exc

    if not result.created:
        response.status_code = 200
    message = "Price guess submitted successfully" if result.created else "Price guess updated successfully"
    return ApiResponse(
        data=GuessSubmissionRead(
            **GuessRead.model_validate(result.guess).model_dump(),
            message=message,
            editable_at=result.editable_at,
        )
    )
