"""Property FMV routes."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.routers.guesses import to_http_exception
from app.schemas.common import ApiResponse
from app.schemas.fmv import FmvRead
from app.services.errors import GuessEngineError
from app.services.fmv import get_property_fmv
from app.services.reference_cache import ReferenceCache, get_reference_cache

router = APIRouter(prefix="/properties/{property_id}")


@router.get("/fmv", response_model=ApiResponse[FmvRead])
def get_fmv(
    property_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    reference_cache: ReferenceCache = Depends(get_reference_cache),
) -> ApiResponse[FmvRead]:
    """Return the crowd FMV snapshot for a property."""

    try:
        result = get_property_fmv(db, property_id, reference_cache=reference_cache)
    except GuessEngineError as exc:
        raise to_http_exception(exc) from exc
    return ApiResponse(data=FmvRead.model_validate(result))
