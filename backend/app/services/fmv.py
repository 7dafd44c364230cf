"""FMV read service: loads guesses and reference values, then aggregates."""

from __future__ import annotations

import logging
from time import perf_counter

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.fmv.aggregator import AggregationPolicy, FmvResult, WeightedGuess, compute_fmv
from app.models.price_guess import PriceGuess
from app.models.user import User
from app.services.catalog import get_property_reference
from app.services.reference_cache import ReferenceCache

logger = logging.getLogger(__name__)


def aggregation_policy() -> AggregationPolicy:
    settings = get_settings()
    return AggregationPolicy(
        outlier_weight=settings.outlier_weight,
        anchor_blend_ratio=settings.anchor_blend_ratio,
    )


def load_weighted_guesses(db: Session, property_id: int) -> list[WeightedGuess]:
    """All guesses for a property (outliers included) with their author's karma."""

    rows = db.execute(
        select(PriceGuess.guessed_price, PriceGuess.is_outlier, User.karma)
        .join(User, User.id == PriceGuess.user_id)
        .where(PriceGuess.property_id == property_id)
        .order_by(PriceGuess.id.asc())
    ).all()
    return [
        WeightedGuess(
            guessed_price=float(row.guessed_price),
            karma=int(row.karma or 0),
            is_outlier=bool(row.is_outlier),
        )
        for row in rows
    ]


def get_property_fmv(
    db: Session,
    property_id: int,
    *,
    reference_cache: ReferenceCache | None = None,
) -> FmvResult:
    """Compute the current FMV snapshot; raises PropertyNotFoundError for unknown ids."""

    started = perf_counter()
    reference = get_property_reference(db, property_id, cache=reference_cache)
    guesses = load_weighted_guesses(db, property_id)
    result = compute_fmv(guesses, reference, aggregation_policy())
    logger.info(
        "fmv.compute property_id=%s guesses=%d outliers=%d confidence=%s total_ms=%.2f",
        property_id,
        result.guess_count,
        result.outlier_count,
        result.confidence,
        (perf_counter() - started) * 1000.0,
    )
    return result
