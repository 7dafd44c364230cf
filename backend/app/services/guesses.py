"""Guess submission gate and property guess listings."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

from sqlalchemy import Insert, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.config import get_settings
from app.fmv.karma import resolve_karma_rank
from app.fmv.outliers import is_outlier
from app.models.price_guess import PriceGuess
from app.models.user import User
from app.schemas.fmv import FmvRead
from app.schemas.guess import (
    GuessAuthorRead,
    GuessListResponse,
    GuessRead,
    GuessWithAuthorRead,
    KarmaRankRead,
    PaginationRead,
)
from app.services.catalog import get_property_reference
from app.services.errors import (
    CooldownActiveError,
    GuessEngineError,
    InvalidGuessError,
    UnauthorizedError,
)
from app.services.fmv import get_property_fmv
from app.services.reference_cache import ReferenceCache

logger = logging.getLogger(__name__)

# NUMERIC(14, 2) capacity.
MAX_GUESS_PRICE = Decimal("999999999999.99")
_CENT = Decimal("0.01")


@dataclass(slots=True)
class GuessSubmissionResult:
    """Persisted guess and whether the submission created it."""

    guess: PriceGuess
    created: bool
    editable_at: datetime


def guess_cooldown() -> timedelta:
    return timedelta(days=get_settings().guess_cooldown_days)


def editable_at(guess: PriceGuess) -> datetime:
    """Earliest moment the author may change this guess."""

    return as_utc(guess.updated_at) + guess_cooldown()


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def normalize_guessed_price(raw_price: object) -> Decimal:
    """Validate a guessed price and round it to cents."""

    if isinstance(raw_price, bool) or not isinstance(raw_price, (int, float, str, Decimal)):
        raise InvalidGuessError("Guessed price must be a number.")
    if isinstance(raw_price, float) and not math.isfinite(raw_price):
        raise InvalidGuessError("Guessed price must be a finite number.")
    try:
        price = Decimal(str(raw_price)).quantize(_CENT)
    except (InvalidOperation, ValueError) as exc:
        raise InvalidGuessError("Guessed price must be a number.") from exc
    if not price.is_finite():
        raise InvalidGuessError("Guessed price must be a finite number.")
    if price <= 0:
        raise InvalidGuessError("Guessed price must be greater than zero.")
    if price > MAX_GUESS_PRICE:
        raise InvalidGuessError(f"Guessed price must not exceed {MAX_GUESS_PRICE}.")
    return price


def submit_guess(
    db: Session,
    property_id: int,
    user_id: int | None,
    guessed_price: object,
    *,
    now: datetime | None = None,
    reference_cache: ReferenceCache | None = None,
) -> GuessSubmissionResult:
    """Create the caller's guess or update it once the cooldown has elapsed.

    Create and update are each one atomic statement: an insert that yields to
    the ``(property_id, user_id)`` unique constraint, then an update guarded by
    ``updated_at <= now - cooldown``. Concurrent first submissions therefore
    cannot both create, and concurrent edits cannot both pass the cooldown.
    """

    if user_id is None:
        raise UnauthorizedError()
    price = normalize_guessed_price(guessed_price)
    reference = get_property_reference(db, property_id, cache=reference_cache)

    settings = get_settings()
    now = as_utc(now or datetime.now(timezone.utc))
    cooldown = guess_cooldown()
    outlier = is_outlier(
        price,
        reference.assessed_value,
        min_ratio=settings.outlier_min_ratio,
        max_ratio=settings.outlier_max_ratio,
    )

    try:
        inserted = db.execute(
            _insert_if_absent(
                db,
                property_id=property_id,
                user_id=user_id,
                guessed_price=price,
                is_outlier=outlier,
                created_at=now,
                updated_at=now,
            )
        ).rowcount
        if inserted:
            db.commit()
            guess = _load_guess(db, property_id, user_id)
            logger.info(
                "guesses.created property_id=%s user_id=%s guess_id=%s is_outlier=%s",
                property_id,
                user_id,
                guess.id,
                outlier,
            )
            return GuessSubmissionResult(guess=guess, created=True, editable_at=now + cooldown)

        updated = db.execute(
            update(PriceGuess)
            .where(
                PriceGuess.property_id == property_id,
                PriceGuess.user_id == user_id,
                PriceGuess.updated_at <= now - cooldown,
            )
            .values(guessed_price=price, is_outlier=outlier, updated_at=now)
            .execution_options(synchronize_session=False)
        ).rowcount
        if updated:
            db.commit()
            guess = _load_guess(db, property_id, user_id)
            logger.info(
                "guesses.updated property_id=%s user_id=%s guess_id=%s is_outlier=%s",
                property_id,
                user_id,
                guess.id,
                outlier,
            )
            return GuessSubmissionResult(guess=guess, created=False, editable_at=now + cooldown)

        existing = db.scalar(
            select(PriceGuess.updated_at).where(
                PriceGuess.property_id == property_id,
                PriceGuess.user_id == user_id,
            )
        )
        db.rollback()
    except Exception:
        db.rollback()
        raise

    if existing is None:
        raise GuessEngineError("Guess was removed during submission.")
    cooldown_ends_at = as_utc(existing) + cooldown
    logger.info(
        "guesses.cooldown_active property_id=%s user_id=%s cooldown_ends_at=%s",
        property_id,
        user_id,
        cooldown_ends_at.isoformat(),
    )
    raise CooldownActiveError(cooldown_ends_at)


def list_property_guesses(
    db: Session,
    property_id: int,
    *,
    page: int = 1,
    page_size: int = 20,
    reference_cache: ReferenceCache | None = None,
) -> GuessListResponse:
    """Return one page of guesses (oldest first) with author ranks and the FMV."""

    fmv = get_property_fmv(db, property_id, reference_cache=reference_cache)
    total = int(
        db.scalar(select(func.count(PriceGuess.id)).where(PriceGuess.property_id == property_id)) or 0
    )
    rows = db.execute(
        select(PriceGuess, User)
        .join(User, User.id == PriceGuess.user_id)
        .where(PriceGuess.property_id == property_id)
        .order_by(PriceGuess.created_at.asc(), PriceGuess.id.asc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    ).all()

    items = [
        GuessWithAuthorRead(
            **GuessRead.model_validate(guess).model_dump(),
            editable_at=editable_at(guess),
            author=GuessAuthorRead(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                karma=user.karma,
                karma_rank=KarmaRankRead.model_validate(resolve_karma_rank(user.karma)),
            ),
        )
        for guess, user in rows
    ]
    return GuessListResponse(
        items=items,
        pagination=PaginationRead(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if total else 0,
        ),
        fmv=FmvRead.model_validate(fmv),
    )


def _insert_if_absent(db: Session, **values: object) -> Insert:
    dialect_name = db.get_bind().dialect.name
    if dialect_name == "postgresql":
        stmt = postgresql.insert(PriceGuess)
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(PriceGuess)
    else:
        raise GuessEngineError(f"Unsupported database dialect for guess upsert: {dialect_name}")
    return stmt.values(**values).on_conflict_do_nothing(index_elements=["property_id", "user_id"])


def _load_guess(db: Session, property_id: int, user_id: int) -> PriceGuess:
    return db.scalars(
        select(PriceGuess).where(
            PriceGuess.property_id == property_id,
            PriceGuess.user_id == user_id,
        )
    ).one()
