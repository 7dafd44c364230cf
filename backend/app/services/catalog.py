"""Read-only lookups into the property and user catalog."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.fmv.aggregator import PropertyReference
from app.models.listing import Listing
from app.models.property import Property
from app.models.user import User
from app.services.errors import PropertyNotFoundError
from app.services.reference_cache import ReferenceCache


def load_property_reference(db: Session, property_id: int) -> PropertyReference:
    """Read the assessed value and the latest active asking price from the store."""

    assessed = db.execute(
        select(Property.id, Property.assessed_value).where(Property.id == property_id)
    ).first()
    if assessed is None:
        raise PropertyNotFoundError(property_id)

    asking_price = db.scalar(
        select(Listing.asking_price)
        .where(Listing.property_id == property_id, Listing.status == "active")
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .limit(1)
    )
    return PropertyReference(
        assessed_value=float(assessed.assessed_value) if assessed.assessed_value is not None else None,
        asking_price=float(asking_price) if asking_price is not None else None,
    )


def get_property_reference(
    db: Session,
    property_id: int,
    *,
    cache: ReferenceCache | None = None,
) -> PropertyReference:
    """Return the property's reference values, through ``cache`` when given."""

    if cache is None:
        return load_property_reference(db, property_id)
    return cache.get_or_load(property_id, lambda key: load_property_reference(db, key))


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)
