"""SQLAlchemy metadata registry import for Alembic."""

from app.models import Listing, PriceGuess, Property, User
from app.models.base import Base

__all__ = ["Base", "Listing", "PriceGuess", "Property", "User"]
