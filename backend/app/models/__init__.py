"""ORM models package exports."""

from app.models.listing import Listing
from app.models.price_guess import PriceGuess
from app.models.property import Property
from app.models.user import User

__all__ = [
    "Listing",
    "PriceGuess",
    "Property",
    "User",
]
