"""Property ORM model."""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IdMixin


class Property(Base, IdMixin, CreatedAtMixin):
    """Catalog property that guesses are submitted against."""

    __tablename__ = "properties"

    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # Official (government) valuation; the anchor for outlier checks and low-confidence FMV.
    assessed_value: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
