"""Meme guess detection against a property's reference value."""

from __future__ import annotations

from decimal import Decimal

# Policy choice: a guess below 20% or above 500% of the reference is a meme guess.
OUTLIER_MIN_RATIO = 0.2
OUTLIER_MAX_RATIO = 5.0


def is_outlier(
    guessed_price: float | Decimal,
    reference_value: float | Decimal | None,
    *,
    min_ratio: float = OUTLIER_MIN_RATIO,
    max_ratio: float = OUTLIER_MAX_RATIO,
) -> bool:
    """Return True when the guess falls outside the tolerance band around the reference.

    Without a positive reference there is no baseline, so nothing is flagged.
    """

    if reference_value is None or reference_value <= 0:
        return False
    ratio = float(guessed_price) / float(reference_value)
    return ratio < min_ratio or ratio > max_ratio
