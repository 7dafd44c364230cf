"""Deterministic crowd fair-market-value aggregation.

Everything here works on in-memory guesses so the algorithm stays independent
of the store. Data loading lives in ``app.services.fmv``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from app.fmv.karma import karma_weight, resolve_karma_rank

FmvConfidence = Literal["none", "low", "medium", "high"]

DISTRIBUTION_PERCENTILES: tuple[int, ...] = (10, 25, 50, 75, 90)

# Policy choice: meme guesses still count, at half weight.
OUTLIER_WEIGHT = 0.5
# Policy choice: low-confidence estimates are an even blend of crowd and assessed value.
ANCHOR_BLEND_RATIO = 0.5


@dataclass(frozen=True, slots=True)
class WeightedGuess:
    """One guess with the inputs that drive its weight."""

    guessed_price: float
    karma: int = 0
    is_outlier: bool = False


@dataclass(frozen=True, slots=True)
class PropertyReference:
    """Authoritative reference values for a property."""

    assessed_value: float | None = None
    asking_price: float | None = None


@dataclass(frozen=True, slots=True)
class AggregationPolicy:
    """Tunable weighting and anchoring knobs."""

    outlier_weight: float = OUTLIER_WEIGHT
    anchor_blend_ratio: float = ANCHOR_BLEND_RATIO


@dataclass(frozen=True, slots=True)
class FmvDistribution:
    min: float
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    max: float


@dataclass(frozen=True, slots=True)
class FmvResult:
    """Point-in-time FMV snapshot for one property."""

    value: float | None
    confidence: FmvConfidence
    guess_count: int
    outlier_count: int
    distribution: FmvDistribution | None
    assessed_value: float | None
    asking_price: float | None
    divergence: float | None


def confidence_for_count(guess_count: int) -> FmvConfidence:
    """Classify confidence purely from the number of guesses."""

    if guess_count <= 0:
        return "none"
    if guess_count <= 2:
        return "low"
    if guess_count <= 9:
        return "medium"
    return "high"


def percentile(sorted_values: Sequence[float], pct: float) -> float:
    """Linear interpolation between order statistics (rank = pct/100 * (n - 1))."""

    if not sorted_values:
        raise ValueError("percentile requires at least one value")
    rank = (pct / 100.0) * (len(sorted_values) - 1)
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return float(sorted_values[lower])
    fraction = rank - lower
    return float(sorted_values[lower]) * (1.0 - fraction) + float(sorted_values[upper]) * fraction


def build_distribution(prices: Sequence[float]) -> FmvDistribution | None:
    if not prices:
        return None
    ordered = sorted(float(price) for price in prices)
    p10, p25, p50, p75, p90 = (_cents(percentile(ordered, pct)) for pct in DISTRIBUTION_PERCENTILES)
    return FmvDistribution(
        min=_cents(ordered[0]),
        p10=p10,
        p25=p25,
        p50=p50,
        p75=p75,
        p90=p90,
        max=_cents(ordered[-1]),
    )


def guess_weights(guesses: Sequence[WeightedGuess], policy: AggregationPolicy) -> list[float]:
    """Karma-tier weights (outliers damped), normalized to sum to the guess count."""

    raw = [
        karma_weight(resolve_karma_rank(guess.karma).level)
        * (policy.outlier_weight if guess.is_outlier else 1.0)
        for guess in guesses
    ]
    total = sum(raw)
    if total <= 0:
        return [1.0 for _ in guesses]
    scale = len(guesses) / total
    return [weight * scale for weight in raw]


def weighted_mean(guesses: Sequence[WeightedGuess], policy: AggregationPolicy) -> float:
    if not guesses:
        raise ValueError("weighted_mean requires at least one guess")
    weights = guess_weights(guesses, policy)
    weighted_sum = sum(weight * guess.guessed_price for weight, guess in zip(weights, guesses))
    return weighted_sum / len(guesses)


def anchor_estimate(
    crowd_estimate: float,
    assessed_value: float | None,
    confidence: FmvConfidence,
    blend_ratio: float = ANCHOR_BLEND_RATIO,
) -> float:
    """Pull low-confidence estimates toward the assessed value."""

    if confidence != "low" or assessed_value is None or assessed_value <= 0:
        return crowd_estimate
    return blend_ratio * assessed_value + (1.0 - blend_ratio) * crowd_estimate


def divergence_pct(value: float | None, asking_price: float | None) -> float | None:
    """Signed % difference of the asking price relative to the FMV."""

    if value is None or asking_price is None or value <= 0:
        return None
    return round((asking_price - value) / value * 100.0, 2)


def compute_fmv(
    guesses: Sequence[WeightedGuess],
    reference: PropertyReference,
    policy: AggregationPolicy | None = None,
) -> FmvResult:
    """Compute the FMV snapshot for a guess set; pure and deterministic."""

    policy = policy or AggregationPolicy()
    assessed_value = _optional_float(reference.assessed_value)
    asking_price = _optional_float(reference.asking_price)
    confidence = confidence_for_count(len(guesses))

    if not guesses:
        return FmvResult(
            value=None,
            confidence=confidence,
            guess_count=0,
            outlier_count=0,
            distribution=None,
            assessed_value=assessed_value,
            asking_price=asking_price,
            divergence=None,
        )

    crowd_estimate = weighted_mean(guesses, policy)
    value = _cents(anchor_estimate(crowd_estimate, assessed_value, confidence, policy.anchor_blend_ratio))
    return FmvResult(
        value=value,
        confidence=confidence,
        guess_count=len(guesses),
        outlier_count=sum(1 for guess in guesses if guess.is_outlier),
        distribution=build_distribution([guess.guessed_price for guess in guesses]),
        assessed_value=assessed_value,
        asking_price=asking_price,
        divergence=divergence_pct(value, asking_price),
    )


def _cents(value: float) -> float:
    return round(float(value), 2)


def _optional_float(value: float | Decimal | None) -> float | None:
    return None if value is None else float(value)
