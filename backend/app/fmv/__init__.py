"""Crowd FMV estimation package."""

from app.fmv.aggregator import (
    AggregationPolicy,
    FmvDistribution,
    FmvResult,
    PropertyReference,
    WeightedGuess,
    compute_fmv,
    confidence_for_count,
)
from app.fmv.karma import KarmaRank, resolve_karma_rank
from app.fmv.outliers import is_outlier

__all__ = [
    "AggregationPolicy",
    "FmvDistribution",
    "FmvResult",
    "KarmaRank",
    "PropertyReference",
    "WeightedGuess",
    "compute_fmv",
    "confidence_for_count",
    "is_outlier",
    "resolve_karma_rank",
]
