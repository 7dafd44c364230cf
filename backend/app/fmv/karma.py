"""Karma rank tiers used for display and FMV weighting."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class KarmaRank:
    """Named reputation tier."""

    title: str
    level: int


# Inclusive lower bounds, highest first.
KARMA_RANKS: tuple[tuple[int, KarmaRank], ...] = (
    (500, KarmaRank(title="Legend", level=5)),
    (101, KarmaRank(title="Expert", level=4)),
    (51, KarmaRank(title="Trusted", level=3)),
    (11, KarmaRank(title="Regular", level=2)),
    (0, KarmaRank(title="Newbie", level=1)),
)

# Policy choice: each tier above Newbie adds 10% weight to a guess.
KARMA_WEIGHT_STEP = 0.1


def resolve_karma_rank(score: int | None) -> KarmaRank:
    """Map a karma score to its tier; negative or missing scores count as 0."""

    public_score = max(0, int(score or 0))
    for lower_bound, rank in KARMA_RANKS:
        if public_score >= lower_bound:
            return rank
    return KARMA_RANKS[-1][1]


def karma_weight(level: int) -> float:
    return 1.0 + KARMA_WEIGHT_STEP * (max(1, level) - 1)
