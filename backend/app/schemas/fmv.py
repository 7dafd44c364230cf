"""FMV response schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class FmvDistributionRead(BaseModel):
    """Percentile spread of guessed prices."""

    model_config = ConfigDict(from_attributes=True)

    min: float
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    max: float


class FmvRead(BaseModel):
    """Crowd fair-market-value snapshot."""

    model_config = ConfigDict(from_attributes=True)

    value: float | None
    confidence: Literal["none", "low", "medium", "high"]
    guess_count: int
    outlier_count: int
    distribution: FmvDistributionRead | None
    assessed_value: float | None
    asking_price: float | None
    divergence: float | None
