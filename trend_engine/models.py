"""Pydantic data models used across the trend engine."""
from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

MomentumLevel = Literal["exploding", "rising", "stable", "falling"]

# Weakest first; filters compare positions in this tuple.
MOMENTUM_ORDER: Tuple[MomentumLevel, ...] = ("falling", "stable", "rising", "exploding")


class RawTrendInput(BaseModel):
    """A single trend mention as reported by one content source."""

    topic: str = Field(..., description="Topic wording as the source reported it")
    source: str = Field(..., description="Source identifier, e.g. 'hacker_news'")
    volume: Optional[float] = Field(None, description="Points / upvotes / searches if known")
    timestamp: Optional[float] = Field(None, description="Epoch milliseconds of the mention")
    url: Optional[str] = None
    region: Optional[str] = None


class VolumeSample(BaseModel):
    timestamp: float
    volume: float

    model_config = {
        "frozen": True,
    }


class AggregatedTrend(BaseModel):
    """Deduplicated cluster of raw mentions that refer to the same topic."""

    id: str
    topic: str = Field(..., description="Representative (first-seen) wording")
    normalized_topic: str
    sources: Tuple[str, ...] = Field(default_factory=tuple)
    source_count: int = Field(0, ge=0)
    combined_score: int = Field(0, ge=0, le=100)
    first_seen: float
    last_seen: float
    momentum: MomentumLevel = "stable"
    volume_history: Tuple[VolumeSample, ...] = Field(default_factory=tuple)
    regions: Tuple[str, ...] = Field(default_factory=tuple)
    urls: Tuple[str, ...] = Field(default_factory=tuple)
    rank: int = Field(0, ge=0)

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _check_source_count(self) -> "AggregatedTrend":
        if self.source_count != len(self.sources):
            raise ValueError(
                f"source_count={self.source_count} does not match {len(self.sources)} sources"
            )
        return self


class AggregationResult(BaseModel):
    trends: List[AggregatedTrend] = Field(default_factory=list)
    source_breakdown: Dict[str, int] = Field(default_factory=dict)
    total_raw: int = 0
    unique_count: int = 0
    aggregated_at: float

    model_config = {
        "frozen": True,
    }


class AggregationOptions(BaseModel):
    """Tunables for a single :func:`aggregate_trends` call."""

    similarity_threshold: float = Field(0.6, ge=0, le=1)
    max_trends: int = Field(100, ge=0)
