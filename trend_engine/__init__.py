"""Trend engine.

Folds raw trend mentions collected from several content sources into
deduplicated, scored and ranked :class:`AggregatedTrend` objects consumed by
topic selection for new campaigns.
"""

from .aggregator import aggregate_trends
from .filters import (
    filter_by_momentum,
    filter_by_region,
    filter_multi_source,
    get_exploding_trends,
    get_high_confidence_trends,
    get_top_trends,
)
from .models import AggregatedTrend, AggregationResult, RawTrendInput, VolumeSample
from .scoring import classify_momentum, combined_score
from .text import normalize_topic, topic_similarity

__all__ = [
    "AggregatedTrend",
    "AggregationResult",
    "RawTrendInput",
    "VolumeSample",
    "aggregate_trends",
    "classify_momentum",
    "combined_score",
    "filter_by_momentum",
    "filter_by_region",
    "filter_multi_source",
    "get_exploding_trends",
    "get_high_confidence_trends",
    "get_top_trends",
    "normalize_topic",
    "topic_similarity",
]

__version__ = "0.1.0"
