"""Pure filter/query helpers over aggregated trends."""
from __future__ import annotations

from typing import List, Sequence

from .models import MOMENTUM_ORDER, AggregatedTrend, MomentumLevel


def filter_by_momentum(trends: Sequence[AggregatedTrend], min_momentum: MomentumLevel) -> List[AggregatedTrend]:
    """Keep trends whose momentum is at least *min_momentum* (falling < stable < rising < exploding)."""
    threshold = MOMENTUM_ORDER.index(min_momentum)
    return [t for t in trends if MOMENTUM_ORDER.index(t.momentum) >= threshold]


def filter_multi_source(trends: Sequence[AggregatedTrend], min_sources: int = 2) -> List[AggregatedTrend]:
    return [t for t in trends if t.source_count >= min_sources]


def filter_by_region(trends: Sequence[AggregatedTrend], region: str) -> List[AggregatedTrend]:
    """Keep global trends (no region recorded) and trends seen in *region*."""
    return [t for t in trends if not t.regions or region in t.regions]


def get_top_trends(trends: Sequence[AggregatedTrend], count: int = 10) -> List[AggregatedTrend]:
    return sorted(trends, key=lambda t: t.combined_score, reverse=True)[:count]


def get_exploding_trends(trends: Sequence[AggregatedTrend]) -> List[AggregatedTrend]:
    return filter_by_momentum(trends, "exploding")


def get_high_confidence_trends(
    trends: Sequence[AggregatedTrend],
    min_score: int = 50,
    min_sources: int = 2,
) -> List[AggregatedTrend]:
    """Trends confirmed by several sources that also score well."""
    return [t for t in trends if t.combined_score >= min_score and t.source_count >= min_sources]
