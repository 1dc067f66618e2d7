"""Fold raw trend mentions from many sources into ranked, deduplicated trends.

Clustering is greedy first-fit: each mention joins the *first* existing
cluster (in creation order) whose representative topic is similar enough, so
the result depends on input order.  Callers wanting consistent ranks across
"load more" style refreshes must aggregate the full raw set again.
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .models import (
    AggregatedTrend,
    AggregationOptions,
    AggregationResult,
    MomentumLevel,
    RawTrendInput,
    VolumeSample,
)
from .scoring import average_volume, classify_momentum, combined_score
from .text import normalize_topic, topic_similarity

logger = logging.getLogger(__name__)

RawTrendLike = Union[RawTrendInput, Mapping[str, object]]


def _now_ms() -> float:
    return float(int(time.time() * 1000))


@dataclass
class _Cluster:
    """Mutable working state for one trend while a single call is running."""

    id: str
    topic: str
    normalized_topic: str
    first_seen: float
    last_seen: float
    sources: List[str] = field(default_factory=list)
    volume_history: List[VolumeSample] = field(default_factory=list)
    regions: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    momentum: MomentumLevel = "stable"
    score: int = 0

    def absorb(self, raw: RawTrendInput, seen_at: float) -> None:
        if raw.source not in self.sources:
            self.sources.append(raw.source)
        # Zero or non-finite volume carries no signal and is treated like a missing value.
        if raw.volume and math.isfinite(raw.volume):
            self.volume_history.append(VolumeSample(timestamp=seen_at, volume=raw.volume))
        if raw.region and raw.region not in self.regions:
            self.regions.append(raw.region)
        if raw.url and raw.url not in self.urls:
            self.urls.append(raw.url)
        self.last_seen = max(self.last_seen, seen_at)

    def freeze(self, rank: int) -> AggregatedTrend:
        return AggregatedTrend(
            id=self.id,
            topic=self.topic,
            normalized_topic=self.normalized_topic,
            sources=tuple(self.sources),
            source_count=len(self.sources),
            combined_score=self.score,
            first_seen=self.first_seen,
            last_seen=self.last_seen,
            momentum=self.momentum,
            volume_history=tuple(self.volume_history),
            regions=tuple(self.regions),
            urls=tuple(self.urls),
            rank=rank,
        )


def _coerce(raw: RawTrendLike) -> RawTrendInput:
    if isinstance(raw, RawTrendInput):
        return raw
    return RawTrendInput.model_validate(raw)


def aggregate_trends(
    raw_trends: Iterable[RawTrendLike],
    similarity_threshold: float = 0.6,
    max_trends: int = 100,
    now: Optional[float] = None,
) -> AggregationResult:
    """Deduplicate, score and rank *raw_trends*.

    Parameters
    ----------
    raw_trends:
        Mentions as :class:`RawTrendInput` objects or plain mappings.
    similarity_threshold:
        Minimum :func:`topic_similarity` for a mention to join a cluster.
    max_trends:
        Maximum number of trends returned; ranks are computed before the cut.
    now:
        Epoch milliseconds used for missing timestamps and ``aggregated_at``.
    """
    options = AggregationOptions(similarity_threshold=similarity_threshold, max_trends=max_trends)
    now = _now_ms() if now is None else now
    mentions = [_coerce(raw) for raw in raw_trends]

    if not mentions:
        return AggregationResult(aggregated_at=now)

    source_breakdown: Dict[str, int] = {}
    clusters: List[_Cluster] = []
    skipped = 0

    for raw in mentions:
        source_breakdown[raw.source] = source_breakdown.get(raw.source, 0) + 1

        normalized = normalize_topic(raw.topic)
        if not normalized:
            skipped += 1
            continue

        seen_at = raw.timestamp if raw.timestamp is not None else now
        match = next(
            (c for c in clusters if topic_similarity(raw.topic, c.topic) >= options.similarity_threshold),
            None,
        )
        if match is None:
            match = _Cluster(
                id=f"trend_{int(now)}_{len(clusters)}",
                topic=raw.topic,
                normalized_topic=normalized,
                first_seen=seen_at,
                last_seen=seen_at,
            )
            clusters.append(match)
        match.absorb(raw, seen_at)

    for cluster in clusters:
        cluster.momentum = classify_momentum(cluster.volume_history)
        cluster.score = combined_score(
            len(cluster.sources),
            average_volume(cluster.volume_history),
            cluster.momentum,
        )

    # sorted() is stable, ties keep creation order.
    ranked = sorted(clusters, key=lambda c: c.score, reverse=True)
    trends = [cluster.freeze(rank=idx + 1) for idx, cluster in enumerate(ranked[: options.max_trends])]

    logger.debug(
        "Aggregated %d mentions into %d clusters (%d unusable topics, %d returned)",
        len(mentions),
        len(clusters),
        skipped,
        len(trends),
    )

    return AggregationResult(
        trends=trends,
        source_breakdown=source_breakdown,
        total_raw=len(mentions),
        unique_count=len(trends),
        aggregated_at=now,
    )
