"""Momentum classification and combined scoring for aggregated trends."""
from __future__ import annotations

import math
from typing import Dict, Sequence

from .models import MomentumLevel, VolumeSample

MOMENTUM_BONUS: Dict[str, int] = {
    "exploding": 20,
    "rising": 10,
    "stable": 0,
    "falling": -10,
}

EXPLODING_RATIO = 2.0
RISING_RATIO = 1.2
FALLING_RATIO = 0.5


def _mean_or_one(samples: Sequence[VolumeSample]) -> float:
    """Mean volume of *samples*; 1 when there are none or the mean is zero."""
    if not samples:
        return 1.0
    mean = sum(s.volume for s in samples) / len(samples)
    return mean or 1.0


def average_volume(history: Sequence[VolumeSample]) -> float:
    """Arithmetic mean of the recorded volumes, ``0.0`` for an empty history."""
    if not history:
        return 0.0
    return sum(s.volume for s in history) / len(history)


def classify_momentum(history: Sequence[VolumeSample]) -> MomentumLevel:
    """Classify a volume history as exploding / rising / stable / falling.

    The samples are ordered by timestamp and split at ``n // 2``; the second
    half (which holds the middle sample for odd ``n``) is "recent".  The ratio
    of the recent mean to the older mean decides the bucket.
    """
    if len(history) < 2:
        return "stable"

    ordered = sorted(history, key=lambda s: s.timestamp)
    midpoint = len(ordered) // 2
    older_avg = _mean_or_one(ordered[:midpoint])
    recent_avg = _mean_or_one(ordered[midpoint:])

    ratio = recent_avg / older_avg
    if ratio > EXPLODING_RATIO:
        return "exploding"
    if ratio > RISING_RATIO:
        return "rising"
    if ratio < FALLING_RATIO:
        return "falling"
    return "stable"


def combined_score(source_count: int, avg_volume: float, momentum: MomentumLevel) -> int:
    """Blend source count, log-scaled volume and momentum into a 0-100 score."""
    score = float(min(source_count * 20, 60))
    if not math.isfinite(avg_volume):
        avg_volume = 0.0
    score += min(math.log10(max(avg_volume, 0.0) + 1) * 10, 30)
    score += MOMENTUM_BONUS[momentum]

    score = max(0.0, min(100.0, score))
    # Round half up: 52.5 -> 53.
    return int(math.floor(score + 0.5))
