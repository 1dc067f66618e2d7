"""Utilities for moving raw and aggregated trends in and out of tabular files."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

import pandas as pd

from .models import AggregatedTrend, RawTrendInput
from .scoring import average_volume

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("topic", "source")

TREND_COLUMNS = [
    "rank",
    "topic",
    "combined_score",
    "momentum",
    "source_count",
    "sources",
    "avg_volume",
    "samples",
    "regions",
    "urls",
    "first_seen",
    "last_seen",
    "id",
]


def _is_missing(value: Any) -> bool:
    return value is None or (not isinstance(value, str) and pd.isna(value))


def _optional_float(value: Any) -> Optional[float]:
    if _is_missing(value) or value == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _optional_timestamp(value: Any) -> Optional[float]:
    """Epoch milliseconds from a number or an ISO-8601 string."""
    number = _optional_float(value)
    if number is not None or _is_missing(value) or value == "":
        return number
    try:
        stamp = pd.Timestamp(value)
    except (ValueError, TypeError):
        logger.warning(f"Ignoring unparseable timestamp {value!r}")
        return None
    if stamp.tzinfo is None:
        stamp = stamp.tz_localize("UTC")
    return float(stamp.value // 1_000_000)


def _optional_str(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".json":
        records = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(records, dict):
            # Accept the exported {"trends": [...]} shape as well as a bare list.
            records = records.get("trends", [])
        return pd.DataFrame.from_records(records)
    raise ValueError(f"Unsupported raw trend file type: {path.suffix or path.name}")


def load_raw_trends(path: Path) -> List[RawTrendInput]:
    """Read raw trend mentions from a CSV or JSON file.

    Parameters
    ----------
    path:
        CSV with ``topic`` and ``source`` columns (``volume``, ``timestamp``,
        ``url`` and ``region`` optional) or a JSON list of the same records.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = _read_frame(path)
    if df.empty:
        return []

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing required column(s): {', '.join(missing)}")

    mentions: List[RawTrendInput] = []
    for _, row in df.iterrows():
        mentions.append(
            RawTrendInput(
                topic="" if _is_missing(row["topic"]) else str(row["topic"]),
                source="" if _is_missing(row["source"]) else str(row["source"]),
                volume=_optional_float(row.get("volume")),
                timestamp=_optional_timestamp(row.get("timestamp")),
                url=_optional_str(row.get("url")),
                region=_optional_str(row.get("region")),
            ),
        )

    logger.info(f"Loaded {len(mentions)} raw trend mentions from {path}")
    return mentions


def raw_trends_to_frame(mentions: Sequence[RawTrendInput]) -> pd.DataFrame:
    """Return raw mentions as a DataFrame (one row per mention)."""
    columns = list(RawTrendInput.model_fields)
    return pd.DataFrame([m.model_dump() for m in mentions], columns=columns)


def trends_to_frame(trends: Sequence[AggregatedTrend]) -> pd.DataFrame:
    """Flatten aggregated trends into a DataFrame ordered by rank."""
    rows = []
    for trend in trends:
        rows.append(
            {
                "rank": trend.rank,
                "topic": trend.topic,
                "combined_score": trend.combined_score,
                "momentum": trend.momentum,
                "source_count": trend.source_count,
                "sources": ", ".join(trend.sources),
                "avg_volume": round(average_volume(trend.volume_history), 1),
                "samples": len(trend.volume_history),
                "regions": ", ".join(trend.regions),
                "urls": " ".join(trend.urls),
                "first_seen": trend.first_seen,
                "last_seen": trend.last_seen,
                "id": trend.id,
            },
        )
    return pd.DataFrame(rows, columns=TREND_COLUMNS)
