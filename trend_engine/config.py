"""Scan configuration loaded from the environment (and an optional ``.env``)."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()  # Load environment variables from .env file

DEFAULT_SOURCES = "hacker_news,reddit,google_news,product_hunt"
DEFAULT_SUBREDDITS = "popular,technology,business,news"


class HackerNewsSource(BaseModel):
    kind: Literal["hacker_news"] = "hacker_news"
    limit: int = Field(10, ge=1, description="Top stories to look up")


class RedditSource(BaseModel):
    kind: Literal["reddit"] = "reddit"
    subreddits: List[str] = Field(default_factory=lambda: DEFAULT_SUBREDDITS.split(","))
    per_subreddit: int = Field(3, ge=1)


class GoogleNewsSource(BaseModel):
    kind: Literal["google_news"] = "google_news"
    query: Optional[str] = Field(None, description="Search feed query; top stories when unset")
    region: str = "US"
    limit: int = Field(10, ge=1)


class ProductHuntSource(BaseModel):
    kind: Literal["product_hunt"] = "product_hunt"
    limit: int = Field(10, ge=1)


SourceConfig = Annotated[
    Union[HackerNewsSource, RedditSource, GoogleNewsSource, ProductHuntSource],
    Field(discriminator="kind"),
]


def _split(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class ScanSettings(BaseModel):
    """Everything a scan needs; passed explicitly, never stored globally."""

    similarity_threshold: float = Field(0.6, ge=0, le=1)
    max_trends: int = Field(100, ge=0)
    max_per_source: int = Field(5, ge=1)
    http_timeout: float = Field(15.0, gt=0)
    data_dir: Path = Path("data")
    sources: List[SourceConfig] = Field(default_factory=list)

    @classmethod
    def from_env(cls) -> "ScanSettings":
        """Build settings from ``TREND_*`` environment variables."""
        region = os.getenv("TREND_REGION", "US")
        sources: List[dict] = []
        for kind in _split(os.getenv("TREND_SOURCES", DEFAULT_SOURCES)):
            if kind == "reddit":
                subreddits = _split(os.getenv("TREND_REDDIT_SUBREDDITS", DEFAULT_SUBREDDITS))
                sources.append({"kind": kind, "subreddits": subreddits})
            elif kind == "google_news":
                query = os.getenv("TREND_GOOGLE_NEWS_QUERY") or None
                sources.append({"kind": kind, "query": query, "region": region})
            else:
                # Unknown kinds are rejected by the discriminated union below.
                sources.append({"kind": kind})

        return cls.model_validate(
            {
                "similarity_threshold": os.getenv("TREND_SIMILARITY_THRESHOLD", "0.6"),
                "max_trends": os.getenv("TREND_MAX_TRENDS", "100"),
                "max_per_source": os.getenv("TREND_MAX_PER_SOURCE", "5"),
                "http_timeout": os.getenv("TREND_HTTP_TIMEOUT", "15"),
                "data_dir": os.getenv("TREND_DATA_DIR", "data"),
                "sources": sources,
            }
        )
