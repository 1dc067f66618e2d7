from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from fetchers.feed_parser import parse_feed_entries
from trend_engine.config import (
    GoogleNewsSource,
    HackerNewsSource,
    ProductHuntSource,
    RedditSource,
    ScanSettings,
)
from trend_engine.models import RawTrendInput

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; TrendScan/0.1)"

HN_TOP_STORIES_URL = "https://hacker-news.firebaseio.com/v0/topstories.json"
HN_ITEM_URL = "https://hacker-news.firebaseio.com/v0/item/{}.json"
HN_DISCUSSION_URL = "https://news.ycombinator.com/item?id={}"
REDDIT_HOT_URL = "https://www.reddit.com/r/{}/hot.json"
GOOGLE_NEWS_URL = "https://news.google.com/rss"
GOOGLE_NEWS_SEARCH_URL = "https://news.google.com/rss/search"
PRODUCT_HUNT_FEED_URL = "https://www.producthunt.com/feed"

MAX_ATTEMPTS = 3


class TrendSourceError(RuntimeError):
    """A content source failed after all retries or returned an unexpected payload."""


class SourceStatus(BaseModel):
    success: bool
    count: int = 0
    error: Optional[str] = None


class MultiSourceResult(BaseModel):
    mentions: List[RawTrendInput] = Field(default_factory=list)
    sources: Dict[str, SourceStatus] = Field(default_factory=dict)


def _get_with_retry(client: httpx.Client, url: str, **kwargs) -> httpx.Response:
    """GET *url*, retrying transport errors and bad statuses with back-off."""
    last_error: Optional[httpx.HTTPError] = None
    for attempt in range(MAX_ATTEMPTS):
        try:
            response = client.get(url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            last_error = e
            logger.warning(f"GET {url} failed on attempt {attempt + 1}: {e}")
            if attempt < MAX_ATTEMPTS - 1:
                wait_time = 2 ** attempt  # Exponential back-off: 1s, 2s
                time.sleep(wait_time)
    raise TrendSourceError(f"GET {url} failed after {MAX_ATTEMPTS} attempts: {last_error}") from last_error


def fetch_hacker_news(client: httpx.Client, config: HackerNewsSource) -> List[RawTrendInput]:
    """Top Hacker News stories; volume is the story's points."""
    story_ids = _get_with_retry(client, HN_TOP_STORIES_URL).json()
    if not isinstance(story_ids, list):
        raise TrendSourceError(f"Unexpected Hacker News top stories payload: {story_ids!r}")

    mentions: List[RawTrendInput] = []
    for story_id in story_ids[: config.limit]:
        try:
            story = _get_with_retry(client, HN_ITEM_URL.format(story_id)).json()
        except TrendSourceError as e:
            logger.warning(f"Skipping Hacker News item {story_id}: {e}")
            continue
        if not isinstance(story, dict) or not story.get("title"):
            continue
        posted = story.get("time")
        mentions.append(
            RawTrendInput(
                topic=story["title"],
                source="hacker_news",
                volume=story.get("score"),
                timestamp=float(posted * 1000) if posted else None,
                url=story.get("url") or HN_DISCUSSION_URL.format(story_id),
            ),
        )
    return mentions


def fetch_reddit(client: httpx.Client, config: RedditSource) -> List[RawTrendInput]:
    """Hot posts from each configured subreddit; stickied posts are skipped."""
    mentions: List[RawTrendInput] = []
    for subreddit in config.subreddits:
        try:
            payload = _get_with_retry(
                client,
                REDDIT_HOT_URL.format(subreddit),
                params={"limit": config.per_subreddit + 2},
            ).json()
            listing = payload.get("data") if isinstance(payload, dict) else None
            posts = listing.get("children") if isinstance(listing, dict) else None
            if not isinstance(posts, list):
                raise TrendSourceError(f"unexpected listing payload: {payload!r}")
        except TrendSourceError as e:
            logger.warning(f"Reddit r/{subreddit} failed: {e}")
            continue

        for post in posts[: config.per_subreddit]:
            data = post.get("data") if isinstance(post, dict) else None
            if not isinstance(data, dict) or not data.get("title") or data.get("stickied"):
                continue
            created = data.get("created_utc")
            permalink = data.get("permalink")
            mentions.append(
                RawTrendInput(
                    topic=data["title"],
                    source="reddit",
                    volume=data.get("score"),
                    timestamp=float(created * 1000) if created else None,
                    url=f"https://reddit.com{permalink}" if permalink else None,
                ),
            )
    return mentions


def fetch_google_news(client: httpx.Client, config: GoogleNewsSource) -> List[RawTrendInput]:
    """Google News top stories (or a search feed when a query is set)."""
    region = config.region.upper()
    params = {"hl": f"en-{region}", "gl": region, "ceid": f"{region}:en"}
    url = GOOGLE_NEWS_URL
    if config.query:
        url = GOOGLE_NEWS_SEARCH_URL
        params["q"] = config.query

    response = _get_with_retry(client, url, params=params)
    return parse_feed_entries(response.text, "google_news", max_items=config.limit, region=region)


def fetch_product_hunt(client: httpx.Client, config: ProductHuntSource) -> List[RawTrendInput]:
    response = _get_with_retry(client, PRODUCT_HUNT_FEED_URL)
    return parse_feed_entries(response.text, "product_hunt", max_items=config.limit)


FETCHERS: Dict[str, Callable[[httpx.Client, object], List[RawTrendInput]]] = {
    "hacker_news": fetch_hacker_news,
    "reddit": fetch_reddit,
    "google_news": fetch_google_news,
    "product_hunt": fetch_product_hunt,
}


def fetch_multi_source(settings: ScanSettings, client: Optional[httpx.Client] = None) -> MultiSourceResult:
    """Collect raw mentions from every configured source.

    A failing source is logged and reported in ``sources`` but never aborts
    the scan.  Each source contributes at most ``settings.max_per_source``
    mentions.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=settings.http_timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    result = MultiSourceResult()
    try:
        for config in settings.sources:
            fetcher = FETCHERS[config.kind]
            logger.info(f"Requesting trends from {config.kind}")
            try:
                items = fetcher(client, config)
            except (TrendSourceError, httpx.HTTPError, ValueError) as e:
                logger.error(f"{config.kind} failed: {e}")
                result.sources[config.kind] = SourceStatus(success=False, error=str(e))
                continue

            result.mentions.extend(items[: settings.max_per_source])
            result.sources[config.kind] = SourceStatus(success=True, count=len(items))
            logger.info(f"Saved {min(len(items), settings.max_per_source)} of {len(items)} trends from {config.kind}")
    finally:
        if owns_client:
            client.close()

    return result
