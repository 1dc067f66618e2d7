"""RSS / Atom feed parsing into raw trend mentions."""
from __future__ import annotations

import calendar
import logging
from typing import List, Optional

import feedparser

from trend_engine.models import RawTrendInput

logger = logging.getLogger(__name__)


def _entry_timestamp(entry: feedparser.FeedParserDict) -> Optional[float]:
    """Epoch milliseconds from ``published`` (RSS) or ``updated`` (Atom)."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return float(calendar.timegm(parsed) * 1000)
            except (TypeError, ValueError, OverflowError):
                continue
    return None


def parse_feed_entries(
    text: str,
    source: str,
    max_items: int = 10,
    region: Optional[str] = None,
) -> List[RawTrendInput]:
    """Parse an RSS 2.0 or Atom document into :class:`RawTrendInput` rows.

    Entries without a title are skipped.  Feeds carry no volume figure, so
    ``volume`` is left unset.
    """
    feed = feedparser.parse(text)
    if feed.bozo and not feed.entries:
        logger.warning(f"{source}: feed could not be parsed ({feed.get('bozo_exception')})")
        return []

    mentions: List[RawTrendInput] = []
    for entry in feed.entries:
        title = (entry.get("title") or "").strip()
        if not title:
            continue
        mentions.append(
            RawTrendInput(
                topic=title,
                source=source,
                timestamp=_entry_timestamp(entry),
                url=entry.get("link") or None,
                region=region,
            ),
        )
        if len(mentions) >= max_items:
            break
    return mentions
