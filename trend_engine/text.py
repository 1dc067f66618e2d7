"""Topic normalisation and similarity helpers."""
from __future__ import annotations

import re

_PUNCTUATION_RE = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_topic(topic: str) -> str:
    """Return *topic* lower-cased, without punctuation and with single spaces."""
    text = _PUNCTUATION_RE.sub("", topic.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def topic_similarity(topic_a: str, topic_b: str) -> float:
    """Return a 0-1 similarity between two raw topic strings.

    Rules, first match wins:

    * both topics normalise to ``""`` -> ``0.0`` (never a match)
    * identical after normalisation -> ``1.0``
    * one contains the other -> ``len(shorter) / len(longer)``
    * otherwise the Jaccard index of the two word sets
    """
    norm_a = normalize_topic(topic_a)
    norm_b = normalize_topic(topic_b)

    if not norm_a and not norm_b:
        return 0.0

    if norm_a == norm_b:
        return 1.0

    if norm_a in norm_b or norm_b in norm_a:
        shorter, longer = sorted((len(norm_a), len(norm_b)))
        return shorter / longer

    words_a = set(norm_a.split())
    words_b = set(norm_b.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)
