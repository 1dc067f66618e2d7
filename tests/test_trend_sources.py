import httpx
import pytest

from fetchers import trend_sources
from fetchers.trend_sources import (
    TrendSourceError,
    fetch_google_news,
    fetch_hacker_news,
    fetch_multi_source,
    fetch_reddit,
)
from trend_engine.config import GoogleNewsSource, HackerNewsSource, RedditSource, ScanSettings

RSS = """<rss version="2.0"><channel><title>News</title>
<item><title>Fed holds rates steady</title><link>https://news.example.com/fed</link></item>
<item><title>Heatwave hits Europe</title><link>https://news.example.com/heat</link></item>
</channel></rss>"""

HN_ITEMS = {
    1: {"id": 1, "title": "Rust 2.0 released", "score": 250, "time": 1751371200, "url": "https://rust.example"},
    2: {"id": 2, "title": "Ask HN: Best SQLite tips?", "score": 12, "time": 1751371260},
    3: {"id": 3, "title": "Not requested", "score": 1, "time": 1751371300},
}


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    sleeps = []
    monkeypatch.setattr(trend_sources.time, "sleep", sleeps.append)
    return sleeps


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _hn_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/v0/topstories.json":
        return httpx.Response(200, json=[1, 2, 3])
    item_id = int(request.url.path.rsplit("/", 1)[-1].split(".")[0])
    return httpx.Response(200, json=HN_ITEMS[item_id])


def test_fetch_hacker_news() -> None:
    with _client(_hn_handler) as client:
        mentions = fetch_hacker_news(client, HackerNewsSource(limit=2))

    assert [m.topic for m in mentions] == ["Rust 2.0 released", "Ask HN: Best SQLite tips?"]
    first, second = mentions
    assert first.source == "hacker_news"
    assert first.volume == 250
    assert first.timestamp == 1751371200000
    assert first.url == "https://rust.example"
    assert second.url == "https://news.ycombinator.com/item?id=2"


def test_fetch_reddit_skips_stickied_and_failed_subreddits(no_backoff) -> None:
    calls = {"broken": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/r/broken/hot.json":
            calls["broken"] += 1
            return httpx.Response(503)
        posts = [
            {"data": {"title": "Welcome thread", "stickied": True, "score": 5}},
            {"data": {"title": "EU passes AI act", "score": 900, "created_utc": 1751371200,
                      "permalink": "/r/technology/comments/abc/eu_ai_act/"}},
            {"data": {"title": "", "score": 1}},
        ]
        return httpx.Response(200, json={"data": {"children": posts}})

    config = RedditSource(subreddits=["broken", "technology"], per_subreddit=3)
    with _client(handler) as client:
        mentions = fetch_reddit(client, config)

    assert calls["broken"] == 3
    assert no_backoff == [1, 2]
    (mention,) = mentions
    assert mention.topic == "EU passes AI act"
    assert mention.source == "reddit"
    assert mention.volume == 900
    assert mention.url == "https://reddit.com/r/technology/comments/abc/eu_ai_act/"


def test_fetch_google_news_search_feed() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, text=RSS)

    with _client(handler) as client:
        mentions = fetch_google_news(client, GoogleNewsSource(query="mortgage rates", region="gb"))

    assert seen["path"] == "/rss/search"
    assert seen["params"]["q"] == "mortgage rates"
    assert seen["params"]["gl"] == "GB"
    assert [m.topic for m in mentions] == ["Fed holds rates steady", "Heatwave hits Europe"]
    assert all(m.region == "GB" for m in mentions)


def test_retry_gives_up_with_source_error(no_backoff) -> None:
    with _client(lambda request: httpx.Response(500)) as client:
        with pytest.raises(TrendSourceError):
            fetch_hacker_news(client, HackerNewsSource())
    assert no_backoff == [1, 2]


def test_fetch_multi_source_isolates_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "hacker-news.firebaseio.com":
            return httpx.Response(503)
        return httpx.Response(200, text=RSS)

    settings = ScanSettings(
        max_per_source=1,
        sources=[{"kind": "hacker_news"}, {"kind": "google_news"}],
    )
    with _client(handler) as client:
        result = fetch_multi_source(settings, client=client)

    assert result.sources["hacker_news"].success is False
    assert "503" in result.sources["hacker_news"].error
    assert result.sources["google_news"].success is True
    assert result.sources["google_news"].count == 2
    assert [m.topic for m in result.mentions] == ["Fed holds rates steady"]


def test_unexpected_payload_fails_only_that_source() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "hacker-news.firebaseio.com":
            return httpx.Response(200, json={"error": "rate limited"})
        return httpx.Response(200, text=RSS)

    settings = ScanSettings(sources=[{"kind": "hacker_news"}, {"kind": "product_hunt"}])
    with _client(handler) as client:
        result = fetch_multi_source(settings, client=client)

    assert result.sources["hacker_news"].success is False
    assert "rate limited" in result.sources["hacker_news"].error
    assert result.sources["product_hunt"].success is True
    assert [m.source for m in result.mentions] == ["product_hunt", "product_hunt"]


def test_malformed_hacker_news_items_are_skipped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v0/topstories.json":
            return httpx.Response(200, json=[1, 2])
        if request.url.path == "/v0/item/1.json":
            return httpx.Response(200, json=["not", "a", "story"])
        return httpx.Response(200, json=HN_ITEMS[2])

    with _client(handler) as client:
        mentions = fetch_hacker_news(client, HackerNewsSource(limit=2))

    assert [m.topic for m in mentions] == ["Ask HN: Best SQLite tips?"]


def test_fetch_reddit_skips_malformed_listings() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/r/odd/hot.json":
            return httpx.Response(200, json=["unexpected"])
        posts = ["junk", {"data": None}, {"data": {"title": "Rust in the kernel", "score": 40}}]
        return httpx.Response(200, json={"data": {"children": posts}})

    with _client(handler) as client:
        mentions = fetch_reddit(client, RedditSource(subreddits=["odd", "rust"], per_subreddit=3))

    assert [m.topic for m in mentions] == ["Rust in the kernel"]
