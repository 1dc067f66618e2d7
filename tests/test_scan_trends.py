import csv
import json
from pathlib import Path

import pytest

from fetchers.trend_sources import MultiSourceResult, SourceStatus
from scripts import scan_trends
from scripts.session_manager import SessionManager
from trend_engine.models import RawTrendInput

ROWS = [
    {"topic": "AI chatbots", "source": "hacker_news", "volume": 100, "timestamp": 1000, "region": "US"},
    {"topic": "ai chatbots!", "source": "reddit", "volume": 500, "timestamp": 2000, "region": ""},
    {"topic": "Crypto regulation", "source": "google_news", "volume": "", "timestamp": "", "region": "EU"},
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("TREND_SIMILARITY_THRESHOLD", raising=False)
    monkeypatch.delenv("TREND_MAX_TRENDS", raising=False)
    monkeypatch.delenv("TREND_SOURCES", raising=False)


def _write_input(tmp_path: Path) -> Path:
    path = tmp_path / "mentions.csv"
    with path.open("w", newline="") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=ROWS[0].keys())
        writer.writeheader()
        writer.writerows(ROWS)
    return path


def _only(directory: Path, pattern: str) -> Path:
    (match,) = directory.glob(pattern)
    return match


def test_scan_from_input_file(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    session_dir = scan_trends.main(["--input", str(_write_input(tmp_path)), "--data-dir", str(data_dir)])

    assert session_dir == data_dir / "scan_001"
    assert _only(session_dir / "raw_data", "raw_trends_*.csv").exists()
    assert _only(session_dir / "analysis", "aggregated_trends_*.csv").exists()

    payload = json.loads(_only(session_dir / "analysis", "aggregated_trends_*.json").read_text())
    assert payload["total_raw"] == 3
    assert payload["unique_count"] == 2
    assert payload["trends"][0]["topic"] == "AI chatbots"
    assert payload["trends"][0]["momentum"] == "exploding"

    report = _only(session_dir / "reports", "trend_report_*.txt").read_text(encoding="utf-8")
    assert "Unique Trends: 2" in report

    summary = SessionManager(data_dir).list_sessions()["scan_001"]["summary"]
    assert summary["source_breakdown"] == {"hacker_news": 1, "reddit": 1, "google_news": 1}


def test_scan_filters(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    session_dir = scan_trends.main(
        ["--input", str(_write_input(tmp_path)), "--data-dir", str(data_dir), "--region", "US", "--min-sources", "2"]
    )

    payload = json.loads(_only(session_dir / "analysis", "aggregated_trends_*.json").read_text())
    assert [t["topic"] for t in payload["trends"]] == ["AI chatbots"]
    assert payload["total_raw"] == 3
    assert payload["unique_count"] == 1


def test_scan_live_sources(tmp_path: Path, monkeypatch) -> None:
    fetched = MultiSourceResult(
        mentions=[RawTrendInput(topic="Rust 2.0 released", source="hacker_news", volume=250)],
        sources={
            "hacker_news": SourceStatus(success=True, count=1),
            "reddit": SourceStatus(success=False, error="boom"),
        },
    )
    monkeypatch.setattr(scan_trends, "fetch_multi_source", lambda settings: fetched)

    session_dir = scan_trends.main(["--data-dir", str(tmp_path)])

    summary = SessionManager(tmp_path).list_sessions()[session_dir.name]["summary"]
    assert summary["unique_count"] == 1
    assert summary["source_status"]["reddit"] == {"success": False, "count": 0, "error": "boom"}


def test_scan_without_mentions(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(scan_trends, "fetch_multi_source", lambda settings: MultiSourceResult())

    assert scan_trends.main(["--data-dir", str(tmp_path)]) is None
