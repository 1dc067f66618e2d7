#!/usr/bin/env python3

"""
Trend Scanner - Collect raw trend mentions, aggregate them and write reports.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fetchers.trend_sources import fetch_multi_source
from scripts.session_manager import SessionManager
from trend_engine.aggregator import aggregate_trends
from trend_engine.config import ScanSettings
from trend_engine.filters import filter_by_momentum, filter_by_region, filter_multi_source
from trend_engine.input_loader import load_raw_trends, raw_trends_to_frame, trends_to_frame
from trend_engine.models import MOMENTUM_ORDER, AggregatedTrend, AggregationResult, RawTrendInput
from trend_engine.report import render_trend_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aggregate multi-source trends and generate reports")
    parser.add_argument("--input", type=Path,
                        help="Load raw mentions from a CSV/JSON file instead of fetching live sources.")
    parser.add_argument("--data-dir", type=Path, help="Session root (defaults to TREND_DATA_DIR).")
    parser.add_argument("--threshold", type=float, help="Similarity threshold for clustering (0-1).")
    parser.add_argument("--max-trends", type=int, help="Maximum number of trends kept.")
    parser.add_argument("--region", help="Keep global trends and trends seen in this region.")
    parser.add_argument("--min-momentum", choices=MOMENTUM_ORDER, help="Drop trends below this momentum.")
    parser.add_argument("--min-sources", type=int, help="Drop trends reported by fewer sources.")
    parser.add_argument("--top", type=int, default=10, help="Number of trends listed in the text report.")
    return parser


def apply_filters(trends: List[AggregatedTrend], args: argparse.Namespace) -> List[AggregatedTrend]:
    """Apply the optional CLI filters in a fixed order: region, momentum, sources."""
    selected = list(trends)
    if args.region:
        selected = filter_by_region(selected, args.region)
    if args.min_momentum:
        selected = filter_by_momentum(selected, args.min_momentum)
    if args.min_sources:
        selected = filter_multi_source(selected, args.min_sources)
    return selected


def _settings_from_args(args: argparse.Namespace) -> ScanSettings:
    settings = ScanSettings.from_env()
    overrides = {
        "data_dir": args.data_dir,
        "similarity_threshold": args.threshold,
        "max_trends": args.max_trends,
    }
    updates = {key: value for key, value in overrides.items() if value is not None}
    # CLI values obey the same bounds as environment values.
    return ScanSettings.model_validate({**settings.model_dump(), **updates})


def _collect(args: argparse.Namespace, settings: ScanSettings) -> Tuple[List[RawTrendInput], Dict[str, dict]]:
    if args.input:
        logger.info(f"📂 Loading raw mentions from {args.input}")
        return load_raw_trends(args.input), {}

    logger.info("📡 Fetching trends from %d sources…", len(settings.sources))
    fetched = fetch_multi_source(settings)
    statuses = {name: status.model_dump() for name, status in fetched.sources.items()}
    return fetched.mentions, statuses


def main(argv: Optional[List[str]] = None) -> Optional[Path]:
    """Main execution function; returns the session directory when a scan ran."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    args = build_parser().parse_args(argv)

    try:
        settings = _settings_from_args(args)
        session_manager = SessionManager(settings.data_dir)
        session_name, session_dir = session_manager.create_new_session()

        logger.info(f"🚀 Starting trend scan – {session_name}")
        logger.info(f"📂 Session directory: {session_dir}")

        timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
        raw_file = session_dir / "raw_data" / f"raw_trends_{timestamp}.csv"
        trends_csv = session_dir / "analysis" / f"aggregated_trends_{timestamp}.csv"
        trends_json = session_dir / "analysis" / f"aggregated_trends_{timestamp}.json"
        report_file = session_dir / "reports" / f"trend_report_{timestamp}.txt"

        mentions, source_status = _collect(args, settings)
        if not mentions:
            logger.error("❌ No trend mentions collected")
            return None

        raw_trends_to_frame(mentions).to_csv(raw_file, index=False)
        logger.info(f"💾 Raw data saved: {raw_file}")

        logger.info("🧮 Aggregating trends…")
        result = aggregate_trends(
            mentions,
            similarity_threshold=settings.similarity_threshold,
            max_trends=settings.max_trends,
        )
        selected = apply_filters(result.trends, args)
        if len(selected) != len(result.trends):
            logger.info(f"🔎 Filters kept {len(selected)} of {len(result.trends)} trends")
        view = AggregationResult(
            trends=selected,
            source_breakdown=result.source_breakdown,
            total_raw=result.total_raw,
            unique_count=len(selected),
            aggregated_at=result.aggregated_at,
        )

        trends_to_frame(view.trends).to_csv(trends_csv, index=False)
        trends_json.write_text(view.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"💾 Trends saved: {trends_csv}")

        logger.info("📊 Generating plain-text trend report…")
        report_file.write_text(render_trend_report(view, timestamp, top_n=args.top), encoding="utf-8")

        session_manager.record_scan_summary(
            session_name,
            {
                'total_raw': view.total_raw,
                'unique_count': view.unique_count,
                'source_breakdown': view.source_breakdown,
                'source_status': source_status,
            },
        )
        logger.info(f"📝 Source breakdown: {json.dumps(view.source_breakdown)}")
        logger.info("🎉 Trend scan complete")
        return session_dir

    except Exception as exc:
        logger.error(f"❌ Fatal error: {exc}")
        raise


if __name__ == "__main__":
    main()
