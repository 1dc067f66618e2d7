"""Plain-text report for an aggregation result."""
from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import List

from .filters import get_exploding_trends, get_high_confidence_trends, get_top_trends
from .models import MOMENTUM_ORDER, AggregationResult
from .scoring import average_volume


def render_trend_report(result: AggregationResult, timestamp: str, top_n: int = 10) -> str:
    """Generate a human-readable summary of *result*."""
    trends = result.trends
    momentum_stats = Counter(t.momentum for t in trends)

    report_lines: List[str] = [
        "=" * 80,
        f"TREND AGGREGATION REPORT - {timestamp}",
        "=" * 80,
        "",
        "📊 OVERVIEW:",
        f"  • Raw Mentions: {result.total_raw:,}",
        f"  • Unique Trends: {result.unique_count:,}",
        f"  • Sources: {len(result.source_breakdown)}",
    ]
    if trends:
        avg_score = sum(t.combined_score for t in trends) / len(trends)
        report_lines.append(f"  • Average Combined Score: {avg_score:.1f}/100")

    report_lines.extend(["", "📡 SOURCE BREAKDOWN:"])
    for source, count in sorted(result.source_breakdown.items(), key=lambda kv: kv[1], reverse=True):
        percentage = (count / result.total_raw) * 100 if result.total_raw else 0.0
        report_lines.append(f"  • {source}: {count} mentions ({percentage:.1f}%)")

    report_lines.extend(["", "🚀 MOMENTUM BREAKDOWN:"])
    for level in reversed(MOMENTUM_ORDER):
        report_lines.append(f"  • {level.title()}: {momentum_stats.get(level, 0)} trends")

    report_lines.extend(["", f"🏆 TOP {top_n} TRENDS:"])
    for trend in get_top_trends(trends, top_n):
        volume = average_volume(trend.volume_history)
        report_lines.append(
            f"  • #{trend.rank}: {trend.topic} "
            f"(Score: {trend.combined_score}/100, {trend.momentum}, "
            f"{trend.source_count} sources, avg volume {volume:,.0f})"
        )

    exploding = get_exploding_trends(trends)
    if exploding:
        report_lines.extend(["", "🔥 EXPLODING TRENDS:"])
        for trend in exploding[:top_n]:
            report_lines.append(f"  • {trend.topic} - {', '.join(trend.sources)}")

    confident = get_high_confidence_trends(trends)
    if confident:
        report_lines.extend(["", "✅ HIGH CONFIDENCE (Score ≥ 50, 2+ sources):"])
        for trend in confident[:top_n]:
            regions = ", ".join(trend.regions) or "global"
            report_lines.append(f"  • {trend.topic} ({regions}) - Score: {trend.combined_score}/100")

    report_lines.extend(
        [
            "",
            f"Report generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "=" * 80,
        ]
    )
    return "\n".join(report_lines)
