"""
Insights engine - pure, synchronous analytics over session insight records.

No I/O, no configuration, no logging: every input arrives as an argument and
every output is a freshly built, frozen model.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from session_insights.engine.aggregator import aggregate, top_buckets
from session_insights.engine.composer import DAY_TOP_N, SUPPORTED_WINDOWS, compose_day, compose_window
from session_insights.engine.pricing import calculate_cost
from session_insights.engine.trends import build_daily_aggregates, change_pct, compute_trend
from session_insights.engine.triage import filter_view, severity
from session_insights.schemas.records import SessionInsightRecord
from session_insights.schemas.snapshots import DailyStat, DayInsightSummary, InsightsSnapshot, TriageView


def compute_insights(
    records: Iterable[SessionInsightRecord],
    window_days: int,
    now: datetime | date,
    daily_stats: Sequence[DailyStat] | None = None,
) -> InsightsSnapshot:
    """Whole-window insights: distributions, trends, session details and usage."""
    return compose_window(records, window_days, now, daily_stats=daily_stats)


def compute_day_insights(
    records: Iterable[SessionInsightRecord],
    date: str,
    top_n: int = DAY_TOP_N,
) -> DayInsightSummary:
    """Single-day summary with top goals, top frictions and recommendations."""
    return compose_day(records, date, top_n=top_n)


def triage(records: Iterable[SessionInsightRecord], filter_kind: str = 'all') -> TriageView:
    """Severity-ranked sessions for a filter, with badge counts for every filter."""
    return filter_view(records, filter_kind)


__all__ = [
    'SUPPORTED_WINDOWS',
    'aggregate',
    'build_daily_aggregates',
    'calculate_cost',
    'change_pct',
    'compute_day_insights',
    'compute_insights',
    'compute_trend',
    'filter_view',
    'severity',
    'top_buckets',
    'triage',
]
