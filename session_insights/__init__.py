"""
session-insights - analytics over per-session insight records.

Basic usage:
    from session_insights import SessionInsightRecord, compute_insights

    records = [SessionInsightRecord.model_validate(raw) for raw in rows]
    snapshot = compute_insights(records, window_days=30, now=datetime.now(UTC))
    print(snapshot.trends.friction_change_pct)
"""

__version__ = '0.1.0'

from session_insights.engine import compute_day_insights, compute_insights, severity, triage
from session_insights.schemas import (
    DayInsightSummary,
    DistributionBucket,
    InsightsSnapshot,
    SessionInsightRecord,
    TokenUsage,
    TrendSnapshot,
    TriageView,
)

__all__ = [
    # Engine
    'compute_insights',
    'compute_day_insights',
    'triage',
    'severity',
    # Schemas
    'SessionInsightRecord',
    'TokenUsage',
    'InsightsSnapshot',
    'DayInsightSummary',
    'TrendSnapshot',
    'TriageView',
    'DistributionBucket',
]
