"""
Schema definitions for session-insights.

- records: SessionInsightRecord input model (lenient, coercing)
- snapshots: engine output models (strict, frozen)
- types: model bases and categorical domains
"""

from __future__ import annotations

from session_insights.schemas.records import SessionInsightRecord, TokenUsage
from session_insights.schemas.snapshots import (
    DailyAggregate,
    DailyStat,
    DailyUsage,
    DayInsightSummary,
    DistributionBucket,
    InsightsSnapshot,
    TrendSnapshot,
    TriageView,
    UsageSummary,
    WeeklyStat,
)

__all__ = [
    'DailyAggregate',
    'DailyStat',
    'DailyUsage',
    'DayInsightSummary',
    'DistributionBucket',
    'InsightsSnapshot',
    'SessionInsightRecord',
    'TokenUsage',
    'TrendSnapshot',
    'TriageView',
    'UsageSummary',
    'WeeklyStat',
]
