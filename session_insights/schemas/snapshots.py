"""
Engine output schemas.

Every model here is derived on demand from the current record set and never
persisted. Models are frozen; callers serialise them with model_dump().

Architecture (top-down):
1. InsightsSnapshot - whole-window view (distributions, trends, usage)
2. DayInsightSummary - single-date rollup with recommendations
3. TriageView - severity-ranked session list with badge counts
4. TrendSnapshot / WeeklyStat - period-over-period comparison
5. DistributionBucket, DailyAggregate, DailyStat, UsageSummary - building blocks
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from session_insights.schemas.records import SessionInsightRecord
from session_insights.schemas.types import BaseStrictModel, FilterKind

# ==============================================================================
# Building Blocks
# ==============================================================================


class DistributionBucket(BaseStrictModel):
    """A category name with the number of records carrying it."""

    name: str
    count: int


class DailyAggregate(BaseStrictModel):
    """Per-day rollup feeding the trend calculator."""

    date: str
    session_count: int
    friction_session_count: int
    achieved_session_count: int
    satisfaction_points_sum: float
    satisfaction_sample_count: int


class DailyStat(BaseStrictModel):
    """Per-day activity entry for the timeline chart."""

    date: str
    session_count: int
    has_digest: bool


class DailyUsage(BaseStrictModel):
    """Token usage summed over one day."""

    date: str
    input_tokens: int
    output_tokens: int
    cache_creation_tokens: int
    cache_read_tokens: int
    total_cost_usd: float
    session_count: int


class UsageSummary(BaseStrictModel):
    """Token usage summed over every record that carries usage data."""

    total_input_tokens: int
    total_output_tokens: int
    total_cache_creation_tokens: int
    total_cache_read_tokens: int
    total_cost_usd: float
    sessions_with_usage: int
    model_distribution: Sequence[DistributionBucket]
    daily_usage: Sequence[DailyUsage]


# ==============================================================================
# Trends
# ==============================================================================


class WeeklyStat(BaseStrictModel):
    """Statistics for one seven-day bucket of the window."""

    week_label: str
    session_count: int
    friction_rate: float
    success_rate: float


class TrendSnapshot(BaseStrictModel):
    """Current period versus the immediately preceding one."""

    period_label: str
    comparison_label: str

    current_sessions: int
    previous_sessions: int
    sessions_change_pct: float

    current_friction_rate: float
    previous_friction_rate: float
    friction_change_pct: float

    current_success_rate: float
    previous_success_rate: float
    success_change_pct: float

    current_satisfaction_score: float
    previous_satisfaction_score: float
    satisfaction_change_pct: float

    weekly_stats: Sequence[WeeklyStat]


# ==============================================================================
# Composed Snapshots
# ==============================================================================


class InsightsSnapshot(BaseStrictModel):
    """Everything the insights dashboard shows for one lookback window."""

    window_days: int
    total_days: int
    total_sessions: int
    daily_stats: Sequence[DailyStat]

    goal_distribution: Sequence[DistributionBucket]
    friction_distribution: Sequence[DistributionBucket]
    satisfaction_distribution: Sequence[DistributionBucket]
    language_distribution: Sequence[DistributionBucket]
    session_type_distribution: Sequence[DistributionBucket]

    session_details: Sequence[SessionInsightRecord]  # Input order, unranked
    trends: TrendSnapshot
    usage_summary: UsageSummary | None = None  # Only when some record has usage


class DayInsightSummary(BaseStrictModel):
    """Rollup of a single date."""

    date: str
    total_sessions: int
    sessions_with_friction: int
    overall_satisfaction: str | None
    top_goals: Sequence[DistributionBucket]
    top_frictions: Sequence[DistributionBucket]
    recommendations: Sequence[str]


class TriageView(BaseStrictModel):
    """Severity-ranked sessions for one filter, with badge counts for every filter."""

    filter_kind: FilterKind
    sessions: Sequence[SessionInsightRecord]
    counts: Mapping[FilterKind, int]  # Computed over the whole unfiltered input
