"""
Insights composition.

Merges the aggregator, trend calculator and triage predicates into the two
snapshot shapes consumed by callers: the whole-window InsightsSnapshot and the
single-day DayInsightSummary.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from datetime import date, datetime, timedelta

from session_insights.engine import aggregator, pricing, recommendations, trends, triage
from session_insights.exceptions import InvalidWindowError
from session_insights.schemas.records import SessionInsightRecord, parse_day
from session_insights.schemas.snapshots import (
    DailyStat,
    DailyUsage,
    DayInsightSummary,
    InsightsSnapshot,
    UsageSummary,
)

SUPPORTED_WINDOWS: tuple[int, ...] = (7, 14, 30, 90)

DAY_TOP_N = 3


# ==============================================================================
# Window Selection
# ==============================================================================


def _today(now: datetime | date) -> date:
    return now.date() if isinstance(now, datetime) else now


def select_window(
    records: Iterable[SessionInsightRecord],
    window_days: int,
    now: datetime | date,
) -> list[SessionInsightRecord]:
    """
    Records dated within the last `window_days` days up to and including today.

    Records whose date does not parse cannot be placed in time and are kept so
    they still count toward totals.
    """
    today = _today(now)
    start = today - timedelta(days=window_days - 1)
    selected = []
    for record in records:
        day = record.day
        if day is None or start <= day <= today:
            selected.append(record)
    return selected


def derive_daily_stats(
    records: Sequence[SessionInsightRecord],
    digest_dates: Collection[str] = (),
) -> list[DailyStat]:
    """Per-date session counts, oldest first, flagging dates that have a digest."""
    return [
        DailyStat(date=agg.date, session_count=agg.session_count, has_digest=agg.date in digest_dates)
        for agg in trends.build_daily_aggregates(records)
    ]


# ==============================================================================
# Usage
# ==============================================================================


def summarize_usage(records: Sequence[SessionInsightRecord]) -> UsageSummary | None:
    """Sum token usage over records that carry it; None when none do."""
    with_usage = [r for r in records if r.token_usage is not None]
    if not with_usage:
        return None

    daily: dict[str, list[SessionInsightRecord]] = {}
    for record in with_usage:
        day = record.day
        if day is not None:
            daily.setdefault(day.isoformat(), []).append(record)

    return UsageSummary(
        total_input_tokens=sum(r.token_usage.input_tokens for r in with_usage),
        total_output_tokens=sum(r.token_usage.output_tokens for r in with_usage),
        total_cache_creation_tokens=sum(r.token_usage.cache_creation_tokens for r in with_usage),
        total_cache_read_tokens=sum(r.token_usage.cache_read_tokens for r in with_usage),
        total_cost_usd=sum(pricing.usage_cost(r.token_usage) for r in with_usage),
        sessions_with_usage=len(with_usage),
        model_distribution=aggregator.aggregate(with_usage, 'model'),
        daily_usage=[
            DailyUsage(
                date=day,
                input_tokens=sum(r.token_usage.input_tokens for r in day_records),
                output_tokens=sum(r.token_usage.output_tokens for r in day_records),
                cache_creation_tokens=sum(r.token_usage.cache_creation_tokens for r in day_records),
                cache_read_tokens=sum(r.token_usage.cache_read_tokens for r in day_records),
                total_cost_usd=sum(pricing.usage_cost(r.token_usage) for r in day_records),
                session_count=len(day_records),
            )
            for day, day_records in sorted(daily.items())
        ],
    )


# ==============================================================================
# Composition
# ==============================================================================


def compose_window(
    records: Iterable[SessionInsightRecord],
    window_days: int,
    now: datetime | date,
    daily_stats: Sequence[DailyStat] | None = None,
) -> InsightsSnapshot:
    """
    Build the insights snapshot for a lookback window.

    Args:
        records: All available records (filtered to the window here)
        window_days: One of SUPPORTED_WINDOWS
        now: Reference time; the window ends on its calendar date
        daily_stats: Per-date stats from the digest archive; derived
            from the records (without digest flags) when omitted

    Returns:
        InsightsSnapshot for the window

    Raises:
        InvalidWindowError: If window_days is not a supported lookback
    """
    if window_days not in SUPPORTED_WINDOWS:
        raise InvalidWindowError(window_days, SUPPORTED_WINDOWS)

    in_window = select_window(records, window_days, now)
    daily_aggregates = trends.build_daily_aggregates(in_window)

    return InsightsSnapshot(
        window_days=window_days,
        total_days=len(daily_aggregates),
        total_sessions=len(in_window),
        daily_stats=list(daily_stats) if daily_stats is not None else derive_daily_stats(in_window),
        goal_distribution=aggregator.aggregate(in_window, 'goal_categories'),
        friction_distribution=aggregator.aggregate(in_window, 'friction_types'),
        satisfaction_distribution=aggregator.aggregate(in_window, 'satisfaction'),
        language_distribution=aggregator.aggregate(in_window, 'languages'),
        session_type_distribution=aggregator.aggregate(in_window, 'session_type'),
        session_details=in_window,
        trends=trends.compute_trend(daily_aggregates, window_days),
        usage_summary=summarize_usage(in_window),
    )


def _same_day(record: SessionInsightRecord, target: str, target_day: date | None) -> bool:
    if target_day is not None:
        return record.day == target_day
    return record.date == target


def compose_day(
    records: Iterable[SessionInsightRecord],
    day: str,
    top_n: int = DAY_TOP_N,
) -> DayInsightSummary:
    """
    Build the summary for a single date.

    Args:
        records: All available records (filtered to `day` here)
        day: ISO date, e.g. '2026-01-31'
        top_n: Number of goal and friction buckets to keep

    Returns:
        DayInsightSummary for the date
    """
    target_day = parse_day(day)
    day_records = [r for r in records if _same_day(r, day, target_day)]

    rated = [r for r in day_records if r.satisfaction != 'unknown']
    satisfaction = aggregator.aggregate(rated, 'satisfaction')

    return DayInsightSummary(
        date=target_day.isoformat() if target_day is not None else day,
        total_sessions=len(day_records),
        sessions_with_friction=sum(1 for r in day_records if triage.FILTERS['friction'](r)),
        overall_satisfaction=satisfaction[0].name if satisfaction else None,
        top_goals=aggregator.top_buckets(day_records, 'goal_categories', top_n),
        top_frictions=aggregator.top_buckets(day_records, 'friction_types', top_n),
        recommendations=recommendations.recommend(day_records),
    )
