"""
Period-over-period trend calculation.

Works on per-day rollups rather than raw records: build_daily_aggregates()
groups records by date, compute_trend() splits the day series into a previous
and a current period and compares rates between them.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from datetime import date

from session_insights.schemas.records import SessionInsightRecord, parse_day
from session_insights.schemas.snapshots import DailyAggregate, TrendSnapshot, WeeklyStat

# Satisfaction points; 'unknown' is excluded from the score entirely
SATISFACTION_POINTS: dict[str, float] = {
    'happy': 100.0,
    'satisfied': 75.0,
    'neutral': 50.0,
    'frustrated': 0.0,
}

WEEK_LENGTH = 7

# (days, window_days) -> (previous, current)
type PeriodSplitter = Callable[
    [Sequence[DailyAggregate], int],
    tuple[Sequence[DailyAggregate], Sequence[DailyAggregate]],
]


# ==============================================================================
# Daily Rollups
# ==============================================================================


def build_daily_aggregates(records: Iterable[SessionInsightRecord]) -> list[DailyAggregate]:
    """
    Roll records up into one entry per distinct date, oldest first.

    Records whose date does not parse are skipped.
    """
    by_day: dict[date, list[SessionInsightRecord]] = {}
    for record in records:
        day = record.day
        if day is not None:
            by_day.setdefault(day, []).append(record)

    aggregates = []
    for day in sorted(by_day):
        day_records = by_day[day]
        rated = [SATISFACTION_POINTS[r.satisfaction] for r in day_records if r.satisfaction in SATISFACTION_POINTS]
        aggregates.append(
            DailyAggregate(
                date=day.isoformat(),
                session_count=len(day_records),
                friction_session_count=sum(1 for r in day_records if r.has_friction),
                achieved_session_count=sum(1 for r in day_records if r.outcome == 'achieved'),
                satisfaction_points_sum=sum(rated),
                satisfaction_sample_count=len(rated),
            )
        )
    return aggregates


# ==============================================================================
# Metrics
# ==============================================================================


def _rate(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return 100.0 * numerator / denominator


def session_total(days: Sequence[DailyAggregate]) -> int:
    return sum(d.session_count for d in days)


def friction_rate(days: Sequence[DailyAggregate]) -> float:
    """Percentage of sessions with at least one friction type."""
    return _rate(sum(d.friction_session_count for d in days), session_total(days))


def success_rate(days: Sequence[DailyAggregate]) -> float:
    """Percentage of sessions whose outcome is 'achieved'."""
    return _rate(sum(d.achieved_session_count for d in days), session_total(days))


def satisfaction_score(days: Sequence[DailyAggregate]) -> float:
    """Mean satisfaction points (0-100) over sessions with a known satisfaction."""
    samples = sum(d.satisfaction_sample_count for d in days)
    if samples == 0:
        return 0.0
    return sum(d.satisfaction_points_sum for d in days) / samples


def change_pct(current: float, previous: float) -> float:
    """
    Percent change from previous to current.

    A zero previous value maps to 0 (no change) or 100 (appeared) so the result
    is never NaN or infinite.
    """
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return 100.0 * (current - previous) / previous


# ==============================================================================
# Periods
# ==============================================================================


def split_periods(
    days: Sequence[DailyAggregate],
    window_days: int,
) -> tuple[Sequence[DailyAggregate], Sequence[DailyAggregate]]:
    """
    Split a chronological day series into (previous, current) periods.

    Only the most recent `window_days` entries are used. The current period is
    the newest ceil(n/2) entries and the previous period the floor(n/2) before
    it, so a full window splits ceil(N/2) / floor(N/2) and a partial one shrinks
    both halves proportionally.
    """
    recent = days[-window_days:] if window_days > 0 else days[:0]
    mid = len(recent) // 2
    return recent[:mid], recent[mid:]


def period_labels(window_days: int) -> tuple[str, str]:
    current = math.ceil(window_days / 2)
    previous = window_days // 2
    return f'Last {current} days', f'vs previous {previous} days'


# ==============================================================================
# Weekly Buckets
# ==============================================================================


def week_label(first: date, last: date) -> str:
    """Label like 'Jan 19-25', or 'Jan 29-Feb 4' when the bucket spans months."""
    if (first.year, first.month) == (last.year, last.month):
        return f'{first:%b} {first.day}-{last.day}'
    return f'{first:%b} {first.day}-{last:%b} {last.day}'


def weekly_stats(days: Sequence[DailyAggregate]) -> list[WeeklyStat]:
    """Consecutive seven-entry buckets anchored at the oldest day, oldest first."""
    stats = []
    for start in range(0, len(days), WEEK_LENGTH):
        bucket = days[start : start + WEEK_LENGTH]
        first, last = parse_day(bucket[0].date), parse_day(bucket[-1].date)
        label = week_label(first, last) if first and last else f'{bucket[0].date} - {bucket[-1].date}'
        stats.append(
            WeeklyStat(
                week_label=label,
                session_count=session_total(bucket),
                friction_rate=friction_rate(bucket),
                success_rate=success_rate(bucket),
            )
        )
    return stats


# ==============================================================================
# Trend Snapshot
# ==============================================================================


def compute_trend(
    daily_aggregates: Sequence[DailyAggregate],
    window_days: int,
    splitter: PeriodSplitter = split_periods,
) -> TrendSnapshot:
    """
    Compare the current period against the previous one.

    Args:
        daily_aggregates: Per-day rollups, oldest first
        window_days: Requested lookback in days
        splitter: Boundary rule between the previous and current periods

    Returns:
        TrendSnapshot with per-period metrics, percent changes and weekly buckets
    """
    window = list(daily_aggregates)[-window_days:] if window_days > 0 else []
    previous, current = splitter(window, window_days)
    period_label, comparison_label = period_labels(window_days)

    current_sessions, previous_sessions = session_total(current), session_total(previous)
    current_friction, previous_friction = friction_rate(current), friction_rate(previous)
    current_success, previous_success = success_rate(current), success_rate(previous)
    current_satisfaction, previous_satisfaction = satisfaction_score(current), satisfaction_score(previous)

    return TrendSnapshot(
        period_label=period_label,
        comparison_label=comparison_label,
        current_sessions=current_sessions,
        previous_sessions=previous_sessions,
        sessions_change_pct=change_pct(current_sessions, previous_sessions),
        current_friction_rate=current_friction,
        previous_friction_rate=previous_friction,
        friction_change_pct=change_pct(current_friction, previous_friction),
        current_success_rate=current_success,
        previous_success_rate=previous_success,
        success_change_pct=change_pct(current_success, previous_success),
        current_satisfaction_score=current_satisfaction,
        previous_satisfaction_score=previous_satisfaction,
        satisfaction_change_pct=change_pct(current_satisfaction, previous_satisfaction),
        weekly_stats=weekly_stats(window),
    )
