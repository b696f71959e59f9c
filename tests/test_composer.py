"""Tests for the composed window and day snapshots."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from session_insights import compute_day_insights, compute_insights
from session_insights.engine.recommendations import FALLBACK_MESSAGE
from session_insights.exceptions import InvalidWindowError
from session_insights.schemas.snapshots import DailyStat

from conftest import D1, D2

NOW = date(2026, 1, 21)


# ==============================================================================
# Window snapshot
# ==============================================================================


def test_end_to_end_scenario(scenario_records) -> None:
    snapshot = compute_insights(scenario_records, 7, NOW)

    assert snapshot.total_sessions == 4
    assert snapshot.total_days == 2
    assert [(b.name, b.count) for b in snapshot.friction_distribution] == [('timeout', 1)]
    assert [(b.name, b.count) for b in snapshot.satisfaction_distribution] == [
        ('frustrated', 2),
        ('satisfied', 1),
        ('happy', 1),
    ]
    assert snapshot.trends.previous_friction_rate == pytest.approx(50.0)
    assert snapshot.trends.current_friction_rate == 0.0


def test_session_details_keep_input_order(scenario_records) -> None:
    snapshot = compute_insights(scenario_records, 7, NOW)

    assert [r.session_id for r in snapshot.session_details] == ['d1-friction', 'd1-clean', 'd2-first', 'd2-second']


def test_window_excludes_records_outside_range(make_record) -> None:
    records = [
        make_record(session_id='today', date='2026-01-21'),
        make_record(session_id='edge', date='2026-01-15'),  # Oldest day of a 7-day window
        make_record(session_id='too-old', date='2026-01-14'),
        make_record(session_id='future', date='2026-01-22'),
    ]

    snapshot = compute_insights(records, 7, NOW)

    assert [r.session_id for r in snapshot.session_details] == ['today', 'edge']
    assert snapshot.total_days == 2


def test_undated_records_count_toward_totals_only(make_record) -> None:
    records = [
        make_record(session_id='ok', date=D2, satisfaction='happy'),
        make_record(session_id='broken', date='yesterday', satisfaction='neutral'),
    ]

    snapshot = compute_insights(records, 7, NOW)

    assert snapshot.total_sessions == 2
    assert snapshot.total_days == 1
    assert sum(b.count for b in snapshot.satisfaction_distribution) == 2
    assert [s.date for s in snapshot.daily_stats] == [D2]
    assert snapshot.trends.current_sessions + snapshot.trends.previous_sessions == 1


def test_now_accepts_datetime(scenario_records) -> None:
    snapshot = compute_insights(scenario_records, 7, datetime(2026, 1, 21, 23, 59, tzinfo=UTC))

    assert snapshot.total_sessions == 4


@pytest.mark.parametrize('window_days', [0, 5, 31, -7])
def test_unsupported_window_raises(scenario_records, window_days) -> None:
    with pytest.raises(InvalidWindowError) as exc_info:
        compute_insights(scenario_records, window_days, NOW)

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.window_days == window_days


def test_empty_input() -> None:
    snapshot = compute_insights([], 30, NOW)

    assert snapshot.total_sessions == 0
    assert snapshot.total_days == 0
    assert list(snapshot.goal_distribution) == []
    assert list(snapshot.daily_stats) == []
    assert snapshot.trends.sessions_change_pct == 0.0
    assert snapshot.usage_summary is None


def test_daily_stats_derived_without_digest(scenario_records) -> None:
    snapshot = compute_insights(scenario_records, 7, NOW)

    assert [(s.date, s.session_count, s.has_digest) for s in snapshot.daily_stats] == [
        (D1, 2, False),
        (D2, 2, False),
    ]


def test_daily_stats_passed_through(scenario_records) -> None:
    supplied = [DailyStat(date=D1, session_count=2, has_digest=True)]

    snapshot = compute_insights(scenario_records, 7, NOW, daily_stats=supplied)

    assert list(snapshot.daily_stats) == supplied


def test_usage_summary_sums_recorded_and_estimated_costs(make_record) -> None:
    records = [
        make_record(
            date=D1,
            token_usage={
                'input_tokens': 100,
                'output_tokens': 50,
                'cache_read_tokens': 10,
                'total_cost_usd': 0.5,
                'models': ['claude-opus-4-6'],
            },
        ),
        make_record(
            date=D2,
            token_usage={
                'input_tokens': 1_000_000,
                'output_tokens': 1_000_000,
                'models': ['claude-sonnet-4-5-20250929', 'claude-opus-4-6'],
            },
        ),
        make_record(date=D2),
    ]

    usage = compute_insights(records, 7, NOW).usage_summary

    assert usage is not None
    assert usage.sessions_with_usage == 2
    assert usage.total_input_tokens == 1_000_100
    assert usage.total_output_tokens == 1_000_050
    assert usage.total_cache_read_tokens == 10
    assert usage.total_cost_usd == pytest.approx(0.5 + 18.0)
    assert [(b.name, b.count) for b in usage.model_distribution] == [
        ('claude-opus-4-6', 2),
        ('claude-sonnet-4-5-20250929', 1),
    ]
    assert [(d.date, d.session_count) for d in usage.daily_usage] == [(D1, 1), (D2, 1)]


def test_language_and_session_type_distributions(make_record) -> None:
    records = [
        make_record(languages=['Python', 'SQL'], session_type='single_task'),
        make_record(languages=['Python'], session_type='multi_task'),
        make_record(session_type='single_task'),
    ]

    snapshot = compute_insights(records, 30, date(2026, 1, 20))

    assert [(b.name, b.count) for b in snapshot.language_distribution] == [('Python', 2), ('SQL', 1)]
    assert [(b.name, b.count) for b in snapshot.session_type_distribution] == [('single_task', 2), ('multi_task', 1)]


def test_snapshot_serialises_to_json(scenario_records) -> None:
    payload = compute_insights(scenario_records, 7, NOW).model_dump(mode='json')

    assert payload['trends']['weekly_stats'][0]['session_count'] == 4
    assert payload['session_details'][0]['friction_types'] == ['timeout']


# ==============================================================================
# Day summary
# ==============================================================================


def test_day_summary_for_failing_day(scenario_records) -> None:
    summary = compute_day_insights(scenario_records, D2)

    assert summary.total_sessions == 2
    assert summary.sessions_with_friction == 0
    assert summary.overall_satisfaction == 'frustrated'
    assert list(summary.top_frictions) == []
    assert any('smaller, more focused steps' in message for message in summary.recommendations)


def test_day_summary_for_good_day(scenario_records) -> None:
    summary = compute_day_insights(scenario_records, D1)

    assert summary.total_sessions == 2
    assert summary.sessions_with_friction == 1
    # satisfied and happy tie; satisfied was seen first
    assert summary.overall_satisfaction == 'satisfied'
    assert [(b.name, b.count) for b in summary.top_frictions] == [('timeout', 1)]
    assert list(summary.recommendations) == [
        'Great collaboration today! Satisfaction levels are high.',
        'Most goals were achieved. Your prompting strategy is working well!',
    ]


def test_day_summary_keeps_top_three_goals(make_record) -> None:
    records = [
        make_record(goal_categories=['debugging', 'docs']),
        make_record(goal_categories=['debugging', 'refactoring', 'testing']),
        make_record(goal_categories=['refactoring']),
    ]

    summary = compute_day_insights(records, D1)

    assert [(b.name, b.count) for b in summary.top_goals] == [('debugging', 2), ('refactoring', 2), ('docs', 1)]


def test_day_summary_without_sessions(scenario_records) -> None:
    summary = compute_day_insights(scenario_records, '2026-03-01')

    assert summary.total_sessions == 0
    assert summary.overall_satisfaction is None
    assert list(summary.recommendations) == []


def test_day_summary_ignores_unknown_satisfaction_for_mode(make_record) -> None:
    records = [make_record(), make_record(), make_record(satisfaction='neutral')]

    summary = compute_day_insights(records, D1)

    assert summary.overall_satisfaction == 'neutral'


def test_day_summary_without_signals_uses_fallback(make_record) -> None:
    summary = compute_day_insights([make_record()], D1)

    assert list(summary.recommendations) == [FALLBACK_MESSAGE]
