"""Tests for severity scoring and triage views."""

from __future__ import annotations

import pytest

from session_insights.engine.triage import SEVERITY_RULES, filter_view, rank, severity
from session_insights.exceptions import UnknownFilterError


def test_worst_case_example_scores_300(make_record) -> None:
    record = make_record(
        friction_types=['A', 'B'],
        outcome='not_achieved',
        satisfaction='frustrated',
        claude_helpfulness='not_helpful',
    )

    assert severity(record) == 120 + 80 + 60 + 40 == 300


def test_clean_session_scores_zero(make_record) -> None:
    record = make_record(outcome='achieved', satisfaction='happy', claude_helpfulness='very_helpful')

    assert severity(record) == 0


@pytest.mark.parametrize(
    ('overrides', 'expected'),
    [
        ({'friction_types': ['timeout']}, 110),
        ({'friction_types': ['a', 'b', 'c']}, 130),
        ({'outcome': 'not_achieved'}, 80),
        ({'outcome': 'partially_achieved'}, 30),
        ({'satisfaction': 'frustrated'}, 60),
        ({'satisfaction': 'neutral'}, 20),
        ({'claude_helpfulness': 'not_helpful'}, 40),
        ({'claude_helpfulness': 'slightly_helpful'}, 20),
        ({'outcome': 'partially_achieved', 'satisfaction': 'neutral', 'claude_helpfulness': 'slightly_helpful'}, 70),
    ],
)
def test_severity_rules_individually(make_record, overrides, expected) -> None:
    assert severity(make_record(**overrides)) == expected


def test_rule_table_is_enumerable(make_record) -> None:
    record = make_record(friction_types=['a'], outcome='not_achieved', satisfaction='neutral')

    points = {rule.name: rule.points(record) for rule in SEVERITY_RULES}

    assert points == {
        'friction': 110,
        'not_achieved': 80,
        'partially_achieved': 0,
        'frustrated': 0,
        'neutral': 20,
        'not_helpful': 0,
        'slightly_helpful': 0,
    }
    assert severity(record) == sum(points.values())


def test_all_view_sorts_by_severity_and_is_stable(make_record) -> None:
    clean = make_record(session_id='clean')
    first_failure = make_record(session_id='first', outcome='not_achieved', satisfaction='frustrated')
    second_failure = make_record(session_id='second', outcome='not_achieved', satisfaction='frustrated')
    meh = make_record(session_id='meh', satisfaction='neutral')

    view = filter_view([clean, first_failure, meh, second_failure], 'all')

    assert [r.session_id for r in view.sessions] == ['first', 'second', 'meh', 'clean']
    assert sorted(r.session_id for r in view.sessions) == ['clean', 'first', 'meh', 'second']


def test_not_achieved_view_in_scenario(scenario_records) -> None:
    view = filter_view(scenario_records, 'not_achieved')

    assert [r.session_id for r in view.sessions] == ['d2-first', 'd2-second']
    assert [severity(r) for r in view.sessions] == [140, 140]


def test_friction_view(scenario_records) -> None:
    view = filter_view(scenario_records, 'friction')

    assert [r.session_id for r in view.sessions] == ['d1-friction']


def test_low_satisfaction_includes_neutral_and_frustrated(make_record) -> None:
    records = [
        make_record(session_id='neutral', satisfaction='neutral'),
        make_record(session_id='happy', satisfaction='happy'),
        make_record(session_id='frustrated', satisfaction='frustrated'),
        make_record(session_id='unknown'),
    ]

    view = filter_view(records, 'low_satisfaction')

    assert [r.session_id for r in view.sessions] == ['frustrated', 'neutral']


def test_badge_counts_ignore_active_filter(scenario_records) -> None:
    expected = {'all': 4, 'friction': 1, 'not_achieved': 2, 'low_satisfaction': 2}

    for kind in expected:
        assert dict(filter_view(scenario_records, kind).counts) == expected


def test_unknown_filter_raises(scenario_records) -> None:
    with pytest.raises(UnknownFilterError, match="Unknown filter 'broken'"):
        filter_view(scenario_records, 'broken')


def test_rank_does_not_mutate_input(scenario_records) -> None:
    original = list(scenario_records)

    ranked = rank(scenario_records)

    assert scenario_records == original
    assert ranked[0].session_id == 'd2-first'
