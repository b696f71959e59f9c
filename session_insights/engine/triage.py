"""
Severity scoring and triage views.

Severity is the sum of an ordered table of (predicate, weight) rules. The
triage views always return sessions most-problematic first, including the
unfiltered 'all' view.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

import attrs

from session_insights.exceptions import UnknownFilterError
from session_insights.schemas.records import SessionInsightRecord
from session_insights.schemas.snapshots import TriageView
from session_insights.schemas.types import FILTER_KINDS, FilterKind

type Predicate = Callable[[SessionInsightRecord], bool]


# ==============================================================================
# Severity Rules
# ==============================================================================


@attrs.define(frozen=True)
class SeverityRule:
    """
    One additive severity rule.

    `weight` is either a fixed number of points or a function of the record
    for rules that scale (friction adds 10 per friction type).
    """

    name: str
    predicate: Predicate
    weight: int | Callable[[SessionInsightRecord], int]

    def points(self, record: SessionInsightRecord) -> int:
        if not self.predicate(record):
            return 0
        if callable(self.weight):
            return self.weight(record)
        return self.weight


SEVERITY_RULES: tuple[SeverityRule, ...] = (
    SeverityRule('friction', lambda r: r.has_friction, lambda r: 100 + 10 * len(r.friction_types)),
    SeverityRule('not_achieved', lambda r: r.outcome == 'not_achieved', 80),
    SeverityRule('partially_achieved', lambda r: r.outcome == 'partially_achieved', 30),
    SeverityRule('frustrated', lambda r: r.satisfaction == 'frustrated', 60),
    SeverityRule('neutral', lambda r: r.satisfaction == 'neutral', 20),
    SeverityRule('not_helpful', lambda r: r.claude_helpfulness == 'not_helpful', 40),
    SeverityRule('slightly_helpful', lambda r: r.claude_helpfulness == 'slightly_helpful', 20),
)


def severity(record: SessionInsightRecord, rules: Sequence[SeverityRule] = SEVERITY_RULES) -> int:
    """Severity score for a record; higher means more problematic."""
    return sum(rule.points(record) for rule in rules)


# ==============================================================================
# Filters
# ==============================================================================

FILTERS: dict[FilterKind, Predicate] = {
    'all': lambda r: True,
    'friction': lambda r: r.has_friction,
    'not_achieved': lambda r: r.outcome == 'not_achieved',
    'low_satisfaction': lambda r: r.satisfaction in ('frustrated', 'neutral'),
}


def filter_counts(records: Sequence[SessionInsightRecord]) -> dict[FilterKind, int]:
    """Number of records matching each filter, over the whole input."""
    return {kind: sum(1 for record in records if FILTERS[kind](record)) for kind in FILTER_KINDS}


def rank(records: Iterable[SessionInsightRecord]) -> list[SessionInsightRecord]:
    """Sort by severity descending. Stable: equal scores keep input order."""
    return sorted(records, key=severity, reverse=True)


def filter_view(records: Iterable[SessionInsightRecord], filter_kind: str = 'all') -> TriageView:
    """
    Severity-ranked sessions matching a filter.

    Args:
        records: All sessions in scope
        filter_kind: One of 'all', 'friction', 'not_achieved', 'low_satisfaction'

    Returns:
        TriageView with the ranked matches and badge counts for every filter

    Raises:
        UnknownFilterError: If filter_kind is not recognised
    """
    if filter_kind not in FILTERS:
        raise UnknownFilterError(filter_kind, FILTER_KINDS)

    records = list(records)
    predicate = FILTERS[filter_kind]
    return TriageView(
        filter_kind=filter_kind,
        sessions=rank(record for record in records if predicate(record)),
        counts=filter_counts(records),
    )
