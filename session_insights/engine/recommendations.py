"""
Rule-based recommendations for a day summary.

A fixed, ordered table of condition -> message rules evaluated against a tally
of the day's sessions. Every rule that holds contributes its message; the
fallback fires only when nothing else did.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence

import attrs

from session_insights.schemas.records import SessionInsightRecord


@attrs.define(frozen=True)
class DayTally:
    """Counts over one day's sessions that the rules read from."""

    total_sessions: int
    sessions_with_friction: int
    friction_sessions: Counter[str]  # friction type -> sessions carrying it
    outcomes: Counter[str]
    satisfactions: Counter[str]

    @classmethod
    def from_records(cls, records: Sequence[SessionInsightRecord]) -> DayTally:
        friction_sessions: Counter[str] = Counter()
        for record in records:
            friction_sessions.update(record.friction_types)
        return cls(
            total_sessions=len(records),
            sessions_with_friction=sum(1 for r in records if r.has_friction),
            friction_sessions=friction_sessions,
            outcomes=Counter(r.outcome for r in records if r.outcome != 'unknown'),
            satisfactions=Counter(r.satisfaction for r in records if r.satisfaction != 'unknown'),
        )

    def more_than_half(self, count: int) -> bool:
        return self.total_sessions > 0 and 2 * count > self.total_sessions


@attrs.define(frozen=True)
class RecommendationRule:
    name: str
    condition: Callable[[DayTally], bool]
    message: str


def _share(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def _struggling_outcomes(t: DayTally) -> bool:
    not_achieved = t.outcomes['not_achieved']
    return not_achieved >= 2 or t.more_than_half(not_achieved + t.outcomes['partially_achieved'])


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        'misunderstood_requests',
        lambda t: t.friction_sessions['misunderstood_request'] >= 2,
        'Be more specific in your initial prompts: several requests were misunderstood today.',
    ),
    RecommendationRule(
        'rejected_actions',
        lambda t: t.friction_sessions['user_rejected_action'] >= 2,
        "Review Claude's suggestions more carefully before accepting: multiple actions were rejected.",
    ),
    RecommendationRule(
        'multiple_attempts',
        lambda t: t.friction_sessions['required_multiple_attempts'] >= 2,
        'Provide more context upfront to reduce back-and-forth iterations.',
    ),
    RecommendationRule(
        'wrong_tool',
        lambda t: t.friction_sessions['wrong_tool_used'] >= 1,
        'Guide Claude toward the right tools by naming file paths or tool preferences in your prompt.',
    ),
    RecommendationRule(
        'struggling_outcomes',
        _struggling_outcomes,
        'Break complex tasks into smaller, more focused steps for better outcomes.',
    ),
    RecommendationRule(
        'frequent_friction',
        lambda t: t.more_than_half(t.sessions_with_friction),
        "More than half of today's sessions had friction. Review their friction details for recurring causes.",
    ),
    RecommendationRule(
        'high_satisfaction',
        lambda t: _share(t.satisfactions['happy'] + t.satisfactions['satisfied'], t.satisfactions.total()) > 0.7,
        'Great collaboration today! Satisfaction levels are high.',
    ),
    RecommendationRule(
        'goals_achieved',
        lambda t: _share(t.outcomes['achieved'], t.outcomes.total()) > 0.8,
        'Most goals were achieved. Your prompting strategy is working well!',
    ),
)

FALLBACK_MESSAGE = 'Session data available but no strong patterns detected today.'


def recommend(
    records: Sequence[SessionInsightRecord],
    rules: Sequence[RecommendationRule] = RECOMMENDATION_RULES,
) -> list[str]:
    """Messages of every rule that holds for the day, in table order."""
    tally = DayTally.from_records(records)
    messages = [rule.message for rule in rules if rule.condition(tally)]
    if not messages and tally.total_sessions > 0:
        messages.append(FALLBACK_MESSAGE)
    return messages
