"""
Session insight record schema.

One record per AI-assisted work session, produced upstream by the facet
summariser and handed to the engine as an immutable snapshot.

Field ordering:
- Identity (which session)
- Temporal (which day)
- Assessment (categoricals)
- Categories (multi-valued sets)
- Free text
- Usage (tokens and cost)
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

import pydantic

from session_insights.schemas.types import (
    HELPFULNESS_LEVELS,
    OUTCOMES,
    SATISFACTIONS,
    UNKNOWN,
    Helpfulness,
    LenientModel,
    Outcome,
    Satisfaction,
)

DATE_FORMAT = '%Y-%m-%d'


def parse_day(value: str) -> date | None:
    """Parse an ISO calendar date, returning None when it is not a valid date."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def _coerce_categorical(value: object, domain: frozenset[str]) -> str:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in domain:
            return normalized
    return UNKNOWN


def _dedupe(values: Iterable[object]) -> tuple[str, ...]:
    """Drop duplicates and blanks, keeping first-occurrence order."""
    seen: dict[str, None] = {}
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


def _coerce_string_set(value: object) -> tuple[str, ...]:
    """Accept a list, tuple, set, a single string or a {name: count} mapping."""
    if value is None:
        return ()
    if isinstance(value, str):
        return _dedupe([value])
    if isinstance(value, dict):
        # Facet files store categories as {name: count}; zero counts mean absent
        return _dedupe(name for name, count in value.items() if count)
    if isinstance(value, (list, tuple, set, frozenset)):
        return _dedupe(value)
    raise ValueError(f'expected a collection of strings, got {type(value).__name__}')


class TokenUsage(LenientModel):
    """Token usage and cost for a single session."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    total_cost_usd: float | None = None  # None: estimated from the first model
    models: tuple[str, ...] = ()  # Distinct models used, primary first

    @pydantic.field_validator('models', mode='before')
    @classmethod
    def coerce_models(cls, v: object) -> tuple[str, ...]:
        return _coerce_string_set(v)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens + self.cache_creation_tokens + self.cache_read_tokens


class SessionInsightRecord(LenientModel):
    """
    Per-session insight record.

    Categorical fields outside their domain become 'unknown'. An unparseable
    date is kept verbatim; `day` then returns None and the record is left out
    of date-based rollups while still counting toward totals.
    """

    # Identity
    session_id: str
    session_name: str = ''

    # Temporal
    date: str

    # Assessment
    outcome: Outcome = UNKNOWN
    satisfaction: Satisfaction = UNKNOWN
    claude_helpfulness: Helpfulness = UNKNOWN
    session_type: str | None = None

    # Categories
    goal_categories: tuple[str, ...] = ()
    friction_types: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()

    # Free text
    brief_summary: str | None = None
    friction_detail: str | None = None

    # Usage
    token_usage: TokenUsage | None = None

    @pydantic.field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v: object) -> str:
        if isinstance(v, datetime):
            return v.date().isoformat()
        if isinstance(v, date):
            return v.isoformat()
        return '' if v is None else str(v)

    @pydantic.field_validator('outcome', mode='before')
    @classmethod
    def coerce_outcome(cls, v: object) -> str:
        return _coerce_categorical(v, OUTCOMES)

    @pydantic.field_validator('satisfaction', mode='before')
    @classmethod
    def coerce_satisfaction(cls, v: object) -> str:
        return _coerce_categorical(v, SATISFACTIONS)

    @pydantic.field_validator('claude_helpfulness', mode='before')
    @classmethod
    def coerce_helpfulness(cls, v: object) -> str:
        return _coerce_categorical(v, HELPFULNESS_LEVELS)

    @pydantic.field_validator('session_type', mode='before')
    @classmethod
    def coerce_session_type(cls, v: object) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @pydantic.field_validator('goal_categories', 'friction_types', 'languages', mode='before')
    @classmethod
    def coerce_string_sets(cls, v: object) -> tuple[str, ...]:
        return _coerce_string_set(v)

    @property
    def day(self) -> date | None:
        """Parsed calendar date, or None when `date` is not a valid ISO date."""
        return parse_day(self.date)

    @property
    def has_friction(self) -> bool:
        return len(self.friction_types) > 0
