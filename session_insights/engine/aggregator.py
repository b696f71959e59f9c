"""
Category aggregation over session insight records.

Each dimension is an extractor returning zero or more keys per record, so
single-valued fields (outcome, satisfaction) and multi-valued sets
(goal_categories, friction_types) go through the same counting loop.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from session_insights.exceptions import UnknownDimensionError
from session_insights.schemas.records import SessionInsightRecord
from session_insights.schemas.snapshots import DistributionBucket
from session_insights.schemas.types import UNKNOWN

type Extractor = Callable[[SessionInsightRecord], Iterable[str]]


# ==============================================================================
# Extractors
# ==============================================================================


def _single(value: str | None) -> tuple[str, ...]:
    return (value or UNKNOWN,)


def _models(record: SessionInsightRecord) -> tuple[str, ...]:
    if record.token_usage is None:
        return ()
    return record.token_usage.models


EXTRACTORS: dict[str, Extractor] = {
    # Single-valued: every record lands in exactly one bucket (possibly 'unknown')
    'outcome': lambda r: _single(r.outcome),
    'satisfaction': lambda r: _single(r.satisfaction),
    'claude_helpfulness': lambda r: _single(r.claude_helpfulness),
    'session_type': lambda r: _single(r.session_type),
    # Multi-valued: one count per distinct value, empty sets contribute nothing
    'goal_categories': lambda r: r.goal_categories,
    'friction_types': lambda r: r.friction_types,
    'languages': lambda r: r.languages,
    'model': _models,
}


def resolve_extractor(dimension: str | Extractor) -> Extractor:
    """Look up a registered dimension, or pass a custom extractor straight through."""
    if callable(dimension):
        return dimension
    try:
        return EXTRACTORS[dimension]
    except KeyError:
        raise UnknownDimensionError(dimension, EXTRACTORS) from None


# ==============================================================================
# Ordering
# ==============================================================================


def bucket_order(count: int, first_seen: int) -> tuple[int, int]:
    """
    Sort key for distribution buckets.

    Count descending, then first occurrence in the input. Swap this function to
    change the tie-break (e.g. alphabetical) without touching aggregation.
    """
    return (-count, first_seen)


# ==============================================================================
# Aggregation
# ==============================================================================


def aggregate(
    records: Iterable[SessionInsightRecord],
    dimension: str | Extractor,
) -> list[DistributionBucket]:
    """
    Count how many records carry each value of a dimension.

    Args:
        records: Records to aggregate
        dimension: Registered dimension name or a custom extractor

    Returns:
        Buckets for every value seen at least once, ordered by bucket_order()

    Raises:
        UnknownDimensionError: If the dimension name is not registered
    """
    extract = resolve_extractor(dimension)

    # dict preserves insertion order, so position == first-seen index
    counts: dict[str, int] = {}
    for record in records:
        for key in dict.fromkeys(extract(record)):
            counts[key] = counts.get(key, 0) + 1

    ranked = sorted(
        enumerate(counts.items()),
        key=lambda item: bucket_order(item[1][1], item[0]),
    )
    return [DistributionBucket(name=name, count=count) for _, (name, count) in ranked]


def top_buckets(
    records: Sequence[SessionInsightRecord],
    dimension: str | Extractor,
    limit: int,
) -> list[DistributionBucket]:
    """First `limit` buckets of aggregate()."""
    return aggregate(records, dimension)[:limit]
