"""
Token cost estimation.

Used when a record's usage carries token counts but no cost. Rates are USD per
million tokens as (input, output, cache write, cache read).
"""

from __future__ import annotations

import attrs

from session_insights.schemas.records import TokenUsage

PER_MILLION = 1_000_000


@attrs.define(frozen=True)
class ModelRates:
    input: float
    output: float
    cache_write: float
    cache_read: float


OPUS_CURRENT = ModelRates(5.0, 25.0, 6.25, 0.50)  # Opus 4.5+
OPUS_LEGACY = ModelRates(15.0, 75.0, 18.75, 1.50)  # Opus 3 through 4.1
HAIKU_CURRENT = ModelRates(1.0, 5.0, 1.25, 0.10)  # Haiku 4.5+
HAIKU_3_5 = ModelRates(0.80, 4.0, 1.00, 0.08)
HAIKU_3 = ModelRates(0.25, 1.25, 0.30, 0.03)
SONNET = ModelRates(3.0, 15.0, 3.75, 0.30)  # Every Sonnet; also the fallback


def model_rates(model: str) -> ModelRates:
    """Rates for a model id, matched on family and version substrings."""
    name = model.lower()

    if 'opus' in name:
        if 'opus-4-5' in name or 'opus-4-6' in name:
            return OPUS_CURRENT
        return OPUS_LEGACY
    if 'haiku' in name:
        if 'haiku-4-5' in name or 'haiku-4-6' in name:
            return HAIKU_CURRENT
        if '3-haiku' in name:
            return HAIKU_3
        return HAIKU_3_5
    return SONNET


def calculate_cost(
    model: str,
    input_tokens: int,
    output_tokens: int,
    cache_creation_tokens: int = 0,
    cache_read_tokens: int = 0,
) -> float:
    """Cost in USD for the given token counts at a model's rates."""
    rates = model_rates(model)
    return (
        input_tokens * rates.input
        + output_tokens * rates.output
        + cache_creation_tokens * rates.cache_write
        + cache_read_tokens * rates.cache_read
    ) / PER_MILLION


def usage_cost(usage: TokenUsage) -> float:
    """Recorded cost, or an estimate at the primary model's rates when absent."""
    if usage.total_cost_usd is not None:
        return usage.total_cost_usd
    model = usage.models[0] if usage.models else ''
    return calculate_cost(
        model,
        usage.input_tokens,
        usage.output_tokens,
        usage.cache_creation_tokens,
        usage.cache_read_tokens,
    )
