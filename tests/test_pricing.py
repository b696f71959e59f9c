"""Tests for token cost estimation."""

from __future__ import annotations

import pytest

from session_insights.engine.pricing import (
    HAIKU_3,
    HAIKU_3_5,
    HAIKU_CURRENT,
    OPUS_CURRENT,
    OPUS_LEGACY,
    SONNET,
    calculate_cost,
    model_rates,
    usage_cost,
)
from session_insights.schemas.records import TokenUsage


@pytest.mark.parametrize(
    ('model', 'rates'),
    [
        ('claude-sonnet-4-5-20250929', SONNET),
        ('claude-opus-4-6', OPUS_CURRENT),
        ('claude-opus-4-5-20250929', OPUS_CURRENT),
        ('claude-opus-4-1-20250414', OPUS_LEGACY),
        ('claude-3-opus-20240229', OPUS_LEGACY),
        ('claude-haiku-4-5-20251001', HAIKU_CURRENT),
        ('claude-3-5-haiku-20241022', HAIKU_3_5),
        ('claude-3-haiku-20240307', HAIKU_3),
        ('Claude-Opus-4-6', OPUS_CURRENT),
        ('some-future-model', SONNET),
        ('', SONNET),
    ],
)
def test_model_rates(model, rates) -> None:
    assert model_rates(model) == rates


@pytest.mark.parametrize(
    ('model', 'input_tokens', 'output_tokens', 'expected'),
    [
        ('claude-sonnet-4-5-20250929', 1_000_000, 1_000_000, 18.0),
        ('claude-opus-4-6', 1_000_000, 100_000, 7.5),
        ('claude-opus-4-1-20250414', 1_000_000, 100_000, 22.5),
        ('claude-haiku-4-5-20251001', 1_000_000, 1_000_000, 6.0),
        ('claude-3-5-haiku-20241022', 1_000_000, 1_000_000, 4.8),
        ('claude-3-haiku-20240307', 1_000_000, 1_000_000, 1.5),
    ],
)
def test_calculate_cost(model, input_tokens, output_tokens, expected) -> None:
    assert calculate_cost(model, input_tokens, output_tokens) == pytest.approx(expected)


def test_cache_tokens_priced_separately() -> None:
    assert calculate_cost('claude-sonnet-4-5-20250929', 0, 0, 1_000_000, 1_000_000) == pytest.approx(4.05)
    assert calculate_cost('claude-opus-4-6', 0, 0, 1_000_000, 1_000_000) == pytest.approx(6.75)


def test_zero_tokens_cost_nothing() -> None:
    assert calculate_cost('claude-sonnet-4-5-20250929', 0, 0) == 0.0


def test_usage_cost_prefers_recorded_cost() -> None:
    usage = TokenUsage(input_tokens=1_000_000, total_cost_usd=0.25, models=('claude-opus-4-6',))

    assert usage_cost(usage) == 0.25


def test_usage_cost_estimates_from_primary_model() -> None:
    usage = TokenUsage(
        input_tokens=1_000_000,
        output_tokens=100_000,
        models=('claude-opus-4-6', 'claude-haiku-4-5-20251001'),
    )

    assert usage_cost(usage) == pytest.approx(7.5)


def test_usage_cost_without_models_uses_fallback_rates() -> None:
    assert usage_cost(TokenUsage(output_tokens=1_000_000)) == pytest.approx(15.0)
