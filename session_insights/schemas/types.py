"""
Shared type definitions for schemas.

Layering:
- This module provides FOUNDATION types (model bases, categorical domains)
- records.py builds the input record model on LenientModel
- snapshots.py builds every engine output on BaseStrictModel
"""

from __future__ import annotations

from typing import Literal, get_args

import pydantic

# ==============================================================================
# Base Strict Model (outputs)
# ==============================================================================


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model for everything the engine produces.

    Outputs are built by our own code, so any unexpected field or type is a bug
    and should fail immediately.
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Lenient Model (inputs)
# ==============================================================================


class LenientModel(pydantic.BaseModel):
    """
    Foundation model for externally supplied records.

    Symmetry with BaseStrictModel:
    - BaseStrictModel: extra='forbid', strict=True (our own outputs)
    - LenientModel: extra='ignore', lax coercion (upstream summariser output)

    Records are never rejected for an out-of-domain categorical value; field
    validators coerce those to 'unknown' instead.
    """

    model_config = pydantic.ConfigDict(
        extra='ignore',  # Upstream may add fields we do not model
        strict=False,  # Accept JSON-ish input (lists for tuples, ints for floats)
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Categorical Domains
# ==============================================================================

type Outcome = Literal['achieved', 'partially_achieved', 'not_achieved', 'unknown']
type Satisfaction = Literal['happy', 'satisfied', 'neutral', 'frustrated', 'unknown']
type Helpfulness = Literal['very_helpful', 'helpful', 'slightly_helpful', 'not_helpful', 'unknown']

UNKNOWN = 'unknown'

OUTCOMES: frozenset[str] = frozenset(get_args(Outcome.__value__))
SATISFACTIONS: frozenset[str] = frozenset(get_args(Satisfaction.__value__))
HELPFULNESS_LEVELS: frozenset[str] = frozenset(get_args(Helpfulness.__value__))

# Filter kinds understood by the triage views
type FilterKind = Literal['all', 'friction', 'not_achieved', 'low_satisfaction']

FILTER_KINDS: tuple[str, ...] = get_args(FilterKind.__value__)
