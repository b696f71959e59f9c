"""
Shared exceptions for session-insights.

Raised only for caller-contract violations and loader failures. Malformed
record values never raise; they are coerced to ``unknown`` at validation time.

Exception Hierarchy:
    SessionInsightsError (base)
    ├── InvalidWindowError (window not one of the supported lookbacks; also ValueError)
    ├── UnknownDimensionError (aggregation dimension not registered)
    ├── UnknownFilterError (triage filter kind not recognised)
    └── RecordLoadError (records file unreadable or a record fails validation)
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class SessionInsightsError(Exception):
    """Base exception for all session-insights errors."""


class InvalidWindowError(SessionInsightsError, ValueError):
    """Raised when a lookback window is not one of the supported sizes."""

    def __init__(self, window_days: object, allowed: Iterable[int]) -> None:
        self.window_days = window_days
        self.allowed = tuple(allowed)
        allowed_str = ', '.join(str(days) for days in self.allowed)
        super().__init__(f'Unsupported window of {window_days!r} days. Expected one of: {allowed_str}')


class UnknownDimensionError(SessionInsightsError):
    """Raised when aggregating over a dimension with no registered extractor."""

    def __init__(self, dimension: str, known: Iterable[str]) -> None:
        self.dimension = dimension
        self.known = sorted(known)
        super().__init__(f"Unknown dimension '{dimension}'. Known dimensions: {', '.join(self.known)}")


class UnknownFilterError(SessionInsightsError):
    """Raised when a triage view is requested for an unrecognised filter kind."""

    def __init__(self, filter_kind: str, known: Iterable[str]) -> None:
        self.filter_kind = filter_kind
        self.known = list(known)
        super().__init__(f"Unknown filter '{filter_kind}'. Expected one of: {', '.join(self.known)}")


class RecordLoadError(SessionInsightsError):
    """Raised when a records file cannot be parsed into session insight records."""

    def __init__(self, path: Path, reason: str, line_number: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.line_number = line_number
        location = f'{path}:{line_number}' if line_number is not None else str(path)
        super().__init__(f'Failed to load records from {location}: {reason}')
