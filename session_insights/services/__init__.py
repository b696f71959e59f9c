"""Service layer for loading records and producing insights."""

from session_insights.services.insights import InsightsService
from session_insights.services.loader import RecordLoaderService

__all__ = [
    'InsightsService',
    'RecordLoaderService',
]
