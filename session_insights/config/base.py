"""
Configuration for the session-insights service layer.

Only the CLI and MCP server read settings. The engine receives every value it
needs as a function argument.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

from session_insights.engine.composer import SUPPORTED_WINDOWS

T = TypeVar('T', bound='InsightsSettings')


class InsightsSettings(pydantic_settings.BaseSettings):
    """Shared configuration for the CLI and MCP server."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix='SESSION_INSIGHTS_',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',  # Reject unknown settings in .env
    )

    # Application metadata
    APP_NAME: str = 'session-insights'
    VERSION: str = '0.1.0'

    # Default lookback when the caller does not pass --days
    DEFAULT_WINDOW_DAYS: int = 30

    # Number of goal/friction buckets kept in a day summary
    DAY_TOP_N: int = 3

    # Default records file (JSON array or JSONL) for CLI and MCP tools
    RECORDS_PATH: pathlib.Path | None = None

    # Optional file listing dates (one per line) that have a daily digest
    DIGEST_DATES_PATH: pathlib.Path | None = None

    @pydantic.field_validator('DEFAULT_WINDOW_DAYS')
    @classmethod
    def validate_window(cls, v: int) -> int:
        """Validate the default window is one of the supported lookbacks."""
        if v not in SUPPORTED_WINDOWS:
            raise ValueError(f'DEFAULT_WINDOW_DAYS must be one of {SUPPORTED_WINDOWS}')
        return v

    @pydantic.field_validator('DAY_TOP_N')
    @classmethod
    def validate_top_n(cls, v: int) -> int:
        """Validate at least one bucket is kept."""
        if v < 1:
            raise ValueError('DAY_TOP_N must be at least 1')
        return v


def get_settings(settings_class: type[T] = InsightsSettings, env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T] = InsightsSettings) -> T:
    """Proxy that instantiates settings on first attribute access."""
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))


# Module-level singleton (lazy-loaded)
settings = lazy_settings(InsightsSettings)
