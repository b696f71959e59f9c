"""
Session Insights MCP Server.

Exposes window insights, day summaries and triage views over a records file.

Setup:
    claude mcp add --scope user session-insights -- session-insights-mcp

Configuration:
    SESSION_INSIGHTS_RECORDS_PATH       default records file (JSON array or JSONL)
    SESSION_INSIGHTS_DIGEST_DATES_PATH  optional file of dates with a daily digest
    SESSION_INSIGHTS_DEFAULT_WINDOW_DAYS  default lookback (7, 14, 30, 90)

Example:
    # Last 30 days from the configured records file
    window_insights()

    # Sessions without an achieved goal, worst first
    triage_sessions(filter_kind='not_achieved')
"""

from __future__ import annotations

import contextlib
import sys
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

import attrs
from mcp.server.fastmcp import Context, FastMCP

from session_insights.config.base import InsightsSettings, get_settings
from session_insights.mcp.utils import DualLogger
from session_insights.schemas.records import parse_day
from session_insights.schemas.snapshots import DayInsightSummary, InsightsSnapshot, TriageView
from session_insights.services.insights import InsightsService

# ==============================================================================
# Server State (immutable)
# ==============================================================================


@attrs.define(frozen=True)
class ServerState:
    """
    Immutable server state initialized at startup.

    Holds the settings resolved once when the server starts.
    """

    settings: InsightsSettings

    def records_path(self, override: str | None) -> Path:
        """Explicit path from the tool call, else the configured default."""
        if override:
            return Path(override).expanduser()
        if self.settings.RECORDS_PATH is None:
            raise ValueError('No records_path given and SESSION_INSIGHTS_RECORDS_PATH is not set')
        return self.settings.RECORDS_PATH


# ==============================================================================
# Lifecycle
# ==============================================================================


@contextlib.asynccontextmanager
async def lifespan(mcp_server: FastMCP) -> AsyncIterator[None]:
    """Resolve settings and register tools before serving."""
    settings = get_settings(InsightsSettings)
    state = ServerState(settings=settings)

    register_tools(state)

    print(f'[MCP Server] {settings.APP_NAME} {settings.VERSION}', file=sys.stderr)
    print(f'[MCP Server] Records: {settings.RECORDS_PATH or "(per call)"}', file=sys.stderr)

    yield


# ==============================================================================
# Server Setup
# ==============================================================================

server = FastMCP('session-insights', lifespan=lifespan)


# ==============================================================================
# Tool Registration (Closure Pattern)
# ==============================================================================


def register_tools(state: ServerState) -> None:
    """
    Register MCP tools with closure over server state.

    Args:
        state: Server state containing resolved settings
    """

    @server.tool()
    async def window_insights(
        window_days: Literal[7, 14, 30, 90] | None = None,
        end_date: str | None = None,
        records_path: str | None = None,
        ctx: Context[Any, Any, Any] | None = None,
    ) -> InsightsSnapshot:
        """
        Distributions, period-over-period trends and usage for a lookback window.

        Args:
            window_days: Lookback in days (default: configured DEFAULT_WINDOW_DAYS)
            end_date: Last day of the window as YYYY-MM-DD (default: today, UTC)
            records_path: Records file (default: configured RECORDS_PATH)

        Returns:
            InsightsSnapshot with distributions, session details, trends and usage

        Examples:
            # Last week
            result = await window_insights(window_days=7)

            # Quarter ending on a given day
            result = await window_insights(window_days=90, end_date='2026-03-31')
        """
        if ctx is None:
            raise RuntimeError('Context is required - must be called via FastMCP')
        logger = DualLogger(ctx)

        now = datetime.now(UTC)
        if end_date is not None:
            day = parse_day(end_date)
            if day is None:
                raise ValueError(f'end_date must be YYYY-MM-DD, got {end_date!r}')
            now = datetime(day.year, day.month, day.day, tzinfo=UTC)

        service = InsightsService(logger)
        return await service.window_insights(
            state.records_path(records_path),
            window_days or state.settings.DEFAULT_WINDOW_DAYS,
            now,
            state.settings.DIGEST_DATES_PATH,
        )

    @server.tool()
    async def day_insights(
        date: str,
        records_path: str | None = None,
        ctx: Context[Any, Any, Any] | None = None,
    ) -> DayInsightSummary:
        """
        Summary of a single day: friction, satisfaction, top goals and recommendations.

        Args:
            date: Day to summarise as YYYY-MM-DD
            records_path: Records file (default: configured RECORDS_PATH)

        Returns:
            DayInsightSummary for the date
        """
        if ctx is None:
            raise RuntimeError('Context is required - must be called via FastMCP')
        logger = DualLogger(ctx)

        service = InsightsService(logger)
        return await service.day_insights(state.records_path(records_path), date, top_n=state.settings.DAY_TOP_N)

    @server.tool()
    async def triage_sessions(
        filter_kind: Literal['all', 'friction', 'not_achieved', 'low_satisfaction'] = 'all',
        records_path: str | None = None,
        ctx: Context[Any, Any, Any] | None = None,
    ) -> TriageView:
        """
        Sessions ranked most-problematic first, with badge counts for every filter.

        Args:
            filter_kind: 'all', 'friction', 'not_achieved' or 'low_satisfaction'
            records_path: Records file (default: configured RECORDS_PATH)

        Returns:
            TriageView with ranked sessions and per-filter counts
        """
        if ctx is None:
            raise RuntimeError('Context is required - must be called via FastMCP')
        logger = DualLogger(ctx)

        service = InsightsService(logger)
        return await service.triage(state.records_path(records_path), filter_kind)


# ==============================================================================
# Server Entry Point
# ==============================================================================


def main() -> None:
    """Run the MCP server."""
    server.run()


if __name__ == '__main__':
    main()
