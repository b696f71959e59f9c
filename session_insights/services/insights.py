"""
Insights service - loads records and runs the engine.

Shared by the CLI and MCP server so both surfaces load, log and compute the
same way. All analytics live in session_insights.engine; this layer only adds
I/O and logging around it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from session_insights import engine
from session_insights.engine.composer import derive_daily_stats, select_window
from session_insights.protocols import LoggerProtocol, NullLogger
from session_insights.schemas.snapshots import DayInsightSummary, InsightsSnapshot, TriageView
from session_insights.services.loader import RecordLoaderService


class InsightsService:
    """Service computing insight snapshots from a records file."""

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self.logger = logger or NullLogger()
        self.loader = RecordLoaderService(self.logger)

    async def window_insights(
        self,
        records_path: Path,
        window_days: int,
        now: datetime | None = None,
        digest_dates_path: Path | None = None,
    ) -> InsightsSnapshot:
        """
        Compute the whole-window snapshot for a records file.

        Args:
            records_path: JSON or JSONL records file
            window_days: Lookback window (7, 14, 30 or 90)
            now: Reference time (default: current UTC time)
            digest_dates_path: Optional file of dates that have a daily digest

        Returns:
            InsightsSnapshot for the window

        Raises:
            RecordLoadError: If a file cannot be loaded
            InvalidWindowError: If window_days is unsupported
        """
        now = now or datetime.now(UTC)
        records = await self.loader.load_records(records_path)

        daily_stats = None
        if digest_dates_path is not None:
            digest_dates = await self.loader.load_digest_dates(digest_dates_path)
            daily_stats = derive_daily_stats(select_window(records, window_days, now), digest_dates)

        snapshot = engine.compute_insights(records, window_days, now, daily_stats=daily_stats)
        await self.logger.info(
            f'Window of {window_days} days ending {now.date().isoformat()}: '
            f'{snapshot.total_sessions} sessions over {snapshot.total_days} days'
        )
        return snapshot

    async def day_insights(self, records_path: Path, date: str, top_n: int = engine.DAY_TOP_N) -> DayInsightSummary:
        """Compute the single-day summary for a records file."""
        records = await self.loader.load_records(records_path)
        summary = engine.compute_day_insights(records, date, top_n=top_n)
        if summary.total_sessions == 0:
            await self.logger.warning(f'No sessions recorded on {date}')
        return summary

    async def triage(self, records_path: Path, filter_kind: str = 'all') -> TriageView:
        """Rank sessions from a records file by severity for one filter."""
        records = await self.loader.load_records(records_path)
        view = engine.triage(records, filter_kind)
        await self.logger.info(f'{len(view.sessions)} of {len(records)} sessions match filter {filter_kind!r}')
        return view
