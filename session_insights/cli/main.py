#!/usr/bin/env python3
"""
Command-line interface for session-insights.

Provides commands to summarise a window of sessions, a single day, and a
severity-ranked triage list.
"""

from __future__ import annotations

import asyncio
import traceback
from collections.abc import Coroutine, Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

import typer

from session_insights.cli.logger import CLILogger
from session_insights.config.base import settings
from session_insights.engine.triage import severity
from session_insights.exceptions import SessionInsightsError
from session_insights.schemas.records import parse_day
from session_insights.schemas.snapshots import (
    DayInsightSummary,
    DistributionBucket,
    InsightsSnapshot,
    TriageView,
)
from session_insights.services.insights import InsightsService

app = typer.Typer(
    name='session-insights',
    help='Analyse AI-assisted work sessions: distributions, trends and triage',
    add_completion=False,
)

OutputFormat = Literal['text', 'json']

BAR_WIDTH = 30

SATISFACTION_COLORS = {
    'happy': typer.colors.GREEN,
    'satisfied': typer.colors.BRIGHT_GREEN,
    'neutral': typer.colors.YELLOW,
    'frustrated': typer.colors.RED,
}


def _resolve_records_path(records: Path | None) -> Path:
    """Use the explicit path, else the configured default."""
    if records is not None:
        return records
    if settings.RECORDS_PATH is None:
        typer.secho('Error: No records file given.', fg=typer.colors.RED, err=True)
        typer.echo('Pass a path or set SESSION_INSIGHTS_RECORDS_PATH.', err=True)
        raise typer.Exit(1)
    return settings.RECORDS_PATH


def _parse_now(value: str | None) -> datetime:
    """Reference date for the window (default: today, UTC)."""
    if value is None:
        return datetime.now(UTC)
    day = parse_day(value)
    if day is None:
        raise typer.BadParameter(f'Expected YYYY-MM-DD, got {value!r}', param_hint='--now')
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


def _run(coro: Coroutine[Any, Any, None], logger: CLILogger, verbose: bool) -> None:
    """Run a command coroutine with the shared error handling."""
    try:
        asyncio.run(coro)
    except SessionInsightsError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except typer.Exit:
        raise
    except Exception as e:
        asyncio.run(logger.error(f'Unexpected failure: {e}'))
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)


# ==============================================================================
# Commands
# ==============================================================================


@app.command()
def window(
    records: Path | None = typer.Argument(None, help='Records file (JSON array or JSONL)'),
    days: int | None = typer.Option(None, '--days', '-d', help='Lookback window: 7, 14, 30 or 90'),
    now: str | None = typer.Option(None, '--now', help='Window end date YYYY-MM-DD (default: today)'),
    digests: Path | None = typer.Option(None, '--digests', help='File listing dates that have a daily digest'),
    format: OutputFormat = typer.Option('text', '--format', '-f', help='Output format: text or json'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Show distributions, trends and usage for a lookback window.

    Examples:
        session-insights window sessions.jsonl
        session-insights window sessions.jsonl --days 7 --format json
    """
    logger = CLILogger(verbose=verbose)
    records_path = _resolve_records_path(records)
    window_days = days if days is not None else settings.DEFAULT_WINDOW_DAYS
    reference = _parse_now(now)
    digests_path = digests if digests is not None else settings.DIGEST_DATES_PATH

    async def _window() -> None:
        service = InsightsService(logger)
        snapshot = await service.window_insights(records_path, window_days, reference, digests_path)
        if format == 'json':
            typer.echo(snapshot.model_dump_json(indent=2))
        else:
            _print_window(snapshot)

    _run(_window(), logger, verbose)


@app.command()
def day(
    date: str = typer.Argument(..., help='Date to summarise (YYYY-MM-DD)'),
    records: Path | None = typer.Argument(None, help='Records file (JSON array or JSONL)'),
    top: int | None = typer.Option(None, '--top', '-n', help='Number of top goals/frictions to show'),
    format: OutputFormat = typer.Option('text', '--format', '-f', help='Output format: text or json'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Summarise a single day with rule-based recommendations.

    Examples:
        session-insights day 2026-01-31 sessions.jsonl
    """
    logger = CLILogger(verbose=verbose)
    records_path = _resolve_records_path(records)
    top_n = top if top is not None else settings.DAY_TOP_N

    async def _day() -> None:
        service = InsightsService(logger)
        summary = await service.day_insights(records_path, date, top_n=top_n)
        if format == 'json':
            typer.echo(summary.model_dump_json(indent=2))
        else:
            _print_day(summary)

    _run(_day(), logger, verbose)


@app.command()
def triage(
    records: Path | None = typer.Argument(None, help='Records file (JSON array or JSONL)'),
    filter: Literal['all', 'friction', 'not_achieved', 'low_satisfaction'] = typer.Option(
        'all', '--filter', help='Filter: all, friction, not_achieved or low_satisfaction'
    ),
    limit: int = typer.Option(20, '--limit', '-l', help='Maximum sessions to list in text output'),
    format: OutputFormat = typer.Option('text', '--format', '-f', help='Output format: text or json'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """List sessions most-problematic first.

    Examples:
        session-insights triage sessions.jsonl --filter friction
    """
    logger = CLILogger(verbose=verbose)
    records_path = _resolve_records_path(records)

    async def _triage() -> None:
        service = InsightsService(logger)
        view = await service.triage(records_path, filter)
        if format == 'json':
            typer.echo(view.model_dump_json(indent=2))
        else:
            _print_triage(view, limit)

    _run(_triage(), logger, verbose)


# ==============================================================================
# Text Rendering
# ==============================================================================


def _heading(title: str) -> None:
    typer.echo()
    typer.secho(f'  {title}', bold=True)


def _print_buckets(
    title: str,
    buckets: Sequence[DistributionBucket],
    color: str,
    limit: int | None = None,
    colors: Mapping[str, str] | None = None,
) -> None:
    if not buckets:
        return
    _heading(title)
    for bucket in buckets[:limit]:
        name = typer.style(f'{bucket.name:>24}', fg=(colors or {}).get(bucket.name, color))
        typer.echo(f'    {name} {bucket.count}')


def _format_change(pct: float) -> str:
    arrow = '+' if pct > 0 else ''
    return f'{arrow}{pct:.1f}%'


def _print_window(snapshot: InsightsSnapshot) -> None:
    typer.secho(f'\n  Insights (last {snapshot.window_days} days)', bold=True, fg=typer.colors.BRIGHT_YELLOW)
    typer.echo(f'\n  Overview: {snapshot.total_days} days, {snapshot.total_sessions} sessions')

    if snapshot.daily_stats:
        _heading('Activity Timeline:')
        max_count = max(stat.session_count for stat in snapshot.daily_stats) or 1
        for stat in snapshot.daily_stats:
            bar = '█' * (stat.session_count * BAR_WIDTH // max_count)
            marker = typer.style('✓' if stat.has_digest else ' ', fg=typer.colors.GREEN)
            typer.echo(f'  {stat.date} {marker} {typer.style(bar, fg=typer.colors.BRIGHT_YELLOW)} {stat.session_count}')

    _print_buckets('Goal Distribution:', snapshot.goal_distribution, typer.colors.CYAN)
    _print_buckets('Friction Points:', snapshot.friction_distribution, typer.colors.RED)
    _print_buckets('Satisfaction:', snapshot.satisfaction_distribution, typer.colors.WHITE, colors=SATISFACTION_COLORS)
    _print_buckets('Session Types:', snapshot.session_type_distribution, typer.colors.MAGENTA)
    _print_buckets('Languages:', snapshot.language_distribution, typer.colors.BRIGHT_BLUE, limit=10)

    trend = snapshot.trends
    _heading(f'Trends ({trend.period_label} {trend.comparison_label}):')
    rows = [
        ('Sessions', f'{trend.current_sessions}', f'{trend.previous_sessions}', trend.sessions_change_pct),
        (
            'Friction rate',
            f'{trend.current_friction_rate:.1f}%',
            f'{trend.previous_friction_rate:.1f}%',
            trend.friction_change_pct,
        ),
        (
            'Success rate',
            f'{trend.current_success_rate:.1f}%',
            f'{trend.previous_success_rate:.1f}%',
            trend.success_change_pct,
        ),
        (
            'Satisfaction',
            f'{trend.current_satisfaction_score:.1f}',
            f'{trend.previous_satisfaction_score:.1f}',
            trend.satisfaction_change_pct,
        ),
    ]
    for label, current, previous, pct in rows:
        typer.echo(f'    {label:>14} {current:>8} vs {previous:>8}  ({_format_change(pct)})')

    if trend.weekly_stats:
        _heading('Weekly:')
        for week in trend.weekly_stats:
            typer.echo(
                f'    {week.week_label:>16}  {week.session_count:>4} sessions  '
                f'friction {week.friction_rate:5.1f}%  success {week.success_rate:5.1f}%'
            )

    usage = snapshot.usage_summary
    if usage is not None:
        _heading('Usage:')
        typer.echo(f'    {usage.sessions_with_usage} sessions, ${usage.total_cost_usd:.2f}')
        typer.echo(
            f'    input {usage.total_input_tokens:,}  output {usage.total_output_tokens:,}  '
            f'cache write {usage.total_cache_creation_tokens:,}  cache read {usage.total_cache_read_tokens:,}'
        )
        _print_buckets('Models:', usage.model_distribution, typer.colors.BRIGHT_BLUE)

    typer.echo()


def _print_day(summary: DayInsightSummary) -> None:
    typer.secho(f'\n  Day {summary.date}', bold=True, fg=typer.colors.BRIGHT_YELLOW)
    typer.echo(f'\n  Sessions: {summary.total_sessions} ({summary.sessions_with_friction} with friction)')
    if summary.overall_satisfaction:
        color = SATISFACTION_COLORS.get(summary.overall_satisfaction, typer.colors.WHITE)
        typer.echo(f'  Overall satisfaction: {typer.style(summary.overall_satisfaction, fg=color)}')

    _print_buckets('Top Goals:', summary.top_goals, typer.colors.CYAN)
    _print_buckets('Top Frictions:', summary.top_frictions, typer.colors.RED)

    if summary.recommendations:
        _heading('Recommendations:')
        for message in summary.recommendations:
            typer.echo(f'    - {message}')
    typer.echo()


def _print_triage(view: TriageView, limit: int) -> None:
    badges = '  '.join(f'{kind}: {count}' for kind, count in view.counts.items())
    typer.secho(f'\n  Triage ({view.filter_kind})', bold=True, fg=typer.colors.BRIGHT_YELLOW)
    typer.echo(f'  {badges}\n')

    if not view.sessions:
        typer.secho('  No sessions match this filter.', fg=typer.colors.GREEN)
        typer.echo()
        return

    for record in view.sessions[:limit]:
        score = severity(record)
        color = typer.colors.RED if score >= 100 else typer.colors.YELLOW if score > 0 else typer.colors.GREEN
        badge = typer.style(f'{score:>4}', fg=color)
        typer.echo(f'  {badge}  {record.date}  {record.session_name or record.session_id}')
        details = [record.outcome]
        if record.satisfaction != 'unknown':
            details.append(record.satisfaction)
        if record.friction_types:
            details.append('friction: ' + ', '.join(record.friction_types))
        typer.echo(f'        {" | ".join(details)}')
        if record.friction_detail:
            typer.secho(f'        {record.friction_detail}', fg=typer.colors.BRIGHT_BLACK)

    remaining = len(view.sessions) - limit
    if remaining > 0:
        typer.echo(f'\n  ... and {remaining} more')
    typer.echo()


def main() -> None:
    """Entry point for the session-insights CLI."""
    app()


if __name__ == '__main__':
    main()
