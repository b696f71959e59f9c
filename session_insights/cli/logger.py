"""
CLI logger adapter - implements LoggerProtocol for command-line usage.

Diagnostics go to stderr so that --format json output on stdout stays parseable.
"""

from __future__ import annotations

import typer


class CLILogger:
    """
    Logger implementation for CLI (implements LoggerProtocol).

    Info and debug messages are shown only in verbose mode.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    async def debug(self, message: str) -> None:
        if self.verbose:
            typer.secho(f'[DEBUG] {message}', fg=typer.colors.BRIGHT_BLACK, err=True)

    async def info(self, message: str) -> None:
        """Log info message (only if verbose)."""
        if self.verbose:
            typer.echo(f'[INFO] {message}', err=True)

    async def warning(self, message: str) -> None:
        typer.secho(f'[WARNING] {message}', fg=typer.colors.YELLOW, err=True)

    async def error(self, message: str) -> None:
        typer.secho(f'[ERROR] {message}', fg=typer.colors.RED, err=True)
