"""
Shared protocols for session-insights services.

The insights engine itself never logs. Loggers only flow through the layers
that do I/O: the record loader, the CLI and the MCP server.
"""

from __future__ import annotations

from typing import Protocol


class LoggerProtocol(Protocol):
    """
    Async logger accepted by the service layer.

    Implementations:
    - DualLogger (mcp/utils.py): stderr plus the MCP client context
    - CLILogger (cli/logger.py): stderr, info/debug gated behind --verbose
    - NullLogger (below): discards everything
    """

    async def debug(self, message: str) -> None: ...
    async def info(self, message: str) -> None: ...
    async def warning(self, message: str) -> None: ...
    async def error(self, message: str) -> None: ...


class NullLogger:
    """Logger that drops every message. Default for library callers and tests."""

    async def debug(self, message: str) -> None:
        pass

    async def info(self, message: str) -> None:
        pass

    async def warning(self, message: str) -> None:
        pass

    async def error(self, message: str) -> None:
        pass
