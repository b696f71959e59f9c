"""MCP server entry point for session-insights."""

from __future__ import annotations

from session_insights.mcp.server import main, server

__all__ = ['main', 'server']
