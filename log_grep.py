"""Log Grep MCP - Entry point and tool registration.

A Model Context Protocol server for searching log files and tailing them
for newly appended content.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent

from config import LOG_LEVEL, POLL_INTERVAL_SECONDS
from event_sink import EventSink, MatchEvent, MonitorEvent
from matcher import MatchOptions
from monitor_registry import MonitorRegistry
from path_utils import init_base_dir_from_args
from tool_result import ToolResult
from tools import grep_log, monitor_log, stop_monitor

logger = logging.getLogger(__name__)

SERVER_NAME = "log-grep-mcp"


def to_call_tool_result(result: ToolResult) -> CallToolResult:
    """Convert a tool's result into the protocol response."""
    return CallToolResult(
        content=[TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def log_event(event: MonitorEvent) -> None:
    """Write a monitoring event to the operator log."""
    if isinstance(event, MatchEvent):
        logger.info(
            f"Match in {event.path} for pattern {event.pattern!r}: "
            + " | ".join(event.matches)
        )
    else:
        logger.info(f"Change in {event.path}: {len(event.new_content)} new characters")


def create_server(registry: MonitorRegistry | None = None) -> FastMCP:
    """Create an MCP server with its own monitor registry.

    Args:
        registry: Registry to serve monitor_log/stop_monitor from. If None, a
            new one is created with the configured poll interval and an event
            sink that logs every event.

    Returns:
        The FastMCP instance with all tools registered.
    """
    if registry is None:
        sink = EventSink()
        sink.subscribe(log_event)
        registry = MonitorRegistry(sink, poll_interval=POLL_INTERVAL_SECONDS)

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await registry.stop_all()

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)

    # Parameter names are camelCase because they are the wire argument names
    @mcp.tool(name="grep_log", structured_output=False)
    async def grep_log_tool(
        filePath: str, pattern: str, options: MatchOptions | None = None
    ) -> CallToolResult:
        """Search for patterns in a log file.

        Args:
            filePath: Path to the log file
            pattern: Pattern to search for
            options: caseSensitive (default false), regex (default false),
                lineNumbers (default true) and context (lines before/after
                each match, default 0)

        Returns:
            Matching lines with context, one block per match separated by
            "---" lines, or "No matches found".
        """
        return to_call_tool_result(await grep_log(filePath, pattern, options))

    @mcp.tool(name="monitor_log", structured_output=False)
    async def monitor_log_tool(filePath: str, pattern: str | None = None) -> CallToolResult:
        """Start monitoring a log file for changes.

        Args:
            filePath: Path to the log file to monitor
            pattern: Pattern to watch for (optional)

        Returns:
            Acknowledgement that monitoring started or was already active.
        """
        return to_call_tool_result(await monitor_log(registry, filePath, pattern))

    @mcp.tool(name="stop_monitor", structured_output=False)
    async def stop_monitor_tool(filePath: str) -> CallToolResult:
        """Stop monitoring a log file.

        Args:
            filePath: Path to the log file to stop monitoring

        Returns:
            Acknowledgement that monitoring stopped, or that it was not active.
        """
        return to_call_tool_result(await stop_monitor(registry, filePath))

    return mcp


def main():
    """Entry point for CLI: log-grep-mcp [/path/to/base/dir]

    Relative file paths in tool calls resolve against the base directory,
    which defaults to the working directory.
    """
    # stdout carries the protocol, so the operator log goes to stderr
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    init_base_dir_from_args()

    mcp = create_server()
    logger.info("Log Grep MCP server running on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
