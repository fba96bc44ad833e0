"""Tools package for the log grep MCP server.

Each tool is implemented in its own module for maintainability.
"""

from tools.grep_log import grep_log
from tools.monitor_log import monitor_log
from tools.stop_monitor import stop_monitor

__all__ = [
    "grep_log",
    "monitor_log",
    "stop_monitor",
]
