"""Stop monitor tool - stop tailing a file."""

from monitor_registry import MonitorRegistry
from path_utils import resolve_path
from tool_result import ToolResult


async def stop_monitor(registry: MonitorRegistry, file_path: str) -> ToolResult:
    """Stop monitoring a log file.

    Args:
        registry: The server's monitor registry
        file_path: Path given to monitor_log (any spelling of the same file works)

    Returns:
        "Stopped monitoring: ..." or "Not monitoring: ...".
    """
    result = resolve_path(file_path)
    if not result.success or not await registry.stop(result.path):
        return ToolResult.ok(f"Not monitoring: {file_path}")
    return ToolResult.ok(f"Stopped monitoring: {file_path}")
