"""Monitor log tool - start tailing a file for appended content."""

from monitor_registry import MonitorRegistry, StartStatus
from path_utils import resolve_path
from tool_result import ToolResult


async def monitor_log(registry: MonitorRegistry, file_path: str, pattern: str | None = None) -> ToolResult:
    """Start monitoring a log file for changes.

    Calling this again for a path that is already monitored is a no-op.

    Args:
        registry: The server's monitor registry
        file_path: Path to the log file (absolute, or relative to the base directory)
        pattern: Optional substring; only appended lines containing it are reported

    Returns:
        Acknowledgement text, or an error result if the watch cannot be created.
    """
    result = resolve_path(file_path)
    if not result.success:
        return ToolResult.err(result.error)

    try:
        status = await registry.start(result.path, pattern=pattern, display_path=file_path)
    except OSError as e:
        return ToolResult.err(f"Error starting monitor: {e}")

    if status is StartStatus.ALREADY_MONITORING:
        return ToolResult.ok(f"Already monitoring: {file_path}")

    output = f"Started monitoring: {file_path}"
    if pattern:
        output += f' for pattern "{pattern}"'
    return ToolResult.ok(output)
