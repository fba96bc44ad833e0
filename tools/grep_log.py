"""Grep log tool - pattern search over a whole file."""

from line_scanner import format_result, scan
from matcher import InvalidPatternError, MatchOptions
from path_utils import resolve_path
from tool_result import ToolResult


async def grep_log(file_path: str, pattern: str, options: MatchOptions | None = None) -> ToolResult:
    """Search a log file for lines matching a pattern.

    Args:
        file_path: Path to the log file (absolute, or relative to the base directory)
        pattern: Substring to search for, or a regular expression if options.regex is set
        options: Case sensitivity, regex mode, line numbering and context lines

    Returns:
        Match blocks separated by "---" lines, "No matches found", or an
        error result if the file cannot be read or the regex is invalid.
    """
    if options is None:
        options = MatchOptions()

    result = resolve_path(file_path)
    if not result.success:
        return ToolResult.err(result.error)

    try:
        # Bytes, so "\r\n" reaches the scanner untranslated
        contents = result.path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        return ToolResult.err(f"Error reading file: {e}")

    try:
        matches = scan(contents, pattern, options)
    except InvalidPatternError as e:
        return ToolResult.err(str(e))

    return ToolResult.ok(format_result(matches))
