"""Line scanner for the grep_log tool.

Splits file contents into lines, applies the matcher to each and assembles
a block of context lines around every match.
"""

from typing import List

from matcher import MatchOptions, build_line_predicate

NO_MATCHES = "No matches found"
BLOCK_SEPARATOR = "\n---\n"

# A block is the formatted lines around one match, in file order
MatchBlock = List[str]
MatchResult = List[MatchBlock]


def split_lines(contents: str) -> List[str]:
    """Split contents on line feeds.

    A trailing newline yields a final empty line ("a\\nb\\n" gives
    ["a", "b", ""]); carriage returns stay part of their line.
    """
    return contents.split("\n")


def _format_line(lines: List[str], index: int, line_numbers: bool) -> str:
    if line_numbers:
        return f"{index + 1}: {lines[index]}"
    return lines[index]


def scan(contents: str, pattern: str, options: MatchOptions | None = None) -> MatchResult:
    """Find matching lines and their context windows.

    Each match gets its own block even when windows overlap, so shared
    context lines are repeated in both blocks.

    Args:
        contents: Whole file contents.
        pattern: Substring or regular expression to search for.
        options: Matching and formatting options. Defaults to MatchOptions().

    Returns:
        One block per matching line, in file order. Empty if nothing matched.

    Raises:
        InvalidPatternError: In regex mode, if the pattern does not compile.
    """
    if options is None:
        options = MatchOptions()

    matches = build_line_predicate(pattern, options.case_sensitive, options.regex)
    lines = split_lines(contents)
    context = options.context
    result: MatchResult = []

    for index, line in enumerate(lines):
        if not matches(line):
            continue

        start = max(0, index - context)
        end = min(len(lines) - 1, index + context)
        result.append(
            [_format_line(lines, i, options.line_numbers) for i in range(start, end + 1)]
        )

    return result


def format_result(result: MatchResult) -> str:
    """Render match blocks as response text.

    Lines within a block are joined by newlines and blocks by a "---" line.

    Returns:
        The rendered blocks, or "No matches found" for an empty result.
    """
    if not result:
        return NO_MATCHES
    return BLOCK_SEPARATOR.join("\n".join(block) for block in result)
