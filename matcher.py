"""Line matching shared by search and monitoring.

Matching is either plain substring containment or a Python regular
expression, each optionally case-insensitive. Case-insensitive substring
matching folds both sides with str.lower().
"""

import re
from typing import Callable, Pattern

from pydantic import BaseModel, ConfigDict, Field


class InvalidPatternError(ValueError):
    """Raised when a regex pattern fails to compile.

    Attributes:
        pattern: The pattern as supplied by the caller.
        reason: The compiler's error message.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f'Invalid regex pattern "{pattern}": {reason}')
        self.pattern = pattern
        self.reason = reason


class MatchOptions(BaseModel):
    """Options for a single search call.

    Accepted under either the Python field names or the camelCase names
    used on the wire (caseSensitive, lineNumbers).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    case_sensitive: bool = Field(
        default=False,
        alias="caseSensitive",
        description="Case sensitive search (default: false)",
    )
    regex: bool = Field(default=False, description="Use regex pattern (default: false)")
    line_numbers: bool = Field(
        default=True,
        alias="lineNumbers",
        description="Include line numbers (default: true)",
    )
    context: int = Field(
        default=0,
        ge=0,
        description="Number of context lines before/after match",
    )


def compile_pattern(pattern: str, case_sensitive: bool) -> Pattern[str]:
    """Compile a regex pattern for line matching.

    Args:
        pattern: Regular expression in Python re syntax.
        case_sensitive: If False, compile with re.IGNORECASE.

    Returns:
        The compiled pattern.

    Raises:
        InvalidPatternError: If the pattern is not a valid expression.
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def is_match(line: str, pattern: str, case_sensitive: bool = False, regex: bool = False) -> bool:
    """Decide whether a line matches a pattern.

    Args:
        line: The line to test, without its line separator.
        pattern: Substring, or regular expression when regex is True.
        case_sensitive: If False, ignore case.
        regex: If True, treat pattern as a regular expression (re.search semantics).

    Returns:
        True if the line matches.

    Raises:
        InvalidPatternError: In regex mode, if the pattern does not compile.
    """
    if regex:
        # re caches compiled patterns, so repeated calls stay cheap
        return compile_pattern(pattern, case_sensitive).search(line) is not None
    if case_sensitive:
        return pattern in line
    return pattern.lower() in line.lower()


def build_line_predicate(
    pattern: str, case_sensitive: bool = False, regex: bool = False
) -> Callable[[str], bool]:
    """Build a one-argument predicate equivalent to is_match for a fixed pattern.

    Compiles (or lowercases) the pattern once so scanning many lines does
    not repeat that work.

    Raises:
        InvalidPatternError: In regex mode, if the pattern does not compile.
    """
    if regex:
        search = compile_pattern(pattern, case_sensitive).search
        return lambda line: search(line) is not None
    if case_sensitive:
        return lambda line: pattern in line
    folded = pattern.lower()
    return lambda line: folded in line.lower()
