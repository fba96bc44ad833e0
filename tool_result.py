"""Tool call results shared by every tool module."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a single tool call.

    Attributes:
        text: Human-readable response text.
        is_error: True when the call failed (input or resource error).
    """

    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        """Create a successful result."""
        return cls(text=text)

    @classmethod
    def err(cls, text: str) -> "ToolResult":
        """Create an error result."""
        return cls(text=text, is_error=True)
