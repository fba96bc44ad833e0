"""Path utilities for the log grep MCP server.

Resolves caller-supplied file paths against a base directory using pathlib.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass
class PathResult:
    """Result of a path resolution operation.

    Attributes:
        success: Whether the resolution succeeded.
        path: The resolved absolute path (only valid if success=True).
        error: Error message (only set if success=False).
    """

    success: bool
    path: Path
    error: str = ""

    @classmethod
    def ok(cls, path: Path) -> "PathResult":
        """Create a successful result."""
        return cls(success=True, path=path)

    @classmethod
    def err(cls, message: str) -> "PathResult":
        """Create an error result."""
        return cls(success=False, path=Path(), error=message)


# Global base directory - set at startup
_base_dir: Path = Path.cwd()


def get_base_dir() -> Path:
    """Get the current base directory.

    Returns:
        The configured base directory as a Path.
    """
    return _base_dir


def set_base_dir(path: Union[str, Path]) -> None:
    """Set the base directory that relative paths resolve against.

    Args:
        path: The new base directory (will be resolved to absolute).
    """
    global _base_dir
    _base_dir = Path(path).resolve()


def init_base_dir_from_args() -> Path:
    """Initialize base directory from command line arguments.

    Uses first command line argument if provided, otherwise keeps the
    working directory.

    Returns:
        The configured base directory.
    """
    if len(sys.argv) > 1:
        set_base_dir(sys.argv[1])
    return _base_dir


def resolve_path(file_path: str) -> PathResult:
    """Resolve a caller-supplied path to an absolute path.

    Absolute paths are kept as given; relative paths are joined to the base
    directory. A leading "~" expands to the home directory. "." and ".."
    segments are normalized but symlinks are not followed, so a link that is
    retargeted later keeps naming the same path. The target need not exist.

    Args:
        file_path: Absolute path, or path relative to the base directory.

    Returns:
        PathResult with either the resolved path or an error message.
    """
    if not file_path:
        return PathResult.err("Error: File path must not be empty.")

    try:
        target = os.path.join(get_base_dir(), os.path.expanduser(file_path))
        return PathResult.ok(Path(os.path.abspath(target)))
    except (OSError, ValueError) as e:
        return PathResult.err(f"Error: Invalid path: {e}")
