"""Configuration management for the log grep MCP server.

Handles loading settings from appsettings.json with sensible defaults.
"""

import json
from pathlib import Path
from typing import Any, Dict


# Default polling interval for monitored files (seconds)
DEFAULT_POLL_INTERVAL_SECONDS: float = 0.1

# Default level for the operator log on stderr
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_settings(config_dir: Path | None) -> Dict[str, Any]:
    """Read appsettings.json as a dict, or return {} if unavailable.

    Args:
        config_dir: Directory containing appsettings.json. If None, uses script directory.

    Returns:
        Parsed settings, or an empty dict if the file is missing, unreadable
        or does not hold a JSON object.
    """
    if config_dir is None:
        config_dir = Path(__file__).parent

    config_path = config_dir / "appsettings.json"

    try:
        if config_path.is_file():
            with config_path.open("r", encoding="utf-8") as f:
                config = json.load(f)
                if isinstance(config, dict):
                    return config
    except (OSError, json.JSONDecodeError):
        # Config file corrupted or unreadable - use defaults
        pass

    return {}


def load_poll_interval_seconds(config_dir: Path | None = None) -> float:
    """Load the file polling interval from appsettings.json.

    Monitored files are polled at this interval. Shorter intervals lower
    detection latency at the cost of more stat calls.

    Args:
        config_dir: Directory containing appsettings.json. If None, uses script directory.

    Returns:
        Interval in seconds (float). Defaults to 0.1.
    """
    value = _load_settings(config_dir).get("pollIntervalSeconds")
    # bool is an int subclass; reject it explicitly
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return DEFAULT_POLL_INTERVAL_SECONDS


def load_log_level(config_dir: Path | None = None) -> str:
    """Load the operator log level from appsettings.json.

    Args:
        config_dir: Directory containing appsettings.json. If None, uses script directory.

    Returns:
        Upper-case level name. Defaults to "INFO".
    """
    value = _load_settings(config_dir).get("logLevel")
    if isinstance(value, str) and value.upper() in VALID_LOG_LEVELS:
        return value.upper()
    return DEFAULT_LOG_LEVEL


# Singletons: load settings at module import
POLL_INTERVAL_SECONDS: float = load_poll_interval_seconds()
LOG_LEVEL: str = load_log_level()
