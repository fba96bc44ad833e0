"""Tests for config.py module.

Tests configuration loading from appsettings.json including
valid config, missing config, and error handling.
"""

import json
import sys
import unittest
from pathlib import Path

# Add parent directory to path for module imports
_parent_dir = str(Path(__file__).parent.parent)
if _parent_dir not in sys.path:
    sys.path.insert(0, _parent_dir)

from tests.test_utils import TempWorkspace


def _write_config(ws: TempWorkspace, config: object) -> None:
    config_path = ws.path / "appsettings.json"
    config_path.write_text(json.dumps(config), encoding="utf-8")


class TestPollIntervalLoading(unittest.TestCase):
    """Tests for loading the polling interval."""

    def test_load_poll_interval_from_valid_config(self) -> None:
        """Verify the interval is loaded from appsettings.json."""
        with TempWorkspace() as ws:
            from config import load_poll_interval_seconds

            _write_config(ws, {"pollIntervalSeconds": 0.25})

            self.assertEqual(load_poll_interval_seconds(ws.path), 0.25)

    def test_load_poll_interval_accepts_int(self) -> None:
        """Verify whole seconds are accepted."""
        with TempWorkspace() as ws:
            from config import load_poll_interval_seconds

            _write_config(ws, {"pollIntervalSeconds": 2})

            self.assertEqual(load_poll_interval_seconds(ws.path), 2.0)

    def test_load_poll_interval_defaults_when_missing(self) -> None:
        """Verify default is used when config is missing."""
        with TempWorkspace() as ws:
            from config import load_poll_interval_seconds

            self.assertEqual(load_poll_interval_seconds(ws.path), 0.1)

    def test_load_poll_interval_defaults_on_invalid_values(self) -> None:
        """Verify default is used for non-positive or non-numeric values."""
        with TempWorkspace() as ws:
            from config import load_poll_interval_seconds

            for value in (0, -1, "fast", True, None):
                with self.subTest(value=value):
                    _write_config(ws, {"pollIntervalSeconds": value})
                    self.assertEqual(load_poll_interval_seconds(ws.path), 0.1)

    def test_load_poll_interval_defaults_on_invalid_json(self) -> None:
        """Verify default is used when config is invalid JSON."""
        with TempWorkspace() as ws:
            from config import load_poll_interval_seconds

            (ws.path / "appsettings.json").write_text("not valid json {", encoding="utf-8")

            self.assertEqual(load_poll_interval_seconds(ws.path), 0.1)

    def test_load_poll_interval_defaults_on_non_object(self) -> None:
        """Verify default is used when the JSON is not an object."""
        with TempWorkspace() as ws:
            from config import load_poll_interval_seconds

            _write_config(ws, [1, 2, 3])

            self.assertEqual(load_poll_interval_seconds(ws.path), 0.1)


class TestLogLevelLoading(unittest.TestCase):
    """Tests for loading the log level."""

    def test_load_log_level_normalizes_case(self) -> None:
        """Verify level names are accepted in any case."""
        with TempWorkspace() as ws:
            from config import load_log_level

            _write_config(ws, {"logLevel": "debug"})

            self.assertEqual(load_log_level(ws.path), "DEBUG")

    def test_load_log_level_defaults_on_unknown_level(self) -> None:
        """Verify unknown level names fall back to INFO."""
        with TempWorkspace() as ws:
            from config import load_log_level

            _write_config(ws, {"logLevel": "LOUD"})

            self.assertEqual(load_log_level(ws.path), "INFO")

    def test_load_log_level_defaults_when_missing(self) -> None:
        """Verify default when key is missing from valid JSON."""
        with TempWorkspace() as ws:
            from config import load_log_level

            _write_config(ws, {"otherSetting": "value"})

            self.assertEqual(load_log_level(ws.path), "INFO")


if __name__ == "__main__":
    unittest.main()
