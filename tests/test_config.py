"""Tests for configuration models and loading."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from pydantic import ValidationError

from logbus.config import (
    DEFAULT_CONFIG,
    EventBusOptions,
    LoggerOptions,
    LoggingConfig,
    load_config,
)


class OptionModelTests(unittest.TestCase):
    """Validate option defaults and constraints."""

    def test_event_bus_defaults(self) -> None:
        options = EventBusOptions()
        self.assertFalse(options.debug)
        self.assertTrue(options.warn_on_no_listeners)
        self.assertTrue(options.catch_errors)
        self.assertIsNone(options.max_listeners)

    def test_negative_max_listeners_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            EventBusOptions(max_listeners=-1)

    def test_logger_defaults(self) -> None:
        options = LoggerOptions()
        self.assertTrue(options.clear_on_init)
        self.assertTrue(options.use_timestamps)

    def test_logging_level_is_normalized(self) -> None:
        self.assertEqual(LoggingConfig(level=" debug ").level, "DEBUG")
        with self.assertRaises(ValidationError):
            LoggingConfig(level="LOUD")


class LoadConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_no_path_uses_defaults(self) -> None:
        config = load_config()
        self.assertEqual(config.model_dump(), DEFAULT_CONFIG)

    def test_missing_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config = load_config(Path(temp_dir) / "logbus.toml")
            self.assertEqual(config.model_dump(), DEFAULT_CONFIG)

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "logbus.toml"
            config_path.write_text(
                """
[logger]
use_timestamps = false

[logging]
level = "warning"
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path)
            self.assertFalse(config.logger.use_timestamps)
            self.assertTrue(config.logger.clear_on_init)
            self.assertEqual(config.logging.level, "WARNING")

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "logbus.toml"
            config_path.write_text("[logging]\nlevel = \"LOUD\"\n", encoding="utf-8")
            with self.assertLogs("logbus.config", level="WARNING"):
                config = load_config(config_path)
            self.assertEqual(config.model_dump(), DEFAULT_CONFIG)

    def test_config_has_only_logger_and_logging_sections(self) -> None:
        self.assertEqual(set(DEFAULT_CONFIG), {"logger", "logging"})
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "logbus.toml"
            config_path.write_text("[events]\nmax_listeners = 10\n", encoding="utf-8")
            config = load_config(config_path)
            self.assertFalse(hasattr(config, "events"))

    def test_unparseable_toml_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "logbus.toml"
            config_path.write_text("[logger\nbroken", encoding="utf-8")
            with self.assertLogs("logbus.config", level="WARNING") as logs:
                config = load_config(config_path)
            self.assertEqual(config.model_dump(), DEFAULT_CONFIG)
            self.assertTrue(any("Failed to parse config" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
