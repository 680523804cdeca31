"""Tests for config persistence, typed accessors, and logging setup."""

from __future__ import annotations

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from filescram.focus import OverlayHidePolicy
from filescram.preview import PreviewLimits
from filescram.runtime import config
from filescram.runtime.logs import DEBUG_ENV_VAR, configure_logging


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_and_malformed_config_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("filescram.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertTrue(config.load_show_hidden())

                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                self.assertIs(config.load_overlay_hide_policy(), OverlayHidePolicy.RESTORE_DEFAULT)
                self.assertEqual(config.load_preview_limits(), PreviewLimits())

    def test_show_hidden_round_trip_preserves_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("filescram.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"overlay_return": "previous"})
                config.save_show_hidden(False)

                self.assertFalse(config.load_show_hidden())
                self.assertEqual(config.load_config()["overlay_return"], "previous")
                self.assertIs(config.load_overlay_hide_policy(), OverlayHidePolicy.RESTORE_PREVIOUS)

    def test_non_boolean_show_hidden_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("filescram.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"show_hidden": "no"})
                self.assertTrue(config.load_show_hidden())

    def test_overlay_policy_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("filescram.runtime.config.CONFIG_PATH", config_path):
                config.save_overlay_hide_policy(OverlayHidePolicy.RESTORE_PREVIOUS)
                self.assertIs(config.load_overlay_hide_policy(), OverlayHidePolicy.RESTORE_PREVIOUS)

                config.save_config({"overlay_return": "sideways"})
                self.assertIs(config.load_overlay_hide_policy(), OverlayHidePolicy.RESTORE_DEFAULT)

    def test_preview_limits_accept_only_positive_integers(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("filescram.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"preview_max_bytes": 2048, "preview_max_lines": True})
                limits = config.load_preview_limits()

                self.assertEqual(limits.max_bytes, 2048)
                self.assertEqual(limits.max_lines, PreviewLimits().max_lines)

                config.save_config({"preview_max_bytes": -1, "preview_max_lines": 20})
                limits = config.load_preview_limits()
                self.assertEqual(limits.max_bytes, PreviewLimits().max_bytes)
                self.assertEqual(limits.max_lines, 20)

    def test_save_config_ignores_write_failures(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("x", encoding="utf-8")
            with mock.patch("filescram.runtime.config.CONFIG_PATH", blocker / "config.json"):
                config.save_config({"show_hidden": True})
                self.assertEqual(config.load_config(), {})


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("filescram")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_without_log_file_installs_null_handler(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop(DEBUG_ENV_VAR, None)
            logger = configure_logging()

        self.assertEqual([type(handler) for handler in logger.handlers], [logging.NullHandler])
        self.assertFalse(logger.propagate)

    def test_log_file_receives_package_records(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "run.log"
            with mock.patch.dict(os.environ, {}, clear=False):
                os.environ.pop(DEBUG_ENV_VAR, None)
                configure_logging(log_path, "debug")

            logging.getLogger("filescram.tree_model.fs").debug("hello %s", "world")
            for handler in logging.getLogger("filescram").handlers:
                handler.flush()

            self.assertIn("hello world", log_path.read_text(encoding="utf-8"))

    def test_debug_env_var_forces_debug_level_and_default_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "debug.log"
            with mock.patch.dict(os.environ, {DEBUG_ENV_VAR: "1"}), mock.patch(
                "filescram.runtime.logs.default_debug_log_path", return_value=default_path
            ):
                logger = configure_logging()

            self.assertEqual(logger.level, logging.DEBUG)
            self.assertIsInstance(logger.handlers[0], logging.FileHandler)
            self.assertEqual(Path(logger.handlers[0].baseFilename), default_path)


if __name__ == "__main__":
    unittest.main()
