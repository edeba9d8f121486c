"""Tests for option resolution and config-file sanitization.

Validates precedence between config file, editor overrides and environment.
Ensures wrongly typed values fall back to defaults.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from bufmark import config
from bufmark.config import BufMarkOptions


class OptionResolutionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.json"
        patcher = mock.patch("bufmark.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        env = mock.patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop(config.DATA_DIR_ENV, None)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults_without_config_file(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.resolve_options(), BufMarkOptions())

    def test_config_file_values_apply(self) -> None:
        self.config_path.write_text('{"persist": false, "swap_native_mark_keymaps": true}', encoding="utf-8")
        options = config.resolve_options()
        self.assertFalse(options.persist)
        self.assertTrue(options.swap_native_mark_keymaps)
        self.assertTrue(options.keymaps)

    def test_overrides_beat_config_file(self) -> None:
        self.config_path.write_text('{"keymaps": false}', encoding="utf-8")
        options = config.resolve_options({"keymaps": True, "persist": 0})
        self.assertTrue(options.keymaps)
        self.assertFalse(options.persist)

    def test_explicit_false_disables_persistence(self) -> None:
        self.assertFalse(config.resolve_options({"persist": False}).persist)

    def test_invalid_values_are_ignored(self) -> None:
        options = config.resolve_options(
            {"persist": "no", "keymaps": 2, "swap_native_mark_keymaps": None, "data_dir": 5}
        )
        self.assertEqual(options, BufMarkOptions())

    def test_malformed_config_file_is_ignored(self) -> None:
        for content in ("{broken", "[1, 2]", ""):
            with self.subTest(content=content):
                self.config_path.write_text(content, encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_environment_data_dir_wins(self) -> None:
        os.environ[config.DATA_DIR_ENV] = "/tmp/from-env"
        options = config.resolve_options({"data_dir": "/tmp/from-editor"})
        self.assertEqual(options.data_dir, Path("/tmp/from-env"))

    def test_override_data_dir_is_expanded(self) -> None:
        options = config.resolve_options({"data_dir": "~/marks"})
        self.assertEqual(options.data_dir, Path("~/marks").expanduser())


class DefaultDataDirTests(unittest.TestCase):
    def test_editor_data_dir_is_used_when_known(self) -> None:
        self.assertEqual(
            config.default_data_dir("/home/me/.local/share/nvim"),
            Path("/home/me/.local/share/nvim/buf_mark"),
        )

    def test_platform_fallback_ends_with_storage_dirname(self) -> None:
        data_dir = config.default_data_dir()
        self.assertEqual(data_dir.name, config.STORAGE_DIRNAME)
        self.assertEqual(data_dir.parent.name, "nvim")


if __name__ == "__main__":
    unittest.main()
