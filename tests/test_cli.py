"""CLI regression tests for listing and editing persisted marks."""

from __future__ import annotations

import contextlib
import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from bufmark import cli, config
from bufmark.store import MarkStore, scope_storage_path


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.data_dir = self.root / "marks"
        self.cwd = str(self.root / "proj")
        env = mock.patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop(config.DATA_DIR_ENV, None)

    def _run(self, *argv: str) -> str:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            cli.main(["--cwd", self.cwd, "--data-dir", str(self.data_dir), *argv])
        return out.getvalue()

    def test_set_then_list(self) -> None:
        self._run("set", "b", "src/b.py")
        self._run("set", "a", "/etc/hosts")

        output = self._run("list")

        self.assertEqual(output, "mark  file\n a    /etc/hosts\n b    src/b.py\n")
        store = MarkStore.initialize(self.cwd, self.data_dir)
        self.assertEqual(store.get("b"), os.path.join(self.cwd, "src", "b.py"))

    def test_list_without_marks(self) -> None:
        self.assertEqual(self._run("list"), "No buffer marks set\n")

    def test_delete_missing_mark_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run("delete", "z")
        self.assertEqual(str(ctx.exception), "Buffer Mark not set")

    def test_invalid_key_is_rejected(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                self._run("set", "ab", "x.py")
        self.assertEqual(ctx.exception.code, 2)

    def test_clear_empties_storage(self) -> None:
        self._run("set", "a", "a.py")
        self._run("clear")
        document = json.loads(scope_storage_path(self.data_dir, self.cwd).read_text(encoding="utf-8"))
        self.assertEqual(document["marks"], {})

    def test_path_and_show(self) -> None:
        self.assertEqual(self._run("path").strip(), str(scope_storage_path(self.data_dir, self.cwd)))
        with self.assertRaises(SystemExit):
            self._run("show")

        self._run("set", "a", "a.py")
        shown = json.loads(self._run("show", "--no-color"))
        self.assertEqual(shown["cwd"], self.cwd)

    def test_data_dir_falls_back_to_environment(self) -> None:
        os.environ[config.DATA_DIR_ENV] = str(self.data_dir)
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            cli.main(["--cwd", self.cwd, "path"])
        self.assertEqual(out.getvalue().strip(), str(scope_storage_path(self.data_dir, self.cwd)))


class HighlightDocumentTests(unittest.TestCase):
    def test_highlight_adds_ansi_sequences(self) -> None:
        rendered = cli.highlight_document('{"cwd": "/p", "marks": {}}\n', "monokai")
        self.assertIn("\x1b[", rendered)

    def test_unknown_style_exits(self) -> None:
        with self.assertRaises(SystemExit):
            cli.highlight_document("{}", "no-such-style")


if __name__ == "__main__":
    unittest.main()
