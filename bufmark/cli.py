"""Command-line front door for buf-mark.

Inspects and edits the persisted marks of a working directory without
starting the editor. Uses the same storage files as the Neovim plugin.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer
from pygments.util import ClassNotFound

from .config import default_data_dir, resolve_options
from .controller import LIST_TITLE, MSG_INVALID_KEY, MSG_NO_MARKS, MSG_NOT_SET
from .navigation import display_path, is_mark_key
from .store import MarkStore


def _mark_key(value: str) -> str:
    """argparse type for single-character mark keys."""
    if not is_mark_key(value):
        raise argparse.ArgumentTypeError(MSG_INVALID_KEY)
    return value


def _resolve_data_dir(raw: str | None) -> Path:
    if raw:
        return Path(raw).expanduser()
    options = resolve_options()
    return options.data_dir or default_data_dir()


def highlight_document(text: str, style: str) -> str:
    """Colorize a JSON storage document for the terminal."""
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound as exc:
        raise SystemExit(f"Unknown style: {style}") from exc
    return highlight(text, JsonLexer(), formatter)


def format_listing(store: MarkStore) -> str:
    entries = store.list()
    if not entries:
        return MSG_NO_MARKS + "\n"
    lines = [LIST_TITLE]
    lines.extend(f" {key}    {display_path(path, store.cwd)}" for key, path in entries)
    return "\n".join(lines) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bufmark",
        description="Inspect and edit buffer marks persisted for a working directory.",
    )
    parser.add_argument("--cwd", default=None, help="Working directory scope. Defaults to current directory.")
    parser.add_argument("--data-dir", default=None, help="Mark storage directory.")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List marks sorted by character.")
    set_parser = commands.add_parser("set", help="Mark PATH under CHAR.")
    set_parser.add_argument("char", type=_mark_key)
    set_parser.add_argument("path")
    delete_parser = commands.add_parser("delete", help="Delete the mark for CHAR.")
    delete_parser.add_argument("char", type=_mark_key)
    commands.add_parser("clear", help="Delete all marks for the scope.")
    commands.add_parser("path", help="Print the storage file for the scope.")
    show_parser = commands.add_parser("show", help="Print the raw storage document.")
    show_parser.add_argument("--style", default="monokai", help="Pygments style name.")
    show_parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one mark command against the scope store."""
    args = build_parser().parse_args(argv)
    cwd = os.path.abspath(args.cwd or os.getcwd())
    store = MarkStore.initialize(cwd, _resolve_data_dir(args.data_dir))

    if args.command == "list":
        sys.stdout.write(format_listing(store))
    elif args.command == "set":
        store.set(args.char, os.path.abspath(os.path.join(cwd, os.path.expanduser(args.path))))
    elif args.command == "delete":
        if not store.delete(args.char):
            raise SystemExit(MSG_NOT_SET)
    elif args.command == "clear":
        store.delete_all()
    elif args.command == "path":
        sys.stdout.write(f"{store.storage_path}\n")
    elif args.command == "show":
        if not store.storage_path.exists():
            raise SystemExit(f"No marks stored for {cwd}")
        text = store.storage_path.read_text(encoding="utf-8")
        if not args.no_color and sys.stdout.isatty():
            text = highlight_document(text, args.style)
        sys.stdout.write(text)
