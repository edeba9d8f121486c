"""Navigation primitives: mark-key validation, display paths, goto resolution.

This module intentionally has no editor concerns.
Host operations are passed in as plain callables.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Callable

ESCAPE_KEY = "\x1b"


class GotoOutcome(enum.Enum):
    """How a goto request was satisfied by the host."""

    ACTIVATED = "activated"
    OPENED = "opened"


def is_mark_key(key: str) -> bool:
    """Return whether key is a valid single-character buffer-mark identifier."""
    return isinstance(key, str) and len(key) == 1 and key.isprintable() and not key.isspace()


def display_path(path: str, cwd: str, home: str | None = None) -> str:
    """Shorten ``path`` for listings.

    Paths inside ``cwd`` become relative, paths inside ``home`` are shown as
    ``~/...``, anything else is returned unchanged.
    """
    if home is None:
        home = os.path.expanduser("~")
    for base, prefix in ((cwd, ""), (home, "~" + os.sep)):
        if not base:
            continue
        base = base.rstrip(os.sep) or os.sep
        if path == base:
            return "." if not prefix else "~"
        base_with_sep = base if base.endswith(os.sep) else base + os.sep
        if path.startswith(base_with_sep):
            return prefix + path[len(base_with_sep):]
    return path


def resolve_goto(
    path: str,
    find_open_view: Callable[[str], int | None],
    activate: Callable[[int], None],
    open_path: Callable[[str], None],
) -> GotoOutcome:
    """Switch to an open view of ``path`` or ask the host to open it fresh."""
    view = find_open_view(path)
    if view is not None:
        activate(view)
        return GotoOutcome.ACTIVATED
    open_path(path)
    return GotoOutcome.OPENED
