"""Editor capabilities the plugin depends on.

The controller talks to the editor only through this callback bundle, so it
can run against Neovim or a test double.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

LEVEL_ERROR = "error"
LEVEL_WARNING = "warning"
LEVEL_INFO = "info"

LEVEL_HIGHLIGHTS = {
    LEVEL_ERROR: "ErrorMsg",
    LEVEL_WARNING: "WarningMsg",
    LEVEL_INFO: "Normal",
}

EchoChunk = tuple[str, str]


def highlight_for_level(level: str) -> str:
    return LEVEL_HIGHLIGHTS.get(level, "Normal")


@dataclass(frozen=True)
class EditorHost:
    """Injected editor operations used by ``BufMarkController``."""

    find_open_view: Callable[[str], int | None]
    activate: Callable[[int], None]
    open_path: Callable[[str], None]
    current_path: Callable[[], str]
    notify: Callable[[str, str], None]
    echo: Callable[[Sequence[EchoChunk]], None]
    loaded_view_paths: Callable[[], list[str]]
    emit_changed: Callable[[], None]
    restore_cursor: Callable[[int], None] | None = None
