"""Status-line indicator for marks of currently loaded buffers.

- the current buffer's mark is highlighted with ``TabLineSel``
- other loaded, marked buffers use ``TabLine``
- an unmarked current buffer gets a blank ``DiffText`` slot
- marks are shown in character order

The result is a statusline/tabline fragment (``%#Group#`` syntax).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

CURRENT_HIGHLIGHT = "TabLineSel"
OTHER_HIGHLIGHT = "TabLine"
UNMARKED_HIGHLIGHT = "DiffText"


def render_status(
    entries: Iterable[tuple[str, str]],
    loaded_paths: Sequence[str],
    current_path: str,
) -> str:
    parts: list[str] = []
    current_is_marked = False
    for key, path in sorted(entries):
        for loaded in loaded_paths:
            if loaded != path:
                continue
            if path == current_path:
                parts.append(f"%#{CURRENT_HIGHLIGHT}#")
                current_is_marked = True
            else:
                parts.append(f"%#{OTHER_HIGHLIGHT}#")
            parts.append(f" {key} ")
    if not current_is_marked:
        parts.append(f"%#{UNMARKED_HIGHLIGHT}#  ")
    return "".join(parts) + "%*"


class StatusIndicator:
    """Cache of the last rendered status fragment."""

    def __init__(self) -> None:
        self.text = ""

    def update(
        self,
        entries: Iterable[tuple[str, str]],
        loaded_paths: Sequence[str],
        current_path: str,
    ) -> str:
        self.text = render_status(entries, loaded_paths, current_path)
        return self.text

    def get(self) -> str:
        return self.text
