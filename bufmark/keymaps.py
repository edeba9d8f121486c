"""Default keymaps and the prompt-action dispatch table.

Keymaps that need a mark character call back into the plugin through
``BufMarkPrompt(action)``, which reads one character and dispatches it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

ACTION_SET = "set"
ACTION_DELETE = "delete"
ACTION_GOTO = "goto"
ACTION_NATIVE_SET = "native_set"
ACTION_NATIVE_GOTO = "native_goto"


@dataclass(frozen=True)
class KeymapSpec:
    """One normal-mode mapping."""

    lhs: str
    rhs: str
    desc: str
    mode: str = "n"


def prompt_rhs(action: str) -> str:
    return f"<Cmd>call BufMarkPrompt('{action}')<CR>"


def default_keymaps(swap_native_mark_keymaps: bool = False) -> tuple[KeymapSpec, ...]:
    """Return the keymaps installed when keymaps are enabled.

    With ``swap_native_mark_keymaps`` the bare ``m``/``'`` keys drive buffer
    marks and the ``<leader>`` variants fall through to native marks.
    """
    if swap_native_mark_keymaps:
        set_lhs, goto_lhs = "m", "'"
    else:
        set_lhs, goto_lhs = "<leader>m", "<leader>'"

    keymaps = [
        KeymapSpec(set_lhs, prompt_rhs(ACTION_SET), "BufMark: Set"),
        KeymapSpec("<leader>M", prompt_rhs(ACTION_DELETE), "BufMark: Delete"),
        KeymapSpec(goto_lhs, prompt_rhs(ACTION_GOTO), "BufMark: Goto"),
        KeymapSpec("<leader>''", ":b#<CR>", "BufMark: Goto alternate buffer"),
        KeymapSpec("<leader>'\"", "<Cmd>BufMarkList<CR>", "BufMark: List"),
    ]
    if swap_native_mark_keymaps:
        keymaps.extend(
            [
                KeymapSpec("<leader>m", prompt_rhs(ACTION_NATIVE_SET), "Set native vim mark"),
                KeymapSpec("<leader>'", prompt_rhs(ACTION_NATIVE_GOTO), "Go to native vim mark"),
            ]
        )
    return tuple(keymaps)


def native_mark_command(action: str, key: str) -> str:
    """Build the ``normal!`` command for a native mark action."""
    prefix = "m" if action == ACTION_NATIVE_SET else "'"
    return f"normal! {prefix}{key}"


class PromptActionRegistry:
    """Small action -> handler table for character prompts."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[str], bool | None]] = {}

    def register(self, action: str, handler: Callable[[str], bool | None]) -> PromptActionRegistry:
        """Register ``handler`` for ``action`` and return ``self`` for fluent usage."""
        self._handlers[action] = handler
        return self

    def __contains__(self, action: object) -> bool:
        return action in self._handlers

    def dispatch(self, action: str, key: str) -> bool | None:
        """Invoke the handler for ``action``; ``None`` when none is registered."""
        handler = self._handlers.get(action)
        if handler is None:
            return None
        return handler(key)
