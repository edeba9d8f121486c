"""Neovim integration over a pynvim remote-plugin session.

``NvimHost`` turns the session into the ``EditorHost`` callbacks and
``BufMarkPlugin`` registers the user commands, functions and autocmds.
Setup is lazy: the store is built on ``VimEnter`` or on first use.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

import pynvim
from pynvim.api import NvimError

from .config import BufMarkOptions, default_data_dir, resolve_options
from .controller import BufMarkController
from .host import LEVEL_ERROR, EchoChunk, EditorHost, highlight_for_level
from .keymaps import (
    ACTION_DELETE,
    ACTION_GOTO,
    ACTION_NATIVE_GOTO,
    ACTION_NATIVE_SET,
    ACTION_SET,
    PromptActionRegistry,
    default_keymaps,
    native_mark_command,
)
from .navigation import ESCAPE_KEY
from .store import MarkStore

logger = logging.getLogger(__name__)

CHANGED_EVENT = "BufMarkChanged"
BUFFER_VAR = "buf_mark"
OPTIONS_VAR = "buf_mark"
_VIM_ERROR_RE = re.compile(r"Vim(?:\([^)]*\))?:(.*)")


def vim_error_text(exc: Exception) -> str:
    """Strip the ``Vim(cmd):`` prefix from an editor error message."""
    message = str(exc)
    match = _VIM_ERROR_RE.search(message)
    return match.group(1).strip() if match else message


class NvimHost:
    """Editor operations backed by a pynvim ``Nvim`` session."""

    def __init__(self, nvim: pynvim.Nvim) -> None:
        self.nvim = nvim

    def find_open_view(self, path: str) -> int | None:
        for buffer in self.nvim.buffers:
            if buffer.name == path:
                return buffer.number
        return None

    def activate(self, view: int) -> None:
        self.nvim.api.set_current_buf(view)

    def open_path(self, path: str) -> None:
        self.nvim.command("edit " + self.nvim.funcs.fnameescape(path))

    def current_path(self) -> str:
        return self.nvim.current.buffer.name

    def notify(self, message: str, level: str) -> None:
        self.nvim.api.echo([[message, highlight_for_level(level)]], True, {})

    def echo(self, chunks: Sequence[EchoChunk]) -> None:
        self.nvim.api.echo([[text, group] for text, group in chunks], True, {})

    def loaded_view_paths(self) -> list[str]:
        return [buffer.name for buffer in self.nvim.buffers if self.nvim.api.buf_is_loaded(buffer)]

    def emit_changed(self) -> None:
        self.nvim.api.exec_autocmds("User", {"pattern": CHANGED_EVENT, "modeline": False})

    def remember_cursor(self) -> None:
        """Cache the cursor of the buffer being left in ``b:buf_mark``."""
        buffer = self.nvim.current.buffer
        row, col = self.nvim.current.window.cursor
        cached = buffer.vars.get(BUFFER_VAR)
        state = dict(cached) if isinstance(cached, Mapping) else {}
        state["last_cursor_position"] = [row, col]
        buffer.vars[BUFFER_VAR] = state

    def restore_cursor(self, view: int) -> None:
        """Move the cursor to the position cached for ``view``, if any."""
        try:
            cached = self.nvim.api.buf_get_var(view, BUFFER_VAR)
        except NvimError:
            return
        position = cached.get("last_cursor_position") if isinstance(cached, Mapping) else None
        if not isinstance(position, (list, tuple)) or len(position) != 2:
            return
        row, col = position
        line_count = self.nvim.api.buf_line_count(view)
        row = max(1, min(int(row), line_count))
        try:
            self.nvim.current.window.cursor = (row, max(0, int(col)))
        except NvimError as exc:
            logger.debug("could not restore cursor for buffer %s: %s", view, exc)

    def editor_host(self) -> EditorHost:
        return EditorHost(
            find_open_view=self.find_open_view,
            activate=self.activate,
            open_path=self.open_path,
            current_path=self.current_path,
            notify=self.notify,
            echo=self.echo,
            loaded_view_paths=self.loaded_view_paths,
            emit_changed=self.emit_changed,
            restore_cursor=self.restore_cursor,
        )


@pynvim.plugin
class BufMarkPlugin:
    """Remote plugin exposing buffer marks to Neovim."""

    def __init__(self, nvim: pynvim.Nvim) -> None:
        self.nvim = nvim
        self.host = NvimHost(nvim)
        self.options: BufMarkOptions | None = None
        self.controller: BufMarkController | None = None
        self.prompts = PromptActionRegistry()

    def setup(self, overrides: Mapping[str, object] | None = None) -> BufMarkController:
        """Resolve options, load marks for the working directory, install keymaps."""
        merged: dict[str, object] = {}
        user_options = self.nvim.vars.get(OPTIONS_VAR)
        if isinstance(user_options, Mapping):
            merged.update(user_options)
        if overrides:
            merged.update(overrides)
        options = resolve_options(merged)
        data_dir = options.data_dir or default_data_dir(self.nvim.funcs.stdpath("data"))

        def store_for(cwd: str) -> MarkStore:
            return MarkStore.initialize(cwd, Path(data_dir), persist_enabled=options.persist)

        controller = BufMarkController(
            store_for(self.nvim.funcs.getcwd()),
            self.host.editor_host(),
            store_factory=store_for,
        )
        self.prompts = (
            PromptActionRegistry()
            .register(ACTION_SET, controller.set)
            .register(ACTION_DELETE, controller.delete)
            .register(ACTION_GOTO, controller.goto)
            .register(ACTION_NATIVE_SET, lambda key: self.native_mark(ACTION_NATIVE_SET, key))
            .register(ACTION_NATIVE_GOTO, lambda key: self.native_mark(ACTION_NATIVE_GOTO, key))
        )
        if options.keymaps:
            for keymap in default_keymaps(options.swap_native_mark_keymaps):
                self.nvim.api.set_keymap(
                    keymap.mode,
                    keymap.lhs,
                    keymap.rhs,
                    {"noremap": True, "silent": True, "desc": keymap.desc},
                )
        self.options = options
        self.controller = controller
        controller.refresh_status()
        logger.debug("buf-mark ready for %s (%d marks)", controller.store.cwd, len(controller.store))
        return controller

    def ensure_setup(self) -> BufMarkController:
        if self.controller is None:
            return self.setup()
        return self.controller

    def native_mark(self, action: str, key: str) -> bool:
        """Run a native ``m``/``'`` mark command, echoing editor errors."""
        if key == ESCAPE_KEY:
            return False
        try:
            self.nvim.command(native_mark_command(action, key))
        except NvimError as exc:
            self.host.notify(vim_error_text(exc), LEVEL_ERROR)
            return False
        return True

    # -- user commands ---------------------------------------------------

    @pynvim.command("BufMarkSet", nargs="1", sync=True)
    def set_command(self, args: list[str]) -> None:
        self.ensure_setup().run_command("BufMarkSet", args)

    @pynvim.command("BufMarkDelete", nargs="1", sync=True)
    def delete_command(self, args: list[str]) -> None:
        self.ensure_setup().run_command("BufMarkDelete", args)

    @pynvim.command("BufMarkGoto", nargs="1", sync=True)
    def goto_command(self, args: list[str]) -> None:
        self.ensure_setup().run_command("BufMarkGoto", args)

    @pynvim.command("BufMarkList", nargs="0", sync=True)
    def list_command(self, args: list[str]) -> None:
        self.ensure_setup().run_command("BufMarkList", args)

    @pynvim.command("BufMarkDeleteAll", nargs="0", sync=True)
    def delete_all_command(self, args: list[str]) -> None:
        self.ensure_setup().run_command("BufMarkDeleteAll", args)

    # -- functions -------------------------------------------------------

    @pynvim.function("BufMarkSetup", sync=True)
    def setup_function(self, args: list[object]) -> None:
        overrides = args[0] if args and isinstance(args[0], Mapping) else None
        self.setup(overrides)

    @pynvim.function("BufMarkPrompt", sync=True)
    def prompt_function(self, args: list[object]) -> None:
        """Read one character and run the prompt action named in ``args[0]``."""
        self.ensure_setup()
        action = str(args[0]) if args else ""
        if action not in self.prompts:
            self.host.notify(f"Unknown buf-mark action: {action}", LEVEL_ERROR)
            return
        key = self.nvim.funcs.getcharstr()
        self.prompts.dispatch(action, key)

    @pynvim.function("BufMarkStatus", sync=True)
    def status_function(self, args: list[object]) -> str:
        return self.ensure_setup().status_text()

    @pynvim.function("BufMarkList", sync=True)
    def list_function(self, args: list[object]) -> dict[str, str]:
        return dict(self.ensure_setup().list())

    # -- autocmds --------------------------------------------------------

    @pynvim.autocmd("VimEnter", pattern="*", sync=True)
    def on_vim_enter(self) -> None:
        self.ensure_setup()

    @pynvim.autocmd("BufLeave", pattern="*", sync=True)
    def on_buf_leave(self) -> None:
        self.host.remember_cursor()

    @pynvim.autocmd("BufEnter", pattern="*", sync=True)
    def on_buf_enter(self) -> None:
        self.ensure_setup().refresh_status()

    @pynvim.autocmd("DirChanged", pattern="*", eval="getcwd()", sync=True)
    def on_dir_changed(self, cwd: str) -> None:
        self.ensure_setup().change_scope(cwd)
