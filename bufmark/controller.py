"""User-facing buffer-mark operations.

Validates keys, talks to the ``MarkStore`` and reports outcomes through the
injected ``EditorHost``. Methods return whether the request was carried out
so key handlers and commands can react without inspecting host output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .host import LEVEL_ERROR, LEVEL_WARNING, EditorHost, highlight_for_level
from .navigation import ESCAPE_KEY, GotoOutcome, display_path, is_mark_key, resolve_goto
from .status import StatusIndicator
from .store import MarkStore

logger = logging.getLogger(__name__)

MSG_INVALID_KEY = "Please provide a single character"
MSG_NOT_SET = "Buffer Mark not set"
MSG_NO_MARKS = "No buffer marks set"
MSG_ALL_DELETED = "All buffer marks deleted"
MSG_NO_FILE = "Buffer has no file name"
LIST_TITLE = "mark  file"

# command name -> (controller method, takes a mark key)
COMMAND_HANDLERS: dict[str, tuple[str, bool]] = {
    "BufMarkSet": ("set", True),
    "BufMarkDelete": ("delete", True),
    "BufMarkGoto": ("goto", True),
    "BufMarkList": ("list_pretty", False),
    "BufMarkDeleteAll": ("delete_all", False),
}


class BufMarkController:
    """Operations bound to keymaps, user commands and the status line."""

    def __init__(
        self,
        store: MarkStore,
        host: EditorHost,
        store_factory: Callable[[str], MarkStore] | None = None,
        status: StatusIndicator | None = None,
    ) -> None:
        self.store = store
        self.host = host
        self.status = status if status is not None else StatusIndicator()
        self._store_factory = store_factory
        self._stores: dict[str, MarkStore] = {store.cwd: store}
        self.store.subscribe(self._on_marks_changed)

    def _on_marks_changed(self, _store: MarkStore) -> None:
        self.refresh_status()
        self.host.emit_changed()

    def _accept_key(self, key: str) -> bool:
        """Validate ``key``, reporting invalid input. ESC cancels silently."""
        if key == ESCAPE_KEY:
            return False
        if not is_mark_key(key):
            self.host.notify(MSG_INVALID_KEY, LEVEL_ERROR)
            return False
        return True

    def set(self, key: str) -> bool:
        """Mark the current buffer's file under ``key``."""
        if not self._accept_key(key):
            return False
        path = self.host.current_path()
        if not path:
            self.host.notify(MSG_NO_FILE, LEVEL_ERROR)
            return False
        self.store.set(key, path)
        return True

    def delete(self, key: str) -> bool:
        if not self._accept_key(key):
            return False
        if not self.store.delete(key):
            self.host.notify(MSG_NOT_SET, LEVEL_WARNING)
            return False
        return True

    def delete_all(self) -> bool:
        self.store.delete_all()
        self.host.notify(MSG_ALL_DELETED, LEVEL_WARNING)
        return True

    def goto(self, key: str) -> bool:
        """Switch to the file marked ``key``, opening it when not loaded."""
        if not self._accept_key(key):
            return False
        path = self.store.get(key)
        if path is None:
            self.host.notify(MSG_NOT_SET, LEVEL_ERROR)
            return False

        already_current = self.host.current_path() == path
        activated: list[int] = []

        def activate(view: int) -> None:
            self.host.activate(view)
            activated.append(view)

        outcome = resolve_goto(path, self.host.find_open_view, activate, self.host.open_path)
        if outcome is not GotoOutcome.ACTIVATED or already_current:
            return True
        if self.host.restore_cursor is not None:
            self.host.restore_cursor(activated[0])
        return True

    def list(self) -> list[tuple[str, str]]:
        return self.store.list()

    def list_pretty(self) -> bool:
        entries = self.store.list()
        if not entries:
            self.host.notify(MSG_NO_MARKS, LEVEL_WARNING)
            return False
        lines = [f" {key}    {display_path(path, self.store.cwd)}" for key, path in entries]
        self.host.echo([(LIST_TITLE, "Title"), ("\n" + "\n".join(lines), highlight_for_level("info"))])
        return True

    def run_command(self, name: str, args: Sequence[str] = ()) -> bool:
        """Dispatch a ``:BufMark*`` user command."""
        method_name, takes_key = COMMAND_HANDLERS[name]
        handler = getattr(self, method_name)
        if not takes_key:
            return handler()
        key = args[0] if len(args) == 1 else ""
        if not is_mark_key(key):
            self.host.notify(MSG_INVALID_KEY, LEVEL_ERROR)
            return False
        return handler(key)

    def change_scope(self, cwd: str) -> bool:
        """Swap in the store for working directory ``cwd``.

        Stores already seen in this session are reused, so their in-memory
        marks survive even when nothing reached disk. Listeners move to the
        new store and a change notification follows.
        """
        if self._store_factory is None or cwd == self.store.cwd:
            return False
        new_store = self._stores.get(cwd)
        if new_store is None:
            new_store = self._store_factory(cwd)
            self._stores[cwd] = new_store
        for listener in self.store.listeners:
            self.store.unsubscribe(listener)
            new_store.subscribe(listener)
        logger.info("buf-mark scope changed: %s -> %s", self.store.cwd, cwd)
        self.store = new_store
        self._on_marks_changed(new_store)
        return True

    def refresh_status(self) -> str:
        return self.status.update(
            self.store.list(),
            self.host.loaded_view_paths(),
            self.host.current_path(),
        )

    def status_text(self) -> str:
        return self.status.get()
