"""Per-directory buffer-mark store with best-effort JSON persistence.

Marks map one character to an absolute file path. Every working directory
gets its own storage file, named from a SHA-256 of the directory string.
All disk access is defensive: unreadable or malformed files load as empty,
and failed writes leave the in-memory marks authoritative.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable
from pathlib import Path

from .navigation import is_mark_key

logger = logging.getLogger(__name__)

STORAGE_SUFFIX = ".json"

MarkListener = Callable[["MarkStore"], None]


def scope_storage_path(data_dir: Path, cwd: str) -> Path:
    """Return the storage file for the scope identified by ``cwd``."""
    digest = hashlib.sha256(cwd.encode("utf-8")).hexdigest()
    return Path(data_dir) / f"{digest}{STORAGE_SUFFIX}"


def _sanitize_marks(value: object) -> dict[str, str] | None:
    """Keep only valid keys mapped to non-empty string paths."""
    if not isinstance(value, dict):
        return None
    marks: dict[str, str] = {}
    for key, path in value.items():
        if not isinstance(key, str) or not is_mark_key(key):
            continue
        if not isinstance(path, str) or not path:
            continue
        marks[key] = path
    return marks


class MarkStore:
    """Character-to-path marks for one working directory."""

    def __init__(self, cwd: str, storage_path: Path, persist_enabled: bool = True) -> None:
        self.cwd = cwd
        self.storage_path = storage_path
        self.persist_enabled = persist_enabled
        self._marks: dict[str, str] = {}
        self._listeners: list[MarkListener] = []

    @classmethod
    def initialize(cls, cwd: str, data_dir: Path, persist_enabled: bool = True) -> MarkStore:
        """Build the store for ``cwd`` and load its persisted marks when enabled."""
        store = cls(cwd, scope_storage_path(data_dir, cwd), persist_enabled=persist_enabled)
        if persist_enabled:
            store.load()
        return store

    # -- queries ---------------------------------------------------------

    def get(self, key: str) -> str | None:
        return self._marks.get(key)

    def list(self) -> list[tuple[str, str]]:
        """Return a snapshot of ``(key, path)`` pairs sorted by key."""
        return sorted(self._marks.items())

    def __len__(self) -> int:
        return len(self._marks)

    def __contains__(self, key: object) -> bool:
        return key in self._marks

    # -- mutations -------------------------------------------------------

    def set(self, key: str, path: str) -> None:
        """Point ``key`` at ``path``, replacing any previous target."""
        if not is_mark_key(key):
            raise ValueError(f"invalid mark key: {key!r}")
        self._marks[key] = path
        self._changed()

    def delete(self, key: str) -> bool:
        """Remove ``key`` and return whether it was set.

        Persistence and change notification happen either way.
        """
        existed = self._marks.pop(key, None) is not None
        self._changed()
        return existed

    def delete_all(self) -> None:
        self._marks = {}
        self._changed()

    # -- change notification --------------------------------------------

    def subscribe(self, listener: MarkListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: MarkListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> tuple[MarkListener, ...]:
        return tuple(self._listeners)

    def _changed(self) -> None:
        self.persist()
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("buf-mark change listener failed")

    # -- persistence -----------------------------------------------------

    def persist(self) -> bool:
        """Write the marks for this scope, replacing the previous file.

        Returns whether the write succeeded. Errors are logged, never raised.
        """
        if not self.persist_enabled:
            return False
        data = {"cwd": self.cwd, "marks": dict(self._marks)}
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            self.storage_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except Exception as exc:
            logger.debug("could not persist marks to %s: %s", self.storage_path, exc)
            return False
        return True

    def load(self) -> bool:
        """Replace in-memory marks with the persisted ones.

        A missing, empty, unreadable or malformed file leaves the current marks
        untouched and returns ``False``.
        """
        try:
            data = json.loads(self.storage_path.read_text(encoding="utf-8"))
        except Exception as exc:
            logger.debug("no marks loaded from %s: %s", self.storage_path, exc)
            return False
        marks = _sanitize_marks(data.get("marks")) if isinstance(data, dict) else None
        if marks is None:
            logger.debug("ignoring %s: no marks object", self.storage_path)
            return False
        self._marks = marks
        return True
