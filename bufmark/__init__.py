"""Single-character marks for files, scoped per working directory."""

from __future__ import annotations

from .navigation import is_mark_key
from .store import MarkStore, scope_storage_path

__all__ = ["MarkStore", "is_mark_key", "scope_storage_path"]
