"""Plugin options and persistent JSON config helpers.

Options come from defaults, then the JSON config file, then editor-provided
overrides, then the environment. All access is defensive: malformed or
missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "buf_mark"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DATA_DIR_ENV = "BUF_MARK_DATA_DIR"
STORAGE_DIRNAME = "buf_mark"


@dataclass(frozen=True)
class BufMarkOptions:
    """User-tunable plugin behavior."""

    persist: bool = True
    keymaps: bool = True
    swap_native_mark_keymaps: bool = False
    data_dir: Path | None = None


def default_data_dir(editor_data_dir: str | None = None) -> Path:
    """Return the mark storage directory.

    ``editor_data_dir`` is the editor's own data directory (``stdpath('data')``);
    without it the platform data directory for ``nvim`` is used.
    """
    base = editor_data_dir or user_data_dir("nvim", appauthor=False)
    return Path(base) / STORAGE_DIRNAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _bool_option(value: object, fallback: bool) -> bool:
    """Accept only explicit booleans (``0``/``1`` from Vimscript count too)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    return fallback


def apply_options(base: BufMarkOptions, raw: Mapping[str, object] | None) -> BufMarkOptions:
    """Overlay recognized keys from ``raw`` onto ``base``.

    Unknown keys and wrongly typed values are ignored.
    """
    if not isinstance(raw, Mapping):
        return base
    data_dir = base.data_dir
    raw_data_dir = raw.get("data_dir")
    if isinstance(raw_data_dir, str) and raw_data_dir.strip():
        data_dir = Path(raw_data_dir.strip()).expanduser()
    return replace(
        base,
        persist=_bool_option(raw.get("persist"), base.persist),
        keymaps=_bool_option(raw.get("keymaps"), base.keymaps),
        swap_native_mark_keymaps=_bool_option(
            raw.get("swap_native_mark_keymaps"), base.swap_native_mark_keymaps
        ),
        data_dir=data_dir,
    )


def resolve_options(overrides: Mapping[str, object] | None = None) -> BufMarkOptions:
    """Build effective options.

    Priority: environment > ``overrides`` > config file > defaults.
    """
    options = apply_options(BufMarkOptions(), load_config())
    options = apply_options(options, overrides)
    env_data_dir = os.environ.get(DATA_DIR_ENV, "").strip()
    if env_data_dir:
        options = replace(options, data_dir=Path(env_data_dir).expanduser())
    return options
