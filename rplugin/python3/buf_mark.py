"""Remote-plugin entry module discovered by Neovim's python3 host.

Plugin managers clone the repository without installing it, so the
repository root is put on ``sys.path`` before importing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

from bufmark.nvim import BufMarkPlugin  # noqa: E402

__all__ = ["BufMarkPlugin"]
