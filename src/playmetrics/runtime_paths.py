"""Runtime path helpers.

Hosts sometimes ship the collector inside a frozen bundle (PyInstaller and
friends). In that case `__file__` points inside the bundle, so the runtime
root is located from `sys.executable` instead.
"""

from __future__ import annotations

import sys
from pathlib import Path


def runtime_root() -> Path:
    """Return the runtime root directory for config/data lookup."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def default_queue_path() -> Path:
    """Default location of the SQLite-backed delivery queue."""
    return runtime_root() / "storage" / "analytics" / "queue.sqlite3"
