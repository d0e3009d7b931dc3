"""Small path helpers shared by config loading and path resolution."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def expand(path: str) -> str:
    """Expand ``~`` and ``$VARS`` in a user supplied path string."""
    return os.path.expandvars(os.path.expanduser(path))
