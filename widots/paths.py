"""Path resolution for root source and target directories."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from .errors import InvalidInputError, PathNotFoundError
from .util import expand

log = logger


def home_dir() -> Path:
    home = os.path.expanduser('~')
    if not home or home == '~':
        raise PathNotFoundError('Home directory not found')
    return Path(home)


def expand_home(path: str | Path) -> Path:
    """Expand a leading ``~`` and environment variables."""
    raw = os.fspath(path)
    if not raw.strip():
        raise InvalidInputError('Empty path')
    return Path(expand(raw))


def canonicalize(path: str | Path) -> Path:
    """Return the absolute, symlink-free form of an existing path."""
    return Path(path).resolve(strict=True)


def parse_path(path: str | Path) -> Path:
    """Expand and canonicalize ``path``; a missing path is returned expanded."""
    expanded = expand_home(path)
    try:
        return canonicalize(expanded)
    except (OSError, RuntimeError) as ex:
        log.debug('Could not canonicalize {} ({}); using as-is', expanded, ex)
        return expanded.absolute()
