"""Project-specific exception types."""

from __future__ import annotations

import errno
from pathlib import Path


class WidotsError(RuntimeError):
    """Base error for whole-operation widots failures."""


class PathNotFoundError(WidotsError):
    """Raised when a root source or target path does not exist."""


class PermissionDeniedError(WidotsError):
    """Raised when the OS refuses access to a root path."""


class InvalidInputError(WidotsError):
    """Raised when user supplied paths or configuration are unusable."""


class ConfirmationError(InvalidInputError):
    """Raised when the confirmation prompt itself fails."""


class FilesystemError(WidotsError):
    """Raised for any other I/O failure that aborts an operation."""


def error_from_os(exc: OSError, path: str | Path) -> WidotsError:
    """Map an ``OSError`` to the widots error taxonomy."""
    detail = f'{path}: {exc.strerror or exc}'
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return PathNotFoundError(detail)
    if isinstance(exc, PermissionError) or exc.errno in (
        errno.EACCES,
        errno.EPERM,
    ):
        return PermissionDeniedError(detail)
    if isinstance(exc, NotADirectoryError):
        return InvalidInputError(detail)
    return FilesystemError(detail)
