"""Filesystem capability used by the link engine.

The engine only talks to the filesystem through the :class:`FileSystem`
protocol so tests can substitute a double that injects failures.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol


@dataclass(frozen=True)
class DirEntry:
    """One child of a directory, with type information captured at scan time."""

    name: str
    path: Path
    is_dir: bool
    is_file: bool
    is_symlink: bool


class FileSystem(Protocol):
    def scandir(self, path: Path) -> Iterator[DirEntry]:
        """Yield immediate children of ``path``."""

    def makedirs(self, path: Path) -> bool:
        """Create ``path`` and missing ancestors; return True if it was created."""

    def symlink(self, source: Path, target: Path) -> None: ...

    def readlink(self, path: Path) -> Path: ...

    def resolve_link(self, path: Path) -> Path:
        """Follow every link in ``path``; a missing tail is kept as written."""

    def remove(self, path: Path) -> None: ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Replace ``dst`` with a byte-for-byte copy of ``src``."""

    def lexists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def is_symlink(self, path: Path) -> bool: ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the real OS."""

    def scandir(self, path: Path) -> Iterator[DirEntry]:
        with os.scandir(path) as it:
            entries = list(it)
        for entry in sorted(entries, key=lambda e: e.name):
            is_symlink = entry.is_symlink()
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file()
            except OSError:
                is_dir = is_file = False
            yield DirEntry(
                name=entry.name,
                path=Path(entry.path),
                is_dir=is_dir,
                is_file=is_file,
                is_symlink=is_symlink,
            )

    def makedirs(self, path: Path) -> bool:
        if path.is_dir():
            return False
        path.mkdir(parents=True, exist_ok=True)
        return True

    def symlink(self, source: Path, target: Path) -> None:
        os.symlink(source, target)

    def readlink(self, path: Path) -> Path:
        return Path(os.readlink(path))

    def resolve_link(self, path: Path) -> Path:
        return Path(os.path.realpath(path))

    def remove(self, path: Path) -> None:
        os.remove(path)

    def copy_file(self, src: Path, dst: Path) -> None:
        # Copy next to dst, then rename over it, so dst is never missing.
        fd, tmp_name = tempfile.mkstemp(
            prefix=f'.{dst.name}.', suffix='.widots-tmp', dir=dst.parent
        )
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            shutil.copyfile(src, tmp)
            shutil.copymode(src, tmp)
            os.replace(tmp, dst)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def lexists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()
