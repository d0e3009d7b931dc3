"""Link a dotfiles tree into a target tree, and materialize it back.

Linking mirrors every eligible directory of the source under the target and
places a symlink at the mirrored path of every eligible file. Materializing
walks a target tree and replaces each symlink with a regular-file copy of
whatever it currently points at.

Both walks report one result per visited entry. A failure on one entry is
recorded as an :class:`~widots.results.Error` and the walk carries on; only a
failure to read the root directory is raised.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .errors import error_from_os
from .fsops import DirEntry, FileSystem, LocalFileSystem
from .ignore import IgnoreRules, is_valid_name
from .results import (
    Created,
    Error,
    FileProcessResult,
    Linked,
    Materialized,
    Skipped,
)

log = logger


class Linker:
    """Symlink engine bound to one ignore rule set and one filesystem."""

    def __init__(
        self,
        rules: IgnoreRules | None = None,
        fs: FileSystem | None = None,
    ):
        self.rules = rules if rules is not None else IgnoreRules()
        self.fs = fs if fs is not None else LocalFileSystem()

    def should_ignore(self, path: str | Path) -> bool:
        return self.rules.should_ignore(path)

    def link_recursively(
        self, source: Path, target: Path, force: bool = False
    ) -> list[FileProcessResult]:
        """Mirror ``source`` under ``target`` with symlinks."""
        source = Path(source)
        target = Path(target)
        log.debug('Linking {} -> {} (force={})', source, target, force)
        try:
            entries = list(self.fs.scandir(source))
        except OSError as ex:
            raise error_from_os(ex, source) from ex
        results: list[FileProcessResult] = []
        self._link_entries(entries, source, target, force, results)
        return results

    def _link_entries(
        self,
        entries: list[DirEntry],
        source_root: Path,
        target_root: Path,
        force: bool,
        results: list[FileProcessResult],
    ) -> None:
        for entry in entries:
            rel = entry.path.relative_to(source_root)
            dst = target_root / rel
            log.debug('Link processing: {}', rel)
            if self.rules.should_ignore(rel):
                results.append(Skipped(entry.path, 'ignored'))
            elif not is_valid_name(entry.name):
                results.append(Skipped(entry.path, 'invalid name'))
            elif entry.is_dir:
                try:
                    children = list(self.fs.scandir(entry.path))
                except OSError as ex:
                    results.append(
                        _error(entry.path, f'cannot read directory: {ex}')
                    )
                    continue
                res = self._mirror_directory(dst)
                results.append(res)
                if isinstance(res, Error):
                    # Nothing below a directory we could not create.
                    continue
                self._link_entries(
                    children, source_root, target_root, force, results
                )
            elif entry.is_file:
                results.append(self._make_symlink(entry.path, dst, force))
            else:
                results.append(
                    Skipped(entry.path, 'not a regular file or directory')
                )

    def _mirror_directory(self, dst: Path) -> FileProcessResult:
        try:
            created = self.fs.makedirs(dst)
        except OSError as ex:
            return _error(dst, f'cannot create directory: {ex}')
        if created:
            log.debug('Created directory: {}', dst)
            return Created(dst)
        return Skipped(dst, 'exists')

    def _make_symlink(
        self, src: Path, dst: Path, force: bool
    ) -> FileProcessResult:
        try:
            self.fs.makedirs(dst.parent)
        except OSError as ex:
            return _error(dst, f'cannot create parent directory: {ex}')
        if self.fs.lexists(dst):
            if not force:
                return Skipped(dst, 'exists')
            try:
                self.fs.remove(dst)
            except OSError as ex:
                return _error(dst, f'cannot remove existing entry: {ex}')
        try:
            self.fs.symlink(src, dst)
        except OSError as ex:
            return _error(dst, f'failed to create symlink: {ex}')
        log.debug('Symlink created: {} -> {}', src, dst)
        return Linked(src, dst)

    def materialize_symlinks_recursively(
        self, target: Path
    ) -> list[FileProcessResult]:
        """Replace every symlink under ``target`` with a copy of its content.

        Directories are descended into but not reported, and regular files
        are left alone, so a second run over the same tree reports nothing.
        """
        target = Path(target)
        log.debug('Materializing symlinks under {}', target)
        results: list[FileProcessResult] = []
        stack = [target]
        while stack:
            current = stack.pop()
            try:
                entries = list(self.fs.scandir(current))
            except OSError as ex:
                if current == target:
                    raise error_from_os(ex, target) from ex
                results.append(_error(current, f'cannot read directory: {ex}'))
                continue
            subdirs: list[Path] = []
            for entry in entries:
                if self.rules.should_ignore(entry.path.relative_to(target)):
                    continue
                if entry.is_symlink:
                    results.append(self._materialize_symlink(entry.path))
                elif entry.is_dir:
                    subdirs.append(entry.path)
            stack.extend(reversed(subdirs))
        return results

    def _materialize_symlink(self, link_path: Path) -> FileProcessResult:
        log.debug('Materializing symlink: {}', link_path)
        try:
            raw = self.fs.readlink(link_path)
            resolved = self.fs.resolve_link(link_path)
        except OSError as ex:
            return _error(link_path, f'cannot read link: {ex}')
        log.debug('{} -> {} (resolved {})', link_path, raw, resolved)
        if self.fs.is_dir(resolved):
            return Skipped(link_path, 'links to a directory')
        try:
            self.fs.copy_file(resolved, link_path)
        except OSError as ex:
            return _error(link_path, f'cannot copy {resolved}: {ex}')
        return Materialized(link_path, resolved)


def _error(path: Path, detail: str) -> Error:
    log.warning('{}: {}', path, detail)
    return Error(path, detail)
