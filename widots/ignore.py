"""Ignore rules and filename validation for the link and materialize walks.

An :class:`IgnoreRules` value is a pure predicate over paths. It performs no
I/O and holds no mutable state, so a single instance built from config is
shared by every walk in a process.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePath

from .errors import InvalidInputError

DEFAULT_IGNORED_FILES = ('.DS_Store', '.gitignore')
DEFAULT_IGNORED_PREFIXES = ('_',)
DEFAULT_IGNORED_ANCESTORS = ('.git', 'node_modules')
DEFAULT_GIT_DIR_NAME = 'git'
DEFAULT_GIT_SPECIAL_FILES = ('ignore', 'config')

_VALID_NAME_RE = re.compile(r'[A-Za-z0-9._-]+')


def _names(field_name: str, values) -> frozenset[str]:
    # A bare string would otherwise become a set of its characters.
    items = [] if isinstance(values, str) else list(values)
    if isinstance(values, str) or not all(isinstance(v, str) for v in items):
        raise InvalidInputError(
            f'{field_name} must be a list of strings, got {values!r}'
        )
    return frozenset(items)


@dataclass(frozen=True)
class IgnoreRules:
    """Decide whether a path takes part in synchronization.

    A path is ignored when any of these hold:

    * its name is one of ``ignored_files``
    * its name starts with one of ``ignored_prefixes``
    * the path itself or any ancestor directory is named in
      ``ignored_ancestors``
    * its last two components are exactly ``(git_dir_name, f)`` for ``f`` in
      ``git_special_files``
    """

    ignored_files: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_IGNORED_FILES)
    )
    ignored_prefixes: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_IGNORED_PREFIXES)
    )
    ignored_ancestors: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_IGNORED_ANCESTORS)
    )
    git_dir_name: str = DEFAULT_GIT_DIR_NAME
    git_special_files: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_GIT_SPECIAL_FILES)
    )

    @classmethod
    def from_lists(
        cls,
        *,
        ignored_files=DEFAULT_IGNORED_FILES,
        ignored_prefixes=DEFAULT_IGNORED_PREFIXES,
        ignored_ancestors=DEFAULT_IGNORED_ANCESTORS,
        git_dir_name: str = DEFAULT_GIT_DIR_NAME,
        git_special_files=DEFAULT_GIT_SPECIAL_FILES,
    ) -> 'IgnoreRules':
        if not isinstance(git_dir_name, str):
            raise InvalidInputError(
                f'git_dir_name must be a string, got {git_dir_name!r}'
            )
        return cls(
            ignored_files=_names('ignored_files', ignored_files),
            # An empty prefix would match every name.
            ignored_prefixes=_names('ignored_prefixes', ignored_prefixes)
            - {''},
            ignored_ancestors=_names('ignored_ancestors', ignored_ancestors),
            git_dir_name=git_dir_name,
            git_special_files=_names('git_special_files', git_special_files),
        )

    def should_ignore(self, path: str | PurePath) -> bool:
        parts = PurePath(path).parts
        if not parts:
            return False
        name = parts[-1]
        if name in self.ignored_files:
            return True
        if any(name.startswith(prefix) for prefix in self.ignored_prefixes):
            return True
        if any(part in self.ignored_ancestors for part in parts):
            return True
        if (
            len(parts) >= 2
            and parts[-2] == self.git_dir_name
            and name in self.git_special_files
        ):
            return True
        return False


def is_valid_name(name: str) -> bool:
    """Return True if ``name`` is safe to mirror into the target tree."""
    if name in ('', '.', '..'):
        return False
    return _VALID_NAME_RE.fullmatch(name) is not None
