"""Per-entry outcomes reported by the link and materialize walks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class Linked:
    """A symlink was created at ``target_path`` pointing at ``source_path``."""

    source_path: Path
    target_path: Path
    kind = 'linked'


@dataclass(frozen=True)
class Created:
    """A directory was created at the target to mirror a source directory."""

    directory_path: Path
    kind = 'created'


@dataclass(frozen=True)
class Materialized:
    """A symlink at ``path`` was replaced by a copy of ``original_target``."""

    path: Path
    original_target: Path
    kind = 'materialized'


@dataclass(frozen=True)
class Skipped:
    path: Path
    reason: str = ''
    kind = 'skipped'


@dataclass(frozen=True)
class Error:
    """Processing one entry failed; the walk carried on."""

    path: Path
    error_detail: str
    kind = 'error'


FileProcessResult = Union[Linked, Created, Materialized, Skipped, Error]

RESULT_KINDS = ('linked', 'created', 'materialized', 'skipped', 'error')


@dataclass
class LinkSummary:
    linked: list[Linked] = field(default_factory=list)
    created: list[Created] = field(default_factory=list)
    materialized: list[Materialized] = field(default_factory=list)
    skipped: list[Skipped] = field(default_factory=list)
    errors: list[Error] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[FileProcessResult]) -> 'LinkSummary':
        summary = cls()
        for res in results:
            summary.add(res)
        return summary

    def add(self, res: FileProcessResult) -> None:
        if isinstance(res, Linked):
            self.linked.append(res)
        elif isinstance(res, Created):
            self.created.append(res)
        elif isinstance(res, Materialized):
            self.materialized.append(res)
        elif isinstance(res, Skipped):
            self.skipped.append(res)
        elif isinstance(res, Error):
            self.errors.append(res)
        else:
            raise TypeError(f'Unknown result type: {type(res).__name__}')

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def counts(self) -> dict[str, int]:
        return {
            'linked': len(self.linked),
            'created': len(self.created),
            'materialized': len(self.materialized),
            'skipped': len(self.skipped),
            'error': len(self.errors),
        }
