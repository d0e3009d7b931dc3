"""Rendering of link results and read-only link status inspection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import error_from_os
from .fsops import DirEntry, FileSystem
from .ignore import is_valid_name
from .link import Linker
from .results import (
    Created,
    Error,
    FileProcessResult,
    Linked,
    LinkSummary,
    Materialized,
    Skipped,
)

LINK_STATES = ('linked', 'missing', 'conflict', 'foreign', 'unreadable')


@dataclass(frozen=True)
class LinkCheck:
    source: Path
    target: Path
    state: str
    detail: str = ''


def status_line(ok: bool | None, label: str, detail: str = '') -> str:
    icon = '✅' if ok is True else ('➖' if ok is None else '❌')
    suffix = f' - {detail}' if detail else ''
    return f'{icon} {label}{suffix}'


def render_result(res: FileProcessResult) -> str:
    if isinstance(res, Linked):
        return f'🔗 Linked: {res.source_path} -> {res.target_path}'
    if isinstance(res, Created):
        return f'📁 Created directory: {res.directory_path}'
    if isinstance(res, Materialized):
        return (
            f'📄 Materialized: {res.path} (was linked to {res.original_target})'
        )
    if isinstance(res, Skipped):
        suffix = f' ({res.reason})' if res.reason else ''
        return f'➖ Skipped: {res.path}{suffix}'
    if isinstance(res, Error):
        return f'❌ Error: {res.path}: {res.error_detail}'
    raise TypeError(f'Unknown result type: {type(res).__name__}')


def render_results(
    results: list[FileProcessResult], *, title: str, show_skipped: bool = True
) -> str:
    summary = LinkSummary.from_results(results)
    lines = [title]
    for res in results:
        if isinstance(res, Skipped) and not show_skipped:
            continue
        lines.append(f'  {render_result(res)}')
    counts = summary.counts()
    lines.append(
        '  summary: '
        + ', '.join(f'{k}={v}' for k, v in counts.items() if v or k == 'error')
    )
    return '\n'.join(lines)


def inspect_links(linker: Linker, source: Path, target: Path) -> list[LinkCheck]:
    """Classify each eligible source file by what sits at its mirrored path.

    The walk goes through ``linker.fs`` with the same ignore rules and name
    checks as linking, so both agree on which files are eligible.
    """
    source = Path(source)
    target = Path(target)
    try:
        entries = list(linker.fs.scandir(source))
    except OSError as ex:
        raise error_from_os(ex, source) from ex
    checks: list[LinkCheck] = []
    _inspect_entries(linker, entries, source, target, checks)
    return checks


def _inspect_entries(
    linker: Linker,
    entries: list[DirEntry],
    source: Path,
    target: Path,
    checks: list[LinkCheck],
) -> None:
    for entry in entries:
        rel = entry.path.relative_to(source)
        if linker.should_ignore(rel) or not is_valid_name(entry.name):
            continue
        if entry.is_dir:
            try:
                children = list(linker.fs.scandir(entry.path))
            except OSError as ex:
                checks.append(
                    LinkCheck(entry.path, target / rel, 'unreadable', str(ex))
                )
                continue
            _inspect_entries(linker, children, source, target, checks)
        elif entry.is_file:
            checks.append(_inspect_one(linker.fs, entry.path, target / rel))


def _inspect_one(fs: FileSystem, src: Path, dst: Path) -> LinkCheck:
    if not fs.lexists(dst):
        return LinkCheck(src, dst, 'missing')
    if not fs.is_symlink(dst):
        return LinkCheck(src, dst, 'conflict', 'exists and is not a symlink')
    raw = fs.readlink(dst)
    resolved = Path(os.path.normpath(dst.parent / raw))
    if resolved == src:
        return LinkCheck(src, dst, 'linked')
    return LinkCheck(src, dst, 'foreign', f'points to {resolved}')


def render_link_status(
    checks: list[LinkCheck], *, source: Path, target: Path
) -> str:
    lines = [f'🔎 Link status: {source} -> {target}']
    if not checks:
        lines.append('  (no eligible files)')
    for check in checks:
        ok = {'linked': True, 'missing': None}.get(check.state, False)
        label = f'{check.state}: {check.target}'
        lines.append('  ' + status_line(ok, label, check.detail))
    tally = {state: 0 for state in LINK_STATES}
    for check in checks:
        tally[check.state] += 1
    lines.append(
        '  summary: ' + ', '.join(f'{k}={v}' for k, v in tally.items())
    )
    return '\n'.join(lines)
