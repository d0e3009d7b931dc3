"""Tests for the link and materialize walks."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from widots.errors import PathNotFoundError
from widots.fsops import LocalFileSystem
from widots.ignore import IgnoreRules
from widots.link import Linker
from widots.results import (
    Created,
    Error,
    Linked,
    LinkSummary,
    Materialized,
    Skipped,
)


def _write_tree(root: Path, files: dict[str, str]) -> None:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')


def _snapshot(root: Path) -> dict[str, tuple[str, str]]:
    """Map each relative path to (kind, link target or content)."""
    snap: dict[str, tuple[str, str]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        here = Path(dirpath)
        for name in dirnames + filenames:
            path = here / name
            rel = str(path.relative_to(root))
            if path.is_symlink():
                snap[rel] = ('link', os.readlink(path))
            elif path.is_dir():
                snap[rel] = ('dir', '')
            else:
                snap[rel] = ('file', path.read_text(encoding='utf-8'))
    return snap


class FailingFileSystem(LocalFileSystem):
    """Raise on selected operations for paths whose name is in ``fail_names``."""

    def __init__(self, fail_names: set[str], ops: set[str]):
        self.fail_names = fail_names
        self.ops = ops

    def _check(self, op: str, path: Path) -> None:
        if op in self.ops and path.name in self.fail_names:
            raise PermissionError(13, 'Permission denied', str(path))

    def symlink(self, source: Path, target: Path) -> None:
        self._check('symlink', target)
        super().symlink(source, target)

    def makedirs(self, path: Path) -> bool:
        self._check('makedirs', path)
        return super().makedirs(path)

    def copy_file(self, src: Path, dst: Path) -> None:
        self._check('copy_file', dst)
        super().copy_file(src, dst)

    def scandir(self, path: Path):
        self._check('scandir', path)
        return super().scandir(path)


def test_link_concrete_scenario(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(
        src, {'.testrc': 'a', '.git/config': 'b', 'sub/inner.txt': 'c'}
    )
    results = Linker().link_recursively(src, dst, force=False)

    assert Linked(src / '.testrc', dst / '.testrc') in results
    assert Created(dst / 'sub') in results
    inner = Linked(src / 'sub' / 'inner.txt', dst / 'sub' / 'inner.txt')
    assert inner in results
    git_results = [r for r in results if '.git' in str(getattr(r, 'path', ''))]
    assert all(isinstance(r, Skipped) for r in git_results)
    assert not any(
        isinstance(r, Linked) and '.git' in str(r.source_path) for r in results
    )
    assert len(results) == 4

    assert (dst / '.testrc').is_symlink()
    assert os.readlink(dst / '.testrc') == str(src / '.testrc')
    assert (dst / 'sub' / 'inner.txt').read_text() == 'c'
    assert not (dst / '.git').exists()


def test_link_counts_files_and_directories(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(
        src,
        {
            '.zshrc': '1',
            '.config/nvim/init.lua': '2',
            '.config/nvim/lua/plugins.lua': '3',
            '.config/fish/config.fish': '4',
        },
    )
    summary = LinkSummary.from_results(Linker().link_recursively(src, dst))
    assert len(summary.linked) == 4
    assert len(summary.created) == 4
    assert not summary.skipped
    assert not summary.failed


def test_link_into_existing_directories_reports_skipped(
    tmp_path: Path,
) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.config/app.conf': 'x'})
    (dst / '.config').mkdir(parents=True)
    results = Linker().link_recursively(src, dst)
    assert Skipped(dst / '.config', 'exists') in results
    conf = Linked(src / '.config' / 'app.conf', dst / '.config' / 'app.conf')
    assert conf in results


def test_force_false_leaves_existing_file(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.bashrc': 'new'})
    _write_tree(dst, {'.bashrc': 'old'})
    results = Linker().link_recursively(src, dst, force=False)
    assert results == [Skipped(dst / '.bashrc', 'exists')]
    assert not (dst / '.bashrc').is_symlink()
    assert (dst / '.bashrc').read_text() == 'old'


def test_force_true_replaces_existing_file(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.bashrc': 'new'})
    _write_tree(dst, {'.bashrc': 'old'})
    results = Linker().link_recursively(src, dst, force=True)
    assert results == [Linked(src / '.bashrc', dst / '.bashrc')]
    assert (dst / '.bashrc').is_symlink()
    assert (dst / '.bashrc').read_text() == 'new'


def test_force_replaces_dangling_symlink(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.vimrc': 'v'})
    dst.mkdir()
    (dst / '.vimrc').symlink_to(tmp_path / 'gone')
    assert Linker().link_recursively(src, dst) == [
        Skipped(dst / '.vimrc', 'exists')
    ]
    assert Linker().link_recursively(src, dst, force=True) == [
        Linked(src / '.vimrc', dst / '.vimrc')
    ]
    assert (dst / '.vimrc').read_text() == 'v'


def test_force_cannot_replace_directory_with_link(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.vim': 'file in source'})
    (dst / '.vim').mkdir(parents=True)
    results = Linker().link_recursively(src, dst, force=True)
    assert len(results) == 1
    assert isinstance(results[0], Error)
    assert (dst / '.vim').is_dir()


def test_link_idempotent_with_force(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.a': '1', 'd/.b': '2', 'd/e/f': '3'})
    linker = Linker()
    first = linker.link_recursively(src, dst, force=True)
    snap1 = _snapshot(dst)
    second = linker.link_recursively(src, dst, force=True)
    snap2 = _snapshot(dst)
    assert snap1 == snap2
    assert len(LinkSummary.from_results(first).linked) == 3
    assert len(LinkSummary.from_results(second).linked) == 3


def test_link_second_run_without_force_skips_everything(
    tmp_path: Path,
) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.a': '1', 'd/.b': '2'})
    linker = Linker()
    linker.link_recursively(src, dst)
    snap1 = _snapshot(dst)
    second = linker.link_recursively(src, dst)
    assert all(isinstance(r, Skipped) for r in second)
    assert len(second) == 3
    assert _snapshot(dst) == snap1


def test_ignored_directory_is_pruned(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(
        src,
        {
            'node_modules/pkg/index.js': 'x',
            'node_modules/.bin/tool': 'y',
            '.keep': 'z',
        },
    )
    results = Linker().link_recursively(src, dst)
    assert Skipped(src / 'node_modules', 'ignored') in results
    touched = [
        r for r in results if isinstance(r, (Linked, Created))
    ]
    assert touched == [Linked(src / '.keep', dst / '.keep')]
    assert not (dst / 'node_modules').exists()


def test_rules_are_relative_to_source_root(tmp_path: Path) -> None:
    src = tmp_path / 'node_modules' / 'dotfiles'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.zshrc': 'x'})
    results = Linker().link_recursively(src, dst)
    assert results == [Linked(src / '.zshrc', dst / '.zshrc')]


def test_git_special_files_and_lookalikes(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(
        src,
        {
            '.config/git/ignore': 'i',
            '.config/git/config': 'c',
            '.config/git/attributes': 'a',
            '.config/foogit/ignore': 'f',
        },
    )
    Linker().link_recursively(src, dst)
    assert not (dst / '.config/git/ignore').exists()
    assert not (dst / '.config/git/config').exists()
    assert (dst / '.config/git/attributes').is_symlink()
    assert (dst / '.config/foogit/ignore').is_symlink()


def test_invalid_names_are_skipped(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'my notes.txt': 'x', 'ok.txt': 'y'})
    results = Linker().link_recursively(src, dst)
    assert Skipped(src / 'my notes.txt', 'invalid name') in results
    assert Linked(src / 'ok.txt', dst / 'ok.txt') in results
    assert not (dst / 'my notes.txt').exists()


def test_custom_rules_are_honored(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'README.md': 'r', '.zshrc': 'z'})
    rules = IgnoreRules.from_lists(ignored_files=['README.md'])
    results = Linker(rules).link_recursively(src, dst)
    assert Skipped(src / 'README.md', 'ignored') in results
    assert Linked(src / '.zshrc', dst / '.zshrc') in results


def test_special_files_are_skipped(tmp_path: Path) -> None:
    if not hasattr(os, 'mkfifo'):
        pytest.skip('mkfifo unavailable')
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    src.mkdir()
    os.mkfifo(src / 'pipe')
    results = Linker().link_recursively(src, dst)
    assert results == [
        Skipped(src / 'pipe', 'not a regular file or directory')
    ]


def test_symlink_failure_is_reported_and_walk_continues(
    tmp_path: Path,
) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.a': '1', '.b': '2', '.c': '3'})
    fs = FailingFileSystem({'.b'}, {'symlink'})
    results = Linker(fs=fs).link_recursively(src, dst)
    assert len(results) == 3
    assert isinstance(results[1], Error)
    assert results[1].path == dst / '.b'
    assert 'failed to create symlink' in results[1].error_detail
    assert (dst / '.a').is_symlink()
    assert (dst / '.c').is_symlink()


def test_directory_failure_aborts_only_that_subtree(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'bad/x': '1', 'good/y': '2'})
    fs = FailingFileSystem({'bad'}, {'makedirs'})
    results = Linker(fs=fs).link_recursively(src, dst)
    assert isinstance(results[0], Error)
    assert results[0].path == dst / 'bad'
    assert not any(
        isinstance(r, Linked) and r.source_path == src / 'bad' / 'x'
        for r in results
    )
    assert Linked(src / 'good' / 'y', dst / 'good' / 'y') in results


def test_unreadable_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(PathNotFoundError):
        Linker().link_recursively(tmp_path / 'missing', tmp_path / 'dst')


def test_unreadable_subdirectory_is_per_entry(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'locked/x': '1', '.z': '2'})
    fs = FailingFileSystem({'locked'}, {'scandir'})
    results = Linker(fs=fs).link_recursively(src, dst)
    errors = [r for r in results if isinstance(r, Error)]
    assert len(errors) == 1
    assert errors[0].path == src / 'locked'
    assert len(results) == 2
    assert Linked(src / '.z', dst / '.z') in results
    assert not (dst / 'locked').exists()


def test_materialize_round_trip(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    files = {'.a': 'alpha', 'd/.b': 'beta', 'd/e/f.txt': 'gamma'}
    _write_tree(src, files)
    linker = Linker()
    linker.link_recursively(src, dst)
    results = linker.materialize_symlinks_recursively(dst)

    assert len(results) == 3
    assert all(isinstance(r, Materialized) for r in results)
    assert Materialized(dst / '.a', src / '.a') in results
    for rel, text in files.items():
        path = dst / rel
        assert not path.is_symlink()
        assert path.is_file()
        assert path.read_bytes() == (src / rel).read_bytes()
    assert not [p for p in dst.rglob('*') if p.is_symlink()]
    assert not [p for p in dst.rglob('*.widots-tmp')]
    # Source is untouched and now independent of the target.
    (src / '.a').write_text('changed')
    assert (dst / '.a').read_text() == 'alpha'


def test_materialize_twice_reports_nothing(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.a': '1', 'd/.b': '2'})
    linker = Linker()
    linker.link_recursively(src, dst)
    assert len(linker.materialize_symlinks_recursively(dst)) == 2
    assert linker.materialize_symlinks_recursively(dst) == []


def test_materialize_relative_symlink(tmp_path: Path) -> None:
    (tmp_path / 'real.txt').write_text('content')
    dst = tmp_path / 'dst'
    dst.mkdir()
    (dst / 'rel').symlink_to(Path('..') / 'real.txt')
    results = Linker().materialize_symlinks_recursively(dst)
    assert results == [Materialized(dst / 'rel', tmp_path / 'real.txt')]
    assert (dst / 'rel').read_text() == 'content'
    assert not (dst / 'rel').is_symlink()


def test_materialize_follows_links_through_aliased_root(tmp_path: Path) -> None:
    real_home = tmp_path / 'a' / 'b' / 'home'
    real_home.mkdir(parents=True)
    (tmp_path / 'a' / 'b' / 'data.txt').write_text('right')
    (tmp_path / 'data.txt').write_text('wrong')
    (real_home / '.cfg').symlink_to(Path('..') / 'data.txt')
    alias = tmp_path / 'alias'
    alias.symlink_to(real_home, target_is_directory=True)

    results = Linker().materialize_symlinks_recursively(alias)

    expected = tmp_path / 'a' / 'b' / 'data.txt'
    assert results == [Materialized(alias / '.cfg', expected)]
    assert (real_home / '.cfg').read_text() == 'right'
    assert not (real_home / '.cfg').is_symlink()


def test_materialize_dangling_and_directory_links(tmp_path: Path) -> None:
    dst = tmp_path / 'dst'
    other = tmp_path / 'other'
    other.mkdir()
    dst.mkdir()
    (dst / 'dangling').symlink_to(tmp_path / 'gone')
    (dst / 'dirlink').symlink_to(other, target_is_directory=True)
    results = Linker().materialize_symlinks_recursively(dst)
    assert isinstance(results[0], Error)
    assert results[0].path == dst / 'dangling'
    assert (dst / 'dangling').is_symlink()
    assert results[1] == Skipped(dst / 'dirlink', 'links to a directory')
    assert (dst / 'dirlink').is_symlink()


def test_materialize_copy_failure_keeps_link(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'.a': '1', '.b': '2'})
    Linker().link_recursively(src, dst)
    fs = FailingFileSystem({'.a'}, {'copy_file'})
    results = Linker(fs=fs).materialize_symlinks_recursively(dst)
    assert isinstance(results[0], Error)
    assert (dst / '.a').is_symlink()
    assert results[1] == Materialized(dst / '.b', src / '.b')


def test_materialize_respects_ignore_rules(tmp_path: Path) -> None:
    src = tmp_path / 'src'
    dst = tmp_path / 'dst'
    _write_tree(src, {'a.txt': 'a'})
    (dst / '.git').mkdir(parents=True)
    (dst / '.git' / 'linked').symlink_to(src / 'a.txt')
    (dst / 'a.txt').symlink_to(src / 'a.txt')
    results = Linker().materialize_symlinks_recursively(dst)
    assert results == [Materialized(dst / 'a.txt', src / 'a.txt')]
    assert (dst / '.git' / 'linked').is_symlink()


def test_materialize_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(PathNotFoundError):
        Linker().materialize_symlinks_recursively(tmp_path / 'missing')
