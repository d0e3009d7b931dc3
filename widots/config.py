"""TOML configuration for dotfile locations and link ignore rules."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

import ubelt as ub

from .errors import InvalidInputError
from .ignore import (
    DEFAULT_GIT_DIR_NAME,
    DEFAULT_GIT_SPECIAL_FILES,
    DEFAULT_IGNORED_ANCESTORS,
    DEFAULT_IGNORED_FILES,
    DEFAULT_IGNORED_PREFIXES,
    IgnoreRules,
)
from .util import ensure_dir, expand

DEFAULT_TEST_DIR = '.widots_test'


@dataclass
class PathsConfig:
    dotfiles_dir: str = '~/dotfiles'
    target_dir: str = '~'
    test_dir: str = DEFAULT_TEST_DIR


@dataclass
class LinkConfig:
    ignored_files: list[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORED_FILES)
    )
    ignored_prefixes: list[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORED_PREFIXES)
    )
    ignored_ancestors: list[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORED_ANCESTORS)
    )
    git_dir_name: str = DEFAULT_GIT_DIR_NAME
    git_special_files: list[str] = field(
        default_factory=lambda: list(DEFAULT_GIT_SPECIAL_FILES)
    )

    def ignore_rules(self) -> IgnoreRules:
        return IgnoreRules.from_lists(
            ignored_files=self.ignored_files,
            ignored_prefixes=self.ignored_prefixes,
            ignored_ancestors=self.ignored_ancestors,
            git_dir_name=self.git_dir_name,
            git_special_files=self.git_special_files,
        )


@dataclass
class WidotsConfig:
    paths: PathsConfig = field(default_factory=PathsConfig)
    link: LinkConfig = field(default_factory=LinkConfig)
    verbosity: int = 1

    def expanded_paths(self) -> 'WidotsConfig':
        self.paths.dotfiles_dir = expand(self.paths.dotfiles_dir)
        self.paths.target_dir = expand(self.paths.target_dir)
        return self


def default_config_path() -> Path:
    return Path(ub.Path.appdir('widots', type='config')) / 'config.toml'


def _toml_escape(s: str) -> str:
    return s.replace('\\', '\\\\').replace('"', '\\"')


def dump_toml(cfg: WidotsConfig) -> str:
    d = asdict(cfg)
    lines: list[str] = []
    if cfg.verbosity != 1:
        lines.append(f'verbosity = {cfg.verbosity}')
        lines.append('')
    for section, body in d.items():
        if not isinstance(body, dict):
            continue
        lines.append(f'[{section}]')
        for k, v in body.items():
            if isinstance(v, bool):
                lines.append(f'{k} = {"true" if v else "false"}')
            elif isinstance(v, int):
                lines.append(f'{k} = {v}')
            elif isinstance(v, list):
                parts = [f'"{_toml_escape(str(item))}"' for item in v]
                lines.append(f'{k} = [{", ".join(parts)}]')
            else:
                lines.append(f'{k} = "{_toml_escape(str(v))}"')
        lines.append('')
    return '\n'.join(lines).rstrip() + '\n'


def _checked(path: Path, section: str, key: str, value, default):
    if isinstance(default, list):
        if isinstance(value, list) and all(isinstance(x, str) for x in value):
            return list(value)
        expected = 'a list of strings'
    elif isinstance(value, str):
        return value
    else:
        expected = 'a string'
    raise InvalidInputError(
        f'Invalid config {path}: [{section}] {key} must be {expected}, '
        f'got {value!r}'
    )


def load(path: Path) -> WidotsConfig:
    cfg = WidotsConfig()
    if not path.exists():
        return cfg
    try:
        raw = tomllib.loads(path.read_text(encoding='utf-8'))
    except tomllib.TOMLDecodeError as ex:
        raise InvalidInputError(f'Invalid config {path}: {ex}') from ex
    for section in ('paths', 'link'):
        sec = raw.get(section)
        if sec is None:
            continue
        if not isinstance(sec, dict):
            raise InvalidInputError(
                f'Invalid config {path}: [{section}] must be a table'
            )
        obj = getattr(cfg, section)
        for k, v in sec.items():
            if hasattr(obj, k):
                setattr(obj, k, _checked(path, section, k, v, getattr(obj, k)))
    if 'verbosity' in raw:
        verbosity = raw['verbosity']
        if isinstance(verbosity, bool) or not isinstance(verbosity, int):
            raise InvalidInputError(
                f'Invalid config {path}: verbosity must be an integer, '
                f'got {verbosity!r}'
            )
        cfg.verbosity = verbosity
    return cfg


def save(path: Path, cfg: WidotsConfig) -> None:
    ensure_dir(path.parent)
    path.write_text(dump_toml(cfg), encoding='utf-8')
