from __future__ import annotations

from pathlib import Path

import scriptconfig as scfg
from loguru import logger

from ..config import WidotsConfig, default_config_path, load
from ..link import Linker
from ..paths import expand_home, home_dir
from ..prompt import AutoPrompt, ConsolePrompt
from ..service import LinkService

log = logger


class _BaseCommand(scfg.DataConfig):
    """Base options shared by all commands."""

    config = scfg.Value(
        None, help='Path to config TOML (default: ~/.config/widots/config.toml).'
    )
    verbose = scfg.Value(
        0,
        short_alias=['v'],
        isflag='counter',
        help='Increase verbosity (-v, -vv).',
    )
    yes = scfg.Value(
        False,
        isflag=True,
        help='Answer yes to confirmation prompts.',
    )


def _cfg_path(p: str | None) -> Path:
    if p:
        return expand_home(p).absolute()
    return default_config_path()


def _load_cfg(config_path: str | None) -> WidotsConfig:
    cfg, _ = _load_cfg_with_path(config_path)
    return cfg


def _load_cfg_with_path(config_path: str | None) -> tuple[WidotsConfig, Path]:
    path = _cfg_path(config_path)
    if config_path is not None and not path.exists():
        raise FileNotFoundError(
            f'Config not found: {path}. Run: widots config init --config {path}'
        )
    cfg = load(path).expanded_paths()
    log.debug('Loaded config from {} (exists={})', path, path.exists())
    return cfg, path


def _build_service(cfg: WidotsConfig, *, yes: bool) -> LinkService:
    linker = Linker(cfg.link.ignore_rules())
    prompt = AutoPrompt(True) if yes else ConsolePrompt()
    return LinkService(linker, prompt)


def _resolve_source(cfg: WidotsConfig, source_opt: str) -> str:
    return str(source_opt or '').strip() or cfg.paths.dotfiles_dir


def _resolve_target(cfg: WidotsConfig, target_opt: str, *, test: bool) -> Path:
    if test:
        return home_dir() / cfg.paths.test_dir
    raw = str(target_opt or '').strip() or cfg.paths.target_dir
    return expand_home(raw)


__all__ = [name for name in globals() if not name.startswith('__')]
