"""Config file management commands."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys

import scriptconfig as scfg

from ..config import WidotsConfig, dump_toml, save
from ..errors import InvalidInputError
from ._common import _BaseCommand, _cfg_path, _load_cfg_with_path, log


class InitCLI(_BaseCommand):
    """Write a config file populated with default paths and ignore rules."""

    dotfiles_dir = scfg.Value(
        '',
        help='Dotfiles directory to record (default: ~/dotfiles).',
    )
    force = scfg.Value(
        False,
        isflag=True,
        help='Overwrite an existing config file.',
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        path = _cfg_path(args.config)
        if path.exists() and not args.force:
            print(f'Config already exists: {path}', file=sys.stderr)
            print('Use --force to overwrite it.', file=sys.stderr)
            return 2
        cfg = WidotsConfig()
        if str(args.dotfiles_dir or '').strip():
            cfg.paths.dotfiles_dir = str(args.dotfiles_dir).strip()
        save(path, cfg)
        print(f'Wrote config: {path}')
        print(f'Dotfiles directory: {cfg.paths.dotfiles_dir}')
        return 0


class ConfigShowCLI(_BaseCommand):
    """Show the resolved config (defaults merged with the file)."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg, path = _load_cfg_with_path(args.config)
        print(f'# Config: {path} ({"exists" if path.exists() else "defaults"})')
        print(dump_toml(cfg), end='')
        return 0


class ConfigPathCLI(_BaseCommand):
    """Print the config file path in use."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        path = _cfg_path(args.config)
        print(f'{path} ({"exists" if path.exists() else "missing"})')
        return 0


class ConfigEditCLI(_BaseCommand):
    """Open the config file in an editor, writing defaults first if missing."""

    editor = scfg.Value(
        '',
        help='Editor command override (default: $VISUAL/$EDITOR, then nano/vi).',
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        path = _cfg_path(args.config)
        if not path.exists():
            save(path, WidotsConfig())
            log.info('Wrote default config to {}', path)
        parts = _editor_command(str(args.editor or '')) + [str(path)]
        log.debug('Launching editor: {}', parts)
        subprocess.run(parts, check=True)
        return 0


def _editor_command(override: str) -> list[str]:
    for candidate in (
        override.strip(),
        os.environ.get('VISUAL', '').strip(),
        os.environ.get('EDITOR', '').strip(),
    ):
        if candidate:
            return shlex.split(candidate)
    for fallback in ('nano', 'vi'):
        found = shutil.which(fallback)
        if found:
            return [found]
    raise InvalidInputError('No editor found. Set $EDITOR or pass --editor.')


class ConfigModalCLI(scfg.ModalCLI):
    """Config file management commands."""

    init = InitCLI
    path = ConfigPathCLI
    show = ConfigShowCLI
    edit = ConfigEditCLI
