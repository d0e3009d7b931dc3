"""Top-level modal CLI wiring, argv normalization, and logging setup."""

from __future__ import annotations

import os
import sys

import scriptconfig as scfg
from loguru import logger

from ._common import _load_cfg, log
from .config import ConfigModalCLI
from .help import HelpModalCLI
from .link import LinkCLI, MaterializeCLI, StatusCLI

COMMAND_ALIASES = {
    'ln': 'link',
    'mat': 'materialize',
    'st': 'status',
    'init': 'config init',
}


class WidotsModalCLI(scfg.ModalCLI):
    """Link a dotfiles repository into your home directory with symlinks."""

    link = LinkCLI
    materialize = MaterializeCLI
    status = StatusCLI
    config = ConfigModalCLI
    help = HelpModalCLI


def main(argv: list[str] | None = None) -> None:
    verbosity = 1
    if argv is None:
        argv = sys.argv[1:]
    argv = _normalize_argv(argv)
    config_value = _find_config_arg(argv)
    try:
        verbosity = _load_cfg(config_value).verbosity
    except Exception:
        verbosity = 1

    explicit_verbose = _count_verbose(argv)
    _setup_logging(explicit_verbose, verbosity)

    try:
        rc = WidotsModalCLI.main(argv=argv, _noexit=True)
    except Exception as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.error('Unhandled widots error: {}', ex)
        sys.exit(2)

    if any(flag in argv for flag in ('-h', '--help')):
        sys.exit(0)
    if isinstance(rc, int):
        sys.exit(rc)
    sys.exit(0)


def _setup_logging(args_verbose: int, cfg_verbosity: int) -> None:
    logger.remove()
    effective_verbosity = args_verbose if args_verbose > 0 else cfg_verbosity
    level = 'WARNING'
    if effective_verbosity == 1:
        level = 'INFO'
    elif effective_verbosity >= 2:
        level = 'DEBUG'
    colorize = sys.stderr.isatty() and os.getenv('NO_COLOR') is None
    logger.add(
        sys.stderr,
        level=level,
        colorize=colorize,
        format='<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
    )
    log.debug(
        'Logging configured at {} (effective_verbosity={}, colorize={})',
        level,
        effective_verbosity,
        colorize,
    )


def _normalize_argv(argv: list[str]) -> list[str]:
    """Map short aliases onto scriptconfig command names."""
    if argv and argv[0] in COMMAND_ALIASES:
        return [*COMMAND_ALIASES[argv[0]].split(), *argv[1:]]
    return argv


def _count_verbose(argv: list[str]) -> int:
    count = 0
    for item in argv:
        if item == '--verbose':
            count += 1
        elif item.startswith('-') and not item.startswith('--'):
            short = item[1:]
            if short and set(short) <= {'v'}:
                count += len(short)
    return count


def _find_config_arg(argv: list[str]) -> str | None:
    """Find the ``--config`` value in ``--config P`` or ``--config=P`` form."""
    for idx, item in enumerate(argv):
        if item == '--config':
            return argv[idx + 1] if idx + 1 < len(argv) else None
        if item.startswith('--config='):
            return item.split('=', 1)[1]
    return None
