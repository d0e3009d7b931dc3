"""Caller-facing link/materialize operations with a confirmation gate."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .errors import (
    ConfirmationError,
    InvalidInputError,
    PathNotFoundError,
    WidotsError,
)
from .link import Linker
from .paths import parse_path
from .prompt import Prompt
from .results import FileProcessResult

log = logger


class LinkService:
    def __init__(self, linker: Linker, prompt: Prompt):
        self.linker = linker
        self.prompt = prompt

    def link_dotfiles(
        self, source: str | Path, target: str | Path, force: bool = False
    ) -> list[FileProcessResult]:
        """Resolve paths, ask once, then link ``source`` into ``target``."""
        src = parse_path(source)
        dst = parse_path(target)
        if not src.exists():
            raise PathNotFoundError(f'Dotfiles directory not found: {src}')
        if not src.is_dir():
            raise InvalidInputError(f'Dotfiles path is not a directory: {src}')
        if dst == src or dst.is_relative_to(src):
            raise InvalidInputError(
                f'Target {dst} must not be inside the dotfiles directory {src}'
            )
        message = (
            f'This will link files from {src} to {dst}. '
            'Do you want to continue?'
        )
        if not self._confirm(
            message,
            help_message='This will create symlinks in the target directory.',
        ):
            log.info('Link declined by user')
            return []
        log.info('Linking {} -> {} (force={})', src, dst, force)
        return self.linker.link_recursively(src, dst, force)

    def materialize_dotfiles(
        self, target: str | Path
    ) -> list[FileProcessResult]:
        """Resolve ``target``, ask once, then replace its symlinks with copies."""
        dst = parse_path(target)
        if not dst.exists():
            raise PathNotFoundError(f'Target directory not found: {dst}')
        if not dst.is_dir():
            raise InvalidInputError(f'Target path is not a directory: {dst}')
        message = (
            f'This will materialize symlinks in {dst}. '
            'Do you want to continue?'
        )
        if not self._confirm(
            message,
            help_message='Each symlink is replaced by a copy of its target.',
        ):
            log.info('Materialize declined by user')
            return []
        log.info('Materializing symlinks under {}', dst)
        return self.linker.materialize_symlinks_recursively(dst)

    def _confirm(self, message: str, *, help_message: str) -> bool:
        try:
            return bool(
                self.prompt.confirm(message, help_message=help_message)
            )
        except WidotsError:
            raise
        except Exception as ex:
            raise ConfirmationError(f'Confirmation failed: {ex}') from ex
