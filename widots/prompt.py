"""Yes/no confirmation prompts consumed by the link service."""

from __future__ import annotations

import sys
from typing import Protocol

from .errors import ConfirmationError


class Prompt(Protocol):
    def confirm(self, message: str, *, help_message: str = '') -> bool:
        """Ask a yes/no question; raise on failure to obtain an answer."""


class ConsolePrompt:
    """Ask on the controlling terminal, defaulting to no."""

    def confirm(self, message: str, *, help_message: str = '') -> bool:
        if not sys.stdin.isatty():
            raise ConfirmationError(
                'Confirmation required, but stdin is not interactive. '
                'Re-run with --yes.'
            )
        print(message)
        if help_message:
            print(f'  {help_message}')
        try:
            ans = input('Continue? [y/N]: ').strip().lower()
        except EOFError as ex:
            raise ConfirmationError('No answer received.') from ex
        return ans in {'y', 'yes'}


class AutoPrompt:
    """Answer every question with a fixed value (``--yes``)."""

    def __init__(self, answer: bool = True):
        self.answer = answer

    def confirm(self, message: str, *, help_message: str = '') -> bool:
        return self.answer
