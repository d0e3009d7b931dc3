"""Link a dotfiles repository into a home directory with symlinks."""

from __future__ import annotations

__version__ = '0.1.0'

from .ignore import IgnoreRules, is_valid_name
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
from .service import LinkService

__all__ = [
    'Created',
    'Error',
    'FileProcessResult',
    'IgnoreRules',
    'LinkService',
    'LinkSummary',
    'Linked',
    'Linker',
    'Materialized',
    'Skipped',
    'is_valid_name',
]
