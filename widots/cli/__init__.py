"""CLI package exports for top-level command entry points."""

from __future__ import annotations

from .main import WidotsModalCLI, main

__all__ = ['WidotsModalCLI', 'main']
