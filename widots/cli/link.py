"""Link, materialize, and link status commands."""

from __future__ import annotations

import scriptconfig as scfg

from ..link import Linker
from ..paths import parse_path
from ..results import LinkSummary
from ..status import inspect_links, render_link_status, render_results
from ._common import (
    _BaseCommand,
    _build_service,
    _load_cfg,
    _resolve_source,
    _resolve_target,
    log,
)


class LinkCLI(_BaseCommand):
    """Symlink every dotfile from the dotfiles directory into the target."""

    source = scfg.Value(
        '',
        position=1,
        help='Dotfiles directory (default: paths.dotfiles_dir from config).',
    )
    target = scfg.Value(
        '',
        help='Target directory (default: paths.target_dir, usually ~).',
    )
    force = scfg.Value(
        False,
        isflag=True,
        help='Replace files that already exist at the target.',
    )
    test = scfg.Value(
        False,
        isflag=True,
        help='Link into ~/<paths.test_dir> instead of the real target.',
    )
    show_skipped = scfg.Value(
        True, isflag=True, help='Include skipped entries in the report.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        source = _resolve_source(cfg, args.source)
        target = _resolve_target(cfg, args.target, test=bool(args.test))
        service = _build_service(cfg, yes=bool(args.yes))
        results = service.link_dotfiles(source, target, force=bool(args.force))
        if not results:
            print('Nothing linked.')
            return 0
        print(
            render_results(
                results,
                title='🔗 Link results',
                show_skipped=bool(args.show_skipped),
            )
        )
        summary = LinkSummary.from_results(results)
        if summary.failed:
            log.error('{} entries failed to link', len(summary.errors))
            return 2
        return 0


class MaterializeCLI(_BaseCommand):
    """Replace every symlink under the target with a copy of its content."""

    target = scfg.Value(
        '',
        position=1,
        help='Directory to materialize (default: paths.target_dir).',
    )
    test = scfg.Value(
        False,
        isflag=True,
        help='Materialize ~/<paths.test_dir> instead of the real target.',
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        target = _resolve_target(cfg, args.target, test=bool(args.test))
        service = _build_service(cfg, yes=bool(args.yes))
        results = service.materialize_dotfiles(target)
        if not results:
            print('Nothing materialized.')
            return 0
        print(render_results(results, title='📄 Materialize results'))
        summary = LinkSummary.from_results(results)
        if summary.failed:
            log.error(
                '{} entries failed to materialize', len(summary.errors)
            )
            return 2
        return 0


class StatusCLI(_BaseCommand):
    """Report which dotfiles are linked, missing, or conflicting (read-only)."""

    source = scfg.Value(
        '',
        position=1,
        help='Dotfiles directory (default: paths.dotfiles_dir from config).',
    )
    target = scfg.Value(
        '',
        help='Target directory (default: paths.target_dir, usually ~).',
    )
    test = scfg.Value(
        False,
        isflag=True,
        help='Inspect ~/<paths.test_dir> instead of the real target.',
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        source = parse_path(_resolve_source(cfg, args.source))
        target = parse_path(
            _resolve_target(cfg, args.target, test=bool(args.test))
        )
        if not source.is_dir():
            raise FileNotFoundError(f'Dotfiles directory not found: {source}')
        linker = Linker(cfg.link.ignore_rules())
        checks = inspect_links(linker, source, target)
        print(render_link_status(checks, source=source, target=target))
        failing = {'conflict', 'foreign', 'unreadable'}
        if any(p.state in failing for p in checks):
            return 1
        return 0
