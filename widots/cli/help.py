"""Help commands: the suggested workflow and the command listing."""

from __future__ import annotations

import shlex
import textwrap

import scriptconfig as scfg

from ._common import _BaseCommand, _cfg_path


class PlanCLI(_BaseCommand):
    """Show the recommended command sequence for linking dotfiles."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        path = _cfg_path(args.config)
        default_path = _cfg_path(None)
        cfg_flag = (
            f' --config {shlex.quote(str(path))}'
            if path != default_path
            else ''
        )
        steps = textwrap.dedent(f"""
        🗺️  widots plan
        📄 Config: {path}

        Suggested flow:

        1. ⚙️ Write a config file and point it at your dotfiles
           widots config init{cfg_flag} --dotfiles_dir ~/dotfiles
        2. 🔎 See what would change
           widots status{cfg_flag}
        3. 🧪 Try the layout in a scratch home first
           widots link{cfg_flag} --test
        4. 🔗 Link into the real home directory
           widots link{cfg_flag}
           widots link{cfg_flag} --force   # replace existing files
        5. 📄 Turn links back into independent copies
           widots materialize{cfg_flag}
        """).strip()
        print(steps)
        return 0


class HelpTreeCLI(_BaseCommand):
    """List every widots command with its alias and a one-line summary."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        cls.cli(argv=argv, data=kwargs)
        from .main import COMMAND_ALIASES, WidotsModalCLI

        print(_render_command_tree(WidotsModalCLI, COMMAND_ALIASES))
        return 0


class HelpModalCLI(scfg.ModalCLI):
    """Help and discovery commands."""

    plan = PlanCLI
    tree = HelpTreeCLI


def _summary(cls: type) -> str:
    doc = (cls.__doc__ or '').strip()
    return doc.splitlines()[0] if doc else ''


def _leaf_commands(
    modal_cls: type[scfg.ModalCLI], words: tuple[str, ...] = ()
) -> list[tuple[str, type]]:
    """Flatten nested command groups into ``('config init', InitCLI)`` pairs."""
    leaves: list[tuple[str, type]] = []
    for name, member in vars(modal_cls).items():
        if name.startswith('_') or not isinstance(member, type):
            continue
        if issubclass(member, scfg.ModalCLI):
            leaves.extend(_leaf_commands(member, (*words, name)))
        elif issubclass(member, scfg.DataConfig):
            leaves.append((' '.join((*words, name)), member))
    return leaves


def _render_command_tree(
    modal_cls: type[scfg.ModalCLI], aliases: dict[str, str]
) -> str:
    alias_for = {command: alias for alias, command in aliases.items()}
    rows = []
    for command, cls in _leaf_commands(modal_cls):
        label = f'widots {command}'
        if command in alias_for:
            label += f' ({alias_for[command]})'
        rows.append((label, _summary(cls)))
    width = max(len(label) for label, _ in rows)
    lines = [f'widots - {_summary(modal_cls)}', '']
    lines.extend(f'  {label:<{width}}  {text}'.rstrip() for label, text in rows)
    return '\n'.join(lines)
