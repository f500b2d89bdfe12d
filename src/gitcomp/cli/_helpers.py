"""Shared infrastructure for gitcomp CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.core import TyperGroup

if TYPE_CHECKING:
    import click

    from gitcomp.engine import Completer


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def get_completer(cwd: str | None = None) -> Completer:
    """Get a Completer for the repository at *cwd* (default: current directory).

    Settings come from the user config file plus ``GITCOMP_*`` environment
    overrides.
    """
    from gitcomp.config import load_settings
    from gitcomp.engine import Completer

    return Completer.from_settings(load_settings(), cwd=cwd)
