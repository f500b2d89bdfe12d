"""gitcomp CLI commands."""

from __future__ import annotations

import typer

from gitcomp.logging_setup import init_logger

from ._helpers import SortedGroup

app = typer.Typer(
    help="gitcomp - context-aware tab completion for git",
    no_args_is_help=True,
    cls=SortedGroup,
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log debug output to stderr",
    ),
) -> None:
    init_logger(debug)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import (  # noqa: E402
    _cmd_complete,
    _cmd_config,
    _cmd_explain,
    _cmd_register,
)

for _mod in (
    _cmd_complete,
    _cmd_config,
    _cmd_explain,
    _cmd_register,
):
    _mod.register(app)


def main() -> None:
    """Run the gitcomp CLI application."""
    app()
