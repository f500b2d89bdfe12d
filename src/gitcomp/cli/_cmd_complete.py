"""Complete command for gitcomp CLI - the entry point shells call."""

from __future__ import annotations

import logging

import typer

from gitcomp.constants import OUTPUT_FORMATS

from ._completions import complete_formats
from ._formatting import format_candidates
from ._helpers import get_completer

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register complete command."""

    @app.command("complete")
    def complete_cmd(
        line: str = typer.Option(..., "--line", "-l", help="Command line typed so far"),
        cursor: int | None = typer.Option(
            None,
            "--cursor",
            "-c",
            help="Cursor offset in the line (default: end of line)",
        ),
        output_format: str = typer.Option(
            "plain",
            "--format",
            "-f",
            help=f"Output format: {', '.join(OUTPUT_FORMATS)}",
            autocompletion=complete_formats,
        ),
        cwd: str | None = typer.Option(None, "--cwd", help="Repository directory"),
    ) -> None:
        """Print completion candidates for a git command line.

        Always exits 0: a completion request that cannot be answered
        prints nothing rather than an error.
        """
        if output_format not in OUTPUT_FORMATS:
            logger.warning("Unknown format %r, using plain", output_format)
            output_format = "plain"

        try:
            candidates = get_completer(cwd).complete(line, cursor)
        except Exception:
            logger.debug("Completion failed for %r", line, exc_info=True)
            candidates = []

        output = format_candidates(candidates, output_format)
        if output:
            typer.echo(output)
