"""Explain command for gitcomp CLI - shows how a line is analyzed."""

from __future__ import annotations

import typer

from ._formatting import context_rows
from ._helpers import get_completer


def register(app: typer.Typer) -> None:
    """Register explain command."""

    @app.command("explain")
    def explain_cmd(
        line: str = typer.Argument(..., help='Command line, e.g. "git diff HEAD -- "'),
        cursor: int | None = typer.Option(
            None,
            "--cursor",
            "-c",
            help="Cursor offset in the line (default: end of line)",
        ),
    ) -> None:
        """Show the analyzed context and the resulting candidates.

        A trailing space means "complete the next argument"; no trailing
        space means "complete the current partial word".
        """
        from rich import box
        from rich.console import Console
        from rich.table import Table

        from gitcomp.engine import dispatch

        completer = get_completer()
        context = completer.analyze(line, cursor)
        candidates = dispatch(context, completer.repository, completer.flag_table)

        console = Console()

        context_table = Table(title="Context", box=box.ROUNDED, show_edge=False)
        context_table.add_column("Field", no_wrap=True)
        context_table.add_column("Value", overflow="fold")
        for field_name, value in context_rows(context):
            context_table.add_row(field_name, value)
        console.print(context_table)

        if not candidates:
            console.print("(no completions)")
            return

        candidate_table = Table(
            title=f"Candidates ({len(candidates)})",
            box=box.ROUNDED,
            show_edge=False,
        )
        candidate_table.add_column("Insert", no_wrap=True)
        candidate_table.add_column("Kind", no_wrap=True)
        candidate_table.add_column("Tooltip", overflow="fold")
        for candidate in candidates:
            candidate_table.add_row(
                candidate.insertion_text,
                candidate.kind.value,
                candidate.tooltip,
            )
        console.print(candidate_table)
