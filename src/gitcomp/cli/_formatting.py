"""Serialize candidates into the shapes shell integrations read."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from gitcomp.models import Candidate, CompletionContext


def _one_line(text: str) -> str:
    """Collapse tabs and newlines so a field can't break the line format."""
    return " ".join(text.split())


def format_plain(candidates: list[Candidate]) -> str:
    """One insertion text per line (bash COMPREPLY)."""
    return "\n".join(c.insertion_text for c in candidates)


def format_tsv(candidates: list[Candidate]) -> str:
    """``insertion<TAB>tooltip`` per line (fish)."""
    return "\n".join(f"{c.insertion_text}\t{_one_line(c.tooltip)}" for c in candidates)


def _zsh_escape(text: str) -> str:
    return text.replace(":", r"\:")


def format_zsh(candidates: list[Candidate]) -> str:
    """``insertion:tooltip`` per line for _describe; colons in the value are escaped."""
    return "\n".join(
        f"{_zsh_escape(c.insertion_text)}:{_one_line(c.tooltip)}"
        for c in candidates
    )


def format_json(candidates: list[Candidate]) -> str:
    """JSON array of candidate objects (PowerShell, tooling)."""
    return orjson.dumps([c.to_dict() for c in candidates]).decode()


FORMATTERS = {
    "plain": format_plain,
    "tsv": format_tsv,
    "zsh": format_zsh,
    "json": format_json,
}


def format_candidates(candidates: list[Candidate], output_format: str) -> str:
    """Format *candidates* with the named formatter.

    Raises:
        KeyError: If output_format is not one of FORMATTERS
    """
    return FORMATTERS[output_format](candidates)


def context_rows(context: CompletionContext) -> list[tuple[str, str]]:
    """Field/value rows describing an analyzed context, for display."""
    return [
        ("word_to_complete", repr(context.word_to_complete)),
        ("command_name", repr(context.command_name)),
        ("is_completing_command", str(context.is_completing_command)),
        ("is_completing_parameter_name", str(context.is_completing_parameter_name)),
        ("previous_parameter_name", repr(context.previous_parameter_name)),
        ("previous_parameter_value", repr(context.previous_parameter_value)),
        ("after_double_dash", str(context.after_double_dash)),
        ("raw_tokens", " ".join(repr(t.text) for t in context.raw_tokens)),
        ("git_command_options", str(len(context.git_command_options))),
    ]
