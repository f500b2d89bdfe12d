"""Shell completion callbacks for the gitcomp CLI itself."""

from __future__ import annotations

from gitcomp.config import KNOWN_KEYS
from gitcomp.constants import OUTPUT_FORMATS, SUPPORTED_SHELLS

# Return (value, help_text) tuples so Typer generates "value":"description"
# pairs in the zsh completion output.

_FORMAT_HELP = {
    "plain": "One insertion text per line",
    "tsv": "Insertion and tooltip separated by a tab",
    "zsh": "insertion:tooltip lines for _describe",
    "json": "JSON array of candidates",
}


def complete_shells(incomplete: str) -> list[tuple[str, str]]:
    """Complete shell names for `gitcomp register`."""
    return [
        (shell, f"Registration script for {shell}")
        for shell in SUPPORTED_SHELLS
        if shell.startswith(incomplete)
    ]


def complete_formats(incomplete: str) -> list[tuple[str, str]]:
    """Complete output formats for `gitcomp complete --format`."""
    return [(f, _FORMAT_HELP[f]) for f in OUTPUT_FORMATS if f.startswith(incomplete)]


def complete_config_keys(incomplete: str) -> list[tuple[str, str]]:
    """Complete configuration keys."""
    return [
        (key, info["description"])
        for key, info in KNOWN_KEYS.items()
        if key.startswith(incomplete)
    ]
