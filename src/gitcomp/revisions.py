"""Revision-range parsing for diff-like subcommands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitcomp.analyzer import is_flag_shaped
from gitcomp.constants import CACHED_FLAGS, DEFAULT_FLAG_PREFIXES, DOUBLE_DASH
from gitcomp.models import RevisionRange

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gitcomp.models import Token


def _split_range(text: str) -> tuple[str | None, str | None]:
    """Split ``A..B`` or ``A...B`` into its ends (empty ends become None)."""
    separator = "..." if "..." in text else ".."
    left, _, right = text.partition(separator)
    return left or None, right or None


def parse_revision_range(
    tokens: Sequence[Token],
    flag_prefixes: Sequence[str] = DEFAULT_FLAG_PREFIXES,
    line_tokens: Sequence[Token] | None = None,
) -> RevisionRange:
    """Extract the revisions a diff command compares.

    Takes the first three non-flag tokens after the program name, stopping
    at ``--``, and drops the first (the subcommand) leaving zero, one or
    two revisions. A single ``A..B`` token supplies both ends.
    ``--cached``/``--staged`` anywhere in *line_tokens* (the whole line,
    including text after the cursor; defaults to *tokens*) sets ``cached``.

    Examples:
        git diff                 -> (None, None, cached=False)
        git diff HEAD~1          -> ("HEAD~1", None)
        git diff main topic      -> ("main", "topic")
        git diff main..topic     -> ("main", "topic")
        git diff --cached HEAD   -> ("HEAD", None, cached=True)
    """
    cached = any(token.text in CACHED_FLAGS for token in (line_tokens or tokens))

    positional: list[str] = []
    for token in tokens[1:]:
        if token.text == DOUBLE_DASH:
            break
        if is_flag_shaped(token.text, flag_prefixes):
            continue
        positional.append(token.text)
        if len(positional) == 3:
            break

    revisions = positional[1:]
    if len(revisions) == 1 and ".." in revisions[0]:
        from_rev, to_rev = _split_range(revisions[0])
        return RevisionRange(from_rev=from_rev, to_rev=to_rev, cached=cached)
    if len(revisions) == 1:
        return RevisionRange(from_rev=revisions[0], cached=cached)
    if len(revisions) == 2:
        return RevisionRange(from_rev=revisions[0], to_rev=revisions[1], cached=cached)
    return RevisionRange(cached=cached)
