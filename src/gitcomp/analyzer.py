"""Turn a raw command line and cursor offset into a CompletionContext."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitcomp.constants import DEFAULT_FLAG_PREFIXES, DOUBLE_DASH
from gitcomp.models import CompletionContext, Token
from gitcomp.tokenizer import token_at, tokenize

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gitcomp.flags import FlagTable

logger = logging.getLogger(__name__)


def is_flag_shaped(text: str, flag_prefixes: Sequence[str] = DEFAULT_FLAG_PREFIXES) -> bool:
    """Return True if *text* names an option rather than a value."""
    return bool(text) and any(text.startswith(prefix) for prefix in flag_prefixes)


def _word_before_cursor(line: str, token: Token, cursor: int) -> str:
    """Return the part of *token* that lies before the cursor."""
    if cursor >= token.end:
        return token.text
    head = tokenize(line[token.start : cursor])
    return head[0].text if head else ""


def analyze(
    raw_line: str,
    cursor: int,
    flag_table: FlagTable | None = None,
    flag_prefixes: Sequence[str] = DEFAULT_FLAG_PREFIXES,
) -> CompletionContext:
    """Build the completion context for *raw_line* with the cursor at *cursor*.

    Token 0 is the program name and token 1 the subcommand. Anything that
    cannot be classified degrades to the most permissive context (completing
    the subcommand with an empty word) instead of raising.

    Args:
        raw_line: The full command line as typed so far
        cursor: Character offset of the cursor in raw_line
        flag_table: Source of known flags for the subcommand
        flag_prefixes: Prefixes that make a token a flag name

    Returns:
        A fresh, immutable CompletionContext
    """
    cursor = max(0, min(cursor, len(raw_line)))
    tokens = tokenize(raw_line)

    index = token_at(tokens, cursor)
    if index is None:
        # Cursor in whitespace: a new, empty word starts here
        index = sum(1 for token in tokens if token.end < cursor)
        word = ""
        raw_tokens = tuple(tokens[:index])
    else:
        word = _word_before_cursor(raw_line, tokens[index], cursor)
        raw_tokens = tuple(tokens[: index + 1])

    if index == 0:
        logger.debug("Cursor on program name in %r, completing commands", raw_line)
        return CompletionContext(
            raw_tokens=raw_tokens,
            line_tokens=tuple(tokens),
            flag_prefixes=tuple(flag_prefixes),
        )

    if index == 1:
        return CompletionContext(
            word_to_complete=word,
            is_completing_command=True,
            raw_tokens=raw_tokens,
            line_tokens=tuple(tokens),
            flag_prefixes=tuple(flag_prefixes),
        )

    command_name = tokens[1].text
    if not command_name:
        # e.g. git "" <cursor>: no usable subcommand was typed
        return CompletionContext(
            word_to_complete=word,
            raw_tokens=raw_tokens,
            line_tokens=tuple(tokens),
            flag_prefixes=tuple(flag_prefixes),
        )

    previous_name = ""
    after_double_dash = False
    for token in tokens[2:index]:
        if after_double_dash:
            continue
        if token.text == DOUBLE_DASH:
            after_double_dash = True
            previous_name = ""
        elif is_flag_shaped(token.text, flag_prefixes):
            previous_name = token.text

    previous = tokens[index - 1].text
    if previous == DOUBLE_DASH or (
        not after_double_dash and is_flag_shaped(previous, flag_prefixes)
    ):
        previous_value = ""
    else:
        previous_value = previous

    options = flag_table.options_for(command_name) if flag_table is not None else ()

    return CompletionContext(
        word_to_complete=word,
        command_name=command_name,
        is_completing_command=False,
        is_completing_parameter_name=(
            not after_double_dash and is_flag_shaped(word, flag_prefixes)
        ),
        previous_parameter_name=previous_name,
        previous_parameter_value=previous_value,
        after_double_dash=after_double_dash,
        raw_tokens=raw_tokens,
        line_tokens=tuple(tokens),
        git_command_options=tuple(options),
        flag_prefixes=tuple(flag_prefixes),
    )
