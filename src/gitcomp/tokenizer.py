"""Split a raw command line into tokens with source spans.

Follows POSIX shell word rules closely enough for completion: whitespace
separates words, single quotes are literal, double quotes allow backslash
escapes of ``"`` and ``\\``, and an unquoted backslash escapes the next
character. Unterminated quotes run to the end of the line instead of
raising.
"""

from __future__ import annotations

from gitcomp.models import Token

_WHITESPACE = frozenset(" \t\r\n")


def tokenize(line: str) -> list[Token]:
    """Tokenize *line* into a list of Tokens.

    ``Token.text`` holds the shell value of the word (quotes removed,
    escapes resolved); ``start``/``end`` delimit the literal source text.

    Examples:
        'git add a.txt'      -> ["git", "add", "a.txt"]
        'git commit -m "x y"' -> ["git", "commit", "-m", "x y"]
    """
    tokens: list[Token] = []
    i = 0
    n = len(line)

    while i < n:
        if line[i] in _WHITESPACE:
            i += 1
            continue

        start = i
        chars: list[str] = []
        quote: str | None = None

        while i < n:
            ch = line[i]
            if quote == "'":
                if ch == "'":
                    quote = None
                else:
                    chars.append(ch)
                i += 1
            elif quote == '"':
                if ch == '"':
                    quote = None
                    i += 1
                elif ch == "\\" and i + 1 < n and line[i + 1] in '"\\':
                    chars.append(line[i + 1])
                    i += 2
                else:
                    chars.append(ch)
                    i += 1
            elif ch in _WHITESPACE:
                break
            elif ch in "'\"":
                quote = ch
                i += 1
            elif ch == "\\" and i + 1 < n:
                chars.append(line[i + 1])
                i += 2
            else:
                chars.append(ch)
                i += 1

        tokens.append(Token(text="".join(chars), start=start, end=i))

    return tokens


def token_at(tokens: list[Token], cursor: int) -> int | None:
    """Return the index of the token touching *cursor*, or None.

    A cursor sitting right after the last character of a token counts as
    being on that token (``git ad|`` completes ``ad``).
    """
    for index, token in enumerate(tokens):
        if token.start <= cursor <= token.end:
            return index
    return None
