"""Prefix matching, ordering and candidate construction."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from gitcomp.models import Candidate, CandidateKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from gitcomp.models import FlagDefinition, LogEntry

T = TypeVar("T")


def starts_with(text: str, prefix: str) -> bool:
    """Case-insensitive prefix test; the empty prefix matches everything."""
    return text.casefold().startswith(prefix.casefold())


def filter_prefix(items: Iterable[T], prefix: str, key: Callable[[T], str]) -> list[T]:
    """Keep items whose key starts with prefix, preserving input order."""
    return [item for item in items if starts_with(key(item), prefix)]


def dedupe(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Drop candidates whose insertion text was already seen (first wins)."""
    seen: set[str] = set()
    unique: list[Candidate] = []
    for candidate in candidates:
        if candidate.insertion_text in seen:
            continue
        seen.add(candidate.insertion_text)
        unique.append(candidate)
    return unique


def sort_ordinal(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Sort by display text using plain code-point comparison."""
    return sorted(candidates, key=lambda c: c.display_text)


def value_candidate(text: str, tooltip: str | None = None) -> Candidate:
    """A parameter value whose tooltip defaults to the value itself."""
    return Candidate(
        insertion_text=text,
        display_text=text,
        kind=CandidateKind.VALUE,
        tooltip=text if tooltip is None else tooltip,
    )


def path_candidate(path: str, tooltip: str = "") -> Candidate:
    return Candidate(
        insertion_text=path,
        display_text=path,
        kind=CandidateKind.PATH,
        tooltip=tooltip or path,
    )


def log_candidate(entry: LogEntry) -> Candidate:
    """Commit hash as the completion, subject line as the tooltip."""
    return value_candidate(entry.commit, entry.message)


def flag_candidate(option: FlagDefinition) -> Candidate:
    return Candidate(
        insertion_text=option.completion_text,
        display_text=option.name,
        kind=CandidateKind.FLAG,
        tooltip=option.description or option.name,
    )
