"""Completion entry point: analyze the line, dispatch, return candidates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitcomp.analyzer import analyze
from gitcomp.config import load_settings
from gitcomp.constants import DEFAULT_FLAG_PREFIXES
from gitcomp.flags import FlagTable
from gitcomp.repository import GitRepository
from gitcomp.strategies import STRATEGIES, complete_commands, complete_default

if TYPE_CHECKING:
    from pathlib import Path

    from gitcomp.config import Settings
    from gitcomp.models import Candidate, CompletionContext
    from gitcomp.repository import RepositorySource

logger = logging.getLogger(__name__)


def dispatch(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    """Route *context* to the command-name, subcommand or default strategy."""
    if context.is_completing_command:
        return complete_commands(context, repository, flag_table)
    strategy = STRATEGIES.get(context.command_name.lower(), complete_default)
    logger.debug("Completing %r with %s", context.command_name, strategy.__name__)
    return strategy(context, repository, flag_table)


class Completer:
    """Holds the collaborators one completion request needs.

    Nothing here survives between requests except the collaborators
    themselves; repository state is re-read on every call.
    """

    def __init__(
        self,
        repository: RepositorySource,
        flag_table: FlagTable,
        flag_prefixes: tuple[str, ...] = DEFAULT_FLAG_PREFIXES,
    ) -> None:
        self.repository = repository
        self.flag_table = flag_table
        self.flag_prefixes = flag_prefixes

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        cwd: str | Path | None = None,
    ) -> Completer:
        """Build a completer for the repository at *cwd* (default: current dir)."""
        settings = settings or load_settings()
        return cls(
            repository=GitRepository.from_settings(settings, cwd=cwd),
            flag_table=FlagTable.load(settings),
            flag_prefixes=settings.flag_prefixes,
        )

    def analyze(self, raw_line: str, cursor: int | None = None) -> CompletionContext:
        """Analyze *raw_line*; the cursor defaults to the end of the line."""
        if cursor is None:
            cursor = len(raw_line)
        return analyze(raw_line, cursor, self.flag_table, self.flag_prefixes)

    def complete(self, raw_line: str, cursor: int | None = None) -> list[Candidate]:
        """Return ranked candidates for *raw_line* with the cursor at *cursor*."""
        context = self.analyze(raw_line, cursor)
        return dispatch(context, self.repository, self.flag_table)


def complete_input(
    raw_line: str,
    cursor: int | None = None,
    cwd: str | Path | None = None,
) -> list[Candidate]:
    """One-shot completion using settings from the config file."""
    return Completer.from_settings(cwd=cwd).complete(raw_line, cursor)
