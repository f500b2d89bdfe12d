"""Per-subcommand completion strategies.

Each strategy takes the analyzed context, a repository source and the flag
table and returns candidates. ``STRATEGIES`` maps subcommand names to
strategies; subcommands missing from it use ``complete_default``. Adding a
subcommand means adding an entry there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitcomp.models import Candidate, CandidateKind, StatusKind
from gitcomp.ranking import (
    dedupe,
    filter_prefix,
    flag_candidate,
    log_candidate,
    path_candidate,
    sort_ordinal,
    starts_with,
    value_candidate,
)
from gitcomp.revisions import parse_revision_range

if TYPE_CHECKING:
    from collections.abc import Callable

    from gitcomp.flags import FlagTable
    from gitcomp.models import CompletionContext
    from gitcomp.repository import RepositorySource

    Strategy = Callable[[CompletionContext, RepositorySource, FlagTable], list[Candidate]]


def complete_flags(context: CompletionContext) -> list[Candidate]:
    """Flags of the current subcommand whose completion text matches."""
    options = filter_prefix(
        context.git_command_options,
        context.word_to_complete,
        key=lambda o: o.completion_text,
    )
    return [flag_candidate(o) for o in options]


def complete_modified_files(repository: RepositorySource, word: str) -> list[Candidate]:
    """Paths with working-tree changes (modified, deleted, untracked, ...)."""
    return [
        path_candidate(entry.path, f"status: {entry.work_tree_status.value}")
        for entry in repository.status()
        if entry.work_tree_status is not StatusKind.NONE and starts_with(entry.path, word)
    ]


def complete_branches(repository: RepositorySource, word: str) -> list[Candidate]:
    return [value_candidate(name) for name in repository.heads(word) if starts_with(name, word)]


def complete_log(repository: RepositorySource, word: str) -> list[Candidate]:
    """Commits whose hash or subject starts with *word* (all when empty)."""
    return [
        log_candidate(entry)
        for entry in repository.log()
        if starts_with(entry.commit, word) or starts_with(entry.message, word)
    ]


def complete_commands(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    """Subcommand names plus aliases, de-duplicated and sorted ordinally."""
    word = context.word_to_complete
    commands = [
        Candidate(
            insertion_text=command.name,
            display_text=command.name,
            kind=CandidateKind.COMMAND,
            tooltip=command.description or command.name,
        )
        for command in filter_prefix(flag_table.commands(), word, key=lambda c: c.name)
    ]
    aliases = [
        Candidate(
            insertion_text=alias.alias,
            display_text=alias.alias,
            kind=CandidateKind.COMMAND,
            tooltip=f"alias: {alias.command} {alias.parameters}".rstrip(),
        )
        for alias in repository.aliases(word)
        if starts_with(alias.alias, word)
    ]
    return sort_ordinal(dedupe(commands + aliases))


def complete_default(
    context: CompletionContext,
    repository: RepositorySource,  # noqa: ARG001
    flag_table: FlagTable,  # noqa: ARG001
) -> list[Candidate]:
    """Flag completion; no positional guesses for unknown subcommands."""
    if context.is_completing_parameter_name:
        return complete_flags(context)
    return []


def complete_add(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    if not context.is_completing_parameter_name:
        return complete_modified_files(repository, context.word_to_complete)
    return complete_default(context, repository, flag_table)


def complete_branch(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    if not context.is_completing_parameter_name:
        return complete_branches(repository, context.word_to_complete)
    return complete_default(context, repository, flag_table)


def complete_checkout(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    """Branches, or modified paths once ``--`` has been typed.

    After a flag such as ``-b`` the next word is that flag's value, so only
    flag completion applies.
    """
    if not context.previous_parameter_name and not context.is_completing_parameter_name:
        if context.after_double_dash:
            return complete_modified_files(repository, context.word_to_complete)
        return complete_branches(repository, context.word_to_complete)
    return complete_default(context, repository, flag_table)


def complete_fetch(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    """Remote names, then that remote's refs once a remote was given."""
    if context.is_completing_parameter_name:
        return complete_default(context, repository, flag_table)

    word = context.word_to_complete
    remote = context.previous_parameter_value
    if remote and remote != context.command_name:
        return [
            value_candidate(r.ref, r.remote_ref)
            for r in repository.remote_refs()
            if r.remote.casefold() == remote.casefold() and starts_with(r.ref, word)
        ]

    seen: set[str] = set()
    remotes: list[Candidate] = []
    for r in repository.remote_refs():
        if r.remote in seen or not starts_with(r.remote, word):
            continue
        seen.add(r.remote)
        remotes.append(value_candidate(r.remote))
    return remotes


def complete_diff(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,  # noqa: ARG001
) -> list[Candidate]:
    """Commits to diff against, or changed paths after ``--``."""
    word = context.word_to_complete
    if context.after_double_dash:
        revisions = parse_revision_range(
            context.raw_tokens,
            context.flag_prefixes,
            context.line_tokens,
        )
        return [
            path_candidate(path)
            for path in repository.diffable_files(
                word,
                revisions.from_rev,
                revisions.to_rev,
                revisions.cached,
            )
            if starts_with(path, word)
        ]

    if not word:
        return [log_candidate(entry) for entry in repository.log()]
    if context.is_completing_parameter_name:
        return complete_flags(context)
    return complete_log(repository, word)


def complete_rebase(
    context: CompletionContext,
    repository: RepositorySource,
    flag_table: FlagTable,
) -> list[Candidate]:
    word = context.word_to_complete
    if not word:
        return [log_candidate(entry) for entry in repository.log()]
    if not context.is_completing_parameter_name:
        return complete_log(repository, word)
    return complete_default(context, repository, flag_table)


STRATEGIES: dict[str, Strategy] = {
    "add": complete_add,
    "branch": complete_branch,
    "checkout": complete_checkout,
    "fetch": complete_fetch,
    "diff": complete_diff,
    "difftool": complete_diff,
    "rebase": complete_rebase,
}
