"""Data models for gitcomp completions using dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gitcomp.constants import DEFAULT_FLAG_PREFIXES


class CandidateKind(str, Enum):
    """Kind tag attached to every completion candidate."""

    COMMAND = "command"
    FLAG = "flag"
    VALUE = "value"
    PATH = "path"


class ValueKind(str, Enum):
    """What a flag expects as its value."""

    NONE = "none"
    PATH = "path"
    REF = "ref"
    FREE_TEXT = "free-text"


class StatusKind(str, Enum):
    """Single-column status from ``git status --porcelain``."""

    NONE = "none"
    MODIFIED = "modified"
    TYPE_CHANGED = "type-changed"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNMERGED = "unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"


STATUS_CODES: dict[str, StatusKind] = {
    " ": StatusKind.NONE,
    "M": StatusKind.MODIFIED,
    "T": StatusKind.TYPE_CHANGED,
    "A": StatusKind.ADDED,
    "D": StatusKind.DELETED,
    "R": StatusKind.RENAMED,
    "C": StatusKind.COPIED,
    "U": StatusKind.UNMERGED,
    "?": StatusKind.UNTRACKED,
    "!": StatusKind.IGNORED,
}


def status_from_code(code: str) -> StatusKind:
    """Map a porcelain status letter to a StatusKind (unknown -> NONE)."""
    return STATUS_CODES.get(code, StatusKind.NONE)


@dataclass(frozen=True)
class Token:
    """A command-line token with its half-open source span."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class FlagDefinition:
    """A flag known for a git subcommand."""

    name: str
    completion_text: str
    value_kind: ValueKind = ValueKind.NONE
    description: str = ""


@dataclass(frozen=True)
class GitCommand:
    """A recognized git subcommand."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class Candidate:
    """One completion suggestion handed back to the shell."""

    insertion_text: str
    display_text: str
    kind: CandidateKind
    tooltip: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dict for JSON output."""
        return {
            "insertion_text": self.insertion_text,
            "display_text": self.display_text,
            "kind": self.kind.value,
            "tooltip": self.tooltip,
        }


@dataclass(frozen=True)
class RemoteRef:
    """A remote-tracking ref split into remote name and branch."""

    remote: str
    ref: str
    remote_ref: str


@dataclass(frozen=True)
class LogEntry:
    """One commit from the log: abbreviated hash and subject line."""

    commit: str
    message: str


@dataclass(frozen=True)
class StatusEntry:
    """One working-tree status entry."""

    path: str
    index_status: StatusKind = StatusKind.NONE
    work_tree_status: StatusKind = StatusKind.NONE


@dataclass(frozen=True)
class GitAlias:
    """A configured ``alias.<name>`` entry."""

    alias: str
    command: str
    parameters: str = ""


@dataclass(frozen=True)
class RevisionRange:
    """Revisions a diff is taken between, plus whether it targets the index."""

    from_rev: str | None = None
    to_rev: str | None = None
    cached: bool = False


@dataclass(frozen=True)
class CompletionContext:
    """Structured view of a partially typed git command line.

    Built once per completion request by ``gitcomp.analyzer.analyze`` and
    never mutated afterwards.
    """

    word_to_complete: str = ""
    command_name: str = ""
    is_completing_command: bool = True
    is_completing_parameter_name: bool = False
    previous_parameter_name: str = ""
    previous_parameter_value: str = ""
    after_double_dash: bool = False
    raw_tokens: tuple[Token, ...] = field(default_factory=tuple)
    line_tokens: tuple[Token, ...] = field(default_factory=tuple)
    git_command_options: tuple[FlagDefinition, ...] = field(default_factory=tuple)
    flag_prefixes: tuple[str, ...] = DEFAULT_FLAG_PREFIXES
