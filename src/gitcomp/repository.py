"""Live repository state, read by running git as a subprocess.

Every query runs a fresh git process; nothing is cached between calls.
Failures of any kind (git missing, not a repository, timeout) produce an
empty result and a debug log line, never an exception.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

from gitcomp.constants import DEFAULT_MAX_LOG_ENTRIES, DEFAULT_TIMEOUT
from gitcomp.models import GitAlias, LogEntry, RemoteRef, StatusEntry, status_from_code
from gitcomp.ranking import starts_with

if TYPE_CHECKING:
    from pathlib import Path

    from gitcomp.config import Settings

logger = logging.getLogger(__name__)


class RepositorySource(Protocol):
    """Queries the completion strategies run against a repository."""

    def heads(self, match: str = "") -> list[str]:
        """Local branch names starting with *match*."""
        ...

    def remote_refs(self) -> list[RemoteRef]:
        """All remote-tracking refs."""
        ...

    def log(self) -> list[LogEntry]:
        """Commits reachable from HEAD, most recent first."""
        ...

    def status(self) -> list[StatusEntry]:
        """Working-tree status entries, paths relative to the working directory."""
        ...

    def diffable_files(
        self,
        match: str = "",
        from_rev: str | None = None,
        to_rev: str | None = None,
        cached: bool = False,
    ) -> list[str]:
        """Paths that differ between two revisions, starting with *match*."""
        ...

    def aliases(self, match: str = "") -> list[GitAlias]:
        """Configured aliases whose name starts with *match*."""
        ...


def parse_remote_ref(refname: str) -> RemoteRef | None:
    """Split ``origin/main`` into remote and ref; symbolic HEADs are skipped."""
    remote, sep, ref = refname.partition("/")
    if not sep or not remote or not ref or ref == "HEAD":
        return None
    return RemoteRef(remote=remote, ref=ref, remote_ref=refname)


def parse_log(output: str) -> list[LogEntry]:
    """Parse ``%h<TAB>%s`` lines."""
    entries: list[LogEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        commit, _, message = line.partition("\t")
        entries.append(LogEntry(commit=commit.strip(), message=message))
    return entries


def parse_status(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain=v1 -z`` output.

    Each record is ``XY<space>path``; renames and copies are followed by an
    extra NUL-terminated record holding the original path, which is skipped.
    """
    entries: list[StatusEntry] = []
    records = output.split("\0")
    i = 0
    while i < len(records):
        record = records[i]
        i += 1
        if len(record) < 4:
            continue
        index_code, work_tree_code, path = record[0], record[1], record[3:]
        entries.append(
            StatusEntry(
                path=path,
                index_status=status_from_code(index_code),
                work_tree_status=status_from_code(work_tree_code),
            ),
        )
        if index_code in "RC":
            i += 1
    return entries


def strip_prefix(entries: list[StatusEntry], prefix: str) -> list[StatusEntry]:
    """Make root-relative status paths relative to the directory *prefix*.

    Entries outside *prefix* are dropped, matching ``git diff --relative``.
    """
    if not prefix:
        return entries
    return [
        replace(entry, path=entry.path[len(prefix) :])
        for entry in entries
        if entry.path.startswith(prefix) and len(entry.path) > len(prefix)
    ]


def parse_aliases(output: str) -> list[GitAlias]:
    """Parse ``git config --get-regexp ^alias\\.`` output.

    Lines look like ``alias.co checkout -b``; the first word of the value is
    the command, the rest its parameters.
    """
    aliases: list[GitAlias] = []
    for line in output.splitlines():
        key, _, value = line.partition(" ")
        if not key.startswith("alias.") or len(key) <= len("alias."):
            continue
        command, _, parameters = value.strip().partition(" ")
        aliases.append(
            GitAlias(alias=key[len("alias.") :], command=command, parameters=parameters.strip()),
        )
    return aliases


class GitRepository:
    """RepositorySource backed by the git executable."""

    def __init__(
        self,
        cwd: str | Path | None = None,
        git_executable: str = "git",
        timeout: float = DEFAULT_TIMEOUT,
        max_log_entries: int = DEFAULT_MAX_LOG_ENTRIES,
    ) -> None:
        self.cwd = cwd
        self.git_executable = git_executable
        self.timeout = timeout
        self.max_log_entries = max_log_entries

    @classmethod
    def from_settings(cls, settings: Settings, cwd: str | Path | None = None) -> GitRepository:
        """Create a repository reader configured from Settings."""
        return cls(
            cwd=cwd,
            git_executable=settings.git_executable,
            timeout=settings.timeout,
            max_log_entries=settings.max_log_entries,
        )

    def _run(self, *args: str) -> str | None:
        """Run a git command and return stdout, or None on any failure."""
        cmd = [self.git_executable, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                cwd=str(self.cwd) if self.cwd else None,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug("git query timed out after %ss: %s", self.timeout, " ".join(cmd))
            return None
        except (FileNotFoundError, OSError) as e:
            # git not installed or other OS error
            logger.debug("git query failed to start: %s: %s", " ".join(cmd), e)
            return None

        if result.returncode != 0:
            logger.debug(
                "git query exited %d: %s: %s",
                result.returncode,
                " ".join(cmd),
                result.stderr.strip(),
            )
            return None
        return result.stdout

    def heads(self, match: str = "") -> list[str]:
        output = self._run("for-each-ref", "--format=%(refname:short)", "refs/heads/")
        if output is None:
            return []
        return [name for name in output.splitlines() if name and starts_with(name, match)]

    def remote_refs(self) -> list[RemoteRef]:
        output = self._run("for-each-ref", "--format=%(refname:lstrip=2)", "refs/remotes/")
        if output is None:
            return []
        refs = (parse_remote_ref(line.strip()) for line in output.splitlines())
        return [ref for ref in refs if ref is not None]

    def log(self) -> list[LogEntry]:
        output = self._run(
            "log",
            f"--max-count={self.max_log_entries}",
            "--format=%h%x09%s",
        )
        if output is None:
            return []
        return parse_log(output)

    def _show_prefix(self) -> str:
        """Path of the working directory below the repository root (``sub/``)."""
        output = self._run("rev-parse", "--show-prefix")
        return output.rstrip("\n") if output else ""

    def status(self) -> list[StatusEntry]:
        output = self._run("status", "--porcelain=v1", "-z", "--untracked-files=all")
        if output is None:
            return []
        return strip_prefix(parse_status(output), self._show_prefix())

    def diffable_files(
        self,
        match: str = "",
        from_rev: str | None = None,
        to_rev: str | None = None,
        cached: bool = False,
    ) -> list[str]:
        args = ["diff", "--name-only", "--relative"]
        if cached:
            args.append("--cached")
        args.extend(rev for rev in (from_rev, to_rev) if rev)
        args.append("--")
        output = self._run(*args)
        if output is None:
            return []
        return [path for path in output.splitlines() if path and starts_with(path, match)]

    def aliases(self, match: str = "") -> list[GitAlias]:
        output = self._run("config", "--get-regexp", r"^alias\.")
        if output is None:
            return []
        return [a for a in parse_aliases(output) if starts_with(a.alias, match)]
