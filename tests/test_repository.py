"""Tests for the git-backed repository data source."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING, Any

import pytest

from gitcomp.config import Settings
from gitcomp.engine import Completer
from gitcomp.flags import FlagTable
from gitcomp.models import GitAlias, LogEntry, RemoteRef, StatusKind
from gitcomp.repository import (
    GitRepository,
    parse_aliases,
    parse_log,
    parse_remote_ref,
    parse_status,
    strip_prefix,
)

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import GitRepo


class TestParsers:
    """Parsing of raw git output."""

    def test_parse_remote_ref(self) -> None:
        assert parse_remote_ref("origin/main") == RemoteRef("origin", "main", "origin/main")

    def test_parse_remote_ref_nested_branch(self) -> None:
        ref = parse_remote_ref("origin/feature/x")
        assert ref is not None
        assert ref.remote == "origin"
        assert ref.ref == "feature/x"

    @pytest.mark.parametrize("refname", ["origin/HEAD", "origin", "", "/main", "origin/"])
    def test_parse_remote_ref_skips(self, refname: str) -> None:
        assert parse_remote_ref(refname) is None

    def test_parse_log(self) -> None:
        assert parse_log("abc\tFirst\ndef\tSecond line\n\n") == [
            LogEntry("abc", "First"),
            LogEntry("def", "Second line"),
        ]

    def test_parse_log_keeps_tabs_in_message(self) -> None:
        assert parse_log("abc\ta\tb\n") == [LogEntry("abc", "a\tb")]

    def test_parse_status(self) -> None:
        output = "M  staged.py\0 M mod.py\0?? new.txt\0R  new.py\0old.py\0"
        entries = parse_status(output)
        assert [e.path for e in entries] == ["staged.py", "mod.py", "new.txt", "new.py"]
        assert entries[0].index_status is StatusKind.MODIFIED
        assert entries[0].work_tree_status is StatusKind.NONE
        assert entries[1].work_tree_status is StatusKind.MODIFIED
        assert entries[2].work_tree_status is StatusKind.UNTRACKED
        assert entries[3].index_status is StatusKind.RENAMED

    def test_parse_status_path_with_spaces(self) -> None:
        (entry,) = parse_status(" M my file.txt\0")
        assert entry.path == "my file.txt"

    def test_parse_status_empty(self) -> None:
        assert parse_status("") == []

    def test_strip_prefix(self) -> None:
        entries = parse_status("?? sub/new.txt\0 M sub/inner/a.py\0 M top.txt\0")
        assert [e.path for e in strip_prefix(entries, "sub/")] == ["new.txt", "inner/a.py"]
        assert strip_prefix(entries, "") == entries

    def test_parse_aliases(self) -> None:
        output = "alias.co checkout\nalias.st status -sb\nalias.lg log --graph --oneline\nuser.name x\n"
        assert parse_aliases(output) == [
            GitAlias("co", "checkout", ""),
            GitAlias("st", "status", "-sb"),
            GitAlias("lg", "log", "--graph --oneline"),
        ]


class TestFailures:
    """Queries degrade to empty results instead of raising."""

    def test_missing_executable(self, tmp_path: Path) -> None:
        repo = GitRepository(cwd=tmp_path, git_executable="definitely-not-git-xyz")
        assert repo.heads() == []
        assert repo.remote_refs() == []
        assert repo.log() == []
        assert repo.status() == []
        assert repo.diffable_files() == []
        assert repo.aliases() == []

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _timeout(*args: Any, **kwargs: Any) -> None:
            raise subprocess.TimeoutExpired(cmd="git", timeout=kwargs.get("timeout", 0))

        monkeypatch.setattr(subprocess, "run", _timeout)
        assert GitRepository(timeout=0.01).log() == []

    def test_timeout_is_passed_to_subprocess(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, Any] = {}

        def _run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            seen["cmd"] = cmd
            seen["timeout"] = kwargs["timeout"]
            return subprocess.CompletedProcess(cmd, 0, stdout="main\n", stderr="")

        monkeypatch.setattr(subprocess, "run", _run)
        assert GitRepository(git_executable="/opt/git", timeout=3.5).heads() == ["main"]
        assert seen["cmd"][0] == "/opt/git"
        assert seen["timeout"] == 3.5

    def test_nonzero_exit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            return subprocess.CompletedProcess(cmd, 128, stdout="", stderr="fatal: not a git repository")

        monkeypatch.setattr(subprocess, "run", _run)
        assert GitRepository().status() == []

    def test_from_settings(self) -> None:
        settings = Settings(git_executable="g", timeout=1.0, max_log_entries=7)
        repo = GitRepository.from_settings(settings, cwd="/tmp")
        assert (repo.git_executable, repo.timeout, repo.max_log_entries, repo.cwd) == ("g", 1.0, 7, "/tmp")


class TestAgainstGit:
    """Queries against a real temporary repository."""

    def test_heads(self, git_repo: GitRepo) -> None:
        git_repo.git("branch", "feature/one")
        repo = GitRepository(cwd=git_repo.path)
        assert repo.heads() == ["feature/one", "main"]
        assert repo.heads("F") == ["feature/one"]

    def test_remote_refs_skip_symbolic_head(self, git_repo: GitRepo) -> None:
        git_repo.git("update-ref", "refs/remotes/origin/main", "HEAD")
        git_repo.git("update-ref", "refs/remotes/origin/dev", "HEAD")
        git_repo.git("symbolic-ref", "refs/remotes/origin/HEAD", "refs/remotes/origin/main")
        refs = GitRepository(cwd=git_repo.path).remote_refs()
        assert refs == [
            RemoteRef("origin", "dev", "origin/dev"),
            RemoteRef("origin", "main", "origin/main"),
        ]

    def test_log_most_recent_first(self, git_repo: GitRepo) -> None:
        git_repo.write("tracked.txt", "v2\n")
        git_repo.commit_all("Second commit")
        entries = GitRepository(cwd=git_repo.path).log()
        assert [e.message for e in entries] == ["Second commit", "Initial commit"]
        assert entries[0].commit == git_repo.head()

    def test_log_respects_limit(self, git_repo: GitRepo) -> None:
        git_repo.write("tracked.txt", "v2\n")
        git_repo.commit_all("Second commit")
        assert len(GitRepository(cwd=git_repo.path, max_log_entries=1).log()) == 1

    def test_status(self, git_repo: GitRepo) -> None:
        git_repo.write("tracked.txt", "changed\n")
        git_repo.write("new.txt")
        statuses = {e.path: e.work_tree_status for e in GitRepository(cwd=git_repo.path).status()}
        assert statuses == {
            "tracked.txt": StatusKind.MODIFIED,
            "new.txt": StatusKind.UNTRACKED,
        }

    def test_diffable_files_between_revisions(self, git_repo: GitRepo) -> None:
        git_repo.write("tracked.txt", "v2\n")
        git_repo.write("other.txt")
        git_repo.commit_all("Second commit")
        repo = GitRepository(cwd=git_repo.path)
        assert repo.diffable_files("", "HEAD~1", "HEAD") == ["other.txt", "tracked.txt"]
        assert repo.diffable_files("T", "HEAD~1", "HEAD") == ["tracked.txt"]

    def test_diffable_files_cached(self, git_repo: GitRepo) -> None:
        git_repo.write("staged.txt")
        git_repo.git("add", "staged.txt")
        git_repo.write("tracked.txt", "unstaged\n")
        repo = GitRepository(cwd=git_repo.path)
        assert repo.diffable_files(cached=True) == ["staged.txt"]
        assert repo.diffable_files() == ["tracked.txt"]

    def test_aliases(self, git_repo: GitRepo) -> None:
        git_repo.git("config", "alias.co", "checkout")
        git_repo.git("config", "alias.st", "status -sb")
        repo = GitRepository(cwd=git_repo.path)
        assert repo.aliases("c") == [GitAlias("co", "checkout", "")]
        assert GitAlias("st", "status", "-sb") in repo.aliases()

    def test_no_aliases(self, git_repo: GitRepo) -> None:
        assert GitRepository(cwd=git_repo.path).aliases() == []

    def test_outside_repository(self, tmp_path: Path, git_repo: GitRepo) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        repo = GitRepository(cwd=outside)
        assert repo.heads() == []
        assert repo.log() == []

    def test_end_to_end_completion(self, git_repo: GitRepo) -> None:
        git_repo.write("tracked.txt", "changed\n")
        git_repo.write("b.txt")
        completer = Completer(GitRepository(cwd=git_repo.path), FlagTable.load())
        texts = [c.insertion_text for c in completer.complete("git add ")]
        assert sorted(texts) == ["b.txt", "tracked.txt"]
        assert [c.insertion_text for c in completer.complete("git checkout ")] == ["main"]

    def test_completion_from_subdirectory(self, git_repo: GitRepo) -> None:
        git_repo.write("sub/mod.txt", "v1\n")
        git_repo.commit_all("Add sub")
        git_repo.write("sub/mod.txt", "v2\n")
        git_repo.write("sub/new.txt")
        git_repo.write("tracked.txt", "changed\n")

        completer = Completer(GitRepository(cwd=git_repo.path / "sub"), FlagTable.load())
        assert sorted(c.insertion_text for c in completer.complete("git add ")) == ["mod.txt", "new.txt"]
        assert sorted(c.insertion_text for c in completer.complete("git checkout -- ")) == [
            "mod.txt",
            "new.txt",
        ]
        assert [c.insertion_text for c in completer.complete("git diff -- ")] == ["mod.txt"]
