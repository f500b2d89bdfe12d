"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gitcomp.flags import FlagTable
from gitcomp.models import GitAlias, LogEntry, RemoteRef, StatusEntry, StatusKind
from gitcomp.ranking import starts_with

# Environment variables that skip system/global config lookups so the user's
# own git aliases and settings never leak into tests.
_GIT_TEST_ENV = {
    "GIT_CONFIG_NOSYSTEM": "1",
    "HOME": "/dev/null",
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@test.com",
    "GIT_TERMINAL_PROMPT": "0",
}


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point gitcomp at an empty, per-test config file."""
    config_path = tmp_path_factory.mktemp("gitcomp-config") / "config.toml"
    monkeypatch.setenv("GITCOMP_CONFIG", str(config_path))
    for name in ("GITCOMP_GIT", "GITCOMP_TIMEOUT", "GITCOMP_MAX_LOG_ENTRIES", "GITCOMP_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    return config_path


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo the CLI's logger setup so caplog sees gitcomp records."""
    yield
    logger = logging.getLogger("gitcomp")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def config_path(_isolated_config: Path) -> Path:
    """Path of the isolated config file (not created until written)."""
    return _isolated_config


@dataclass
class FakeRepository:
    """In-memory RepositorySource for strategy tests."""

    branches: list[str] = field(default_factory=list)
    remotes: list[RemoteRef] = field(default_factory=list)
    entries: list[LogEntry] = field(default_factory=list)
    statuses: list[StatusEntry] = field(default_factory=list)
    diff_files: list[str] = field(default_factory=list)
    alias_list: list[GitAlias] = field(default_factory=list)
    diff_calls: list[tuple[str, str | None, str | None, bool]] = field(default_factory=list)

    def heads(self, match: str = "") -> list[str]:
        return [b for b in self.branches if starts_with(b, match)]

    def remote_refs(self) -> list[RemoteRef]:
        return list(self.remotes)

    def log(self) -> list[LogEntry]:
        return list(self.entries)

    def status(self) -> list[StatusEntry]:
        return list(self.statuses)

    def diffable_files(
        self,
        match: str = "",
        from_rev: str | None = None,
        to_rev: str | None = None,
        cached: bool = False,
    ) -> list[str]:
        self.diff_calls.append((match, from_rev, to_rev, cached))
        return [f for f in self.diff_files if starts_with(f, match)]

    def aliases(self, match: str = "") -> list[GitAlias]:
        return [a for a in self.alias_list if starts_with(a.alias, match)]


@pytest.fixture
def fake_repo() -> FakeRepository:
    """A repository with a little of everything."""
    return FakeRepository(
        branches=["main", "feature/login", "Fix-typo"],
        remotes=[
            RemoteRef(remote="origin", ref="main", remote_ref="origin/main"),
            RemoteRef(remote="origin", ref="develop", remote_ref="origin/develop"),
            RemoteRef(remote="upstream", ref="main", remote_ref="upstream/main"),
        ],
        entries=[
            LogEntry(commit="h1", message="msg1"),
            LogEntry(commit="h2", message="msg2"),
            LogEntry(commit="abc1234", message="Fix parser crash"),
        ],
        statuses=[
            StatusEntry(path="a.txt", work_tree_status=StatusKind.MODIFIED),
            StatusEntry(path="b.txt", work_tree_status=StatusKind.UNTRACKED),
            StatusEntry(path="staged.txt", index_status=StatusKind.ADDED),
        ],
        diff_files=["src/app.py", "src/util.py", "README.md"],
        alias_list=[
            GitAlias(alias="co", command="checkout", parameters=""),
            GitAlias(alias="st", command="status", parameters="-sb"),
        ],
    )


@pytest.fixture(scope="session")
def flag_table() -> FlagTable:
    """The bundled subcommand/flag table."""
    return FlagTable.load()


@dataclass
class GitRepo:
    """A temporary git repository."""

    path: Path

    def git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a git command in this repo."""
        return subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=check,
            env={**os.environ, **_GIT_TEST_ENV},
        )

    def write(self, name: str, content: str = "content\n") -> Path:
        """Write a file relative to the repo root."""
        path = self.path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def commit_all(self, message: str) -> None:
        """Stage all changes and commit."""
        self.git("add", "-A")
        self.git("commit", "-m", message)

    def head(self) -> str:
        """Abbreviated hash of HEAD."""
        return self.git("rev-parse", "--short", "HEAD").stdout.strip()


@pytest.fixture(scope="session")
def _git_template_dir(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Empty template dir to skip copying sample hooks during git init."""
    return str(tmp_path_factory.mktemp("git-tpl"))


@pytest.fixture
def git_repo(
    tmp_path: Path,
    _git_template_dir: str,
    monkeypatch: pytest.MonkeyPatch,
) -> GitRepo:
    """Create a temporary git repository with one commit on main."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    # GitRepository inherits the environment, so isolate it too
    for key, value in _GIT_TEST_ENV.items():
        monkeypatch.setenv(key, value)

    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    subprocess.run(
        ["git", "init", "-b", "main", "--template", _git_template_dir, str(repo_path)],
        check=True,
        capture_output=True,
        env={**os.environ, **_GIT_TEST_ENV},
    )

    repo = GitRepo(path=repo_path)
    repo.write("tracked.txt", "v1\n")
    repo.commit_all("Initial commit")
    return repo
