# tests/conftest.py
"""Pytest configuration with shared fixtures for the guit tests.

Fixtures cover three layers:
- a mocked curses window for the loop, key binder and renderer;
- an ApplicationState built over a mocked repository, with the query
  functions patched to return canned records;
- a real temporary git repository for the query layer, skipped when
  `git` is not installed.
"""

from __future__ import annotations

import copy
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Callable, Generator, Optional
from unittest.mock import MagicMock, Mock, patch

import pytest

from guit.core.AppState import ApplicationState
from guit.core.Records import BranchRecord, CommitRecord, StatusRecord
from guit.integrations.GitBridge import GitBridge
from guit.utils.utils import DEFAULT_CONFIG


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr with terminal size (24, 80)."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """A private copy of the built-in configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


# --- Record fixtures ---
@pytest.fixture
def status_records() -> list[StatusRecord]:
    return [StatusRecord(" M", f"src/file{i}.py") for i in range(5)]


@pytest.fixture
def commit_records() -> list[CommitRecord]:
    return [
        CommitRecord("aaaaaaa", "Ada Lovelace", "third"),
        CommitRecord("bbbbbbb", "Alan Turing", "second"),
        CommitRecord("ccccccc", "Grace Hopper", "first"),
    ]


@pytest.fixture
def branch_records() -> list[BranchRecord]:
    return [BranchRecord("feature"), BranchRecord("main")]


@pytest.fixture
def reflog_records() -> list[CommitRecord]:
    return [
        CommitRecord("aaaaaaa", "Ada Lovelace", "commit: third"),
        CommitRecord("bbbbbbb", "Ada Lovelace", "checkout: moving from feature to main"),
    ]


# --- ApplicationState fixtures ---
@pytest.fixture
def mock_repo() -> Mock:
    """A `GitBridge` mock; the query functions are patched, so it is never called."""
    repo = Mock(spec=GitBridge)
    repo.path = Path("/path/to/repo")
    return repo


@pytest.fixture
def make_state(
    mock_repo: Mock,
    status_records: list[StatusRecord],
    commit_records: list[CommitRecord],
    branch_records: list[BranchRecord],
    reflog_records: list[CommitRecord],
) -> Callable[..., ApplicationState]:
    """Factory building an ApplicationState over canned query results.

    Keyword arguments override the records of one pane, e.g.
    ``make_state(commits=[])``.
    """

    def factory(
        status: Optional[list] = None,
        commits: Optional[list] = None,
        branches: Optional[list] = None,
        reflog: Optional[list] = None,
        config: Optional[dict[str, Any]] = None,
    ) -> ApplicationState:
        with (
            patch("guit.core.AppState.list_status", return_value=status_records if status is None else status),
            patch("guit.core.AppState.list_commits", return_value=commit_records if commits is None else commits),
            patch("guit.core.AppState.list_branches", return_value=branch_records if branches is None else branches),
            patch("guit.core.AppState.list_reflog", return_value=reflog_records if reflog is None else reflog),
        ):
            return ApplicationState(mock_repo, config)

    return factory


@pytest.fixture
def app_state(make_state: Callable[..., ApplicationState]) -> ApplicationState:
    return make_state()


# --- Real repository fixtures ---
def _git(cwd: Path, *args: str, env: Optional[dict[str, str]] = None) -> None:
    subprocess.run(["git", *args], cwd=cwd, env=env, check=True, capture_output=True)


@pytest.fixture
def git_env(tmp_path: Path) -> dict[str, str]:
    """Environment isolating git from the user's global configuration."""
    env = dict(os.environ)
    env.update(
        {
            "HOME": str(tmp_path),
            "GIT_CONFIG_NOSYSTEM": "1",
            "GIT_AUTHOR_NAME": "Ada Lovelace",
            "GIT_AUTHOR_EMAIL": "ada@example.com",
            "GIT_COMMITTER_NAME": "Ada Lovelace",
            "GIT_COMMITTER_EMAIL": "ada@example.com",
        }
    )
    return env


@pytest.fixture
def empty_repo(tmp_path: Path, git_env: dict[str, str]) -> Generator[Path, None, None]:
    """An initialised repository with no commits (unborn HEAD)."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    _git(repo_dir, "init", "--quiet", "--initial-branch=main", env=git_env)
    with patch.dict(os.environ, {"HOME": git_env["HOME"], "GIT_CONFIG_NOSYSTEM": "1"}):
        yield repo_dir


@pytest.fixture
def commit(empty_repo: Path, git_env: dict[str, str]) -> Callable[[str, int], None]:
    """Commits a file change with *message* at a fixed timestamp."""

    def make_commit(message: str, timestamp: int) -> None:
        env = dict(git_env)
        date = f"@{timestamp} +0000"
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
        (empty_repo / "file.txt").write_text(message, encoding="utf-8")
        _git(empty_repo, "add", "file.txt", env=env)
        _git(empty_repo, "commit", "--quiet", "-m", message, env=env)

    return make_commit
