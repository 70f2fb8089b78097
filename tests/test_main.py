# tests/test_main.py
"""Tests for the `guit` command-line entry point.

Argument parsing is tested directly; `start()` is run with configuration,
logging and curses patched out so that only the start-up sequence and its
exit codes are exercised.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from guit import main
from guit.integrations.GitBridge import RepositoryOpenError


@pytest.mark.parametrize(
    "args, expected",
    [
        ([], None),
        (["--repo-path", "/srv/repo"], Path("/srv/repo")),
        (["--repo-path=/srv/repo"], Path("/srv/repo")),
        (["/srv/repo"], Path("/srv/repo")),
        (["--repo-path", "  "], None),
    ],
)
def test_parse_repo_path(args: list[str], expected) -> None:
    assert main.parse_repo_path(args) == expected


def test_parse_repo_path_expands_home(monkeypatch) -> None:
    monkeypatch.setenv("HOME", "/home/ada")
    assert main.parse_repo_path(["~/code"]) == Path("/home/ada/code")


@pytest.mark.parametrize(
    "argv",
    [
        ["guit", "--repo-path"],
        ["guit", "--bogus"],
        ["guit", "one", "two"],
        ["guit", "/srv/repo", "--repo-path", "/srv/other"],
    ],
)
def test_bad_arguments_exit_two(argv: list[str], capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main.start(argv)

    assert exc.value.code == 2
    assert "usage: guit" in capsys.readouterr().err


def test_help_exits_zero(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main.start(["guit", "--help"])

    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "usage: guit" in out
    assert "--repo-path" in out


@pytest.fixture
def quiet_start(mock_config):
    """Patches the environment, config and logging steps of `start()`."""
    with (
        patch("guit.main.load_dotenv"),
        patch("guit.main.load_config", return_value=mock_config),
        patch("guit.main.setup_logging"),
    ):
        yield mock_config


def test_unopenable_repository_exits_one_before_curses(quiet_start, capsys) -> None:
    with (
        patch("guit.main.GitBridge.open", side_effect=RepositoryOpenError("/nowhere: no such directory")),
        patch("guit.main.curses.wrapper") as wrapper,
    ):
        with pytest.raises(SystemExit) as exc:
            main.start(["guit", "/nowhere"])

    assert exc.value.code == 1
    wrapper.assert_not_called()
    assert "cannot open repository: /nowhere: no such directory" in capsys.readouterr().err


def test_start_runs_dashboard_in_curses_wrapper(quiet_start) -> None:
    repo = MagicMock()
    with (
        patch("guit.main.GitBridge.open", return_value=repo) as open_repo,
        patch("guit.main.curses.wrapper") as wrapper,
    ):
        main.start(["guit", "--repo-path", "/srv/repo"])

    open_repo.assert_called_once_with(Path("/srv/repo"), timeout=5)
    wrapper.assert_called_once_with(main.main_app_runner, repo, quiet_start)


def test_invalid_git_timeout_uses_default(quiet_start, caplog) -> None:
    quiet_start["repository"]["git_timeout"] = "soon"
    with (
        patch("guit.main.GitBridge.open", return_value=MagicMock()) as open_repo,
        patch("guit.main.curses.wrapper"),
        caplog.at_level(logging.WARNING, logger="guit"),
    ):
        main.start(["guit"])

    open_repo.assert_called_once_with(None, timeout=5)
    assert "git_timeout" in caplog.text


def test_crash_inside_curses_exits_one(quiet_start) -> None:
    with (
        patch("guit.main.GitBridge.open", return_value=MagicMock()),
        patch("guit.main.curses.wrapper", side_effect=RuntimeError("boom")),
    ):
        with pytest.raises(SystemExit) as exc:
            main.start(["guit"])

    assert exc.value.code == 1


def test_config_failure_is_fatal(capsys) -> None:
    with (
        patch("guit.main.load_dotenv"),
        patch("guit.main.load_config", side_effect=OSError("read-only")),
    ):
        with pytest.raises(SystemExit) as exc:
            main.start(["guit"])

    assert exc.value.code == 1
    assert "FATAL" in capsys.readouterr().err


def test_main_app_runner_builds_state_and_runs_loop(mock_stdscr, mock_config) -> None:
    repo = MagicMock()
    with (
        patch("guit.main.curses.set_escdelay"),
        patch("guit.main.ApplicationState") as state_cls,
        patch("guit.main.Guit") as guit_cls,
    ):
        main.main_app_runner(mock_stdscr, repo, mock_config)

    state_cls.assert_called_once_with(repo, mock_config)
    guit_cls.assert_called_once_with(mock_stdscr, state_cls.return_value, mock_config)
    guit_cls.return_value.run.assert_called_once_with()
