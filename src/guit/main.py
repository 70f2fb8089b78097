# guit/main.py
"""
guit Main Entry Point
=====================

Launches the guit dashboard. It performs, in order:
1) Environment Loading: reads ~/.config/guit/.env early.
2) Configuration & Logging: loads config and initializes logging ASAP.
3) Repository: opens the repository given on the command line (default: the
   current directory). Failure here ends the process before curses starts.
4) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
5) Application Run: builds the ApplicationState and runs the Guit loop.

Usage: guit [--repo-path PATH | PATH]
"""

from __future__ import annotations

import argparse
import curses
import locale
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from guit.core.AppState import ApplicationState
from guit.core.Guit import Guit
from guit.integrations.GitBridge import DEFAULT_GIT_TIMEOUT, GitBridge, RepositoryOpenError
from guit.utils.logging_config import setup_logging
from guit.utils.utils import CONFIG_DIR, load_config


logger = logging.getLogger("guit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="guit", description="guit - A terminal GUI for git.")
    parser.add_argument("path", nargs="?", default=None, help="Path to the repository. Defaults to current directory.")
    parser.add_argument(
        "--repo-path",
        metavar="PATH",
        default=None,
        help="Path to the repository, by default it will use current directory.",
    )
    return parser


def parse_repo_path(args: list[str]) -> Optional[Path]:
    """
    Parse argv[1:] and return the repository path, or None for the current directory.
    Bad arguments exit with status 2 and `--help` exits with status 0 (argparse).
    """
    parser = build_parser()
    ns = parser.parse_args(args)
    if ns.path is not None and ns.repo_path is not None:
        parser.error("give the repository either as PATH or with --repo-path, not both")

    raw = ns.repo_path if ns.repo_path is not None else ns.path
    if raw is None or not raw.strip():
        return None
    return Path(raw.strip()).expanduser()


def main_app_runner(stdscr: Any, repo: GitBridge, config: dict[str, Any]) -> None:
    """
    Target for `curses.wrapper`. Builds the state and runs the loop.
    """
    try:
        curses.set_escdelay(25)
    except Exception:
        pass

    state = ApplicationState(repo, config)
    Guit(stdscr, state, config).run()


def start(argv: Optional[list[str]] = None) -> None:
    """Console-script entry point."""
    argv = sys.argv if argv is None else argv
    repo_path = parse_repo_path(argv[1:])

    # --- Environment, configuration and logging ---
    load_dotenv(dotenv_path=CONFIG_DIR / ".env")
    try:
        config: dict[str, Any] = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("guit starting up...")

    # --- Repository (the only fatal construction-time condition) ---
    raw_timeout = config.get("repository", {}).get("git_timeout", DEFAULT_GIT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError):
        logger.warning("Invalid repository.git_timeout %r; using %s.", raw_timeout, DEFAULT_GIT_TIMEOUT)
        timeout = DEFAULT_GIT_TIMEOUT
    try:
        repo = GitBridge.open(repo_path, timeout=timeout)
    except RepositoryOpenError as e:
        logger.critical("Cannot open repository: %s", e)
        print(f"guit: cannot open repository: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        curses.wrapper(main_app_runner, repo, config)
        logger.info("guit shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
