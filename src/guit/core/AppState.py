# guit/core/AppState.py
"""AppState.py
========================
ApplicationState: everything the dashboard knows between two key presses.

It owns one `SelectableList` per pane, the `PaneRegistry` pointing at the
pane that receives input, the monotonic quit flag and the repository handle.
The repository is queried once, at construction. After that every public
method is a pure in-memory transition, runs to completion, and is safe to
call without a live repository.

The renderer reads this object once per frame and never mutates it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from guit.core.PaneRegistry import Pane, PaneKind, PaneRegistry
from guit.core.Records import BranchKind, BranchRecord, CommitRecord, StatusRecord
from guit.core.SelectableList import SelectableList
from guit.integrations.GitBridge import (
    DEFAULT_COMMIT_LIMIT,
    DEFAULT_REFLOG_LIMIT,
    GitBridge,
    list_branches,
    list_commits,
    list_reflog,
    list_status,
)


logger = logging.getLogger("guit")

QUIT_CHARACTER = "q"
REMOTE_BRANCHES_UNSUPPORTED = "Switching to remote branches is not supported yet."


def _read_limit(repo_config: dict[str, Any], key: str, default: int) -> int:
    value = repo_config.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid repository.%s %r; using %d.", key, value, default)
        return default


## ==================== ApplicationState Class ====================
class ApplicationState:
    """Class ApplicationState
    =========================
    Aggregates the per-pane lists and the active-pane pointer, and exposes
    one method per input event.

    Attributes:
        repo (GitBridge): Read-only repository handle, owned for the session.
        config (dict): Merged application configuration.
        status (SelectableList[StatusRecord]): Working-tree entries.
        commits (SelectableList[CommitRecord]): History from HEAD.
        branches (SelectableList[BranchRecord]): Local branches.
        reflog (SelectableList[CommitRecord]): HEAD's reference log.
        panes (PaneRegistry): Which pane currently receives input.
    """

    def __init__(self, repo: GitBridge, config: Optional[dict[str, Any]] = None) -> None:
        self.repo = repo
        self.config: dict[str, Any] = config or {}
        self.panes = PaneRegistry()
        self._should_quit = False
        self._status_message = ""

        repo_config = self.config.get("repository", {})
        commit_limit = _read_limit(repo_config, "commit_limit", DEFAULT_COMMIT_LIMIT)
        reflog_limit = _read_limit(repo_config, "reflog_limit", DEFAULT_REFLOG_LIMIT)

        self.status: SelectableList[StatusRecord] = SelectableList.with_items(list_status(repo))
        self.commits: SelectableList[CommitRecord] = SelectableList.with_items(
            list_commits(repo, limit=commit_limit)
        )
        self.branches: SelectableList[BranchRecord] = SelectableList.with_items(
            list_branches(repo, BranchKind.LOCAL)
        )
        self.reflog: SelectableList[CommitRecord] = SelectableList.with_items(
            list_reflog(repo, limit=reflog_limit)
        )
        logger.info(
            "Loaded %d status entries, %d commits, %d branches, %d reflog entries.",
            len(self.status), len(self.commits), len(self.branches), len(self.reflog),
        )

    # --- read-only view -------------------------------------------------

    @property
    def active_pane(self) -> Pane:
        return self.panes.active

    @property
    def should_quit(self) -> bool:
        return self._should_quit

    @property
    def status_message(self) -> str:
        return self._status_message

    def list_for(self, pane: Pane) -> SelectableList:
        """The list shown by *pane*."""
        lists: dict[PaneKind, SelectableList] = {
            PaneKind.STATUS: self.status,
            PaneKind.COMMITS: self.commits,
            PaneKind.BRANCHES: self.branches,
            PaneKind.REFLOG: self.reflog,
        }
        return lists[pane.kind]

    @property
    def active_list(self) -> SelectableList:
        return self.list_for(self.active_pane)

    # --- input events ---------------------------------------------------

    def move_selection_up(self) -> None:
        self.active_list.previous()

    def move_selection_down(self) -> None:
        self.active_list.next()

    def advance_pane(self) -> None:
        """Focuses the next pane. Cursors of all lists are left untouched."""
        self.panes.advance()

    def drill_in(self) -> None:
        """Pane-specific "enter" action (right arrow). Only Branches defines one, not implemented yet."""
        if self.active_pane.kind is PaneKind.BRANCHES:
            logger.info("Unsupported action requested: %s", REMOTE_BRANCHES_UNSUPPORTED)
            self._set_status_message(REMOTE_BRANCHES_UNSUPPORTED)

    def drill_out(self) -> None:
        """Reserved for leaving a drilled-in view (left arrow)."""

    def request_quit(self) -> None:
        if not self._should_quit:
            logger.info("Quit requested.")
        self._should_quit = True

    def handle_character(self, c: str) -> None:
        if c == QUIT_CHARACTER:
            self.request_quit()

    def on_tick(self) -> None:
        """Time-based hook, called once per tick interval. Nothing is refreshed yet."""

    # --- status notices ---------------------------------------------------

    def _set_status_message(self, msg: str) -> None:
        self._status_message = str(msg)

    def clear_status_message(self) -> None:
        self._status_message = ""
