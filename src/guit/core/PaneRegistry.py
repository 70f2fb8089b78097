# guit/core/PaneRegistry.py
"""PaneRegistry.py
========================
The panes of the dashboard and the state machine deciding which one
receives input.

A :class:`Pane` is an immutable tagged value: its ``kind`` is the tag and
only the ``BRANCHES`` variant carries a payload, the :class:`BranchKind`
being listed. The active pane is replaced wholesale on a switch, never
mutated. Switching is a one-directional ring::

    Status -> Commits -> Branches(local) -> Reflog -> Status
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from guit.core.Records import BranchKind


logger = logging.getLogger("guit")


class PaneKind(Enum):
    STATUS = "status"
    COMMITS = "commits"
    BRANCHES = "branches"
    REFLOG = "reflog"


@dataclass(frozen=True)
class Pane:
    """One of the mutually exclusive views. ``branch_kind`` is set only for BRANCHES."""

    kind: PaneKind
    branch_kind: Optional[BranchKind] = None

    def __post_init__(self) -> None:
        if (self.kind is PaneKind.BRANCHES) != (self.branch_kind is not None):
            raise ValueError(f"branch_kind is required for BRANCHES and only for it, got {self!r}")

    @classmethod
    def branches(cls, kind: BranchKind = BranchKind.LOCAL) -> "Pane":
        return cls(PaneKind.BRANCHES, kind)

    @property
    def title(self) -> str:
        if self.branch_kind is BranchKind.REMOTE:
            return "Remote branches"
        return self.kind.name.capitalize()


STATUS = Pane(PaneKind.STATUS)
COMMITS = Pane(PaneKind.COMMITS)
REFLOG = Pane(PaneKind.REFLOG)

# Successor of each pane kind on the ring. Entering Branches always lands on
# the local listing, whatever kind was shown last time.
_RING: dict[PaneKind, Pane] = {
    PaneKind.STATUS: COMMITS,
    PaneKind.COMMITS: Pane.branches(BranchKind.LOCAL),
    PaneKind.BRANCHES: REFLOG,
    PaneKind.REFLOG: STATUS,
}


def next_pane(pane: Pane) -> Pane:
    """Returns the pane following *pane* on the ring."""
    return _RING[pane.kind]


class PaneRegistry:
    """Holds the active pane. Exactly one pane is active at any time."""

    def __init__(self, initial: Pane = STATUS) -> None:
        self._active: Pane = initial

    @property
    def active(self) -> Pane:
        return self._active

    def advance(self) -> Pane:
        """Moves focus to the next pane on the ring and returns it."""
        self._active = next_pane(self._active)
        logger.debug("Active pane is now %s.", self._active.title)
        return self._active

    def is_active(self, kind: PaneKind) -> bool:
        return self._active.kind is kind
