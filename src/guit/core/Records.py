# guit/core/Records.py
"""Display-ready records projected from repository history.

Records are derived and read-only: they are regenerated from the repository
whenever it is queried and never persisted or used as lookup keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


SHORT_HASH_LENGTH = 7


class BranchKind(Enum):
    """Which namespace of branches a listing covers."""

    LOCAL = "local"
    REMOTE = "remote"


def short_hash(object_id: str) -> str:
    """First 7 characters of a full object id. Cosmetic only, may collide."""
    return object_id[:SHORT_HASH_LENGTH]


@dataclass(frozen=True)
class CommitRecord:
    """One commit (or reflog entry) truncated for display."""

    short_hash: str
    author: str
    summary: str


@dataclass(frozen=True)
class BranchRecord:
    name: str


@dataclass(frozen=True)
class StatusRecord:
    """One working-tree entry: the two-letter porcelain code and its path."""

    code: str
    path: str

    @property
    def label(self) -> str:
        return f"{self.code} {self.path}"


__all__ = [
    "SHORT_HASH_LENGTH",
    "BranchKind",
    "short_hash",
    "CommitRecord",
    "BranchRecord",
    "StatusRecord",
]
