# guit/integrations/GitBridge.py
"""GitBridge.py
========================
Read-only access to a git repository for the guit dashboard.

`GitBridge` is the repository handle owned by the application state for the
whole session. It runs `git` in the repository directory through `safe_run`
and never writes: only query subcommands are issued, with
``GIT_OPTIONAL_LOCKS=0`` so even `git status` leaves the index lock alone.

The module-level query functions project raw history into bounded lists of
plain records. They never raise into the caller:

- absence (unborn HEAD, empty history, no reflog) yields an empty list;
- an individual record that cannot be decoded or parsed is skipped;
- a failing git invocation is logged and yields an empty list.

Only `GitBridge.open` can fail, with `RepositoryOpenError`, and only before
the interactive loop starts.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from guit.core.Records import (
    BranchKind,
    BranchRecord,
    CommitRecord,
    StatusRecord,
    short_hash,
)
from guit.utils.utils import safe_run


logger = logging.getLogger("guit")

DEFAULT_COMMIT_LIMIT = 20
DEFAULT_REFLOG_LIMIT = 100
DEFAULT_GIT_TIMEOUT = 5

FIELD_SEP = b"\x1f"
RECORD_SEP = b"\x00"

# %x1f between fields, -z puts NUL between records.
COMMIT_FORMAT = "--format=%H%x1f%an%x1f%s"
REFLOG_FORMAT = "--format=%H%x1f%gn%x1f%gs"

BRANCH_REF_PREFIXES: dict[BranchKind, str] = {
    BranchKind.LOCAL: "refs/heads",
    BranchKind.REMOTE: "refs/remotes",
}


class RepositoryOpenError(Exception):
    """The given path cannot be opened as a git repository."""


# ================= GitBridge Class ==============================
class GitBridge:
    """Handle to one repository. Holds no cached state besides its location."""

    def __init__(self, path: Union[str, Path], timeout: float = DEFAULT_GIT_TIMEOUT):
        self.path: Path = Path(path)
        self.timeout = timeout
        self._env = {**os.environ, "GIT_OPTIONAL_LOCKS": "0"}

    @classmethod
    def open(
        cls, path: Union[str, Path, None] = None, timeout: float = DEFAULT_GIT_TIMEOUT
    ) -> "GitBridge":
        """Validates *path* (default: the current directory) as a repository.

        Raises:
            RepositoryOpenError: the path is not a directory, git is missing,
                or git does not recognise a repository there.
        """
        repo_path = Path(path).expanduser() if path is not None else Path.cwd()
        if not repo_path.is_dir():
            raise RepositoryOpenError(f"{repo_path}: no such directory")

        bridge = cls(repo_path.resolve(), timeout=timeout)
        res = bridge.run_git("rev-parse", "--git-dir")
        if res.returncode == 127:
            raise RepositoryOpenError("git executable not found on PATH")
        if res.returncode != 0:
            detail = _first_line(res.stderr) or f"git exited with status {res.returncode}"
            raise RepositoryOpenError(f"{repo_path}: {detail}")

        logger.info("Opened repository at %s", bridge.path)
        return bridge

    def run_git(self, *args: str) -> subprocess.CompletedProcess:
        """Runs ``git <args>`` in the repository and returns raw-bytes output."""
        return safe_run(
            ["git", *args], text=False, cwd=str(self.path), timeout=self.timeout, env=self._env
        )

    def resolve_head(self) -> Optional[str]:
        """Full object id of HEAD, or None when HEAD does not point at a commit yet."""
        res = self.run_git("rev-parse", "--verify", "--quiet", "HEAD^{commit}")
        if res.returncode != 0:
            return None
        try:
            oid = res.stdout.decode("ascii").strip()
        except UnicodeDecodeError:
            return None
        return oid or None

    def __repr__(self) -> str:
        return f"GitBridge({str(self.path)!r})"


# ================= Query layer ==============================

def list_commits(repo: GitBridge, limit: int = DEFAULT_COMMIT_LIMIT) -> list[CommitRecord]:
    """Commits reachable from HEAD, most recent commit time first, at most *limit*."""
    if limit <= 0:
        return []
    head = repo.resolve_head()
    if head is None:
        logger.debug("HEAD is unborn in %s; no commits to list.", repo.path)
        return []

    res = repo.run_git("log", "--date-order", f"--max-count={limit}", "-z", COMMIT_FORMAT, head)
    if res.returncode != 0:
        logger.warning("git log failed in %s: %s", repo.path, _first_line(res.stderr))
        return []
    return _parse_commit_records(res.stdout)[:limit]


def list_reflog(repo: GitBridge, limit: int = DEFAULT_REFLOG_LIMIT) -> list[CommitRecord]:
    """Entries of HEAD's reference log, most recent first, at most *limit*.

    Each record carries the short hash of the new target, the actor who made
    the update and the reflog message (e.g. ``commit: add parser``).
    """
    if limit <= 0:
        return []
    if repo.resolve_head() is None:
        logger.debug("HEAD is unborn in %s; no reflog to list.", repo.path)
        return []

    res = repo.run_git("log", "--walk-reflogs", f"--max-count={limit}", "-z", REFLOG_FORMAT, "HEAD")
    if res.returncode != 0:
        logger.warning("git reflog walk failed in %s: %s", repo.path, _first_line(res.stderr))
        return []
    return _parse_commit_records(res.stdout)[:limit]


def list_branches(repo: GitBridge, kind: BranchKind = BranchKind.LOCAL) -> list[BranchRecord]:
    """Branches of *kind*, sorted by name. Undecodable names and symbolic refs are skipped."""
    res = repo.run_git(
        "for-each-ref", "--format=%(refname:lstrip=2)%09%(symref)", BRANCH_REF_PREFIXES[kind]
    )
    if res.returncode != 0:
        logger.warning("git for-each-ref failed in %s: %s", repo.path, _first_line(res.stderr))
        return []

    branches: list[BranchRecord] = []
    for line in res.stdout.splitlines():
        raw_name, _, symref = line.partition(b"\t")
        if not raw_name or symref:
            continue
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping branch with undecodable name %r", raw_name)
            continue
        branches.append(BranchRecord(name))
    return branches


def list_status(repo: GitBridge) -> list[StatusRecord]:
    """Working-tree entries as reported by ``git status --porcelain``."""
    res = repo.run_git("status", "--porcelain=v1", "-z", "--untracked-files=normal")
    if res.returncode != 0:
        # Bare repositories have no working tree; that is not worth a warning.
        logger.debug("git status unavailable in %s: %s", repo.path, _first_line(res.stderr))
        return []

    entries = res.stdout.split(RECORD_SEP)
    records: list[StatusRecord] = []
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        code = entry[:2].decode("ascii", "replace")
        path = entry[3:].decode("utf-8", "replace")
        if code[0] in "RC":
            # Renames and copies are followed by their origin path.
            i += 1
        records.append(StatusRecord(code, path))
    return records


def _parse_commit_records(output: bytes) -> list[CommitRecord]:
    records: list[CommitRecord] = []
    for chunk in output.split(RECORD_SEP):
        chunk = chunk.strip(b"\n")
        if not chunk:
            continue
        fields = chunk.split(FIELD_SEP, 2)
        if len(fields) != 3:
            logger.debug("Skipping malformed log record %r", chunk[:80])
            continue
        raw_oid, raw_author, raw_summary = fields
        try:
            oid = raw_oid.decode("ascii")
        except UnicodeDecodeError:
            logger.debug("Skipping log record with invalid object id %r", raw_oid[:80])
            continue
        records.append(
            CommitRecord(
                short_hash=short_hash(oid),
                author=raw_author.decode("utf-8", "replace"),
                summary=raw_summary.decode("utf-8", "replace"),
            )
        )
    return records


def _first_line(output: Union[bytes, str, None]) -> str:
    if not output:
        return ""
    if isinstance(output, bytes):
        output = output.decode("utf-8", "replace")
    lines = output.strip().splitlines()
    return lines[0] if lines else ""
