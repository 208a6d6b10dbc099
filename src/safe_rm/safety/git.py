"""Git repository discovery and batched per-path status classification."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class GitFileStatus(str, Enum):
    """Status of one path relative to HEAD, the index and the working tree."""

    CLEAN = "Clean"
    MODIFIED = "Modified"
    STAGED = "Staged"
    UNTRACKED = "Untracked"
    IGNORED = "Ignored"
    NOT_IN_REPO = "NotInRepo"

    @property
    def is_dirty(self) -> bool:
        """True if deleting the path would lose uncommitted content."""
        return self in (GitFileStatus.MODIFIED, GitFileStatus.STAGED, GitFileStatus.UNTRACKED)

    def __str__(self) -> str:
        return self.value


def _run_git(*args: str, cwd: Path) -> tuple[bool, str]:
    """Run a git command and return (success, output)."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
        )
    except OSError as e:
        # git not installed, or cwd vanished
        logger.debug("git %s failed to start: %s", " ".join(args), e)
        return False, str(e)
    if result.returncode == 0:
        return True, os.fsdecode(result.stdout)
    stderr = os.fsdecode(result.stderr).strip()
    logger.debug("git %s exited %d: %s", " ".join(args), result.returncode, stderr)
    return False, stderr


def find_repo_root(path: Path) -> Path | None:
    """Return the canonical top-level directory of the repository containing ``path``."""
    ok, output = _run_git("rev-parse", "--show-toplevel", cwd=path)
    if not ok or not output.strip():
        return None
    return Path(output.strip()).resolve()


def discover_project_root(cwd: Path) -> Path:
    """The deletion boundary: the enclosing repository's root, else ``cwd``."""
    return find_repo_root(cwd) or cwd.resolve()


def classify_porcelain(code: str) -> GitFileStatus:
    """
    Map a two-letter ``git status --porcelain`` code to a status.

    Ignored wins, then index changes (Staged), then working-tree changes
    (Modified), then untracked. Merge conflicts count as Modified.
    """
    if code == "!!":
        return GitFileStatus.IGNORED
    if code == "??":
        return GitFileStatus.UNTRACKED
    index, worktree = code[0], code[1]
    if "U" in code or code in ("AA", "DD"):
        return GitFileStatus.MODIFIED
    if index not in " ?":
        return GitFileStatus.STAGED
    if worktree != " ":
        return GitFileStatus.MODIFIED
    return GitFileStatus.CLEAN


def parse_porcelain(output: str) -> tuple[dict[str, GitFileStatus], dict[str, GitFileStatus]]:
    """
    Parse NUL-separated ``git status --porcelain=v1 -z`` output.

    Returns:
        Tuple of (file entries, directory entries). Directory entries are
        collapsed listings such as an ignored ``build/``, keyed without the
        trailing slash; they apply to everything below them.
    """
    files: dict[str, GitFileStatus] = {}
    directories: dict[str, GitFileStatus] = {}

    tokens = output.split("\0")
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        code, path = token[:2], token[3:]
        if code[0] in "RC":
            # Renames and copies are followed by the original path
            i += 1
        status = classify_porcelain(code)
        if path.endswith("/"):
            directories[path.rstrip("/")] = status
        else:
            files[path] = status

    return files, directories


class GitStatusOracle:
    """
    Repository-wide status, fetched once and read many times.

    Build with :meth:`prepare`. Outside a repository every query answers
    ``NotInRepo`` without touching the filesystem.
    """

    def __init__(
        self,
        root: Path | None,
        entries: Mapping[str, GitFileStatus] | None = None,
        directories: Mapping[str, GitFileStatus] | None = None,
        tracked: frozenset[str] = frozenset(),
        failed: bool = False,
    ):
        self.root = root
        self._entries = dict(entries or {})
        self._directories = dict(directories or {})
        self._tracked = tracked
        self.failed = failed

    @classmethod
    def not_in_repo(cls) -> GitStatusOracle:
        return cls(root=None)

    @classmethod
    def prepare(cls, start: Path) -> GitStatusOracle:
        """
        Scan the repository containing ``start`` in one pass.

        If git fails after the repository was found, the oracle is marked
        failed and reports every path as Modified.
        """
        root = find_repo_root(start)
        if root is None:
            logger.debug("%s is not inside a git repository", start)
            return cls.not_in_repo()

        ok, status_output = _run_git(
            "status",
            "--porcelain=v1",
            "-z",
            "--ignored=matching",
            "--untracked-files=all",
            cwd=root,
        )
        ok_files, ls_output = _run_git("ls-files", "-z", cwd=root) if ok else (False, "")
        if not (ok and ok_files):
            logger.warning("git status failed in %s; treating every file as modified", root)
            return cls(root=root, failed=True)

        entries, directories = parse_porcelain(status_output)
        tracked = frozenset(p for p in ls_output.split("\0") if p)
        logger.debug(
            "git status for %s: %d changed, %d collapsed dirs, %d tracked",
            root,
            len(entries),
            len(directories),
            len(tracked),
        )
        return cls(root=root, entries=entries, directories=directories, tracked=tracked)

    @property
    def is_repo(self) -> bool:
        return self.root is not None

    def _relative_key(self, path: Path) -> str | None:
        assert self.root is not None
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return None

    def status(self, path: Path) -> GitFileStatus:
        """Classify a canonical path against the prepared batch."""
        if self.root is None:
            return GitFileStatus.NOT_IN_REPO
        if self.failed:
            return GitFileStatus.MODIFIED

        key = self._relative_key(path)
        if key is None:
            return GitFileStatus.NOT_IN_REPO

        if key in self._entries:
            return self._entries[key]
        if key in self._tracked:
            # Tracked and absent from the changed set
            return GitFileStatus.CLEAN
        for directory, status in self._directories.items():
            if key == directory or key.startswith(directory + "/"):
                return status
        if os.path.lexists(path):
            return GitFileStatus.UNTRACKED
        return GitFileStatus.CLEAN
