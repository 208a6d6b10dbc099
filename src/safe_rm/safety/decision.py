"""Allow/Block verdicts for individual paths."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from safe_rm.errors import PathResolutionError
from safe_rm.safety.git import GitFileStatus, GitStatusOracle
from safe_rm.safety.paths import ResolvedPath, is_target_contained

if TYPE_CHECKING:
    from safe_rm.config import Config

logger = logging.getLogger(__name__)


class BlockReason(str, Enum):
    """Which safety rule refused a deletion."""

    OUTSIDE_PROJECT = "outside-project"
    UNCOMMITTED_CHANGE = "uncommitted-change"
    DIRECTORY_READ_ERROR = "directory-read-error"

    @property
    def summary(self) -> str:
        return _REASON_SUMMARIES[self]


_REASON_SUMMARIES = {
    BlockReason.OUTSIDE_PROJECT: "refusing to delete outside the project",
    BlockReason.UNCOMMITTED_CHANGE: "refusing to delete a file with uncommitted changes",
    BlockReason.DIRECTORY_READ_ERROR: "cannot read directory, deletion blocked",
}


@dataclass(frozen=True)
class Verdict:
    """
    Outcome of the safety check for one path.

    A blocked verdict records the path that triggered it, which for a
    directory is the offending descendant, and the git status when the
    reason is an uncommitted change.
    """

    allowed: bool
    bypassed: bool = False
    reason: BlockReason | None = None
    path: Path | None = None
    status: GitFileStatus | None = None

    @classmethod
    def allow(cls, bypassed: bool = False) -> Verdict:
        return cls(allowed=True, bypassed=bypassed)

    @classmethod
    def block(
        cls,
        reason: BlockReason,
        path: Path | None = None,
        status: GitFileStatus | None = None,
    ) -> Verdict:
        return cls(allowed=False, reason=reason, path=path, status=status)

    @property
    def blocked(self) -> bool:
        return not self.allowed

    def describe(self) -> str:
        """Short human-readable label."""
        if self.allowed:
            return "allowed by config" if self.bypassed else "allowed"
        assert self.reason is not None
        if self.status is not None:
            return f"{self.reason.summary} ({self.status})"
        return self.reason.summary


def status_verdict(status: GitFileStatus, path: Path) -> Verdict:
    """Turn a git status into a verdict under the strict policy."""
    match status:
        case GitFileStatus.CLEAN | GitFileStatus.IGNORED | GitFileStatus.NOT_IN_REPO:
            return Verdict.allow()
        case GitFileStatus.MODIFIED | GitFileStatus.STAGED | GitFileStatus.UNTRACKED:
            return Verdict.block(BlockReason.UNCOMMITTED_CHANGE, path=path, status=status)
    raise ValueError(f"Unhandled git status: {status!r}")


class DecisionEngine:
    """
    Combines allowed-path rules, containment and git status into verdicts.

    Rules are applied in a fixed order, first match wins:

    1. unresolvable path -> Block(directory-read-error)
    2. allowed-path rule -> Allow(bypassed)
    3. outside the project root -> Block(outside-project)
    4. ``allow_project_deletion`` -> Allow
    5. git status: clean, ignored or not a repository -> Allow, else Block
    """

    def __init__(
        self,
        config: Config,
        project_root: Path,
        oracle: GitStatusOracle | None = None,
    ):
        if not config.allow_project_deletion and oracle is None:
            raise ValueError("A git status oracle is required when project deletion is restricted")
        self.config = config
        self.project_root = project_root
        self.oracle = oracle

    def check_boundary(self, target: ResolvedPath | PathResolutionError) -> Verdict | None:
        """
        Apply the resolution, bypass and containment rules only.

        Returns:
            A verdict if one of those rules decides the path, else None
        """
        if isinstance(target, PathResolutionError):
            return Verdict.block(BlockReason.DIRECTORY_READ_ERROR, path=target.path)
        if self.config.rules.matches(target.resolved):
            return Verdict.allow(bypassed=True)
        if not is_target_contained(target, self.project_root):
            return Verdict.block(BlockReason.OUTSIDE_PROJECT, path=target.absolute)
        return None

    def apply_policy(self, target: ResolvedPath) -> Verdict:
        """Apply the project-deletion policy to a path inside the boundary."""
        if self.config.allow_project_deletion:
            return Verdict.allow()
        assert self.oracle is not None
        return status_verdict(self.oracle.status(target.resolved), target.absolute)

    def decide(self, target: ResolvedPath | PathResolutionError) -> Verdict:
        """Return the verdict for a single path."""
        verdict = self.check_boundary(target)
        if verdict is None:
            assert isinstance(target, ResolvedPath)
            verdict = self.apply_policy(target)

        logger.debug("verdict for %s: %s", getattr(target, "raw", target), verdict.describe())
        return verdict
