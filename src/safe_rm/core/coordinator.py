"""Applies the decision engine to every requested path."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from safe_rm.config import Config
from safe_rm.errors import OperationError, OperationErrorKind, PathResolutionError
from safe_rm.safety.decision import BlockReason, DecisionEngine, Verdict
from safe_rm.safety.git import GitStatusOracle, discover_project_root
from safe_rm.safety.paths import PathResolver, ResolvedPath

logger = logging.getLogger(__name__)


@dataclass
class PathOutcome:
    """What happened to one path argument.

    Exactly one of ``verdict``, ``error`` or ``skipped`` describes the
    outcome; ``target`` is None only when resolution failed.
    """

    raw: str
    target: ResolvedPath | None = None
    verdict: Verdict | None = None
    error: OperationError | None = None
    skipped: bool = False

    @property
    def blocked(self) -> bool:
        return self.verdict is not None and self.verdict.blocked

    @property
    def allowed(self) -> bool:
        return self.verdict is not None and self.verdict.allowed


@dataclass
class DirectoryListing:
    """Non-directory entries below a directory, or the error that stopped the walk."""

    root: Path
    leaves: list[Path] = field(default_factory=list)
    error: PathResolutionError | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


def list_leaves(directory: Path) -> DirectoryListing:
    """
    Enumerate every file and symlink below ``directory``.

    Symlinked directories are leaves and are not followed, so each entry is
    visited once. The first unreadable directory aborts the walk.
    """
    listing = DirectoryListing(root=directory)
    pending = [directory]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    if entry.is_dir(follow_symlinks=False):
                        pending.append(Path(entry.path))
                    else:
                        listing.leaves.append(Path(entry.path))
        except OSError as e:
            logger.debug("Cannot read %s: %s", current, e)
            listing.error = PathResolutionError(current, e)
            listing.leaves.clear()
            break

    return listing


class BatchCoordinator:
    """
    Evaluates a batch of path arguments.

    Git status is scanned once up front, and only when the policy needs it.
    """

    def __init__(
        self,
        config: Config,
        cwd: Path,
        project_root: Path | None = None,
        oracle: GitStatusOracle | None = None,
    ):
        self.config = config
        self.cwd = cwd
        self.project_root = project_root or discover_project_root(cwd)
        if oracle is None and not config.allow_project_deletion:
            oracle = GitStatusOracle.prepare(self.project_root)
        self.oracle = oracle
        self.resolver = PathResolver(cwd)
        self.engine = DecisionEngine(config, self.project_root, oracle)

    def process(
        self,
        targets: Sequence[str],
        recursive: bool = False,
        force: bool = False,
    ) -> list[PathOutcome]:
        """Evaluate each path argument in order."""
        return [self.evaluate(raw, recursive=recursive, force=force) for raw in targets]

    def evaluate(self, raw: str, recursive: bool = False, force: bool = False) -> PathOutcome:
        """Evaluate a single path argument."""
        try:
            target = self.resolver.resolve(raw)
        except PathResolutionError as e:
            return PathOutcome(raw, verdict=self.engine.decide(e))

        boundary = self.engine.check_boundary(target)
        if boundary is not None and boundary.blocked:
            return PathOutcome(raw, target, verdict=boundary)

        if target.not_a_directory:
            return PathOutcome(
                raw, target, error=OperationError(OperationErrorKind.NOT_A_DIRECTORY, raw)
            )
        if not target.exists:
            if force:
                return PathOutcome(raw, target, skipped=True)
            return PathOutcome(raw, target, error=OperationError(OperationErrorKind.PATH_MISSING, raw))
        if target.is_dir and not recursive:
            return PathOutcome(
                raw, target, error=OperationError(OperationErrorKind.IS_A_DIRECTORY, raw)
            )

        if boundary is not None:
            # Matched an allowed-path rule
            return PathOutcome(raw, target, verdict=boundary)
        if target.is_dir:
            return PathOutcome(raw, target, verdict=self.decide_tree(target))
        return PathOutcome(raw, target, verdict=self.engine.apply_policy(target))

    def decide_tree(self, target: ResolvedPath) -> Verdict:
        """
        Aggregate verdict for a directory: allowed only if every leaf is.

        An unreadable subdirectory blocks the whole tree.
        """
        listing = list_leaves(target.resolved)
        if listing.error is not None:
            return Verdict.block(BlockReason.DIRECTORY_READ_ERROR, path=listing.error.path)

        for leaf in listing.leaves:
            leaf_target: ResolvedPath | PathResolutionError
            try:
                leaf_target = self.resolver.resolve(str(leaf))
            except PathResolutionError as e:
                leaf_target = e
            verdict = self.engine.decide(leaf_target)
            if verdict.blocked:
                return verdict

        logger.debug("%d entries under %s allowed", len(listing.leaves), target.resolved)
        return Verdict.allow()
