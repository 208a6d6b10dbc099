"""Performs removals for allowed paths and reports everything else."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from send2trash import send2trash

from safe_rm.core.coordinator import PathOutcome
from safe_rm.errors import (
    EXIT_BLOCKED,
    EXIT_ERROR,
    EXIT_SUCCESS,
    OperationError,
    OperationErrorKind,
)
from safe_rm.safety.decision import BlockReason, Verdict
from safe_rm.safety.paths import PathKind, ResolvedPath

BYPASS_NOTE = " (allowed by config)"


@dataclass
class BatchResult:
    """Counts for one invocation."""

    removed: int = 0
    skipped: int = 0
    blocked: int = 0
    failed: int = 0

    @property
    def exit_code(self) -> int:
        """Blocks outrank operation errors, which outrank success."""
        if self.blocked:
            return EXIT_BLOCKED
        if self.failed:
            return EXIT_ERROR
        return EXIT_SUCCESS


def format_block(verdict: Verdict, project_root: Path) -> str:
    """Explain a blocked verdict, naming the rule that triggered it."""
    assert verdict.reason is not None
    lines = [f"{verdict.reason.summary} [{verdict.reason.value}]"]
    if verdict.path is not None:
        lines.append(f"  path: {verdict.path}")
    if verdict.reason is BlockReason.OUTSIDE_PROJECT:
        lines.append(f"  project: {project_root}")
    elif verdict.reason is BlockReason.UNCOMMITTED_CHANGE:
        lines.append(f"  status: {verdict.status}")
        lines.append("  commit the file first (git commit), then retry")
    elif verdict.reason is BlockReason.DIRECTORY_READ_ERROR:
        lines.append("  safety could not be verified; nothing was removed")
    return "\n".join(lines)


class Remover:
    """Removes allowed paths; prints blocks and errors to the error console."""

    def __init__(
        self,
        project_root: Path,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        dry_run: bool = False,
        use_trash: bool = False,
    ):
        self.project_root = project_root
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self.dry_run = dry_run
        self.use_trash = use_trash

    def execute(self, outcomes: Iterable[PathOutcome]) -> BatchResult:
        """
        Act on each outcome.

        Args:
            outcomes: Evaluated path arguments, in command-line order

        Returns:
            Counts, including the process exit code
        """
        result = BatchResult()
        outcomes = list(outcomes)

        for outcome in outcomes:
            if outcome.skipped:
                result.skipped += 1
                continue
            if outcome.error is not None:
                self._report(outcome.raw, str(outcome.error))
                result.failed += 1
                continue

            assert outcome.verdict is not None
            if outcome.verdict.blocked:
                self._report(outcome.raw, format_block(outcome.verdict, self.project_root))
                result.blocked += 1
                continue

            assert outcome.target is not None
            try:
                self._remove(outcome.target)
            except OSError as e:
                error = OperationError(
                    OperationErrorKind.REMOVAL_FAILED, outcome.raw, e.strerror or str(e)
                )
                self._report(outcome.raw, str(error))
                result.failed += 1
                continue

            result.removed += 1
            verb = "would remove" if self.dry_run else "removed"
            note = BYPASS_NOTE if outcome.verdict.bypassed else ""
            self.console.print(f"{verb}: {escape(outcome.raw)}{note}")

        unsuccessful = result.blocked + result.failed
        if unsuccessful and len(outcomes) > 1:
            done = "would be removed" if self.dry_run else "removed"
            self.error_console.print(
                f"safe-rm: {result.removed} file(s) {done}, {unsuccessful} failed"
            )

        return result

    def _report(self, raw: str, message: str) -> None:
        self.error_console.print(f"[red]safe-rm: {escape(raw)}: {escape(message)}[/red]")

    def _remove(self, target: ResolvedPath) -> None:
        """Delete a single checked target."""
        if self.dry_run:
            return

        path = target.resolved
        if self.use_trash:
            send2trash(str(path))
            return

        if target.kind is PathKind.DIRECTORY:
            shutil.rmtree(path)
        else:
            # Files and symlinks; a link is removed, never its target
            path.unlink()
