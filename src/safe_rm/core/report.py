"""Tabular display of verdicts for ``safe-rm check``."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from safe_rm.core.coordinator import PathOutcome
from safe_rm.core.remover import BatchResult


def summarize(outcomes: list[PathOutcome]) -> BatchResult:
    """Count outcomes as if they had been executed."""
    result = BatchResult()
    for outcome in outcomes:
        if outcome.skipped:
            result.skipped += 1
        elif outcome.error is not None:
            result.failed += 1
        elif outcome.blocked:
            result.blocked += 1
        else:
            result.removed += 1
    return result


class Reporter:
    """Displays evaluated outcomes without touching the filesystem."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_outcomes(self, outcomes: list[PathOutcome]) -> BatchResult:
        """Display outcomes in a formatted table and return their counts."""
        table = Table(
            title="Deletion Check",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Path", style="white", overflow="fold")
        table.add_column("Verdict", width=10)
        table.add_column("Detail", overflow="fold")

        for i, outcome in enumerate(outcomes, 1):
            verdict_cell, detail = self._describe(outcome)
            table.add_row(str(i), escape(outcome.raw), verdict_cell, escape(detail))

        self.console.print(table)

        result = summarize(outcomes)
        self.console.print(
            f"\n[bold]{result.removed}[/bold] allowed, "
            f"[bold]{result.blocked}[/bold] blocked, "
            f"[bold]{result.failed}[/bold] errors, "
            f"[bold]{result.skipped}[/bold] skipped"
        )
        return result

    @staticmethod
    def _describe(outcome: PathOutcome) -> tuple[str, str]:
        if outcome.skipped:
            return "[dim]skip[/dim]", "missing (ignored by --force)"
        if outcome.error is not None:
            return "[yellow]error[/yellow]", str(outcome.error)
        assert outcome.verdict is not None
        verdict = outcome.verdict
        if verdict.allowed:
            return "[green]allow[/green]", verdict.describe()
        assert verdict.reason is not None
        detail = f"{verdict.reason.value}: {verdict.describe()}"
        if verdict.path is not None:
            detail += f" ({verdict.path})"
        return "[red]block[/red]", detail
