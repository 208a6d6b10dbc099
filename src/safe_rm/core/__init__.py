"""Batch evaluation and removal."""

from __future__ import annotations

from .coordinator import BatchCoordinator, PathOutcome
from .remover import BatchResult, Remover
from .report import Reporter

__all__ = ["BatchCoordinator", "BatchResult", "PathOutcome", "Remover", "Reporter"]
