"""Safety checks that decide whether a path may be deleted."""

from __future__ import annotations

from .allowed import AllowedPathRule, AllowedPathRuleSet
from .decision import BlockReason, DecisionEngine, Verdict
from .git import GitFileStatus, GitStatusOracle, discover_project_root
from .paths import PathKind, PathResolver, ResolvedPath, expand_user, is_contained

__all__ = [
    "AllowedPathRule",
    "AllowedPathRuleSet",
    "BlockReason",
    "DecisionEngine",
    "GitFileStatus",
    "GitStatusOracle",
    "PathKind",
    "PathResolver",
    "ResolvedPath",
    "Verdict",
    "discover_project_root",
    "expand_user",
    "is_contained",
]
