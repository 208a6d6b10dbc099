"""Configured directories where deletion bypasses every other check."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from safe_rm.safety.paths import expand_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowedPathRule:
    """A canonical directory and whether descendants at any depth match."""

    directory: Path
    recursive: bool = False

    def matches(self, path: Path) -> bool:
        """Check a canonical path against this rule."""
        if self.recursive:
            return path == self.directory or self.directory in path.parents
        # Non-recursive: direct children only
        return path.parent == self.directory and path != self.directory


class AllowedPathRuleSet:
    """Allowed-path rules, resolved once at load time."""

    def __init__(self, rules: Iterable[AllowedPathRule] = ()):
        self.rules: tuple[AllowedPathRule, ...] = tuple(rules)

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, bool]]) -> AllowedPathRuleSet:
        """
        Build a rule set from ``(path, recursive)`` pairs.

        Paths are ``~``-expanded and canonicalized. Entries that cannot be
        canonicalized (missing, unreadable) are dropped and never retried.
        """
        rules: list[AllowedPathRule] = []
        for raw_path, recursive in entries:
            try:
                directory = Path(expand_user(raw_path)).resolve(strict=True)
            except (OSError, RuntimeError) as e:
                logger.debug("Dropping allowed path %r: %s", raw_path, e)
                continue
            rules.append(AllowedPathRule(directory=directory, recursive=recursive))
        return cls(rules)

    def matches(self, path: Path) -> bool:
        """Return True if any rule matches the canonical ``path``."""
        return any(rule.matches(path) for rule in self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __bool__(self) -> bool:
        return bool(self.rules)

    def __repr__(self) -> str:
        return f"AllowedPathRuleSet({list(self.rules)!r})"
