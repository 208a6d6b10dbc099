"""Configuration management for safe-rm."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Conditional import for Python 3.10 compatibility
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

from safe_rm.safety.allowed import AllowedPathRuleSet

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SAFE_RM_CONFIG"


@dataclass(frozen=True)
class AllowedPathEntry:
    """An ``[[allowed_paths]]`` entry as written in the config file."""

    path: str
    recursive: bool = False


@dataclass(frozen=True)
class Config:
    """
    Root configuration, built once per invocation.

    ``rules`` is derived from ``allowed_paths`` at construction time; entries
    whose directory cannot be resolved are dropped there.
    """

    allow_project_deletion: bool = True
    allowed_paths: tuple[AllowedPathEntry, ...] = ()
    rules: AllowedPathRuleSet = field(init=False, repr=False, compare=False)

    # Metadata (not from TOML)
    _source: Path | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        rules = AllowedPathRuleSet.from_entries((e.path, e.recursive) for e in self.allowed_paths)
        object.__setattr__(self, "rules", rules)


def get_xdg_config_home() -> Path:
    """Get XDG config home, respecting environment variable."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """
    Get the config file path.

    ``$SAFE_RM_CONFIG`` wins, otherwise ``<XDG config home>/safe-rm/config.toml``.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_xdg_config_home() / "safe-rm" / "config.toml"


def _load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _validate_config(data: dict[str, Any]) -> list[str]:
    """Validate TOML data and return list of errors."""
    errors: list[str] = []

    allow = data.get("allow_project_deletion")
    if allow is not None and not isinstance(allow, bool):
        errors.append(f"Invalid allow_project_deletion: {allow!r} (use: true, false)")

    allowed_paths = data.get("allowed_paths")
    if allowed_paths is None:
        return errors
    if not isinstance(allowed_paths, list):
        errors.append("Invalid allowed_paths: expected an array of tables ([[allowed_paths]])")
        return errors

    for i, entry in enumerate(allowed_paths):
        if not isinstance(entry, dict):
            errors.append(f"Invalid allowed_paths[{i}]: expected a table")
            continue
        if not isinstance(entry.get("path"), str) or not entry["path"]:
            errors.append(f"Invalid allowed_paths[{i}].path: expected a non-empty string")
        recursive = entry.get("recursive")
        if recursive is not None and not isinstance(recursive, bool):
            errors.append(f"Invalid allowed_paths[{i}].recursive: {recursive!r} (use: true, false)")

    return errors


def _dict_to_config(data: dict[str, Any], source: Path | None = None) -> Config:
    """Convert validated TOML data to a Config."""
    entries = tuple(
        AllowedPathEntry(path=entry["path"], recursive=entry.get("recursive", False))
        for entry in data.get("allowed_paths", [])
    )
    return Config(
        allow_project_deletion=data.get("allow_project_deletion", True),
        allowed_paths=entries,
        _source=source,
    )


def load_config(path: Path | None = None) -> Config:
    """
    Load configuration, falling back to defaults on any problem.

    A missing file yields the defaults silently. An unreadable file,
    invalid TOML or a schema error logs a warning and yields the defaults,
    so the tool stays usable in a fresh environment.

    Args:
        path: Config file to read instead of :func:`get_config_path`
    """
    if path is None:
        path = get_config_path()

    try:
        if not path.is_file():
            logger.debug("No config file at %s, using defaults", path)
            return Config()
        data = _load_toml(path)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        logger.warning("Invalid TOML in %s, using defaults: %s", path, e)
        return Config()
    except OSError as e:
        logger.warning("Cannot read config %s, using defaults: %s", path, e)
        return Config()

    errors = _validate_config(data)
    if errors:
        logger.warning("Config validation failed (%s), using defaults: %s", path, "; ".join(errors))
        return Config()

    config = _dict_to_config(data, path)
    dropped = len(config.allowed_paths) - len(config.rules)
    if dropped:
        logger.debug("%d allowed path(s) in %s could not be resolved", dropped, path)
    return config


# Default config template for `safe-rm init`
DEFAULT_CONFIG_TEMPLATE = """\
# safe-rm configuration
# Location: ~/.config/safe-rm/config.toml (override with $SAFE_RM_CONFIG)

# Allow deleting any file inside the current project without checking
# git status. Paths outside the project are refused either way.
# Set to false to only allow clean or ignored files.
allow_project_deletion = true

# Directories where deletion is always permitted, bypassing the project
# boundary and git status checks. Supports ~ for the home directory.
[[allowed_paths]]
path = "~/.claude/skills"
recursive = true        # any depth below the directory

# Example: only direct children of /tmp/logs
# [[allowed_paths]]
# path = "/tmp/logs"
# recursive = false
"""
