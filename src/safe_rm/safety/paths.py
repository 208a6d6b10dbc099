"""Path canonicalization and project-boundary containment."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from safe_rm.errors import PathResolutionError

logger = logging.getLogger(__name__)


class PathKind(str, Enum):
    """What a path argument points at, observed without following links."""

    MISSING = "missing"
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


@dataclass(frozen=True)
class ResolvedPath:
    """A path argument after expansion and canonicalization.

    ``absolute`` is the lexical absolute path used for I/O, ``resolved`` is
    the canonical location of the entry itself. For a symlink ``resolved``
    is the link (its parent canonicalized) and ``link_target`` is where it
    points.
    """

    raw: str
    absolute: Path
    resolved: Path
    kind: PathKind
    link_target: Path | None = None
    not_a_directory: bool = False

    @property
    def exists(self) -> bool:
        return self.kind is not PathKind.MISSING

    @property
    def is_dir(self) -> bool:
        """True for a real directory; symlinks to directories are not."""
        return self.kind is PathKind.DIRECTORY


def expand_user(path: str) -> str:
    """Expand a leading ``~`` to the home directory. Purely textual."""
    return os.path.expanduser(path)


def is_contained(path: Path, boundary: Path) -> bool:
    """
    Check whether ``path`` is ``boundary`` or nested under it.

    Both arguments must already be canonical. Comparison is per path
    segment, so ``/proj2`` is not inside ``/proj``.
    """
    return path == boundary or boundary in path.parents


def is_target_contained(target: ResolvedPath, boundary: Path) -> bool:
    """Containment for a resolved target, including a symlink's destination."""
    if not is_contained(target.resolved, boundary):
        return False
    if target.link_target is not None and not is_contained(target.link_target, boundary):
        return False
    return True


def _kind_from_mode(mode: int) -> PathKind:
    if stat.S_ISLNK(mode):
        return PathKind.SYMLINK
    if stat.S_ISDIR(mode):
        return PathKind.DIRECTORY
    return PathKind.FILE


class PathResolver:
    """Resolves raw path arguments relative to a base directory."""

    def __init__(self, base: Path):
        self.base = base

    def to_absolute(self, raw: str) -> Path:
        """Expand ``~`` and anchor a relative path at the base directory."""
        path = Path(expand_user(raw))
        if path.is_absolute():
            return path
        return self.base / path

    def resolve(self, raw: str) -> ResolvedPath:
        """
        Canonicalize a path argument.

        A missing final component is resolved relative to its canonical
        parent. Any other failure while walking the ancestors (permission
        denied, symlink loop) is fail-closed.

        Raises:
            PathResolutionError: If an intermediate directory is unreadable
        """
        absolute = self.to_absolute(raw)
        trailing_slash = raw.endswith(os.sep)
        not_a_directory = False

        try:
            kind = _kind_from_mode(os.lstat(absolute).st_mode)
        except FileNotFoundError:
            kind = PathKind.MISSING
        except NotADirectoryError:
            kind = PathKind.MISSING
            not_a_directory = True
        except OSError as e:
            raise PathResolutionError(absolute, e) from e

        if trailing_slash and kind is PathKind.FILE:
            not_a_directory = True

        link_target: Path | None = None
        try:
            if kind is PathKind.SYMLINK:
                resolved = absolute.parent.resolve(strict=True) / absolute.name
                link_target = absolute.resolve()
                if trailing_slash:
                    # "link/" names whatever the link points to
                    if link_target.is_dir():
                        kind, resolved, link_target = PathKind.DIRECTORY, link_target, None
                    else:
                        not_a_directory = True
            elif kind is PathKind.MISSING:
                resolved = absolute.resolve()
            else:
                resolved = absolute.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            # RuntimeError is raised for symlink loops on older interpreters
            cause = e if isinstance(e, OSError) else None
            raise PathResolutionError(absolute, cause) from e

        logger.debug("resolved %s -> %s (%s)", raw, resolved, kind.value)
        return ResolvedPath(
            raw=raw,
            absolute=absolute,
            resolved=resolved,
            kind=kind,
            link_target=link_target,
            not_a_directory=not_a_directory,
        )
