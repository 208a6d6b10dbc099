"""Error types shared by the decision core and the execution layer."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

# Exit statuses, highest priority wins across a batch.
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_BLOCKED = 2


class SafeRmError(Exception):
    """Base class for safe-rm errors."""


class PathResolutionError(SafeRmError):
    """A path could not be resolved because an ancestor is unreadable.

    Never downgraded to a warning: the decision engine turns it into a
    ``directory-read-error`` block.
    """

    def __init__(self, path: Path | str, cause: OSError | None = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause.strerror}" if cause is not None and cause.strerror else ""
        super().__init__(f"cannot resolve '{self.path}'{detail}")


class OperationErrorKind(str, Enum):
    """Command misuse or I/O failure, not a safety concern."""

    PATH_MISSING = "path-missing"
    NOT_A_DIRECTORY = "not-a-directory"
    IS_A_DIRECTORY = "is-a-directory"
    REMOVAL_FAILED = "removal-failed"


class OperationError(SafeRmError):
    """A per-path usage or removal error, reported with rm-style wording."""

    def __init__(self, kind: OperationErrorKind, path: Path | str, detail: str = ""):
        self.kind = kind
        self.path = Path(path)
        self.detail = detail
        super().__init__(self.user_message())

    def user_message(self) -> str:
        """Return the message shown to humans and agents."""
        if self.kind is OperationErrorKind.PATH_MISSING:
            return f"cannot remove '{self.path}': No such file or directory"
        if self.kind is OperationErrorKind.IS_A_DIRECTORY:
            return f"cannot remove '{self.path}': Is a directory (use -r for recursive)"
        if self.kind is OperationErrorKind.NOT_A_DIRECTORY:
            return f"cannot remove '{self.path}': Not a directory"
        return f"cannot remove '{self.path}': {self.detail or 'removal failed'}"
