"""Rich console utilities for output formatting."""

from __future__ import annotations

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


def create_console(stderr: bool = False) -> Console:
    """Create a configured Rich console.

    Lines are never wrapped so that agents can parse the output.
    """
    # Windows-specific console settings
    if platform.system() == "Windows":
        return Console(stderr=stderr, soft_wrap=True, legacy_windows=True, emoji=False)
    return Console(stderr=stderr, soft_wrap=True, highlight=False)


def setup_logging(console: Console, verbose: bool = False) -> None:
    """Route library logging through a RichHandler on ``console``."""
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    package_logger = logging.getLogger("safe_rm")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_warning(console: Console, message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{escape(message)}[/yellow]")


def print_error(console: Console, message: str) -> None:
    """Print an error message."""
    console.print(f"[red]{escape(message)}[/red]")
