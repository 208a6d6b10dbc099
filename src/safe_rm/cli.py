"""safe-rm CLI - Main entry point."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from typer.core import TyperGroup

if TYPE_CHECKING:
    import click

from safe_rm import __version__
from safe_rm.config import DEFAULT_CONFIG_TEMPLATE, get_config_path, load_config
from safe_rm.core.coordinator import BatchCoordinator
from safe_rm.core.remover import Remover
from safe_rm.core.report import Reporter
from safe_rm.errors import EXIT_ERROR
from safe_rm.safety.paths import expand_user
from safe_rm.ui.console import create_console, print_error, print_warning, setup_logging


class DefaultCommandGroup(TyperGroup):
    """Routes ``safe-rm PATH...`` to the ``rm`` command.

    The first token selects a command only when it names one, or is a
    group-level option. ``safe-rm -- init`` removes a file called ``init``.
    """

    default_command = "rm"
    group_options = ("--help", "--version", "-V")

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if args and args[0] not in self.commands and args[0] not in self.group_options:
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)


app = typer.Typer(
    name="safe-rm",
    cls=DefaultCommandGroup,
    help="Safe file deletion for AI agents: refuses paths outside the project "
    "and, in strict mode, files with uncommitted changes.",
    no_args_is_help=True,
    add_completion=False,
)
console = create_console()
err_console = create_console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"safe-rm v{__version__}")
        raise typer.Exit(0)


# Shared CLI option defaults to avoid repetition
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file (default: $SAFE_RM_CONFIG or ~/.config/safe-rm/config.toml)",
    dir_okay=False,
)

VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log path resolution, git status and verdicts to stderr",
)

RECURSIVE_OPTION = typer.Option(
    False,
    "--recursive",
    "-r",
    "-R",
    help="Remove directories and their contents recursively",
)

PATHS_ARGUMENT = typer.Argument(
    ...,
    help="Files or directories to delete",
    metavar="PATH...",
    show_default=False,
)


def _prepare(config_file: Optional[Path], verbose: bool) -> BatchCoordinator:
    """Set up logging, load config and evaluate from the current directory."""
    setup_logging(err_console, verbose=verbose)
    config = load_config(config_file)
    try:
        cwd = Path.cwd()
    except OSError as e:
        print_error(err_console, f"safe-rm: cannot determine current directory: {e}")
        raise typer.Exit(EXIT_ERROR) from e
    return BatchCoordinator(config, cwd)


@app.command("rm")
def rm(
    paths: list[str] = PATHS_ARGUMENT,
    recursive: bool = RECURSIVE_OPTION,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Ignore nonexistent files",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be removed without removing anything",
    ),
    trash: bool = typer.Option(
        False,
        "--trash",
        help="Move allowed paths to the trash instead of deleting them",
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Delete files after checking the project boundary and git status (default command)."""
    coordinator = _prepare(config_file, verbose)
    outcomes = coordinator.process(paths, recursive=recursive, force=force)

    remover = Remover(
        coordinator.project_root,
        console=console,
        error_console=err_console,
        dry_run=dry_run,
        use_trash=trash,
    )
    result = remover.execute(outcomes)
    raise typer.Exit(result.exit_code)


@app.command()
def check(
    paths: list[str] = PATHS_ARGUMENT,
    recursive: bool = RECURSIVE_OPTION,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Treat nonexistent files as skipped instead of errors",
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the verdict for each path without deleting anything."""
    coordinator = _prepare(config_file, verbose)
    outcomes = coordinator.process(paths, recursive=recursive, force=force)

    console.print(f"[dim]Project root: {escape(str(coordinator.project_root))}[/dim]")
    result = Reporter(console=console).display_outcomes(outcomes)
    raise typer.Exit(result.exit_code)


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing config file",
    ),
) -> None:
    """Generate a default configuration file with comments."""
    target = get_config_path()

    try:
        exists = target.exists()
    except OSError as e:
        print_error(err_console, f"Cannot access config file {target}: {e}")
        raise typer.Exit(EXIT_ERROR) from e

    if exists and not force:
        print_warning(console, f"Config file already exists: {target}")
        console.print("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(0)

    # Ensure parent directory exists
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_CONFIG_TEMPLATE)
    except OSError as e:
        print_error(err_console, f"Cannot write config file {target}: {e}")
        raise typer.Exit(EXIT_ERROR) from e

    console.print(f"[green]Created config file:[/green] {escape(str(target))}")
    console.print("[dim]Default: ~/.claude/skills is allowed (recursive).[/dim]")
    console.print("[dim]Edit the file to add more allowed paths.[/dim]")


# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Inspect safe-rm configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app)


@config_app.command("show")
def config_show(
    config_file: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Display the active configuration and its source."""
    setup_logging(err_console, verbose=verbose)
    config = load_config(config_file)

    source_text = escape(str(config._source)) if config._source else "[dim]defaults only[/dim]"
    console.print(
        Panel.fit(
            f"[bold]Active config:[/bold] {source_text}\n"
            f"[bold]allow_project_deletion:[/bold] {config.allow_project_deletion}",
            title="Configuration Source",
        )
    )

    if not config.allowed_paths:
        console.print("[dim]No allowed paths configured[/dim]")
        return

    table = Table(title="Allowed Paths", show_header=True)
    table.add_column("Path", style="cyan")
    table.add_column("Recursive", style="green")
    table.add_column("Resolved")

    for entry in config.allowed_paths:
        try:
            directory = Path(expand_user(entry.path)).resolve(strict=True)
        except (OSError, RuntimeError):
            status = "[yellow]dropped (cannot resolve)[/yellow]"
        else:
            status = escape(str(directory))
        table.add_row(escape(entry.path), str(entry.recursive), status)

    console.print(table)


@config_app.command("path")
def config_path() -> None:
    """Show configuration file location and status."""
    path = get_config_path()
    try:
        found = path.is_file()
    except OSError as e:
        status = f"[yellow]unreadable: {escape(e.strerror or str(e))}[/yellow]"
    else:
        status = "[green]exists[/green]" if found else "[dim]not found[/dim]"
    console.print(f"Config file: {escape(str(path))} ({status})")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """safe-rm - Git-aware deletion gatekeeper for AI agents."""


if __name__ == "__main__":
    app()
