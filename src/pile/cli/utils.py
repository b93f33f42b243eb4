"""Utility functions for CLI commands."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from pile.config import Config
from pile.core.collaborators import Collaborators, SystemCollaborators
from pile.core.errors import PileError
from pile.infrastructure.catalog_db import CatalogDB
from pile.managers.base import CatalogContext
from pile.managers.project import ProjectManager

console = Console(soft_wrap=True)

WORKSPACE_HELP = "Workspace root holding the projects (env: PILE_WORKSPACE)"

# Set by tests to avoid touching the real OS
collaborators_factory = SystemCollaborators


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def require_workspace(workspace: Optional[Path]) -> Path:
    """Return the workspace, or exit if neither --workspace nor PILE_WORKSPACE is set."""
    if workspace is None:
        console.print(
            "[red]❌ Error: No workspace given. Use --workspace or set PILE_WORKSPACE.[/red]"
        )
        raise typer.Exit(1)
    return workspace


def report_error(error: PileError) -> None:
    """Print one line for the error kind, plus its detail."""
    console.print(f"[red]❌ Error: {escape(error.message)}[/red]")
    if error.detail and error.detail != error.message:
        console.print(f"   [dim]{escape(error.detail)}[/dim]")


def warn(message: str) -> None:
    console.print(f"[yellow]⚠️  {escape(message)}[/yellow]")


def make_collaborators(git_executable: str = "git") -> Collaborators:
    return collaborators_factory(git_executable)


@contextmanager
def project_manager(workspace: Optional[Path]) -> Iterator[ProjectManager]:
    """Open the catalog for a workspace and yield its ProjectManager.

    The catalog is closed on every path. Pile errors are reported and turned
    into exit status 1.
    """
    workspace = require_workspace(workspace)
    config = Config(workspace)
    try:
        config_data = config.load()
        with CatalogDB(workspace, config_data.database_file) as catalog:
            context = CatalogContext(
                workspace=workspace,
                catalog=catalog,
                config=config_data,
                collaborators=make_collaborators(config_data.git_executable),
            )
            yield context.projects
    except PileError as e:
        report_error(e)
        raise typer.Exit(1)
