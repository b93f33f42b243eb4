"""Main CLI entry point for Pile."""

import typer
from typing import List, Optional
from pathlib import Path
from rich.markup import escape
from rich.table import Table as RichTable

from pile.cli.utils import (
    WORKSPACE_HELP,
    console,
    make_collaborators,
    project_manager,
    report_error,
    setup_logging,
    warn,
)
from pile.core.errors import CollaboratorError, PileError

app = typer.Typer(
    name="pile",
    help="Pile - organize your projects from the command line",
    add_completion=False,
    invoke_without_command=True,
)


def workspace_option():
    return typer.Option(
        None, "--workspace", "-w", envvar="PILE_WORKSPACE", help=WORKSPACE_HELP
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """
    Pile - organize your projects from the command line
    """
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        # No subcommand was invoked, show help
        print(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def add(
    name: str = typer.Argument(..., help="Project name"),
    tags: Optional[List[str]] = typer.Argument(None, help="Subject tags"),
    clone: Optional[str] = typer.Option(
        None, "--clone", "-c", help="Clone a git repository into the project"
    ),
    readme: Optional[bool] = typer.Option(
        None, "--readme/--no-readme", "-r/-R", help="Generate a README.md"
    ),
    workspace: Optional[Path] = workspace_option(),
):
    """Add a project and create a directory for it."""
    with project_manager(workspace) as projects:
        result = projects.add_project(name, tags or [], clone=clone, readme=readme)

    for warning in result.warnings:
        warn(warning)
    console.print(f"[green]✅ Project '{escape(result.project.name)}' created[/green]")
    typer.echo(str(result.path))


@app.command(name="list")
def list_projects(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Filter by project name"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Filter by tag"),
    workspace: Optional[Path] = workspace_option(),
):
    """List all projects."""
    with project_manager(workspace) as projects:
        found = projects.list_projects(name=name, tag=tag)

    if not found:
        console.print("[yellow]No projects were found[/yellow]")
        return

    table = RichTable(box=None)
    table.add_column("Project name", style="cyan")
    table.add_column("Tags", style="green")
    for project in found:
        table.add_row(escape(project.name), escape(", ".join(project.tags)))

    console.print(table)


@app.command()
def path(
    name: str = typer.Argument(..., help="Project name"),
    command: Optional[List[str]] = typer.Argument(
        None, help="Command to run in the project directory (put it after --)"
    ),
    copy: bool = typer.Option(False, "--copy", "-y", help="Copy the path to the clipboard"),
    workspace: Optional[Path] = workspace_option(),
):
    """Print the path of a project directory."""
    with project_manager(workspace) as projects:
        project_path = projects.resolve(name)
        typer.echo(str(project_path))

        if copy:
            try:
                projects.copy_path(name)
            except CollaboratorError as e:
                warn(str(e))

        if command:
            completed = projects.run_in_project(name, command)
            if completed.stdout:
                console.out(completed.stdout, end="", highlight=False)
            if completed.stderr:
                console.out(completed.stderr, end="", highlight=False)
            if completed.returncode != 0:
                raise typer.Exit(completed.returncode)


@app.command(name="workspace")
def open_workspace(workspace: Optional[Path] = workspace_option()):
    """Open the workspace in a file manager."""
    with project_manager(workspace) as projects:
        projects.open_workspace()


@app.command(name="open")
def open_project(
    name: str = typer.Argument(..., help="Project name"),
    workspace: Optional[Path] = workspace_option(),
):
    """Open a project in a file manager."""
    with project_manager(workspace) as projects:
        projects.open_project(name)


@app.command()
def remove(
    name: str = typer.Argument(..., help="Project name"),
    workspace: Optional[Path] = workspace_option(),
):
    """Remove a project from the catalog."""
    with project_manager(workspace) as projects:
        left_behind = projects.remove_project(name)

    console.print(
        f"[green]✅ The project '{escape(left_behind.name)}' was removed from the catalog[/green]"
    )
    console.print(
        f"[yellow]Note: the directory {escape(str(left_behind))} has not been removed[/yellow]"
    )


@app.command()
def edit(
    name: str = typer.Argument(..., help="Project name"),
    new_name: Optional[str] = typer.Option(None, "--name", "-n", help="New project name"),
    tags: Optional[List[str]] = typer.Option(
        None, "--tag", "-t", help="Replace the tags (repeat for several)"
    ),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
    workspace: Optional[Path] = workspace_option(),
):
    """Edit the name and/or tags of a project."""
    if clear_tags:
        tags = []
    elif not tags:
        tags = None

    if new_name is None and tags is None:
        console.print("[yellow]Nothing to change. Use --name, --tag or --clear-tags.[/yellow]")
        return

    with project_manager(workspace) as projects:
        result = projects.edit_project(name, new_name=new_name, tags=tags)
        new_path = result.project.path_in(projects.workspace)

    if result.renamed_from:
        console.print(
            f"[green]✅ Renamed '{escape(result.renamed_from)}' to '{escape(result.project.name)}'[/green]"
        )
        typer.echo(str(new_path))
    if result.tags_updated:
        console.print(
            f"[green]✅ Tags of '{escape(result.project.name)}' set to "
            f"{escape(', '.join(result.project.tags)) or '(none)'}[/green]"
        )
    for _step, error in result.errors:
        report_error(error)
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def doc():
    """Open the documentation in a web browser."""
    from pile.config import Config

    try:
        url = Config().load().documentation_url
        console.print(f"Documentation can be found at: {url}", highlight=False)
        make_collaborators().open(url)
    except PileError as e:
        report_error(e)
        raise typer.Exit(1)


@app.command(name="config")
def show_config(workspace: Optional[Path] = workspace_option()):
    """Show the effective configuration and active environment variables."""
    from pile.config import Config, active_env_overrides

    config = Config(workspace)
    try:
        config_data = config.load()
    except PileError as e:
        report_error(e)
        raise typer.Exit(1)

    console.print("\n[bold]Pile Configuration[/bold]")
    console.print(f"Workspace: {config.workspace}", highlight=False)
    console.print(
        f"Config file: {config.config_path}"
        + ("" if config.exists else " [dim](not present, using defaults)[/dim]"),
        highlight=False,
    )
    console.print(f"Catalog: {config.workspace / config_data.database_file}", highlight=False)
    console.print(f"Git executable: {config_data.git_executable}")
    console.print(f"Readme by default: {config_data.readme}")
    console.print(f"Documentation: {config_data.documentation_url}", highlight=False)

    active = active_env_overrides()
    if active:
        console.print("\n[yellow]Active environment variables:[/yellow]")
        for key, value in active.items():
            console.print(f"  {key}={value}", highlight=False)
    else:
        console.print("\n[dim]No Pile environment variables set[/dim]")


@app.command()
def version():
    """Show Pile version."""
    from pile import __version__

    typer.echo(f"Pile version {__version__}")


if __name__ == "__main__":
    app()
