"""CLI for axosync."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import CONFIG_FILE, __version__
from .config import (
    AxosyncConfig,
    check_directories,
    create_default_config,
    get_config_path,
    load_config,
    save_config,
)
from .errors import AxosyncError
from .service import SyncService

console = Console()
error_console = Console(stderr=True)


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def load_config_or_exit(project_root: Path) -> AxosyncConfig:
    """Load the config, printing the error and exiting on failure."""
    try:
        return load_config(project_root)
    except AxosyncError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def print_directory_warnings(config: AxosyncConfig, project_root: Path) -> None:
    for warning in check_directories(config, project_root):
        error_console.print(f"[bold yellow]Warning:[/bold yellow] {warning}")


@click.group()
@click.version_option(version=__version__, prog_name="axosync")
def main() -> None:
    """axosync - Sourcemap sync server for editor plugins."""
    pass


@main.command()
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing configuration",
)
def init(force: bool) -> None:
    """Create a default axosync.json in the current directory."""
    project_root = get_project_root()
    config_path = get_config_path(project_root)

    if config_path.exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {CONFIG_FILE} already exists. Use --force to overwrite."
        )
        sys.exit(1)

    config = create_default_config(project_root)
    try:
        save_config(config, project_root)
    except AxosyncError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(
        Panel(
            f"[green]Created {CONFIG_FILE}[/green]\n\n"
            f"Project name: [bold]{config.project_name}[/bold]\n"
            f"Port: [bold]{config.port}[/bold]\n\n"
            f"Run [bold]axosync serve[/bold] to start the server.",
            title="axosync init",
        )
    )


@main.command()
@click.option("--port", default=None, type=int, help="Override the configured port")
@click.option("--yes", "-y", is_flag=True, help="Don't ask before first start")
def serve(port: int | None, yes: bool) -> None:
    """Start the sourcemap sync server."""
    from .server import run_server

    project_root = get_project_root()
    config_path = get_config_path(project_root)

    if not config_path.exists():
        config = create_default_config(project_root)
        try:
            save_config(config, project_root)
        except AxosyncError as e:
            error_console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)
        console.print(
            f"Created [bold bright_blue]{CONFIG_FILE}[/bold bright_blue] in the current directory."
        )
        console.print("You can edit it before continuing if you wish.")
        if not yes and not click.confirm(click.style("Continue?", bold=True), default=True):
            return

    config = load_config_or_exit(project_root)
    if port is not None:
        config = config.model_copy(update={"port": port})

    print_directory_warnings(config, project_root)
    run_server(config, project_root)


@main.command()
def status() -> None:
    """Show configuration and sourcemap status."""
    project_root = get_project_root()
    config = load_config_or_exit(project_root)
    service = SyncService.from_config(config, project_root)

    table = Table(title="axosync Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Project name", config.project_name)
    table.add_row("Address", f"http://{config.host}:{config.port}")
    table.add_row("Config file", str(get_config_path(project_root)))
    table.add_row("Scrape directory", str(service.scrape_directory))
    table.add_row("Sourcemap", str(service.store.path))

    if service.store.exists():
        try:
            tree = service.get_sourcemap()
        except AxosyncError as e:
            table.add_row("Sourcemap status", f"[red]{e}[/red]")
        else:
            table.add_row("Sourcemap status", "[green]Ready[/green]")
            table.add_row("Instances", str(tree.count()))
    else:
        table.add_row("Sourcemap status", "[yellow]Not created yet[/yellow]")

    console.print(table)
    print_directory_warnings(config, project_root)


@main.command()
@click.option(
    "--relative",
    is_flag=True,
    help="Print paths relative to the current directory",
)
def paths(relative: bool) -> None:
    """Print the file paths the server would report."""
    project_root = get_project_root()
    config = load_config_or_exit(project_root)
    service = SyncService.from_config(config, project_root)

    try:
        result = service.get_file_paths(project_root if relative else None)
    except AxosyncError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    for path in result:
        click.echo(path)


if __name__ == "__main__":
    main()
