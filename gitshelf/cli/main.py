"""gitshelf command-line tool."""

import os
import shutil
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitshelf.cli import __version__
from gitshelf.cli.commands import entries
from gitshelf.cli.menu import InteractiveMenu
from gitshelf.cli.utils.config import ConfigManager
from gitshelf.cli.utils.context import CLIContext
from gitshelf.cli.utils.output import OutputFormatter
from gitshelf.cli.utils.prompts import RichPrompter
from gitshelf.config import load_settings
from gitshelf.core.self_update import SelfUpdater
from gitshelf.infrastructure.exceptions import CatalogError, GitshelfError, SelfUpdateError
from gitshelf.infrastructure.logging import get_logger, setup_logging

app = typer.Typer(
    name="gitshelf",
    help="Browse a catalog of repositories, then download, start, update or remove them",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"gitshelf v{__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    install_root: Optional[Path] = typer.Option(
        None,
        "--install-root",
        "-r",
        help="Directory entries are installed into",
    ),
    catalog: Optional[Path] = typer.Option(
        None,
        "--catalog",
        help="Catalog file (JSON)",
    ),
):
    """
    gitshelf

    Run without a command to open the interactive menu.
    """
    config_manager = ConfigManager(config_file)
    try:
        settings = load_settings(
            config_manager.get_all(),
            install_root=install_root,
            catalog_path=catalog,
            log_level="DEBUG" if debug else None,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    setup_logging(settings.log_level, settings.log_format)

    formatter = OutputFormatter(output_format or config_manager.get("output_format", "table"), console=console)
    cli_context = CLIContext(
        debug=debug,
        settings=settings,
        config=config_manager,
        formatter=formatter,
        console=console,
    )
    ctx.obj = cli_context
    ctx.call_on_close(cli_context.close)

    if ctx.invoked_subcommand is None:
        _run_menu(cli_context, clear_screen=True)


def _self_update(cli_ctx: CLIContext) -> None:
    settings = cli_ctx.settings
    if not (settings.self_update_enabled and settings.self_update_url and settings.self_update_files):
        return

    updater = SelfUpdater(
        cli_ctx.get_client(),
        settings.self_update_url,
        settings.self_update_files,
        settings.self_update_root,
    )
    try:
        updated = updater.apply()
    except SelfUpdateError as e:
        logger.warning("self_update_failed", error=str(e))
        cli_ctx.formatter.print_warning(f"Update check failed: {e}")
        return
    if updated:
        cli_ctx.formatter.print_info(f"Updated {', '.join(updated)}")


def _run_menu(cli_ctx: CLIContext, clear_screen: bool) -> None:
    _self_update(cli_ctx)
    menu = InteractiveMenu(cli_ctx, RichPrompter(cli_ctx.console), clear_screen=clear_screen)
    try:
        # A missing catalog is reported by the menu itself and is not an error exit
        menu.run()
    except KeyboardInterrupt:
        cli_ctx.console.print("\n[dim]Interrupted[/dim]")
        raise typer.Exit(130)


@app.command("menu")
def menu_command(
    ctx: typer.Context,
    no_clear: bool = typer.Option(False, "--no-clear", help="Do not clear the screen between actions"),
):
    """
    Open the interactive menu.
    """
    _run_menu(ctx.obj, clear_screen=not no_clear)


entries.register(app)


@app.command("config")
def config_command(
    ctx: typer.Context,
    action: str = typer.Argument("list", help="Action: get, set, list"),
    key: Optional[str] = typer.Argument(None, help="Configuration key"),
    value: Optional[str] = typer.Argument(None, help="Configuration value"),
):
    """
    Show or change configuration settings.

    Examples:
        gitshelf config list
        gitshelf config get install_root
        gitshelf config set install_root ~/apps
    """
    cli_ctx: CLIContext = ctx.obj

    if action == "list":
        table = Table(title="Effective Settings")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")
        for name, current in cli_ctx.settings.model_dump().items():
            if name == "github_token":
                table.add_row(name, "***" if current else "Not set")
            else:
                table.add_row(name, str(current))
        console.print(table)

    elif action == "get":
        if not key:
            console.print("[red]Error: Key is required for get action[/red]")
            raise typer.Exit(1)
        if key not in type(cli_ctx.settings).model_fields:
            console.print(f"[yellow]Configuration key '{key}' not found[/yellow]")
            raise typer.Exit(1)
        current = getattr(cli_ctx.settings, key)
        if key == "github_token":
            console.print("***" if current else "Not set")
        else:
            console.print(str(current))

    elif action == "set":
        if not key or value is None:
            console.print("[red]Error: Both key and value are required for set action[/red]")
            raise typer.Exit(1)
        if key not in type(cli_ctx.settings).model_fields and key != "output_format":
            console.print(f"[red]Error: Unknown configuration key '{key}'[/red]")
            raise typer.Exit(1)
        cli_ctx.config.set(key, value)
        try:
            load_settings(cli_ctx.config.get_all())
        except ValidationError as e:
            console.print(f"[red]Error: Invalid value for {key}:[/red] {e.errors()[0]['msg']}")
            raise typer.Exit(1)
        cli_ctx.config.save()
        shown = "***" if key == "github_token" else value
        console.print(f"[green]✓[/green] Configuration updated: {key} = {shown}")

    else:
        console.print(f"[red]Error: Unknown action '{action}'. Use: get, set, or list[/red]")
        raise typer.Exit(1)


@app.command("doctor")
def doctor_command(ctx: typer.Context):
    """
    Diagnose configuration, catalog and connectivity.
    """
    cli_ctx: CLIContext = ctx.obj
    settings = cli_ctx.settings
    healthy = True
    console.print("[bold]gitshelf doctor[/bold]\n")

    console.print("Catalog:")
    catalog_path = settings.resolved_catalog_path
    try:
        found = cli_ctx.get_catalog().load()
        console.print(f"  [green]✓[/green] {catalog_path} ({len(found)} entries)")
    except CatalogError as e:
        healthy = False
        console.print(f"  [red]✗[/red] {e}")

    console.print("Install root:")
    root = settings.resolved_install_root
    if root.is_dir() and os.access(root, os.W_OK):
        console.print(f"  [green]✓[/green] {root} is writable")
    else:
        healthy = False
        console.print(f"  [red]✗[/red] {root} is missing or not writable")

    console.print("Hosting API:")
    try:
        limits = cli_ctx.get_client().ping()
        remaining = limits.get("rate", {}).get("remaining")
        console.print(f"  [green]✓[/green] {settings.api_base_url} is reachable (requests left: {remaining})")
    except GitshelfError as e:
        healthy = False
        console.print(f"  [red]✗[/red] {e}")
    if settings.github_token:
        console.print("  [green]✓[/green] Token configured")
    else:
        console.print("  [yellow]⚠[/yellow] No token configured, unauthenticated rate limits apply")

    console.print("Start interpreter:")
    if shutil.which(settings.start_interpreter):
        console.print(f"  [green]✓[/green] {settings.start_interpreter} found on PATH")
    else:
        console.print(f"  [yellow]⚠[/yellow] {settings.start_interpreter} not found on PATH")

    if not healthy:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
