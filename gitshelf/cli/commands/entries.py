"""Non-interactive catalog entry commands."""

import typer
from rich.prompt import Confirm

from gitshelf.cli.actions import run_install, run_start, run_uninstall, run_update
from gitshelf.cli.utils.context import CLIContext
from gitshelf.core.catalog import CatalogEntry
from gitshelf.infrastructure.exceptions import CatalogError


def _find_entry(cli_ctx: CLIContext, name: str) -> CatalogEntry:
    try:
        entry = cli_ctx.get_catalog().find(name)
    except CatalogError as e:
        cli_ctx.formatter.print_error(str(e))
        raise typer.Exit(1)

    if entry is None:
        cli_ctx.formatter.print_error(f"No catalog entry named '{name}'")
        raise typer.Exit(1)
    return entry


def list_entries(
    ctx: typer.Context,
    installed: bool = typer.Option(False, "--installed", "-i", help="Only show installed entries"),
):
    """
    List catalog entries.

    Example:
        gitshelf list
        gitshelf list --installed -o json
    """
    cli_ctx: CLIContext = ctx.obj
    try:
        entries = cli_ctx.get_catalog().load()
    except CatalogError as e:
        cli_ctx.formatter.print_error(str(e))
        raise typer.Exit(1)

    lifecycle = cli_ctx.get_lifecycle()
    rows = []
    for entry in entries:
        is_installed = lifecycle.is_installed(entry)
        if installed and not is_installed:
            continue
        rows.append({
            "name": entry.name,
            "repo": entry.repo_id,
            "branch": entry.branch,
            "folder": entry.folder,
            "installed": is_installed,
        })

    cli_ctx.formatter.print_list(rows, title="Catalog")


def install_entry(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name or folder"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite an existing folder without asking"),
):
    """
    Download an entry and install its dependencies.

    Example:
        gitshelf install Demo
        gitshelf install demo --yes
    """
    cli_ctx: CLIContext = ctx.obj
    entry = _find_entry(cli_ctx, name)

    def confirm_overwrite(item: CatalogEntry) -> bool:
        return yes or Confirm.ask(f"{item.name} already exists. Overwrite?", console=cli_ctx.console, default=False)

    if not run_install(cli_ctx, entry, confirm_overwrite):
        raise typer.Exit(1)


def uninstall_entry(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name or folder"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """
    Delete an installed entry.

    Example:
        gitshelf uninstall Demo --yes
    """
    cli_ctx: CLIContext = ctx.obj
    entry = _find_entry(cli_ctx, name)

    if not yes and cli_ctx.get_lifecycle().is_installed(entry):
        if not Confirm.ask(f"Are you sure you want to uninstall {entry.name}?", console=cli_ctx.console, default=True):
            cli_ctx.formatter.print_warning("Operation cancelled")
            raise typer.Exit(0)

    if not run_uninstall(cli_ctx, entry):
        raise typer.Exit(1)


def update_entry(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name or folder"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """
    Replace an entry with the latest snapshot of its branch.

    Example:
        gitshelf update Demo
    """
    cli_ctx: CLIContext = ctx.obj
    entry = _find_entry(cli_ctx, name)

    if not yes and cli_ctx.get_lifecycle().is_installed(entry):
        if not Confirm.ask(f"Replace the local copy of {entry.name}?", console=cli_ctx.console, default=True):
            cli_ctx.formatter.print_warning("Operation cancelled")
            raise typer.Exit(0)

    if not run_update(cli_ctx, entry):
        raise typer.Exit(1)


def start_entry(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name or folder"),
):
    """
    Launch an installed entry in the background.

    Example:
        gitshelf start Demo
    """
    cli_ctx: CLIContext = ctx.obj
    entry = _find_entry(cli_ctx, name)
    if not run_start(cli_ctx, entry):
        raise typer.Exit(1)


def register(app: typer.Typer):
    app.command("list")(list_entries)
    app.command("install")(install_entry)
    app.command("uninstall")(uninstall_entry)
    app.command("update")(update_entry)
    app.command("start")(start_entry)
