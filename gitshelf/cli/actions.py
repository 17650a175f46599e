"""Lifecycle actions with console reporting, shared by the menu and subcommands."""

from typing import Callable

from gitshelf.cli.utils.context import CLIContext
from gitshelf.cli.utils.progress import RichProgress
from gitshelf.core.catalog import CatalogEntry
from gitshelf.core.lifecycle import InstallResult, InstallStatus
from gitshelf.infrastructure.exceptions import FilesystemError, LifecycleError


def _report_install(cli_ctx: CLIContext, entry: CatalogEntry, result: InstallResult) -> bool:
    formatter = cli_ctx.formatter

    if result.status == InstallStatus.SKIPPED:
        formatter.print_warning(f"Kept existing {entry.name}")
        return True

    if result.status == InstallStatus.FAILED:
        message = f"Error downloading {entry.name}: {result.error}"
        if result.download is not None and result.download.total_files:
            message += f" ({result.download.files_written}/{result.download.total_files} files written)"
        formatter.print_error(message)
        return False

    formatter.print_success(f"Downloaded {entry.name} to {entry.folder}")
    deps = result.dependencies
    if deps is not None:
        if deps.succeeded:
            formatter.print_success(f"{deps.command} complete")
        else:
            formatter.print_warning(f"{deps.command} failed, {entry.name} is installed without dependencies")
    return True


def run_install(cli_ctx: CLIContext, entry: CatalogEntry, confirm_overwrite: Callable[[CatalogEntry], bool]) -> bool:
    cli_ctx.console.print(f"[bright_cyan]Downloading {entry.name}...[/bright_cyan]")
    result = cli_ctx.get_lifecycle().install(
        entry,
        confirm_overwrite=confirm_overwrite,
        progress=RichProgress(cli_ctx.console, description=entry.name),
    )
    return _report_install(cli_ctx, entry, result)


def run_uninstall(cli_ctx: CLIContext, entry: CatalogEntry) -> bool:
    try:
        removed = cli_ctx.get_lifecycle().uninstall(entry)
    except FilesystemError as e:
        cli_ctx.formatter.print_error(f"Failed to uninstall {entry.name}: {e}")
        return False

    if removed:
        cli_ctx.formatter.print_success(f"Uninstalled {entry.name}")
    else:
        cli_ctx.formatter.print_info("Nothing to uninstall.")
    return True


def run_update(cli_ctx: CLIContext, entry: CatalogEntry) -> bool:
    cli_ctx.console.print(f"[bright_blue]Updating {entry.name}...[/bright_blue]")
    result = cli_ctx.get_lifecycle().update(
        entry, progress=RichProgress(cli_ctx.console, description=entry.name)
    )

    if result.install is None:
        cli_ctx.formatter.print_error(f"Failed to uninstall {entry.name}: {result.error}")
        return False

    if result.uninstalled:
        cli_ctx.formatter.print_info(f"Removed previous copy of {entry.name}")
    ok = _report_install(cli_ctx, entry, result.install)
    if not ok and result.uninstalled:
        cli_ctx.formatter.print_warning(f"{entry.name} is no longer installed")
    return ok


def run_start(cli_ctx: CLIContext, entry: CatalogEntry) -> bool:
    try:
        cli_ctx.get_lifecycle().start(entry)
    except LifecycleError as e:
        cli_ctx.formatter.print_error(str(e))
        return False
    except OSError as e:
        cli_ctx.formatter.print_error(f"Could not launch {entry.name}: {e}")
        return False

    cli_ctx.formatter.print_success(f"Launched {entry.name}")
    return True
