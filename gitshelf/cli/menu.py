"""Interactive catalog menu."""

from enum import Enum
from typing import List, Optional

from rich.panel import Panel

from gitshelf.cli.actions import run_install, run_start, run_uninstall, run_update
from gitshelf.cli.utils.context import CLIContext
from gitshelf.cli.utils.prompts import Prompter
from gitshelf.core.catalog import CatalogEntry
from gitshelf.infrastructure.exceptions import CatalogError
from gitshelf.infrastructure.logging import get_logger

logger = get_logger(__name__)


class MenuAction(str, Enum):
    DOWNLOAD = "Download"
    START = "Start"
    UNINSTALL = "Uninstall"
    UPDATE = "Update"
    EXIT = "Exit"


# Actions that only make sense for entries already on disk
INSTALLED_ONLY = {MenuAction.START, MenuAction.UNINSTALL, MenuAction.UPDATE}


class InteractiveMenu:
    """The main menu loop. One action runs at a time."""

    def __init__(self, cli_ctx: CLIContext, prompter: Prompter, clear_screen: bool = True):
        self.ctx = cli_ctx
        self.prompter = prompter
        self.clear_screen = clear_screen

    def header(self):
        if self.clear_screen:
            self.ctx.console.clear()
        self.ctx.console.print(
            Panel.fit("[bold magenta]gitshelf[/bold magenta] [dim]repository download manager[/dim]")
        )

    def run(self) -> bool:
        """
        Loop until the user exits.

        Returns:
            False when the session ended because the catalog was missing or
            invalid, True otherwise
        """
        store = self.ctx.get_catalog()
        while True:
            self.header()
            try:
                entries = store.load()
            except CatalogError as e:
                self.ctx.formatter.print_error(str(e))
                return False

            action = self.prompter.select(
                "What do you want to do?",
                [(action.value, action) for action in MenuAction],
            )
            if action is None or action == MenuAction.EXIT:
                self.ctx.console.print("[dim]Goodbye![/dim]")
                return True

            self.handle(action, entries)

            if not self.prompter.confirm("Return to menu?", default=True):
                return True

    def handle(self, action: MenuAction, entries: List[CatalogEntry]) -> None:
        lifecycle = self.ctx.get_lifecycle()
        if action in INSTALLED_ONLY:
            entries = lifecycle.installed_entries(entries)
            if not entries:
                self.ctx.formatter.print_warning(f"No installed repos available to {action.value.lower()}.")
                return

        selected = self._select_entry(action, entries)
        if selected is None:
            return

        logger.debug("menu_action", action=action.value, entry=selected.name)
        if action == MenuAction.DOWNLOAD:
            run_install(self.ctx, selected, self._confirm_overwrite)
        elif action == MenuAction.UNINSTALL:
            if self.prompter.confirm(f"Are you sure you want to uninstall {selected.name}?", default=True):
                run_uninstall(self.ctx, selected)
        elif action == MenuAction.UPDATE:
            run_update(self.ctx, selected)
        elif action == MenuAction.START:
            run_start(self.ctx, selected)

    def _select_entry(self, action: MenuAction, entries: List[CatalogEntry]) -> Optional[CatalogEntry]:
        lifecycle = self.ctx.get_lifecycle()
        choices = []
        for entry in entries:
            title = entry.name
            if lifecycle.is_installed(entry):
                title += " [green]\\[Installed][/green]"
            choices.append((title, entry))
        return self.prompter.select(f"Select a repo to {action.value.lower()}:", choices)

    def _confirm_overwrite(self, entry: CatalogEntry) -> bool:
        return self.prompter.confirm(f"{entry.name} already exists. Overwrite?", default=False)
