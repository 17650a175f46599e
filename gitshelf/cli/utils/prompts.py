"""Interactive prompts."""

from typing import List, Optional, Protocol, Sequence, Tuple, TypeVar

from rich.console import Console
from rich.prompt import Confirm, IntPrompt

T = TypeVar("T")


class Prompter(Protocol):
    def select(self, message: str, choices: Sequence[Tuple[str, T]]) -> Optional[T]: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...


class RichPrompter:
    """Numbered menus and yes/no questions on a rich console."""

    def __init__(self, console: Console):
        self.console = console

    def select(self, message: str, choices: Sequence[Tuple[str, T]]) -> Optional[T]:
        """
        Show a numbered list and return the chosen value.

        Returns:
            None if the user picked ``0`` (back) or there were no choices
        """
        if not choices:
            return None

        self.console.print(f"\n[bold]{message}[/bold]")
        for number, (title, _) in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{number}[/cyan]) {title}")
        self.console.print("  [dim]0) Back[/dim]")

        valid: List[str] = [str(n) for n in range(len(choices) + 1)]
        picked = IntPrompt.ask("Choose", console=self.console, choices=valid, show_choices=False, default=1)
        if picked == 0:
            return None
        return choices[picked - 1][1]

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, console=self.console, default=default)
