"""Rich progress bar for downloads."""

from typing import Optional

from rich.console import Console
from rich.progress import (BarColumn, MofNCompleteColumn, Progress,
                           TaskProgressColumn, TextColumn, TaskID)


class RichProgress:
    """Download progress bar, one per materialization."""

    def __init__(self, console: Console, description: str = "Downloading"):
        self.console = console
        self.description = description
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def start(self, total: int) -> None:
        self._progress = Progress(
            TextColumn("[cyan]{task.description}"),
            BarColumn(complete_style="bright_green"),
            TaskProgressColumn(),
            MofNCompleteColumn(),
            console=self.console,
            transient=False,
        )
        self._progress.start()
        self._task = self._progress.add_task(self.description, total=total)

    def advance(self) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.advance(self._task)

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None
