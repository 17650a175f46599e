"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "table", console: Optional[Console] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            console: Console to print to
        """
        self.console = console or Console()
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def _print_structured(self, data: Any):
        if self.format == OutputFormat.JSON:
            self.console.print_json(json.dumps(data, default=str))
        else:
            self.console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for table format)
            title: Table title (for table format)
        """
        if self.format != OutputFormat.TABLE:
            self._print_structured(items)
            return

        if not items:
            self.console.print("[dim]No items found[/dim]")
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            row = []
            for col in columns:
                value = item.get(col, "")
                if value is None:
                    value = "[dim]-[/dim]"
                elif isinstance(value, bool):
                    value = "[green]✓[/green]" if value else "[red]✗[/red]"
                else:
                    value = str(value)
                row.append(value)
            table.add_row(*row)

        self.console.print(table)

    def _print_status(self, status: str, message: str, marker: str):
        if self.format == OutputFormat.TABLE:
            self.console.print(f"{marker} {message}")
        else:
            self._print_structured({"status": status, "message": message})

    def print_success(self, message: str):
        """Print success message."""
        self._print_status("success", message, "[green]✔[/green]")

    def print_error(self, message: str):
        """Print error message."""
        self._print_status("error", message, "[red]✘[/red]")

    def print_warning(self, message: str):
        """Print warning message."""
        self._print_status("warning", message, "[yellow]⚠[/yellow]")

    def print_info(self, message: str):
        """Print informational message."""
        self._print_status("info", message, "[cyan]•[/cyan]")
