"""Output formatting utilities using Rich."""

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handles output formatting for the inspection commands."""

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        color: bool = True,
        quiet: bool = False,
    ):
        self.format = format
        self.color = color
        self.quiet = quiet
        self._console = Console(no_color=not color, highlight=color)

    def print_warning(self, message: str) -> None:
        if self.quiet:
            return
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_data(
        self,
        data: list[dict[str, Any]] | dict[str, Any],
        title: str | None = None,
    ) -> None:
        """Print data in the configured format."""
        if self.format == OutputFormat.JSON:
            self._print_json(data)
        elif self.format == OutputFormat.YAML:
            self._print_yaml(data)
        else:
            self._print_table(data, title)

    def _print_json(self, data: Any) -> None:
        json_str = json.dumps(data, indent=2, default=str)
        if self.color:
            self._console.print(Syntax(json_str, "json", theme="monokai"))
        else:
            self._console.out(json_str, highlight=False)

    def _print_yaml(self, data: Any) -> None:
        yaml_str = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        if self.color:
            self._console.print(Syntax(yaml_str, "yaml", theme="monokai"))
        else:
            self._console.out(yaml_str, highlight=False)

    def _print_table(
        self,
        data: list[dict[str, Any]] | dict[str, Any],
        title: str | None = None,
    ) -> None:
        """Print data as a formatted table."""
        if isinstance(data, dict):
            # Single record - display as key-value pairs
            table = Table(title=title, show_header=True, header_style="bold cyan")
            table.add_column("Field", style="dim")
            table.add_column("Value", overflow="fold")
            for key, value in data.items():
                table.add_row(str(key), str(value))
            self._console.print(table)
        elif isinstance(data, list) and len(data) > 0:
            headers = list(data[0].keys())
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header, overflow="fold")
            for row in data:
                table.add_row(*[str(row.get(h, "")) for h in headers])
            self._console.print(table)
        else:
            self._console.print("[dim]No data to display[/dim]")
