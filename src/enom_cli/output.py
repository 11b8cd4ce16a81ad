"""
CLI Output

Formatting of command results.
"""

import json
from datetime import date
from typing import Any, Dict, List, Sequence

import click


def print_error(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"))


def print_info(message: str) -> None:
    click.echo(message)


def print_success(message: str) -> None:
    click.echo(click.style(message, fg="green"))


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    return str(value)


class OutputFormatter:
    """
    Renders rows and records as aligned tables or JSON.

    Args:
        format: "table" or "json"
        quiet: Suppress success messages
    """

    def __init__(self, format: str = "table", quiet: bool = False):
        self.format = format
        self.quiet = quiet

    def record(self, data: Dict[str, Any]) -> None:
        """Output a single record as key/value lines."""
        if self.format == "json":
            click.echo(json.dumps(data, indent=2, default=_json_default))
            return

        width = max((len(key) for key in data), default=0)
        for key, value in data.items():
            click.echo(f"{key.ljust(width)}  {_cell(value)}")

    def table(self, headers: Sequence[str], rows: List[Sequence[Any]]) -> None:
        """Output rows under column headers."""
        if self.format == "json":
            items = [dict(zip(headers, row)) for row in rows]
            click.echo(json.dumps(items, indent=2, default=_json_default))
            return

        cells = [[_cell(value) for value in row] for row in rows]
        widths = [len(h) for h in headers]
        for row in cells:
            for i, value in enumerate(row):
                widths[i] = max(widths[i], len(value))

        click.echo("  ".join(h.upper().ljust(w) for h, w in zip(headers, widths)).rstrip())
        for row in cells:
            click.echo("  ".join(v.ljust(w) for v, w in zip(row, widths)).rstrip())

    def success(self, message: str) -> None:
        if not self.quiet:
            print_success(message)
