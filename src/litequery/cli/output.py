"""
This module provides methods for formatted output to stdout, including tables of
records.
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Sequence

import click
from rich.console import Console
from rich.table import Table, Column
from rich.text import Text


# ==== printing structured data to console =============================================


def rich_table(*headers: Column | str) -> Table:
    return Table(*headers, padding=(0, 2, 0, 0), box=None, show_header=len(headers) > 0)


def format_value(value: Any) -> Text:
    """Renders a column value, NULL values are dimmed."""
    if value is None:
        return Text("NULL", style="dim")
    if isinstance(value, bytes):
        return Text(f"<{len(value)} bytes>", style="dim")
    return Text(str(value), overflow="ellipsis")


def print_records(records: Sequence[Mapping[str, Any]]) -> None:
    """
    Prints records as a table with one column per field. Fields which are missing from
    a record are left empty.

    :param records: Records to print.
    """
    headers: list[str] = []

    for record in records:
        for key in record:
            if key not in headers:
                headers.append(key)

    table = rich_table(*headers)

    for record in records:
        table.add_row(
            *(format_value(record[h]) if h in record else Text("") for h in headers)
        )

    console = Console()
    console.print(table)


# ==== printing messages to console ====================================================


class Prefix(enum.Enum):
    """Prefix for command line output"""

    Ok = 0
    Warn = 1
    NONE = 2


def echo(message: str, nl: bool = True, prefix: Prefix = Prefix.NONE) -> None:
    """
    Print a message to stdout.

    :param message: The string to output.
    :param nl: Whether to end with a new line.
    :param prefix: Any prefix to output before the message,
    """
    if prefix is Prefix.Ok:
        pre = click.style("✓", fg="green") + " "
    elif prefix is Prefix.Warn:
        pre = click.style("!", fg="red") + " "
    else:
        pre = ""

    click.echo(f"{pre}{message}", nl=nl)


def warn(message: str, nl: bool = True) -> None:
    """Print a warning to stdout. Will be prefixed with an exclamation mark."""
    echo(message, nl=nl, prefix=Prefix.Warn)


def ok(message: str, nl: bool = True) -> None:
    """Print a confirmation to stdout. Will be prefixed with a checkmark."""
    echo(message, nl=nl, prefix=Prefix.Ok)
