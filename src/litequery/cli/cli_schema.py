from __future__ import annotations

from typing import TYPE_CHECKING

import click

from .common import convert_api_errors, inject_database, run
from .core import ColumnDefinition
from .output import echo, ok

if TYPE_CHECKING:
    from ..main import ColumnSpec, Database


@click.command(help="Check if a table exists. Exits with status 1 if it does not.")
@click.argument("table")
@inject_database
@convert_api_errors
def exists(db: Database, table: str) -> None:
    if run(db.table_exists(table)):
        echo(f"Table '{table}' exists.")
    else:
        echo(f"Table '{table}' does not exist.")
        raise click.exceptions.Exit(1)


@click.command(
    help="""
Create a table if it does not exist yet.

Columns are given as NAME:TYPE, for example:

    litequery notes create words "id:INTEGER PRIMARY KEY" "name:TEXT"
""",
)
@click.argument("table")
@click.argument("columns", nargs=-1, required=True, type=ColumnDefinition())
@inject_database
@convert_api_errors
def create(db: Database, table: str, columns: tuple[ColumnSpec, ...]) -> None:
    run(db.create_table(table, columns))
    ok(f"Created table '{table}'.")


@click.command(help="Drop a table.")
@click.argument("table")
@click.option("--yes", "-Y", is_flag=True, default=False, help="Do not ask.")
@inject_database
@convert_api_errors
def drop(db: Database, table: str, yes: bool) -> None:
    if not yes:
        click.confirm(f"Drop table '{table}' and all its rows?", abort=True)

    run(db.drop_table(table))
    ok(f"Dropped table '{table}'.")


@click.command(name="add-column", help="Add a column unless it already exists.")
@click.argument("table")
@click.argument("column")
@click.argument("column_type", metavar="TYPE")
@inject_database
@convert_api_errors
def add_column(db: Database, table: str, column: str, column_type: str) -> None:
    run(db.add_column(table, column, column_type))
    ok(f"Column '{column}' is present in '{table}'.")
