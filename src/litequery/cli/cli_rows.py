from __future__ import annotations

from typing import Any, TYPE_CHECKING

import click

from .common import convert_api_errors, inject_database, run
from .core import Assignment, CliException, parse_value
from .output import echo, ok, print_records

if TYPE_CHECKING:
    from ..main import Database


def _selector_options(f: Any) -> Any:
    f = click.option(
        "--where", "-w", default=None, help="Raw SQL condition to select rows."
    )(f)
    f = click.option(
        "--field", "-f", default=None, help="Match ID against this column."
    )(f)
    return f


@click.command(
    help="""
Insert or replace a row.

Values are given as COLUMN=VALUE. Numbers and quoted strings are parsed as such,
anything else is stored as text.
""",
)
@click.argument("table")
@click.argument("values", nargs=-1, required=True, type=Assignment())
@inject_database
@convert_api_errors
def insert(db: Database, table: str, values: tuple[tuple[str, Any], ...]) -> None:
    rowid = run(db.insert_or_replace(table, dict(values)))
    ok(f"Inserted row {rowid}.")


@click.command(
    name="exec", help="Execute SQL statements in a single transaction."
)
@click.argument("statements", nargs=-1, required=True)
@inject_database
@convert_api_errors
def exec_(db: Database, statements: tuple[str, ...]) -> None:
    run(db.exec(list(statements)))
    ok(f"Executed {len(statements)} statement(s).")


@click.command(help="Select rows from a table.")
@click.argument("table")
@click.option("--fields", "-F", default=None, help="Columns to return.")
@click.option("--where", "-w", default=None, help="Raw SQL condition.")
@click.option("--group", "-g", default=None, help="GROUP BY expression.")
@click.option("--order", "-o", default=None, help="ORDER BY expression.")
@click.option("--limit", "-l", type=int, default=None, help="Maximum number of rows.")
@click.option("--join", "-j", default=None, help="Table to return columns of.")
@inject_database
@convert_api_errors
def get(
    db: Database,
    table: str,
    fields: str | None,
    where: str | None,
    group: str | None,
    order: str | None,
    limit: int | None,
    join: str | None,
) -> None:
    records = run(db.get(table, fields, where, group, order, limit, join))

    if records:
        print_records(records)
    else:
        echo("No matching rows.")


@click.command(name="get-one", help="Show a single row by primary key or field.")
@click.argument("table")
@click.argument("id", required=False)
@_selector_options
@inject_database
@convert_api_errors
def get_one(
    db: Database, table: str, id: str | None, field: str | None, where: str | None
) -> None:
    record = run(db.get_one(table, _parse_id(id), field, where))

    if record is None:
        echo("No matching row.")
    else:
        print_records([record])


@click.command(help="Update rows selected by primary key, field or condition.")
@click.argument("table")
@click.argument("values", nargs=-1, required=True, type=Assignment())
@click.option("--id", "-i", "id", default=None, help="Primary key or field value.")
@_selector_options
@inject_database
@convert_api_errors
def update(
    db: Database,
    table: str,
    values: tuple[tuple[str, Any], ...],
    id: str | None,
    field: str | None,
    where: str | None,
) -> None:
    _require_selector(id, where)
    count = run(db.update(table, dict(values), _parse_id(id), field, where))
    ok(f"Updated {count} row(s).")


@click.command(help="Delete rows selected by primary key, field or condition.")
@click.argument("table")
@click.argument("id", required=False)
@_selector_options
@inject_database
@convert_api_errors
def remove(
    db: Database, table: str, id: str | None, field: str | None, where: str | None
) -> None:
    _require_selector(id, where)
    count = run(db.remove(table, _parse_id(id), field, where))
    ok(f"Removed {count} row(s).")


def _parse_id(id: str | None) -> Any:
    return None if id is None else parse_value(id)


def _require_selector(id: str | None, where: str | None) -> None:
    if id is None and where is None:
        raise CliException("Please give an ID or a --where condition.")
