"""
Functions which translate structured call parameters into SQL statements.

All builders are pure and return a :class:`Statement` with the SQL text and the
arguments to bind to its ``?`` placeholders. Identifiers and raw clauses such as
``where`` or ``order`` are inserted verbatim: they must come from trusted code.

With ``legacy=True``, values are inlined into the SQL text using the quoting rules of
earlier releases instead of being bound. This exists to keep byte-identical SQL for
callers which depend on it.
"""

from __future__ import annotations

import re
import logging
from numbers import Real
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

logger = logging.getLogger(__name__)


__all__ = [
    "Statement",
    "DEFAULT_PK_COLUMN",
    "is_storable",
    "sanitize",
    "select_target",
    "build_create_table",
    "build_drop_table",
    "build_add_column",
    "build_table_info",
    "build_table_exists",
    "build_insert_or_replace",
    "build_update",
    "build_delete",
    "build_select",
    "build_select_one",
]

DEFAULT_PK_COLUMN = "id"

_QUOTE_RE = re.compile(r'""([\s\S])|(")')


class Statement(NamedTuple):
    """A SQL statement and the arguments for its placeholders."""

    sql: str
    args: tuple = ()


def is_storable(value: Any) -> bool:
    """
    Whether ``value`` is written by :func:`build_insert_or_replace`. Only strings and
    real numbers qualify, booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, Real))


def sanitize(value: Any) -> str:
    """
    Quote a value for inlining into an UPDATE statement. Surrounding whitespace is
    stripped, a doubled double-quote followed by any character collapses to a single
    quote and a lone double-quote is doubled. This is not an escaping scheme.
    """
    text = str(value).strip()
    return '"' + _QUOTE_RE.sub(r'"\1\2', text) + '"'


def _literal(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


# ==== selectors =======================================================================


def select_target(
    pk_column: str,
    field: str | None = None,
    id: Any = None,
    where: str | None = None,
    legacy: bool = False,
) -> Statement:
    """
    Returns the condition which targets rows for get_one, update and remove.

    If both ``field`` and ``id`` are given, rows where ``field`` equals ``id`` are
    targeted. Otherwise, a raw ``where`` clause is used if neither ``field`` nor ``id``
    is given. In all other cases, rows where the primary key equals ``id`` are targeted.

    :param pk_column: Name of the table's primary key column.
    :param field: Column to match instead of the primary key.
    :param id: Value to match.
    :param where: Raw SQL condition.
    :param legacy: Inline ``id`` in single quotes instead of binding it.
    :returns: Condition without the ``WHERE`` keyword.
    """
    if field is not None and id is not None:
        column = field
    elif where is not None and field is None and id is None:
        return Statement(where)
    else:
        column = pk_column

    if legacy:
        return Statement(f"{column} = '{id}'")
    return Statement(f"{column} = ?", (id,))


# ==== schema ==========================================================================


def _column_def(column: Any) -> str:
    if isinstance(column, Mapping):
        return f"{column['name']} {column['type']}"
    return f"{column.name} {column.type}"


def build_create_table(table: str, columns: Iterable[Any]) -> Statement:
    """
    :param table: Table name.
    :param columns: Column specifications with ``name`` and ``type``, either as
        attributes or as mapping keys. Types are not validated.
    """
    column_defs = ", ".join(_column_def(c) for c in columns)
    return Statement(f"CREATE TABLE IF NOT EXISTS {table} ({column_defs})")


def build_drop_table(table: str) -> Statement:
    return Statement(f"DROP TABLE {table}")


def build_add_column(table: str, column: str, column_type: str) -> Statement:
    return Statement(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")


def build_table_info(table: str) -> Statement:
    return Statement(f"PRAGMA table_info({table})")


def build_table_exists(table: str) -> Statement:
    return Statement(
        "SELECT name FROM sqlite_master WHERE type='table' AND name = ?", (table,)
    )


# ==== rows ============================================================================


def build_insert_or_replace(
    table: str, record: Mapping[str, Any], legacy: bool = False
) -> Statement:
    """
    Builds an ``INSERT OR REPLACE`` statement for a single record.

    Fields whose value is neither a string nor a number are dropped from the statement.

    :param table: Table name.
    :param record: Mapping of column names to values.
    :param legacy: Inline values, strings in double quotes without escaping.
    """
    columns = []
    values = []

    for column, value in record.items():
        if is_storable(value):
            columns.append(column)
            values.append(value)
        else:
            logger.debug(
                "Dropping field %r of type %s from insert into %s",
                column,
                type(value).__name__,
                table,
            )

    column_str = ",".join(columns)

    if legacy:
        value_str = ",".join(_literal(v) for v in values)
        return Statement(
            f"INSERT OR REPLACE INTO {table} ({column_str}) VALUES ({value_str})"
        )

    refs = ",".join(["?"] * len(values))
    return Statement(
        f"INSERT OR REPLACE INTO {table} ({column_str}) VALUES ({refs})", tuple(values)
    )


def build_update(
    table: str,
    target: Statement,
    update: Mapping[str, Any],
    legacy: bool = False,
) -> Statement:
    """
    :param table: Table name.
    :param target: Row condition from :func:`select_target`.
    :param update: Mapping of column names to new values. String values are stripped.
    :param legacy: Inline values after passing them through :func:`sanitize`.
    """
    if legacy:
        assignments = ", ".join(f"{k} = {sanitize(v)}" for k, v in update.items())
        args: tuple = ()
    else:
        assignments = ", ".join(f"{k} = ?" for k in update)
        args = tuple(v.strip() if isinstance(v, str) else v for v in update.values())

    sql = f"UPDATE {table} SET {assignments} WHERE {target.sql}"
    return Statement(sql, args + target.args)


def build_delete(table: str, target: Statement) -> Statement:
    return Statement(f"DELETE FROM {table} WHERE {target.sql}", target.args)


def build_select(
    table: str,
    fields: str | Sequence[str] | None = None,
    where: str | None = None,
    group: str | None = None,
    order: str | None = None,
    limit: str | int | None = None,
    join: str | None = None,
) -> Statement:
    """
    Builds a ``SELECT`` statement, appending each clause only when given.

    :param table: Table name or join expression.
    :param fields: Columns to return. Defaults to ``*``, or to ``<join>.*`` when
        ``join`` is given.
    :param where: Raw ``WHERE`` condition.
    :param group: Raw ``GROUP BY`` expression.
    :param order: Raw ``ORDER BY`` expression.
    :param limit: ``LIMIT`` value. ``0`` is a valid limit and returns no rows.
    :param join: Name of the table whose columns are returned by default.
    """
    if not fields:
        fields = f"{join}.*" if join else "*"
    elif not isinstance(fields, str):
        fields = ", ".join(fields)

    sql = f"SELECT {fields} FROM {table}"

    if where:
        sql += f" WHERE {where}"
    if group:
        sql += f" GROUP BY {group}"
    if order:
        sql += f" ORDER BY {order}"
    if limit is not None:
        sql += f" LIMIT {limit}"

    return Statement(sql)


def build_select_one(table: str, target: Statement) -> Statement:
    return Statement(f"SELECT * FROM {table} WHERE {target.sql} LIMIT 1", target.args)
