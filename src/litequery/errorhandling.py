"""
This module contains methods to convert :exc:`sqlite3.Error` instances raised by the
database engine to instances of :exc:`litequery.exceptions.LiteQueryError`.
"""

from __future__ import annotations

import sqlite3
import contextlib
from typing import Iterator

from .exceptions import (
    NativeExecutionError,
    DatabaseLockedError,
    ConstraintError,
)


__all__ = ["convert_sqlite_errors", "sqlite_to_litequery_error"]


LOCKED_MESSAGES = ("database is locked", "database table is locked", "database is busy")


@contextlib.contextmanager
def convert_sqlite_errors(sql: str | None = None) -> Iterator[None]:
    """
    A context manager that catches and re-raises instances of :exc:`sqlite3.Error` as
    :exc:`litequery.exceptions.NativeExecutionError`. The original exception is kept as
    ``__cause__``.

    :param sql: SQL statement associated with the error.
    """
    try:
        yield
    except sqlite3.Error as exc:
        raise sqlite_to_litequery_error(exc, sql) from exc


def sqlite_to_litequery_error(
    exc: sqlite3.Error, sql: str | None = None
) -> NativeExecutionError:
    """
    Converts a :exc:`sqlite3.Error` to a :exc:`NativeExecutionError` and tries to add a
    reasonably informative error title.

    :param exc: Original sqlite3 error.
    :param sql: SQL statement associated with the error.
    :returns: Converted exception.
    """
    text = str(exc)
    err_cls: type[NativeExecutionError]

    if isinstance(exc, sqlite3.IntegrityError):
        err_cls = ConstraintError
        title = "Constraint violation"
    elif isinstance(exc, sqlite3.OperationalError) and text.lower().startswith(
        LOCKED_MESSAGES
    ):
        err_cls = DatabaseLockedError
        title = "Database is locked"
        text = f"{text}. Another connection is writing to the database."
    else:
        err_cls = NativeExecutionError
        title = "Could not execute query"

    if sql:
        text = f"{text} [{sql}]"

    return err_cls(title, text, sql=sql)
