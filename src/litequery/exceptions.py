# -*- coding: utf-8 -*-
"""
This module defines litequery's error classes. It should be kept free of memory heavy
imports.

All errors inherit from :class:`LiteQueryError` which has title and message attributes
to display the error to the user. Errors raised by the SQLite engine itself inherit
from :class:`NativeExecutionError` and carry the offending SQL statement.
"""

from typing import Optional


class LiteQueryError(Exception):
    """Base class for litequery errors

    :param title: A short description of the error type. This can be used in a CLI to
        give a short error summary.
    :param message: A more verbose description which can include instructions on how to
        proceed to fix the error.
    """

    def __init__(self, title: str, message: str = "") -> None:
        super().__init__(title, message)
        self.title = title
        self.message = message

    def __str__(self) -> str:
        return ". ".join([self.title, self.message])


# ==== errors raised by the database engine ============================================


class NativeExecutionError(LiteQueryError):
    """Raised when the SQLite engine rejects a statement, for instance because it is
    malformed or refers to a missing table or column.

    :param sql: The statement which was rejected, if known.
    """

    def __init__(self, title: str, message: str = "", sql: Optional[str] = None) -> None:
        super().__init__(title, message)
        self.sql = sql


class DatabaseLockedError(NativeExecutionError):
    """Raised when the database file remains locked by another connection for longer
    than the configured busy timeout. This is not retried."""


class ConstraintError(NativeExecutionError):
    """Raised when a statement violates a UNIQUE, NOT NULL, CHECK or foreign key
    constraint."""


# ==== errors which are not raised by the engine =======================================


class TableNotFoundError(LiteQueryError):
    """Raised when dropping a table which does not exist."""


class EmptyResultSetError(LiteQueryError):
    """Raised when results are requested from a statement which did not produce a
    cursor."""
