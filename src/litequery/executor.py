"""
This module runs statements against a database file. Every public method opens its own
connection and closes it again before returning, no connection is held between calls.
"""

from __future__ import annotations

import sqlite3
import logging
import contextlib
from typing import AsyncIterator, List, Sequence

import aiosqlite

from .builder import (
    Statement,
    DEFAULT_PK_COLUMN,
    build_table_exists,
    build_table_info,
)
from .errorhandling import convert_sqlite_errors
from .mapper import Record, map_cursor


__all__ = ["Executor"]

BEGIN = Statement("BEGIN")
COMMIT = Statement("COMMIT")
ROLLBACK = Statement("ROLLBACK")
LAST_INSERT_ROWID = Statement("SELECT last_insert_rowid()")


class Executor:
    """
    Connection-scoped executor for a single database file.

    Connections are opened in autocommit mode. Transactions are only used by
    :meth:`exec_batch` which issues ``BEGIN``, ``COMMIT`` and ``ROLLBACK`` explicitly.

    :param path: Path of the database file.
    :param timeout: Seconds to wait for a lock held by another connection before
        raising :exc:`litequery.exceptions.DatabaseLockedError`.
    :param logger: Logger to use, defaults to the module logger.
    """

    def __init__(
        self,
        path: str,
        timeout: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = path
        self.timeout = timeout
        self._logger = logger or logging.getLogger(__name__)

    @contextlib.asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Opens a connection which is closed on leaving the context, on all paths."""
        with convert_sqlite_errors():
            conn = await aiosqlite.connect(
                self.path, timeout=self.timeout, isolation_level=None
            )

        try:
            yield conn
        finally:
            await conn.close()

    # ==== statements on an open connection ============================================

    async def execute(
        self, conn: aiosqlite.Connection, statement: Statement
    ) -> aiosqlite.Cursor:
        self._logger.debug("Executing %s %s", statement.sql, statement.args)

        with convert_sqlite_errors(statement.sql):
            return await conn.execute(statement.sql, statement.args)

    async def run(self, conn: aiosqlite.Connection, statement: Statement) -> int:
        """
        Executes a statement without result rows.

        :returns: Number of rows modified by the statement, -1 if not applicable.
        """
        cursor = await self.execute(conn, statement)
        rowcount = cursor.rowcount
        await cursor.close()
        return rowcount

    async def query(
        self, conn: aiosqlite.Connection, statement: Statement
    ) -> List[Record]:
        """Executes a statement and returns all result rows as records."""
        cursor = await self.execute(conn, statement)

        with convert_sqlite_errors(statement.sql):
            return await map_cursor(cursor)

    async def primary_key(self, conn: aiosqlite.Connection, table: str) -> str:
        """
        Returns the name of the first column of ``table`` which is part of its primary
        key. Falls back to ``id`` if no column is flagged, for instance for tables
        without an explicit primary key or tables which do not exist.

        The table definition is read on ``conn`` on every call, nothing is cached.
        """
        columns = await self.query(conn, build_table_info(table))
        return next((c["name"] for c in columns if c["pk"]), DEFAULT_PK_COLUMN)

    # ==== connection-scoped operations ================================================

    async def exec_one(self, statement: Statement) -> int:
        """
        Executes a single statement outside of a transaction.

        :returns: Number of rows modified by the statement.
        """
        async with self.connect() as conn:
            return await self.run(conn, statement)

    async def exec_batch(self, statements: Sequence[Statement]) -> int:
        """
        Executes statements in order inside a single transaction. Execution stops at
        the first failing statement, the transaction is rolled back and the error is
        raised. Either all statements take effect or none.

        :returns: The rowid of the last row inserted on the connection, 0 if none.
        """
        async with self.connect() as conn:
            await self.run(conn, BEGIN)

            try:
                for statement in statements:
                    await self.run(conn, statement)
                await self.run(conn, COMMIT)
            except Exception:
                await self._rollback(conn)
                raise

            rows = await self.query(conn, LAST_INSERT_ROWID)
            return rows[0]["last_insert_rowid()"]

    async def exec_query(self, statement: Statement) -> List[Record]:
        """Executes a statement and returns all result rows as records."""
        async with self.connect() as conn:
            return await self.query(conn, statement)

    async def table_exists(self, table: str) -> bool:
        rows = await self.exec_query(build_table_exists(table))
        return len(rows) > 0

    async def _rollback(self, conn: aiosqlite.Connection) -> None:
        self._logger.debug("Rolling back transaction on %s", self.path)

        try:
            await conn.execute(ROLLBACK.sql)
        except sqlite3.Error as exc:
            # The statement error is raised, not this one.
            self._logger.warning("Could not roll back transaction: %s", exc)
