"""
This module defines the main API which is exposed to applications and the CLI.
"""

from __future__ import annotations

import os
import os.path as osp
import shutil
from typing import Any, Iterable, List, Mapping, NamedTuple, Sequence, Union

import aiosqlite

from .builder import (
    Statement,
    select_target,
    build_create_table,
    build_drop_table,
    build_add_column,
    build_table_info,
    build_insert_or_replace,
    build_update,
    build_delete,
    build_select,
    build_select_one,
)
from .config import LiteQueryConfig, LiteQueryState
from .exceptions import TableNotFoundError
from .executor import Executor
from .logging import scoped_logger
from .mapper import Record
from .utils.appdirs import get_data_path


__all__ = ["Database", "ColumnSpec"]


class ColumnSpec(NamedTuple):
    """A column definition for :meth:`Database.create_table`. The type is passed
    through verbatim and may contain constraints, e.g., ``INTEGER PRIMARY KEY``."""

    name: str
    type: str


class Database:
    """An asynchronous interface to a named SQLite database

    All operations are coroutines which open a connection, execute their statements and
    close the connection again before returning, regardless of the outcome. Instances
    hold no connection and can be shared between concurrent tasks.

    Table names, column names and raw clauses such as ``where`` or ``order`` are
    inserted into SQL statements verbatim and must never come from untrusted input.

    :param name: Name of the database. The database is stored as ``<name>.sqlite`` in
        ``directory``.
    :param install_from: Path of a database file to install as this database. The file
        is copied only once per database name and config, later instances use the
        existing copy.
    :param directory: Directory for database files. Defaults to the configured
        directory or the platform data directory.
    :param config_name: Name of the litequery configuration to use.
    :param legacy_quoting: Inline quoted values instead of binding them. Defaults to
        the configured value.
    """

    def __init__(
        self,
        name: str,
        install_from: str | None = None,
        directory: str | None = None,
        config_name: str = "litequery",
        legacy_quoting: bool | None = None,
    ) -> None:
        self.name = name
        self.config_name = config_name

        self._logger = scoped_logger(__name__, config_name)
        self._conf = LiteQueryConfig(config_name)
        self._state = LiteQueryState(config_name)

        if directory is None:
            directory = self._conf.get("database", "directory") or get_data_path(
                "litequery"
            )

        os.makedirs(directory, exist_ok=True)
        self.path = osp.join(directory, f"{name}.sqlite")

        if legacy_quoting is None:
            legacy_quoting = self._conf.get("database", "legacy_quoting")

        self.legacy_quoting = legacy_quoting

        self._executor = Executor(
            self.path,
            timeout=self._conf.get("database", "busy_timeout"),
            logger=self._logger,
        )

        if install_from is not None:
            self._install(install_from)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}', path='{self.path}')>"

    @property
    def installed(self) -> bool:
        """Whether a template database has been installed under this name."""
        return self._state.get("install", self._install_key, False)

    @property
    def _install_key(self) -> str:
        return f"installed_{self.name}"

    def _install(self, source: str) -> None:
        if self.installed:
            return

        self._logger.info("Installing database %s from %s", self.name, source)
        shutil.copyfile(source, self.path)
        self._state.set("install", self._install_key, True)

    # ==== schema ======================================================================

    async def table_exists(self, table: str) -> bool:
        """
        Checks if a table exists.

        :param table: Table name.
        :returns: Whether the table exists.
        """
        return await self._executor.table_exists(table)

    async def create_table(
        self, table: str, columns: Iterable[ColumnSpec | Mapping[str, str]]
    ) -> None:
        """
        Creates a table if it does not exist yet.

        Example::

            await db.create_table("tests", [
                ColumnSpec("testId", "INTEGER PRIMARY KEY"),
                ColumnSpec("testValue", "TEXT"),
            ])

        :param table: Table name.
        :param columns: Column specifications, as :class:`ColumnSpec` or mappings with
            ``name`` and ``type`` keys.
        """
        await self._executor.exec_one(build_create_table(table, columns))

    async def drop_table(self, table: str) -> None:
        """
        Drops a table.

        :param table: Table name.
        :raises TableNotFoundError: if the table does not exist.
        """
        if not await self.table_exists(table):
            raise TableNotFoundError(
                "Table does not exist", f"Cannot drop missing table '{table}'."
            )

        await self._executor.exec_one(build_drop_table(table))

    async def add_column(self, table: str, column: str, column_type: str) -> None:
        """
        Adds a column to a table. Does nothing if a column with the same name exists,
        names are compared case-insensitively like SQLite identifiers.

        :param table: Name of the table to alter.
        :param column: Name of the new column.
        :param column_type: SQLite type of the new column.
        """
        async with self._executor.connect() as conn:
            columns = await self._executor.query(conn, build_table_info(table))

            if any(c["name"].lower() == column.lower() for c in columns):
                self._logger.debug("Column %s.%s already exists", table, column)
                return

            await self._executor.run(conn, build_add_column(table, column, column_type))

    # ==== rows ========================================================================

    async def insert_or_replace(
        self, table: str, records: Mapping[str, Any] | Sequence[Mapping[str, Any]]
    ) -> int:
        """
        Inserts one or more records, replacing rows with the same primary key or unique
        values. Multiple records are inserted in a single transaction.

        Only string and number values are written, fields with other values (None,
        bool, bytes, ...) are dropped from the insert.

        :param table: Table name.
        :param records: A record or a sequence of records.
        :returns: Rowid of the last inserted row.
        """
        if isinstance(records, Mapping):
            records = [records]

        statements = [
            build_insert_or_replace(table, r, self.legacy_quoting) for r in records
        ]
        return await self._executor.exec_batch(statements)

    async def exec(self, sql: Union[str, Sequence[str]]) -> None:
        """
        Executes one or more SQL statements in a single transaction. If any statement
        fails, none take effect.

        :param sql: A statement or a sequence of statements.
        """
        if isinstance(sql, str):
            sql = [sql]

        await self._executor.exec_batch([Statement(s) for s in sql])

    async def get(
        self,
        table: str,
        fields: str | Sequence[str] | None = None,
        where: str | None = None,
        group: str | None = None,
        order: str | None = None,
        limit: str | int | None = None,
        join: str | None = None,
    ) -> List[Record]:
        """
        Runs a select query.

        Example::

            rows = await db.get(table="words", order="name DESC", limit=2)

        :param table: Table name or join expression, e.g.,
            ``"a JOIN b ON a.id = b.a_id"``.
        :param fields: Columns to return. Defaults to all.
        :param where: SQL ``WHERE`` condition.
        :param group: SQL ``GROUP BY`` expression.
        :param order: SQL ``ORDER BY`` expression.
        :param limit: Maximum number of rows.
        :param join: Name of the table to return all columns of if ``fields`` is not
            given.
        :returns: Records of all matching rows.
        """
        statement = build_select(table, fields, where, group, order, limit, join)
        return await self._executor.exec_query(statement)

    async def get_one(
        self,
        table: str,
        id: Any = None,
        field: str | None = None,
        where: str | None = None,
    ) -> Record | None:
        """
        Gets a single row. The row is selected by ``field = id`` if both are given, by
        the ``where`` condition if neither is given, and by primary key ``= id``
        otherwise. The primary key column is looked up from the table definition and
        defaults to ``id``.

        :param table: Table name.
        :param id: Primary key value, or value of ``field``.
        :param field: Column to match against ``id`` instead of the primary key.
        :param where: SQL ``WHERE`` condition.
        :returns: The first matching record or None.
        """
        async with self._executor.connect() as conn:
            target = await self._target(conn, table, id, field, where)
            rows = await self._executor.query(conn, build_select_one(table, target))

        return rows[0] if rows else None

    async def update(
        self,
        table: str,
        update: Mapping[str, Any],
        id: Any = None,
        field: str | None = None,
        where: str | None = None,
    ) -> int:
        """
        Updates rows, selected as in :meth:`get_one`. All rows matching the selection
        are updated.

        Example::

            await db.update(table="words", id="2", update={"translation": "new"})

        :param table: Table name.
        :param update: Mapping of column names to new values. Strings are stripped.
        :param id: Primary key value, or value of ``field``.
        :param field: Column to match against ``id`` instead of the primary key.
        :param where: SQL ``WHERE`` condition.
        :returns: Number of updated rows.
        """
        async with self._executor.connect() as conn:
            target = await self._target(conn, table, id, field, where)
            statement = build_update(table, target, update, self.legacy_quoting)
            return await self._executor.run(conn, statement)

    async def remove(
        self,
        table: str,
        id: Any = None,
        field: str | None = None,
        where: str | None = None,
    ) -> int:
        """
        Deletes rows, selected as in :meth:`get_one`.

        :param table: Table name.
        :param id: Primary key value, or value of ``field``.
        :param field: Column to match against ``id`` instead of the primary key.
        :param where: SQL ``WHERE`` condition.
        :returns: Number of deleted rows.
        """
        async with self._executor.connect() as conn:
            target = await self._target(conn, table, id, field, where)
            return await self._executor.run(conn, build_delete(table, target))

    async def _target(
        self,
        conn: aiosqlite.Connection,
        table: str,
        id: Any,
        field: str | None,
        where: str | None,
    ) -> Statement:
        pk_column = await self._executor.primary_key(conn, table)
        return select_target(pk_column, field, id, where, self.legacy_quoting)
