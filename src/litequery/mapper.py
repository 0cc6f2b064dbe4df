"""
Conversion of result cursors to plain records.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from aiosqlite import Cursor

from .exceptions import EmptyResultSetError


__all__ = ["Record", "map_cursor"]

Record = Dict[str, Any]


async def map_cursor(cursor: Optional[Cursor]) -> List[Record]:
    """
    Drains ``cursor`` into a list of records and closes it, also when reading fails.
    Each record maps column names to values in the order in which the columns were
    returned. If a column name occurs more than once, the last value wins.

    :param cursor: Cursor of an executed statement.
    :returns: One record per row, empty if there are no rows.
    :raises EmptyResultSetError: if no cursor is given.
    """
    if cursor is None:
        raise EmptyResultSetError(
            "Failed to read results", "The statement did not produce a cursor."
        )

    results: List[Record] = []

    try:
        names = [d[0] for d in cursor.description or ()]
        row = await cursor.fetchone()

        while row is not None:
            results.append({names[i]: row[i] for i in range(len(names))})
            row = await cursor.fetchone()
    finally:
        await cursor.close()

    return results
