"""SQLite connection backed by the standard-library ``sqlite3`` module."""
from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from reefql.compile.sqlite import SQLiteDialect
from reefql.connections.base import DatabaseConnection, Row


class SQLiteConnection(DatabaseConnection):
    """Runs statements on a ``sqlite3`` database.

    Each write is committed immediately.

    Args:
        database: Database file path, or ``":memory:"``.
        connection: An already-open ``sqlite3.Connection`` to use instead.
    """

    def __init__(
        self,
        database: str | Path = ":memory:",
        connection: sqlite3.Connection | None = None,
    ) -> None:
        super().__init__(SQLiteDialect())
        self._conn = connection or sqlite3.connect(str(database))
        self._conn.row_factory = sqlite3.Row
        self._last_insert_id: int | None = None

    @property
    def raw(self) -> sqlite3.Connection:
        """The underlying ``sqlite3.Connection``."""
        return self._conn

    def run_select(self, sql: str, params: Sequence[Any]) -> list[Row]:
        cursor = self._conn.execute(sql, tuple(params))
        return [dict(row) for row in cursor.fetchall()]

    def run_statement(self, sql: str, params: Sequence[Any]) -> bool:
        cursor = self._conn.execute(sql, tuple(params))
        self._last_insert_id = cursor.lastrowid
        self._conn.commit()
        return True

    def quote(self, value: Any) -> str:
        # SQLite's own quote() function handles every storage class.
        return self._conn.execute("SELECT quote(?)", (value,)).fetchone()[0]

    @property
    def last_insert_id(self) -> int | None:
        return self._last_insert_id

    def close(self) -> None:
        self._conn.close()
