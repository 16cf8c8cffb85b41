"""Connection abstraction consumed by the query builder and migrations.

A ``DatabaseConnection`` pairs a driver with the
:class:`~reefql.compile.base.SQLDialect` that renders SQL for it.  Driver
errors propagate unchanged; reefQL does not interpret them.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from reefql.compile.base import SQLDialect
from reefql.query.builder import Query

#: A fetched row, keyed by column name.
Row = dict[str, Any]


class DatabaseConnection(ABC):
    """Executes rendered statements one at a time.

    Args:
        dialect: Dialect used to render queries started via :meth:`table`.
    """

    def __init__(self, dialect: SQLDialect) -> None:
        self.dialect = dialect

    def table(self, name: str) -> Query:
        """Start a query against table ``name``."""
        return Query(self.dialect, name, self)

    @abstractmethod
    def run_select(self, sql: str, params: Sequence[Any]) -> list[Row]:
        """Execute a read statement and return all rows."""

    @abstractmethod
    def run_statement(self, sql: str, params: Sequence[Any]) -> bool:
        """Execute a write or DDL statement and return its success flag."""

    @abstractmethod
    def quote(self, value: Any) -> str:
        """Return ``value`` as an escaped SQL literal.

        Only for contexts where parameter binding is unavailable.
        """

    @property
    def last_insert_id(self) -> int | None:
        """Primary key generated by the most recent INSERT, when known."""
        return None

    def close(self) -> None:
        """Release the underlying driver resources."""

    def __enter__(self) -> DatabaseConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
