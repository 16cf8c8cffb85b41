"""Test fixtures: a recording connection and sample migration directories."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from reefql.compile.base import SQLDialect
from reefql.compile.sqlite import SQLiteDialect
from reefql.connections.base import DatabaseConnection, Row

_FIXTURES_DIR = Path(__file__).parent

#: The two-step "feed" migrations: create ``articles``, then add an integer
#: ``author`` so predicates can compare it numerically.
FEED_MIGRATIONS = _FIXTURES_DIR / "migrations" / "feed"

#: A directory whose only migration does not define its class.
BROKEN_MIGRATIONS = _FIXTURES_DIR / "migrations" / "broken"


class RecordingConnection(DatabaseConnection):
    """In-memory connection that records every statement it is given.

    Args:
        dialect: Dialect to render with (SQLite by default).
        rows: Rows returned by every ``run_select`` call.
        succeed: Value returned by ``run_statement``.
        applied: Ledger names to report instead of ``rows``; a select bound
            to a name only sees that name.
    """

    def __init__(
        self,
        dialect: SQLDialect | None = None,
        rows: list[Row] | None = None,
        succeed: bool = True,
        applied: Sequence[str] | None = None,
    ) -> None:
        super().__init__(dialect or SQLiteDialect())
        self.rows = rows or []
        self.succeed = succeed
        self.applied = applied
        self.selects: list[tuple[str, list[Any]]] = []
        self.statements: list[tuple[str, list[Any]]] = []

    def run_select(self, sql: str, params: Sequence[Any]) -> list[Row]:
        self.selects.append((sql, list(params)))
        if self.applied is None:
            return list(self.rows)
        return [{"name": name} for name in self.applied if not params or name in params]

    def run_statement(self, sql: str, params: Sequence[Any]) -> bool:
        self.statements.append((sql, list(params)))
        return self.succeed

    def quote(self, value: Any) -> str:
        return "'" + str(value).replace("'", "''") + "'"

    @property
    def executed_sql(self) -> list[str]:
        return [sql for sql, _ in self.statements]
