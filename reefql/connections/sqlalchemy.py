"""SQLAlchemy-backed connection for MySQL, PostgreSQL and friends.

Install the optional dependency before using this module::

    pip install "reefql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from reefql.connections.sqlalchemy import SQLAlchemyConnection

    connection = SQLAlchemyConnection(create_engine("mysql+pymysql://root@localhost/app"))
    rows = connection.table("articles").select().limit(5).execute()

Statements are executed with ``exec_driver_sql`` so the dialect's positional
placeholders reach the DBAPI driver untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from reefql.compile.base import SQLDialect
from reefql.compile.registry import DialectFactory
from reefql.connections.base import DatabaseConnection, Row

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class SQLAlchemyConnection(DatabaseConnection):
    """Runs statements through a SQLAlchemy :class:`~sqlalchemy.engine.Engine`.

    Args:
        engine: Engine to execute on.
        dialect: Dialect override; by default the registered dialect matching
            ``engine.dialect.name`` is used.
    """

    def __init__(self, engine: Engine, dialect: SQLDialect | None = None) -> None:
        super().__init__(dialect or DialectFactory.create(engine.dialect.name))
        self.engine = engine
        self._last_insert_id: int | None = None

    def run_select(self, sql: str, params: Sequence[Any]) -> list[Row]:
        with self.engine.connect() as conn:
            result = conn.exec_driver_sql(sql, tuple(params))
            return [dict(row._mapping) for row in result]

    def run_statement(self, sql: str, params: Sequence[Any]) -> bool:
        with self.engine.begin() as conn:
            result = conn.exec_driver_sql(sql, tuple(params))
            self._last_insert_id = getattr(result, "lastrowid", None)
        return True

    def quote(self, value: Any) -> str:
        from sqlalchemy import literal

        compiled = literal(value).compile(
            dialect=self.engine.dialect,
            compile_kwargs={"literal_binds": True},
        )
        return str(compiled)

    @property
    def last_insert_id(self) -> int | None:
        return self._last_insert_id

    def close(self) -> None:
        self.engine.dispose()
