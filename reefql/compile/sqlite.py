"""SQLite dialect."""
from __future__ import annotations

import logging
from dataclasses import replace

from reefql.compile.base import SQLDialect
from reefql.errors import CompilationError
from reefql.query.plan import QueryPlan
from reefql.schema.column import Column
from reefql.schema.types import SemanticType, TypeSpec

logger = logging.getLogger(__name__)


class SQLiteDialect(SQLDialect):
    """Renders SQLite-flavoured parameterized SQL.

    Parameter style: ``?`` – compatible with Python's built-in ``sqlite3``
    positional execution (``cursor.execute(sql, params)``).

    Note: SQLite cannot change a column definition in place and accepts a
    single ``ADD COLUMN`` / ``DROP COLUMN`` per ``ALTER TABLE``.  Altered
    columns are therefore left out of ALTER statements, and
    :meth:`split_alter` breaks a multi-column change into one statement per
    column.  ``AUTO_INCREMENT``
    is dropped because an ``INTEGER PRIMARY KEY`` is already a rowid alias.
    """

    type_map = {
        SemanticType.INTEGER: TypeSpec("INTEGER"),
        SemanticType.SMALLINT: TypeSpec("SMALLINT"),
        SemanticType.DECIMAL: TypeSpec("DECIMAL", 10),
        SemanticType.FLOAT: TypeSpec("REAL"),
        SemanticType.BIT: TypeSpec("INTEGER"),
        SemanticType.CHARACTER: TypeSpec("CHAR", 1),
        SemanticType.VARCHAR: TypeSpec("VARCHAR", 255),
        SemanticType.TEXT: TypeSpec("TEXT"),
        SemanticType.DATE: TypeSpec("DATE"),
        SemanticType.TIME: TypeSpec("TIME"),
        SemanticType.TIMESTAMP: TypeSpec("TIMESTAMP"),
        SemanticType.BOOLEAN: TypeSpec("BOOLEAN"),
    }
    modifier_aliases = {"AUTO_INCREMENT": ""}
    supports_modify = False

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def param_placeholder(self) -> str:
        return "?"

    def split_alter(self, plan: QueryPlan) -> list[QueryPlan]:
        """One plan per ``ADD COLUMN`` then one per ``DROP COLUMN``."""
        self._check_alter(plan)
        added = [
            replace(plan, added_columns=[column], altered_columns=[], dropped_columns=[])
            for column in plan.added_columns
        ]
        dropped = [
            replace(plan, added_columns=[], altered_columns=[], dropped_columns=[column])
            for column in plan.dropped_columns
        ]
        return added + dropped

    def render_alter_clauses(self, plan: QueryPlan) -> list[str]:
        self._check_alter(plan)
        clauses = super().render_alter_clauses(plan)
        if len(clauses) > 1:
            raise CompilationError(
                "SQLite accepts a single ADD COLUMN or DROP COLUMN per ALTER TABLE; "
                f"got {len(clauses)} changes.",
                clause="ALTER",
            )
        return clauses

    @staticmethod
    def _check_alter(plan: QueryPlan) -> None:
        if plan.altered_columns:
            logger.debug(
                "SQLite cannot modify columns; skipping %d altered column(s)",
                len(plan.altered_columns),
            )
        if any(c.is_primary for c in plan.added_columns):
            raise CompilationError(
                "SQLite cannot add a primary key to an existing table.", clause="ALTER"
            )

    def alter_add(self, column: Column) -> str:
        return f"ADD COLUMN {self.render_typed_column(column)}"

    def alter_drop(self, column: Column) -> str:
        return f"DROP COLUMN {self.quote_identifier(column.name)}"
