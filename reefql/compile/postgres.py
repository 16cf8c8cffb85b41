"""PostgreSQL dialect."""

from __future__ import annotations

from reefql.compile.base import SQLDialect
from reefql.schema.column import Column
from reefql.schema.types import SemanticType, TypeSpec


class PostgresDialect(SQLDialect):
    """Renders PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``%s`` – compatible with ``psycopg2`` and ``psycopg``
    positional execution.

    ``AUTO_INCREMENT`` is spelled as an identity column, and altered columns
    are rendered as ``ALTER COLUMN … TYPE …`` (modifiers such as
    ``NOT NULL`` need their own ``SET`` clause in PostgreSQL and are not
    re-applied).
    """

    type_map = {
        SemanticType.INTEGER: TypeSpec("INTEGER"),
        SemanticType.SMALLINT: TypeSpec("SMALLINT"),
        SemanticType.DECIMAL: TypeSpec("NUMERIC", 10),
        SemanticType.FLOAT: TypeSpec("DOUBLE PRECISION"),
        SemanticType.BIT: TypeSpec("BIT", 1),
        SemanticType.CHARACTER: TypeSpec("CHAR", 1),
        SemanticType.VARCHAR: TypeSpec("VARCHAR", 255),
        SemanticType.TEXT: TypeSpec("TEXT"),
        SemanticType.DATE: TypeSpec("DATE"),
        SemanticType.TIME: TypeSpec("TIME"),
        SemanticType.TIMESTAMP: TypeSpec("TIMESTAMP"),
        SemanticType.BOOLEAN: TypeSpec("BOOLEAN"),
    }
    modifier_aliases = {"AUTO_INCREMENT": "GENERATED BY DEFAULT AS IDENTITY"}

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self) -> str:
        return "%s"

    def alter_add(self, column: Column) -> str:
        return f"ADD COLUMN {self.render_typed_column(column)}"

    def alter_modify(self, column: Column) -> str:
        return f"ALTER COLUMN {self.quote_identifier(column.name)} TYPE {self.resolve_type(column)}"

    def alter_drop(self, column: Column) -> str:
        return f"DROP COLUMN {self.quote_identifier(column.name)}"
