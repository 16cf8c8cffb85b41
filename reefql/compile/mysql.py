"""MySQL dialect."""

from __future__ import annotations

from reefql.compile.base import SQLDialect
from reefql.schema.types import SemanticType, TypeSpec


class MySQLDialect(SQLDialect):
    """Renders MySQL-flavoured parameterized SQL.

    Parameter style: ``%s`` – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` positional execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    MySQL accepts table-qualified ``SET`` targets and ``LIMIT`` on ``DELETE``,
    and uses the base ``ADD`` / ``MODIFY`` / ``DROP`` ALTER clauses unchanged.
    """

    identifier_quotes = "`"
    type_map = {
        SemanticType.INTEGER: TypeSpec("INT", 11),
        SemanticType.SMALLINT: TypeSpec("SMALLINT", 6),
        SemanticType.DECIMAL: TypeSpec("DECIMAL", 10),
        SemanticType.FLOAT: TypeSpec("FLOAT"),
        SemanticType.BIT: TypeSpec("BIT", 1),
        SemanticType.CHARACTER: TypeSpec("CHAR", 1),
        SemanticType.VARCHAR: TypeSpec("VARCHAR", 255),
        SemanticType.TEXT: TypeSpec("TEXT"),
        SemanticType.DATE: TypeSpec("DATE"),
        SemanticType.TIME: TypeSpec("TIME"),
        SemanticType.TIMESTAMP: TypeSpec("TIMESTAMP"),
        SemanticType.BOOLEAN: TypeSpec("TINYINT", 1),
    }
    qualify_assignments = True
    supports_delete_limit = True

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def param_placeholder(self) -> str:
        return "%s"
