"""reefQL – a small ORM: fluent queries, pluggable dialects, diffing migrations.

Public API
----------
``connect``
    Open a :class:`DatabaseConnection` for a :class:`Settings` object.

``init``
    Connect and run the forward migrations of ``settings.migrations``.

Building queries::

    connection = reefql.connect(Settings(type="sqlite", database=":memory:"))
    compiled = (
        connection.table("t")
        .select("id", "name")
        .where("age", ">", 21)
        .and_("name", "x")
        .limit(10)
        .build()
    )
    compiled.sql
    # SELECT "t"."id","t"."name" FROM "t" WHERE "t"."age">? AND "t"."name"=? LIMIT 10;

Declaring migrations::

    class CreateArticles(Migration):
        def up(self, schema):
            schema.table("articles", lambda t: (t.add_primary("id"), t.add_string("title")))

        def down(self, schema):
            schema.drop_table("articles")

Extensibility
-------------
New dialects can be registered via::

    from reefql.compile.registry import DialectFactory

    @DialectFactory.register("duckdb")
    class DuckDBDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from reefql.compile import (
    CompiledSQL,
    DialectFactory,
    MySQLDialect,
    PostgresDialect,
    SQLDialect,
    SQLiteDialect,
)
from reefql.config import Settings
from reefql.connections.base import DatabaseConnection
from reefql.connections.sqlite import SQLiteConnection
from reefql.errors import (
    CompilationError,
    ExecutionError,
    InvalidDataTypeError,
    MalformedConstraintError,
    MigrationError,
    MigrationResolutionError,
    ReefQLError,
)
from reefql.migrate.migration import Migration, SchemaEditor
from reefql.migrate.runner import MigrationResult, MigrationRunner
from reefql.model import Model
from reefql.query.builder import Query
from reefql.query.plan import QueryKind, QueryPlan
from reefql.query.predicate import Condition, ConditionGroup, PredicateTree
from reefql.schema.column import Column
from reefql.schema.context import SchemaContext
from reefql.schema.diff import TableDiff, diff_table
from reefql.schema.table import Table
from reefql.schema.types import SemanticType, TypeSpec

__all__ = [
    # Bootstrap
    "connect",
    "init",
    "Settings",
    # Query building
    "Query",
    "QueryKind",
    "QueryPlan",
    "Condition",
    "ConditionGroup",
    "PredicateTree",
    # Dialects
    "CompiledSQL",
    "DialectFactory",
    "SQLDialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
    # Connections
    "DatabaseConnection",
    "SQLiteConnection",
    # Schema
    "SemanticType",
    "TypeSpec",
    "Column",
    "Table",
    "SchemaContext",
    "TableDiff",
    "diff_table",
    # Migrations
    "Migration",
    "SchemaEditor",
    "MigrationRunner",
    "MigrationResult",
    # Models
    "Model",
    # Errors
    "ReefQLError",
    "MalformedConstraintError",
    "InvalidDataTypeError",
    "CompilationError",
    "ExecutionError",
    "MigrationError",
    "MigrationResolutionError",
]


def connect(settings: Settings) -> DatabaseConnection:
    """Open a connection for ``settings``.

    SQLite uses the standard-library driver; every other target goes through
    SQLAlchemy (``pip install "reefql[sqlalchemy]"`` plus a DBAPI driver).
    """
    if settings.type == "sqlite":
        return SQLiteConnection(settings.database)

    from sqlalchemy import create_engine

    from reefql.connections.sqlalchemy import SQLAlchemyConnection

    return SQLAlchemyConnection(create_engine(settings.sqlalchemy_url()))


def init(
    settings: Settings,
    context: SchemaContext | None = None,
) -> DatabaseConnection:
    """Connect and apply pending migrations from ``settings.migrations``.

    Args:
        settings: Connection and migration settings.
        context: Schema context to declare tables in; also assigned to
            :attr:`Model.schema` so models validate attribute names.

    Returns:
        The open connection, also assigned to :attr:`Model.connection`.
    """
    connection = connect(settings)
    context = context if context is not None else SchemaContext()
    if settings.migrations is not None:
        MigrationRunner(connection, context).run_directory(settings.migrations)
    Model.connection = connection
    Model.schema = context
    return connection
