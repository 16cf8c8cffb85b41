"""reefQL dialect layer: QueryPlan → parameterized SQL."""
from reefql.compile.base import CompiledSQL, SQLDialect
from reefql.compile.mysql import MySQLDialect
from reefql.compile.postgres import PostgresDialect
from reefql.compile.registry import DialectFactory
from reefql.compile.sqlite import SQLiteDialect

DialectFactory.register_class("sqlite", SQLiteDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("mysql", MySQLDialect)

__all__ = [
    "CompiledSQL",
    "DialectFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLDialect",
    "SQLiteDialect",
]
