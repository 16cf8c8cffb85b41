"""reefQL migrations: declarative steps, schema editor and runner."""
from reefql.migrate.migration import Migration, SchemaEditor
from reefql.migrate.runner import LEDGER_TABLE, MigrationResult, MigrationRunner

__all__ = [
    "LEDGER_TABLE",
    "Migration",
    "MigrationResult",
    "MigrationRunner",
    "SchemaEditor",
]
