"""reefQL schema models: SemanticType, Column, Table, SchemaContext, TableDiff."""
from reefql.schema.column import Column
from reefql.schema.context import SchemaContext
from reefql.schema.diff import TableDiff, diff_table
from reefql.schema.table import AUTO_INCREMENT, Table
from reefql.schema.types import DEFAULT_LENGTH, SemanticType, TypeSpec

__all__ = [
    "AUTO_INCREMENT",
    "DEFAULT_LENGTH",
    "Column",
    "SchemaContext",
    "SemanticType",
    "Table",
    "TableDiff",
    "TypeSpec",
    "diff_table",
]
