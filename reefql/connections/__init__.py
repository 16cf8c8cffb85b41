"""reefQL connections: the driver seam used by queries and migrations."""
from reefql.connections.base import DatabaseConnection, Row
from reefql.connections.sqlite import SQLiteConnection

__all__ = [
    "DatabaseConnection",
    "Row",
    "SQLiteConnection",
]
