"""Shared pytest fixtures for reefQL unit and integration tests."""
from __future__ import annotations

import pytest

from reefql.compile.mysql import MySQLDialect
from reefql.compile.postgres import PostgresDialect
from reefql.compile.sqlite import SQLiteDialect
from reefql.connections.sqlite import SQLiteConnection
from reefql.schema.context import SchemaContext
from tests.fixtures import RecordingConnection


@pytest.fixture()
def sqlite_dialect() -> SQLiteDialect:
    return SQLiteDialect()


@pytest.fixture()
def pg_dialect() -> PostgresDialect:
    return PostgresDialect()


@pytest.fixture()
def mysql_dialect() -> MySQLDialect:
    return MySQLDialect()


@pytest.fixture()
def recorder() -> RecordingConnection:
    """Recording connection rendering SQLite SQL."""
    return RecordingConnection()


@pytest.fixture()
def mysql_recorder() -> RecordingConnection:
    """Recording connection rendering MySQL SQL (supports MODIFY clauses)."""
    return RecordingConnection(MySQLDialect())


@pytest.fixture()
def context() -> SchemaContext:
    return SchemaContext()


@pytest.fixture()
def sqlite_db():
    """Fresh in-memory SQLite connection."""
    connection = SQLiteConnection(":memory:")
    yield connection
    connection.close()
