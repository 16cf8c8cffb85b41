"""Unit tests for Settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from reefql.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.type == "mysql"
    assert settings.host == "localhost"
    assert settings.port is None
    assert settings.migrations is None


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        Settings(driver="oracle")


def test_unknown_type_is_rejected():
    with pytest.raises(ValidationError):
        Settings(type="oracle")


def test_from_env_reads_prefixed_variables():
    settings = Settings.from_env(
        environ={
            "REEFQL_TYPE": "sqlite",
            "REEFQL_DATABASE": "feed.db",
            "REEFQL_PORT": "3307",
            "REEFQL_MIGRATIONS": "migrations",
            "OTHER_TYPE": "postgres",
        }
    )
    assert settings.type == "sqlite"
    assert settings.database == "feed.db"
    assert settings.port == 3307
    assert settings.migrations == Path("migrations")
    assert settings.username == "root"


def test_from_env_custom_prefix():
    settings = Settings.from_env(prefix="APP_DB_", environ={"APP_DB_HOST": "db"})
    assert settings.host == "db"


class TestSQLAlchemyURL:
    @pytest.fixture(autouse=True)
    def _require_sqlalchemy(self):
        pytest.importorskip("sqlalchemy")

    def test_mysql_url_carries_charset(self):
        url = Settings(type="mysql").sqlalchemy_url()
        assert url == "mysql+pymysql://root@localhost/reefql?charset=utf8"

    def test_postgres_url(self):
        url = Settings(
            type="postgres",
            host="db",
            port=5432,
            database="feed",
            username="app",
            password="s3cret",
        ).sqlalchemy_url()
        assert url == "postgresql+psycopg://app:s3cret@db:5432/feed"

    def test_sqlite_url(self):
        assert Settings(type="sqlite", database="feed.db").sqlalchemy_url() == "sqlite:///feed.db"
