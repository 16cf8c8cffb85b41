"""Connection and migration settings.

Settings can be built directly, from a dict, or from the environment::

    settings = Settings(type="sqlite", database="feed.db", migrations="migrations")
    settings = Settings.from_env()   # REEFQL_TYPE, REEFQL_DATABASE, ...

Non-SQLite targets are reached through SQLAlchemy; install the optional
dependency and a DBAPI driver (``pymysql`` or ``psycopg``) to use them.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

#: Supported database targets.
DatabaseType = Literal["sqlite", "mysql", "postgres"]

#: SQLAlchemy driver names used for each non-SQLite target.
_DRIVERS: dict[str, str] = {
    "mysql": "mysql+pymysql",
    "postgres": "postgresql+psycopg",
}


class Settings(BaseModel):
    """Database and migration settings.

    Attributes:
        type: Database target.
        host: Server host (ignored for SQLite).
        port: Server port; the driver default when ``None``.
        database: Database name, or file path for SQLite.
        username: Login user.
        password: Login password.
        charset: Connection character set (MySQL only).
        migrations: Directory of migration files run by :func:`reefql.init`.
    """

    model_config = ConfigDict(extra="forbid")

    type: DatabaseType = "mysql"
    host: str = "localhost"
    port: int | None = None
    database: str = "reefql"
    username: str = "root"
    password: str = ""
    charset: str = "utf8"
    migrations: Path | None = None

    @classmethod
    def from_env(
        cls,
        prefix: str = "REEFQL_",
        environ: Mapping[str, str] | None = None,
    ) -> Settings:
        """Build settings from ``<prefix><FIELD>`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        values = {
            name: env[f"{prefix}{name.upper()}"]
            for name in cls.model_fields
            if f"{prefix}{name.upper()}" in env
        }
        return cls.model_validate(values)

    def sqlalchemy_url(self) -> str:
        """Return the SQLAlchemy URL for a non-SQLite target."""
        from sqlalchemy.engine import URL

        if self.type == "sqlite":
            return f"sqlite:///{self.database}"
        query = {"charset": self.charset} if self.type == "mysql" else {}
        url = URL.create(
            _DRIVERS[self.type],
            username=self.username,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database,
            query=query,
        )
        return url.render_as_string(hide_password=False)
