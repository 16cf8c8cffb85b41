"""Dialect registry (Open/Closed Principle).

``DialectFactory``
    Central registry for :class:`~reefql.compile.base.SQLDialect`
    implementations.  Register a new dialect once; connections and the
    bootstrap code look it up by name.

Usage::

    from reefql.compile.registry import DialectFactory

    @DialectFactory.register("duckdb")
    class DuckDBDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from reefql.compile.base import SQLDialect
from reefql.errors import CompilationError

#: Driver-level names (as reported by SQLAlchemy) mapped to registry names.
_ALIASES: dict[str, str] = {
    "postgresql": "postgres",
    "mariadb": "mysql",
    "sqlite3": "sqlite",
}


class DialectFactory:
    """Registry mapping dialect names to :class:`SQLDialect` classes.

    Example::

        @DialectFactory.register("mysql")
        class MySQLDialect(SQLDialect):
            ...

        dialect = DialectFactory.create("mysql")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[SQLDialect]) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Driver-level aliases such as ``"postgresql"`` are accepted.

        Raises:
            CompilationError: If no dialect is registered for ``name``.
        """
        key = _ALIASES.get(name, name)
        dialect_cls = cls._dialects.get(key)
        if dialect_cls is None:
            registered = sorted(cls._dialects)
            raise CompilationError(
                f"Unsupported dialect: '{name}'. Registered dialects: {registered}."
            )
        return dialect_cls()

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._dialects)
