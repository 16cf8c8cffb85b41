"""Custom exception hierarchy for reefQL.

All public errors inherit from ReefQLError so callers can catch the base
class for any reefQL-specific failure.  Errors raised by the database driver
itself (``sqlite3.Error``, SQLAlchemy exceptions, ...) are never wrapped.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any


class ReefQLError(Exception):
    """Base exception for all reefQL errors."""


class MalformedConstraintError(ReefQLError):
    """Raised when a WHERE constraint cannot be interpreted.

    Args:
        message: Human-readable description.
        constraint: The offending comparison tuple or operator, if any.
    """

    def __init__(self, message: str, constraint: Any = None) -> None:
        super().__init__(message)
        self.constraint = constraint


class InvalidDataTypeError(ReefQLError):
    """Raised when a column type has no mapping in the target dialect.

    Args:
        data_type: The semantic type that could not be resolved.
        dialect: Name of the dialect that was asked to render it.
        column: Name of the column being rendered, if known.
    """

    def __init__(
        self,
        data_type: Any,
        dialect: str,
        column: str | None = None,
    ) -> None:
        where = f" for column '{column}'" if column else ""
        super().__init__(
            f"Data type {data_type!r} is not supported by dialect '{dialect}'{where}."
        )
        self.data_type = data_type
        self.dialect = dialect
        self.column = column


class CompilationError(ReefQLError):
    """Raised when a query description cannot be rendered to SQL.

    Args:
        message: Human-readable description.
        clause: The statement or clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class ExecutionError(ReefQLError):
    """Raised when a query is executed without a database connection."""


class MigrationError(ReefQLError):
    """Raised when a migration step cannot be applied.

    Args:
        message: Human-readable description.
        migration: Name of the migration being run, if known.
    """

    def __init__(self, message: str, migration: str | None = None) -> None:
        super().__init__(message)
        self.migration = migration


class MigrationResolutionError(MigrationError):
    """Raised when a migration file does not define its expected class.

    Args:
        name: Migration name derived from the file name.
        path: The migration file.
        class_name: The class the file was expected to define.
    """

    def __init__(self, name: str, path: Path, class_name: str) -> None:
        super().__init__(
            f"Migration file '{path}' does not define a Migration subclass "
            f"named '{class_name}'.",
            migration=name,
        )
        self.path = path
        self.class_name = class_name
