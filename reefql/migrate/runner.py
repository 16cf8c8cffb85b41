"""Migration discovery, bookkeeping and execution.

Migration files live in one directory and are named
``<ordering prefix>_<snake_case_name>.py``; each defines a
:class:`~reefql.migrate.migration.Migration` subclass named after the
CamelCase form of ``<snake_case_name>``::

    migrations/
        aaa_create_articles.py      # class CreateArticles(Migration)
        aab_add_articles_author.py  # class AddArticlesAuthor(Migration)

Files run in lexical order.  Applied migration names are recorded in the
``reefql_migrations`` ledger table; forward runs skip executing them but
still replay them (without touching the database) so the schema context
knows the current shape of every table.
"""
from __future__ import annotations

import importlib.util
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from reefql.compile.base import CompiledSQL
from reefql.connections.base import DatabaseConnection
from reefql.errors import MigrationResolutionError
from reefql.migrate.migration import Migration, SchemaEditor
from reefql.schema.column import Column
from reefql.schema.context import SchemaContext
from reefql.schema.table import AUTO_INCREMENT
from reefql.schema.types import SemanticType
from reefql.utils import to_camel_case

logger = logging.getLogger(__name__)

#: Name of the table recording applied migrations.
LEDGER_TABLE = "reefql_migrations"


@dataclass
class MigrationResult:
    """Outcome of running one migration.

    Attributes:
        name: Migration name.
        modified: Whether its statements were executed.
        statements: Statements rendered while running it.
    """

    name: str
    modified: bool
    statements: list[CompiledSQL] = field(default_factory=list)


class MigrationRunner:
    """Runs migrations against a connection and keeps the ledger.

    Args:
        connection: Connection to migrate.
        context: Schema context to declare tables in; a fresh one by default.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        context: SchemaContext | None = None,
    ) -> None:
        self.connection = connection
        self.context = context if context is not None else SchemaContext()

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    def ensure_ledger(self) -> None:
        """Create the ledger table if it does not exist."""
        self.connection.table(LEDGER_TABLE).create_table(
            [
                Column(
                    name="id",
                    type=SemanticType.INTEGER,
                    modifiers=[AUTO_INCREMENT],
                    is_primary=True,
                ),
                Column(name="name", type=SemanticType.VARCHAR),
            ]
        ).execute()

    def is_applied(self, name: str) -> bool:
        rows = (
            self.connection.table(LEDGER_TABLE)
            .select("name")
            .where("name", name)
            .limit(1)
            .execute()
        )
        return bool(rows)

    def record(self, name: str) -> None:
        self.connection.table(LEDGER_TABLE).insert({"name": name}).execute()

    def forget(self, name: str) -> None:
        self.connection.table(LEDGER_TABLE).delete("name", name).execute()

    def applied(self) -> list[str]:
        """Return the names of all applied migrations, oldest first."""
        rows = (
            self.connection.table(LEDGER_TABLE).select("name").execute()
        )
        return [row["name"] for row in rows]

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    @staticmethod
    def discover(directory: str | Path) -> list[tuple[str, Migration]]:
        """Load every migration in ``directory``, in file-name order.

        Raises:
            MigrationResolutionError: If a file is misnamed or does not
                define its expected :class:`Migration` subclass.
        """
        migrations: list[tuple[str, Migration]] = []
        for path in sorted(Path(directory).glob("*.py")):
            if path.name.startswith("_"):
                continue
            _, sep, name = path.stem.partition("_")
            class_name = to_camel_case(name)
            if not sep or not name:
                raise MigrationResolutionError(path.stem, path, class_name or path.stem)
            migration_cls = getattr(_load_module(path, name), class_name, None)
            if not (isinstance(migration_cls, type) and issubclass(migration_cls, Migration)):
                raise MigrationResolutionError(name, path, class_name)
            migrations.append((name, migration_cls()))
        return migrations

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(
        self,
        migrations: Iterable[tuple[str, Migration]],
        up: bool = True,
        modify: bool = True,
    ) -> list[MigrationResult]:
        """Run ``migrations`` forward or backward.

        Forward: pending migrations are executed and recorded; applied ones
        are replayed without touching the database.  Backward: migrations run
        in reverse order; applied ones are executed and their ledger entries
        removed so they can be applied again, pending ones only update the
        schema context.

        Args:
            migrations: ``(name, migration)`` pairs in application order.
            up: Run forward when true, backward otherwise.
            modify: When false, statements are rendered but not executed and
                no ledger entry is added or removed.
        """
        self.ensure_ledger()
        ordered = list(migrations)
        if not up:
            self.replay(ordered)
            ordered.reverse()

        results: list[MigrationResult] = []
        for name, migration in ordered:
            already_applied = self.is_applied(name)
            execute = modify and already_applied != up
            editor = SchemaEditor(
                self.context,
                self.connection.dialect,
                self.connection,
                modify=execute,
                migration=name,
            )
            statements = migration.run(editor, up=up)
            if up and execute:
                self.record(name)
                logger.info("Applied migration %s (%d statements)", name, len(statements))
            elif execute:
                self.forget(name)
                logger.info("Reverted migration %s (%d statements)", name, len(statements))
            else:
                logger.debug(
                    "Replayed migration %s without executing (applied=%s)", name, already_applied
                )
            results.append(MigrationResult(name, execute, list(statements)))
        return results

    def replay(self, migrations: Iterable[tuple[str, Migration]]) -> None:
        """Declare ``migrations`` forward in the context without executing them.

        Backward runs need the declared shape of every table before a
        ``down`` can be diffed against it.
        """
        for name, migration in migrations:
            editor = SchemaEditor(
                self.context, self.connection.dialect, modify=False, migration=name
            )
            migration.run(editor, up=True)

    def run_directory(
        self, directory: str | Path, up: bool = True, modify: bool = True
    ) -> list[MigrationResult]:
        """Discover the migrations in ``directory`` and run them."""
        return self.run(self.discover(directory), up=up, modify=modify)


def _load_module(path: Path, name: str) -> object:
    spec = importlib.util.spec_from_file_location(f"reefql_migration_{name}", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load migration module from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
