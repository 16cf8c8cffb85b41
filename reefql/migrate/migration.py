"""Migration steps and the schema editor they declare changes through.

A migration subclasses :class:`Migration` and declares table changes in
``up`` (forward) and ``down`` (backward)::

    class AddArticlesAuthor(Migration):
        def up(self, schema: SchemaEditor) -> None:
            schema.table("articles", lambda t: t.add_integer("author"))

        def down(self, schema: SchemaEditor) -> None:
            schema.table("articles", lambda t: t.drop_column("author"))

Table lifecycle within one run
------------------------------
new (first reference in the :class:`~reefql.schema.context.SchemaContext`)
→ declared (the migration's callable populates it)
→ applied (the diff has been rendered and, when ``modify`` is set, executed;
only then are ``is_new`` flags cleared and the drop list emptied).

With ``modify`` unset the statements are rendered and recorded but not
executed, and the table is treated as already matching the live schema.
The runner uses this to replay applied migrations so that later ones are
diffed against the right state, and callers can use it to preview SQL.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from reefql.compile.base import CompiledSQL, SQLDialect
from reefql.connections.base import DatabaseConnection
from reefql.errors import MigrationError
from reefql.query.builder import Query
from reefql.query.plan import QueryPlan
from reefql.schema.context import SchemaContext
from reefql.schema.diff import TableDiff, diff_table
from reefql.schema.table import Table

logger = logging.getLogger(__name__)


class SchemaEditor:
    """Applies declared table changes for one migration step.

    Args:
        context: Registry of declared tables for this run.
        dialect: Dialect used to render statements.
        connection: Connection used when ``modify`` is set.
        modify: Execute rendered statements against ``connection``.
        migration: Name of the migration being run, for error reporting.
    """

    def __init__(
        self,
        context: SchemaContext,
        dialect: SQLDialect,
        connection: DatabaseConnection | None = None,
        modify: bool = True,
        migration: str | None = None,
    ) -> None:
        if modify and connection is None:
            raise MigrationError("A connection is required to modify the schema.", migration)
        self.context = context
        self.dialect = dialect
        self.connection = connection
        self.modify = modify
        self.migration = migration
        self.statements: list[CompiledSQL] = []

    # ------------------------------------------------------------------
    # Declarative API used by migrations
    # ------------------------------------------------------------------

    def table(self, name: str, fn: Callable[[Table], object]) -> Table:
        """Declare changes to ``name`` via ``fn`` and apply them."""
        table = self.context.with_table(name, fn)
        self.apply(table)
        return table

    def drop_table(self, name: str) -> CompiledSQL:
        """Drop ``name`` (may result in data loss)."""
        compiled = self._run(self._query(name).drop_table())
        self.context.drop(name)
        return compiled

    def get_table(self, name: str) -> Table:
        """Return the declared table ``name`` without applying anything."""
        return self.context.get(name)

    # ------------------------------------------------------------------
    # Diff application
    # ------------------------------------------------------------------

    def apply(self, table: Table) -> list[CompiledSQL]:
        """Render, record and (optionally) execute the diff of ``table``.

        Dialects that cannot express the whole diff in one ``ALTER TABLE``
        get one statement per piece, run in order.

        Returns:
            The rendered statements; empty when there was nothing to do.

        Raises:
            MigrationError: If the connection reports a statement failed.
                The table's flags are left untouched in that case.
        """
        diff = diff_table(table)
        if self._is_noop(diff):
            # A new table with no columns stays new until it gets some.
            if not diff.is_new:
                table.mark_applied()
            return []
        if diff.is_new:
            queries = [self._query(table.name).create_table(diff.columns)]
        else:
            alter = self._query(table.name).alter_table(diff.added, diff.altered, diff.dropped)
            queries = [
                self._query(table.name, plan) for plan in self.dialect.split_alter(alter.plan)
            ]
        compiled = [self._run(query) for query in queries]
        table.mark_applied()
        return compiled

    def _is_noop(self, diff: TableDiff) -> bool:
        if diff.is_empty:
            return True
        if diff.is_new or self.dialect.supports_modify:
            return False
        return not (diff.added or diff.dropped)

    def _query(self, table: str, plan: QueryPlan | None = None) -> Query:
        query = Query(self.dialect, table, self.connection)
        if plan is not None:
            query.plan = plan
        return query

    def _run(self, query: Query) -> CompiledSQL:
        compiled = query.build()
        self.statements.append(compiled)
        if not self.modify:
            logger.debug("Rendered without executing: %s", compiled.sql)
            return compiled
        if not query.execute():
            raise MigrationError(
                f"Statement failed: {compiled.sql}", migration=self.migration
            )
        return compiled


class Migration(ABC):
    """One forward/backward schema change unit.

    Attributes:
        name: Migration name; defaults to the class name.
    """

    name: str | None = None

    @abstractmethod
    def up(self, schema: SchemaEditor) -> None:
        """Apply the migration."""

    @abstractmethod
    def down(self, schema: SchemaEditor) -> None:
        """Reverse the migration."""

    def run(self, schema: SchemaEditor, up: bool = True) -> list[CompiledSQL]:
        """Run ``up`` or ``down`` and return the statements it produced."""
        if up:
            self.up(schema)
        else:
            self.down(schema)
        return schema.statements

    @property
    def migration_name(self) -> str:
        return self.name or type(self).__name__
