"""Schema context: the registry of declared tables for one migration run.

Packages the live-table and dropped-table mappings into a single object that
is handed to every migration step, so there is exactly one authoritative
:class:`~reefql.schema.table.Table` per name for the whole run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from reefql.schema.table import Table


@dataclass
class SchemaContext:
    """Mutable registry of declared tables.

    Attributes:
        tables: Live tables keyed by name.
        dropped: Tables marked for dropping, keyed by name.
    """

    tables: dict[str, Table] = field(default_factory=dict)
    dropped: dict[str, Table] = field(default_factory=dict)

    def get(self, name: str) -> Table:
        """Return the table named ``name``, creating it on first reference.

        A newly created table is flagged ``is_new``.  Referencing a table
        that was dropped earlier in the run starts a fresh declaration.
        """
        table = self.tables.get(name)
        if table is None:
            self.dropped.pop(name, None)
            table = self.tables[name] = Table(name=name, is_new=True)
        return table

    def with_table(self, name: str, fn: Callable[[Table], object]) -> Table:
        """Call ``fn`` with the table named ``name`` and return the table."""
        table = self.get(name)
        fn(table)
        return table

    def drop(self, name: str) -> Table:
        """Move ``name`` from the live registry to the dropped registry.

        When the table was never declared a stub records the drop intent.
        """
        table = self.tables.pop(name, None)
        if table is None:
            table = Table(name=name)
        self.dropped[name] = table
        return table

    def __contains__(self, name: object) -> bool:
        return name in self.tables

    @property
    def table_names(self) -> list[str]:
        """Returns all live table names."""
        return list(self.tables)
