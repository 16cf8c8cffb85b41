"""Schema diffing: declared table structure → column change-sets.

``diff_table`` is pure.  It never clears ``is_new`` flags or empties the
drop list; that happens in :meth:`~reefql.schema.table.Table.mark_applied`
once the rendered statement has been executed.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from reefql.schema.column import Column
from reefql.schema.table import Table


@dataclass(frozen=True)
class TableDiff:
    """Column-level changes needed to bring one table to its declared state.

    Attributes:
        table: Name of the table.
        is_new: ``True`` when the table must be created rather than altered.
        added: Columns not yet present in the live schema.
        altered: Live columns to re-declare (``MODIFY``).  Unchanged columns
            are included; no-op detection is not performed.
        dropped: Columns to remove.
    """

    table: str
    is_new: bool
    added: list[Column] = field(default_factory=list)
    altered: list[Column] = field(default_factory=list)
    dropped: list[Column] = field(default_factory=list)

    @property
    def columns(self) -> list[Column]:
        """Every column of a new table, in declaration order."""
        return [*self.added, *self.altered]

    @property
    def is_empty(self) -> bool:
        """``True`` when there is no statement to render."""
        if self.is_new:
            return not self.columns
        return not (self.added or self.altered or self.dropped)


def diff_table(table: Table) -> TableDiff:
    """Compute the :class:`TableDiff` for ``table``."""
    added: list[Column] = []
    altered: list[Column] = []
    for column in table.columns.values():
        (added if column.is_new else altered).append(column)
    return TableDiff(
        table=table.name,
        is_new=table.is_new,
        added=added,
        altered=altered,
        dropped=list(table.dropped_columns.values()),
    )
