"""Query description consumed by the dialect renderer.

A ``QueryPlan`` is the structural description accumulated by
:class:`~reefql.query.builder.Query`; dialects turn it into SQL text without
looking at the builder.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from reefql.query.predicate import PredicateTree
from reefql.schema.column import Column


class QueryKind(str, Enum):
    """Statement kinds a plan can describe."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    ALTER = "alter"
    DROP = "drop"

    @property
    def is_read(self) -> bool:
        return self is QueryKind.SELECT


@dataclass
class QueryPlan:
    """Mutable description of one statement.

    Attributes:
        kind: Statement kind.
        columns: Selected columns (SELECT), target columns (INSERT/UPDATE),
            or column definitions (CREATE).
        values: Bound values for INSERT/UPDATE, parallel to ``columns``.
        added_columns: ALTER ``ADD`` definitions.
        altered_columns: ALTER ``MODIFY`` definitions.
        dropped_columns: ALTER ``DROP`` targets.
        predicate: WHERE tree and its bound values.
        limit: Optional result cap.
    """

    kind: QueryKind = QueryKind.SELECT
    columns: list[Any] = field(default_factory=lambda: ["*"])
    values: list[Any] = field(default_factory=list)
    added_columns: list[Column] = field(default_factory=list)
    altered_columns: list[Column] = field(default_factory=list)
    dropped_columns: list[Column] = field(default_factory=list)
    predicate: PredicateTree = field(default_factory=PredicateTree)
    limit: int | None = None

    @property
    def parameters(self) -> list[Any]:
        """All bound values in placeholder order (``SET``/``VALUES`` first)."""
        return [*self.values, *self.predicate.params]
