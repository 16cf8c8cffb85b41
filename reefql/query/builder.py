"""Fluent query builder.

``Query`` accumulates intent into a :class:`~reefql.query.plan.QueryPlan`
and never performs I/O except in :meth:`Query.execute`.  Rendering is
delegated to the injected :class:`~reefql.compile.base.SQLDialect`;
execution is delegated to the injected connection.

Every builder method returns the same ``Query`` so calls can be chained::

    rows = (
        connection.table("articles")
        .select("id", "title")
        .where("author", 7)
        .or_(lambda q: q.where("views", ">", 100).and_("draft", False))
        .limit(10)
        .execute()
    )

Nested groups are built on a fresh child ``Query`` that shares the dialect,
table and connection but none of the parent's lists.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from reefql.compile.base import CompiledSQL, SQLDialect
from reefql.errors import ExecutionError, MalformedConstraintError
from reefql.query.plan import QueryKind, QueryPlan
from reefql.query.predicate import COMPARISON_OPERATORS, normalize_comparison
from reefql.schema.column import Column

if TYPE_CHECKING:
    from reefql.connections.base import DatabaseConnection

logger = logging.getLogger(__name__)

#: A callable that populates a child query with nested conditions.
GroupBuilder = Callable[["Query"], "Query | None"]


class Query:
    """Chainable builder for one statement against one table.

    Args:
        dialect: Dialect used by :meth:`build`.
        table: Target table name.
        connection: Optional connection used by :meth:`execute`.
    """

    def __init__(
        self,
        dialect: SQLDialect,
        table: str,
        connection: DatabaseConnection | None = None,
    ) -> None:
        self.dialect = dialect
        self.table = table
        self.connection = connection
        self.plan = QueryPlan()

    # ------------------------------------------------------------------
    # Statement kinds
    # ------------------------------------------------------------------

    def select(self, *columns: str | Sequence[str]) -> Query:
        """Start a SELECT of ``columns`` (all columns when none are given).

        Columns may be passed as separate arguments or as one list.
        """
        if len(columns) == 1 and not isinstance(columns[0], str):
            columns = tuple(columns[0])
        self.plan.kind = QueryKind.SELECT
        self.plan.columns = list(columns) or ["*"]
        return self

    def insert(self, data: Mapping[str, Any]) -> Query:
        """Start an INSERT of one row given as a column → value mapping."""
        return self._assign(QueryKind.INSERT, data)

    def update(self, changes: Mapping[str, Any]) -> Query:
        """Start an UPDATE setting each column of ``changes`` to its value."""
        return self._assign(QueryKind.UPDATE, changes)

    def delete(
        self,
        column: Any = None,
        operator: Any = None,
        value: Any = None,
    ) -> Query:
        """Start a DELETE, optionally with an initial AND constraint."""
        self.plan.kind = QueryKind.DELETE
        if column is not None:
            return self.where(column, operator, value, "AND")
        return self

    def create_table(self, columns: Iterable[Column]) -> Query:
        """Start a ``CREATE TABLE IF NOT EXISTS`` with ``columns``."""
        self.plan.kind = QueryKind.CREATE
        self.plan.columns = list(columns)
        return self

    def alter_table(
        self,
        added: Iterable[Column] = (),
        altered: Iterable[Column] = (),
        dropped: Iterable[Column] = (),
    ) -> Query:
        """Start an ``ALTER TABLE`` with ADD, MODIFY and DROP changes."""
        self.plan.kind = QueryKind.ALTER
        self.plan.added_columns = list(added)
        self.plan.altered_columns = list(altered)
        self.plan.dropped_columns = list(dropped)
        return self

    def drop_table(self) -> Query:
        """Start a ``DROP TABLE IF EXISTS``."""
        self.plan.kind = QueryKind.DROP
        return self

    def _assign(self, kind: QueryKind, data: Mapping[str, Any]) -> Query:
        self.plan.kind = kind
        self.plan.columns = list(data.keys())
        self.plan.values = list(data.values())
        return self

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(
        self,
        column: Any,
        operator: Any = None,
        value: Any = None,
        bool_op: str = "AND",
    ) -> Query:
        """Add a constraint joined to the previous one by ``bool_op``.

        Accepted forms:

        * ``where("name", "bob")`` – equality;
        * ``where("age", ">", 21)`` – comparison, when the second argument is
          one of ``<``, ``>``, ``<=``, ``>=``, ``=`` (otherwise it is taken
          as the value of an equality);
        * ``where([("age", ">", 21), ("name", "bob")])`` – a parenthesized
          group of comparison tuples;
        * ``where(lambda q: q.where(...).or_(...))`` – a parenthesized group
          built on a child query.
        """
        if callable(column):
            return self.where_group(column, bool_op)
        if isinstance(column, (list, tuple)):
            return self.where_all(column, bool_op)
        if isinstance(operator, str) and operator in COMPARISON_OPERATORS:
            return self.where_cmp(column, operator, value, bool_op)
        return self.where_eq(column, operator, bool_op)

    def and_(self, column: Any, operator: Any = None, value: Any = None) -> Query:
        return self.where(column, operator, value, "AND")

    def or_(self, column: Any, operator: Any = None, value: Any = None) -> Query:
        return self.where(column, operator, value, "OR")

    def where_eq(self, column: str, value: Any, bool_op: str = "AND") -> Query:
        """Add ``column = value``."""
        return self.where_cmp(column, "=", value, bool_op)

    def where_cmp(
        self,
        column: str,
        operator: str,
        value: Any,
        bool_op: str = "AND",
    ) -> Query:
        """Add ``column <operator> value``.

        Raises:
            MalformedConstraintError: If ``operator`` is not a comparison
                operator.
        """
        self.plan.predicate.add_condition(column, operator, value, bool_op)
        return self

    def where_all(
        self,
        comparisons: Iterable[Sequence[Any]],
        bool_op: str = "AND",
    ) -> Query:
        """Add a parenthesized AND-group of ``(column, [operator,] value)`` tuples.

        Raises:
            MalformedConstraintError: If a tuple has fewer than 2 or more
                than 3 elements, or names an unknown operator.
        """
        child = self._spawn()
        for comparison in comparisons:
            column, operator, value = normalize_comparison(comparison)
            child.where_cmp(column, operator, value)
        self.plan.predicate.add_group(child.plan.predicate, bool_op)
        return self

    def where_group(self, build: GroupBuilder, bool_op: str = "AND") -> Query:
        """Add a parenthesized group built by ``build`` on a child query."""
        child = self._spawn()
        result = build(child)
        if result is None:
            result = child
        if not isinstance(result, Query):
            raise MalformedConstraintError(
                "A nested constraint builder must return a Query.", constraint=result
            )
        self.plan.predicate.add_group(result.plan.predicate, bool_op)
        return self

    # ------------------------------------------------------------------
    # LIMIT
    # ------------------------------------------------------------------

    def limit(self, count: int) -> Query:
        """Cap the number of affected or returned rows."""
        self.plan.limit = count
        return self

    # ------------------------------------------------------------------
    # Build / execute
    # ------------------------------------------------------------------

    @property
    def kind(self) -> QueryKind:
        return self.plan.kind

    @property
    def params(self) -> list[Any]:
        """Bound values in placeholder order."""
        return self.plan.parameters

    def build(self) -> CompiledSQL:
        """Render the query with the dialect.

        Raises:
            CompilationError: If the plan cannot be rendered.
            InvalidDataTypeError: If a column type is not mapped by the dialect.
        """
        return CompiledSQL(
            sql=self.dialect.compose(self.plan, self.table),
            params=self.plan.parameters,
            dialect=self.dialect.dialect_name,
        )

    def execute(self) -> Any:
        """Build the query and run it on the connection.

        Returns:
            A list of rows for SELECT, otherwise the connection's success flag.

        Raises:
            ExecutionError: If the query has no connection.
        """
        if self.connection is None:
            raise ExecutionError(
                f"Cannot execute a {self.kind.value} query on '{self.table}' "
                "without a connection."
            )
        compiled = self.build()
        logger.debug("Executing %s (%d params)", compiled.sql, len(compiled.params))
        match self.kind:
            case QueryKind.SELECT:
                return self.connection.run_select(compiled.sql, compiled.params)
            case _:
                return self.connection.run_statement(compiled.sql, compiled.params)

    def _spawn(self) -> Query:
        return Query(self.dialect, self.table, self.connection)

    def __str__(self) -> str:
        return self.build().sql

    def __repr__(self) -> str:
        return f"Query(table={self.table!r}, kind={self.kind.value!r})"
