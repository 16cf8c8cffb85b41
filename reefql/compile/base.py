"""Dialect abstractions: CompiledSQL and the SQLDialect base class.

The Template Method pattern (GoF) is used:
- ``SQLDialect`` owns the composition algorithm for every statement kind:
  fragment order, list joining, WHERE tree rendering and the trailing ``;``.
- ``SQLiteDialect``, ``PostgresDialect`` and ``MySQLDialect`` override the
  dialect-specific steps (identifier quotes, placeholder style, type map,
  modifier spelling, ALTER clause keywords).

Dialects are stateless; the table a statement targets is passed to every
composer, so one instance can serve any number of tables.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from reefql.errors import CompilationError, InvalidDataTypeError
from reefql.query.plan import QueryKind, QueryPlan
from reefql.query.predicate import ConditionGroup, PredicateNode, PredicateTree
from reefql.schema.column import Column
from reefql.schema.types import SemanticType, TypeSpec, format_length


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled, ``;``-terminated SQL string with positional
            placeholders.
        params: Values for the placeholders, in placeholder order.
        dialect: Name of the dialect the statement was rendered for.
    """

    sql: str
    params: list[Any] = field(default_factory=list)
    dialect: str = ""

    def __str__(self) -> str:
        return self.sql


class SQLDialect(ABC):
    """Abstract base for dialect-specific SQL renderers.

    Subclasses set the class attributes below and implement the abstract
    hooks; the composition algorithm itself is shared.

    Attributes:
        identifier_quotes: One character used on both sides of an identifier,
            or two characters for distinct opening and closing quotes.
        type_map: Keyword and default length for every supported type.
        modifier_aliases: Dialect spelling of portable column modifiers.  An
            empty alias removes the modifier.
        qualify_assignments: Prefix ``SET`` targets with the table name.
        supports_delete_limit: Allow ``LIMIT`` on ``DELETE``.
        supports_modify: Whether existing columns can be re-declared in place.
    """

    identifier_quotes: ClassVar[str] = '"'
    type_map: ClassVar[dict[SemanticType, TypeSpec]] = {}
    modifier_aliases: ClassVar[dict[str, str]] = {}
    qualify_assignments: ClassVar[bool] = False
    supports_delete_limit: ClassVar[bool] = False
    supports_modify: ClassVar[bool] = True

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'sqlite'``)."""

    @abstractmethod
    def param_placeholder(self) -> str:
        """Return the positional placeholder understood by the driver."""

    # ------------------------------------------------------------------
    # Identifiers and lists
    # ------------------------------------------------------------------

    def quote_identifier(self, value: str, table: str | None = None) -> str:
        """Wrap ``value`` in identifier quotes.

        ``*`` is never quoted.  When ``table`` is given the identifier is
        prefixed with the quoted table name (``"table"."value"``).
        """
        if value != "*":
            opening = self.identifier_quotes[0]
            closing = self.identifier_quotes[-1]
            escaped = value.replace(closing, closing * 2)
            value = f"{opening}{escaped}{closing}"
        if table:
            return f"{self.quote_identifier(table)}.{value}"
        return value

    @staticmethod
    def render_list(values: Iterable[str], parentheses: bool = True) -> str:
        sql = ",".join(values)
        return f"({sql})" if parentheses else sql

    def render_column_list(
        self,
        columns: Iterable[str],
        table: str | None = None,
        parentheses: bool = False,
    ) -> str:
        """Render quoted, comma-separated column names."""
        return self.render_list(
            (self.quote_identifier(c, table) for c in columns), parentheses
        )

    # ------------------------------------------------------------------
    # Column definitions
    # ------------------------------------------------------------------

    def resolve_type(self, column: Column) -> str:
        """Return the rendered type of ``column`` (e.g. ``VARCHAR(255)``).

        Raises:
            InvalidDataTypeError: If the column's type is not in ``type_map``.
        """
        spec = self.type_map.get(column.type) if column.type is not None else None
        if spec is None:
            raise InvalidDataTypeError(column.type, self.dialect_name, column.name)
        length = column.length if column.length >= 0 else spec.default_length
        if length is None:
            return spec.keyword
        return f"{spec.keyword}({format_length(length)})"

    def render_modifiers(self, modifiers: Iterable[str]) -> list[str]:
        rendered = (self.modifier_aliases.get(m.upper(), m) for m in modifiers)
        return [m for m in rendered if m]

    def render_typed_column(self, column: Column) -> str:
        """Render ``"name" TYPE(length) MODIFIERS`` for one column."""
        parts = [self.quote_identifier(column.name), self.resolve_type(column)]
        parts.extend(self.render_modifiers(column.modifiers))
        return " ".join(parts)

    def render_primary_key(self, names: Sequence[str]) -> str:
        return f"PRIMARY KEY {self.render_column_list(names, parentheses=True)}"

    def render_typed_column_list(
        self,
        columns: Sequence[Column],
        with_keys: bool = True,
        parentheses: bool = True,
    ) -> str:
        """Render column definitions, with a trailing ``PRIMARY KEY`` clause.

        Every type is resolved before any definition is assembled, so an
        unmapped type fails without producing partial SQL.
        """
        for column in columns:
            self.resolve_type(column)
        definitions = [self.render_typed_column(c) for c in columns]
        keys = [c.name for c in columns if c.is_primary]
        if with_keys and keys:
            definitions.append(self.render_primary_key(keys))
        return self.render_list(definitions, parentheses)

    # ------------------------------------------------------------------
    # WHERE / LIMIT
    # ------------------------------------------------------------------

    def render_where(
        self,
        tree: PredicateTree,
        table: str | None = None,
        with_keyword: bool = True,
    ) -> str | None:
        """Render the predicate tree, or ``None`` when it is empty."""
        if not tree.nodes:
            return None
        sql = self._render_nodes(tree.nodes, table)
        return f"WHERE {sql}" if with_keyword else sql

    def _render_nodes(self, nodes: Sequence[PredicateNode], table: str | None) -> str:
        parts: list[str] = []
        for idx, node in enumerate(nodes):
            prefix = f"{node.bool_op} " if idx > 0 else ""
            if isinstance(node, ConditionGroup):
                parts.append(f"{prefix}({self._render_nodes(node.children, table)})")
            else:
                column = self.quote_identifier(node.column, table)
                parts.append(f"{prefix}{column}{node.operator}{self.param_placeholder()}")
        return " ".join(parts)

    @staticmethod
    def render_limit(limit: int | None) -> str | None:
        return f"LIMIT {int(limit)}" if limit is not None else None

    # ------------------------------------------------------------------
    # Statement composition
    # ------------------------------------------------------------------

    @staticmethod
    def compose_fragments(*fragments: str | None) -> str:
        """Join non-empty fragments with single spaces and terminate with ``;``."""
        return " ".join(f for f in fragments if f) + ";"

    def compose(self, plan: QueryPlan, table: str) -> str:
        """Render ``plan`` against ``table``, dispatching on its kind."""
        match plan.kind:
            case QueryKind.SELECT:
                return self.compose_select(plan, table)
            case QueryKind.INSERT:
                return self.compose_insert(plan, table)
            case QueryKind.UPDATE:
                return self.compose_update(plan, table)
            case QueryKind.DELETE:
                return self.compose_delete(plan, table)
            case QueryKind.CREATE:
                return self.compose_create(plan, table)
            case QueryKind.ALTER:
                return self.compose_alter_table(plan, table)
            case QueryKind.DROP:
                return self.compose_drop_table(plan, table)
        raise CompilationError(f"Unknown query kind: {plan.kind!r}")

    def compose_select(self, plan: QueryPlan, table: str) -> str:
        columns = plan.columns or ["*"]
        return self.compose_fragments(
            f"SELECT {self.render_column_list(columns, table)}",
            f"FROM {self.quote_identifier(table)}",
            self.render_where(plan.predicate, table),
            self.render_limit(plan.limit),
        )

    def compose_insert(self, plan: QueryPlan, table: str) -> str:
        if not plan.columns:
            raise CompilationError("INSERT requires at least one column.", clause="INSERT")
        placeholders = [self.param_placeholder()] * len(plan.columns)
        return self.compose_fragments(
            f"INSERT INTO {self.quote_identifier(table)}",
            self.render_column_list(plan.columns, parentheses=True),
            f"VALUES {self.render_list(placeholders)}",
        )

    def compose_update(self, plan: QueryPlan, table: str) -> str:
        if not plan.columns:
            raise CompilationError("UPDATE requires at least one column.", clause="UPDATE")
        target = table if self.qualify_assignments else None
        assignments = (
            f"{self.quote_identifier(c, target)}={self.param_placeholder()}"
            for c in plan.columns
        )
        return self.compose_fragments(
            f"UPDATE {self.quote_identifier(table)}",
            f"SET {self.render_list(assignments, parentheses=False)}",
            self.render_where(plan.predicate, table),
        )

    def compose_delete(self, plan: QueryPlan, table: str) -> str:
        if plan.limit is not None and not self.supports_delete_limit:
            raise CompilationError(
                f"Dialect '{self.dialect_name}' does not support LIMIT on DELETE.",
                clause="DELETE",
            )
        return self.compose_fragments(
            f"DELETE FROM {self.quote_identifier(table)}",
            self.render_where(plan.predicate, table),
            self.render_limit(plan.limit),
        )

    def compose_create(self, plan: QueryPlan, table: str) -> str:
        if not plan.columns:
            raise CompilationError("CREATE TABLE requires at least one column.", clause="CREATE")
        return self.compose_fragments(
            f"CREATE TABLE IF NOT EXISTS {self.quote_identifier(table)}",
            self.render_typed_column_list(plan.columns),
        )

    def compose_alter_table(self, plan: QueryPlan, table: str) -> str:
        clauses = self.render_alter_clauses(plan)
        if not clauses:
            raise CompilationError(
                f"ALTER TABLE on '{table}' has no changes to render.", clause="ALTER"
            )
        return self.compose_fragments(
            f"ALTER TABLE {self.quote_identifier(table)}",
            self.render_list(clauses, parentheses=False),
        )

    def compose_drop_table(self, plan: QueryPlan, table: str) -> str:
        return self.compose_fragments(f"DROP TABLE IF EXISTS {self.quote_identifier(table)}")

    # ------------------------------------------------------------------
    # ALTER TABLE clauses (dialect hooks)
    # ------------------------------------------------------------------

    def split_alter(self, plan: QueryPlan) -> list[QueryPlan]:
        """Return the ALTER plans to execute, in order, for ``plan``.

        Dialects that accept every change in one ``ALTER TABLE`` return
        ``[plan]``; others return one plan per statement they can render.
        """
        return [plan]

    def render_alter_clauses(self, plan: QueryPlan) -> list[str]:
        """Return ``ADD`` / ``MODIFY`` / ``DROP`` clauses in that order."""
        altered = plan.altered_columns if self.supports_modify else []
        for column in [*plan.added_columns, *altered]:
            self.resolve_type(column)

        clauses = [self.alter_add(c) for c in plan.added_columns]
        keys = [c.name for c in plan.added_columns if c.is_primary]
        if keys:
            clauses.append(f"ADD {self.render_primary_key(keys)}")
        clauses.extend(self.alter_modify(c) for c in altered)
        clauses.extend(self.alter_drop(c) for c in plan.dropped_columns)
        return clauses

    def alter_add(self, column: Column) -> str:
        return f"ADD {self.render_typed_column(column)}"

    def alter_modify(self, column: Column) -> str:
        return f"MODIFY {self.render_typed_column(column)}"

    def alter_drop(self, column: Column) -> str:
        return f"DROP {self.quote_identifier(column.name)}"
