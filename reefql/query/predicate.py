"""WHERE predicate tree.

A tree is an ordered list of nodes.  A node is either a :class:`Condition`
leaf (``column <op> ?``) or a :class:`ConditionGroup` holding its own ordered
list of nodes, rendered inside parentheses.  Every node carries the boolean
operator that joins it to the node before it; the first node of any list
never renders its operator.

The bound values live beside the nodes in :attr:`PredicateTree.params`, one
per leaf, in depth-first left-to-right order, which is exactly the order the
``?`` placeholders are rendered in.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

from reefql.errors import MalformedConstraintError

BoolOp = Literal["AND", "OR"]
ComparisonOp = Literal["<", ">", "<=", ">=", "="]

#: Operators accepted by ``where()`` in the ``(column, operator, value)`` form.
COMPARISON_OPERATORS: frozenset[str] = frozenset({"<", ">", "<=", ">=", "="})

BOOL_OPERATORS: frozenset[str] = frozenset({"AND", "OR"})


@dataclass(frozen=True)
class Condition:
    """A single ``column <operator> ?`` comparison."""

    column: str
    operator: ComparisonOp = "="
    bool_op: BoolOp = "AND"


@dataclass(frozen=True)
class ConditionGroup:
    """A parenthesized sub-expression."""

    children: tuple[PredicateNode, ...]
    bool_op: BoolOp = "AND"


PredicateNode = Union[Condition, ConditionGroup]


@dataclass
class PredicateTree:
    """Root list of predicate nodes plus their bound values."""

    nodes: list[PredicateNode] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.nodes)

    def add_condition(
        self,
        column: str,
        operator: str,
        value: Any,
        bool_op: str = "AND",
    ) -> Condition:
        """Append a leaf and its bound value."""
        if operator not in COMPARISON_OPERATORS:
            raise MalformedConstraintError(
                f"Unsupported comparison operator: {operator!r}. "
                f"Expected one of {sorted(COMPARISON_OPERATORS)}.",
                constraint=operator,
            )
        condition = Condition(column, operator, _check_bool_op(bool_op))  # type: ignore[arg-type]
        self.nodes.append(condition)
        self.params.append(value)
        return condition

    def add_group(self, other: PredicateTree, bool_op: str = "AND") -> ConditionGroup | None:
        """Append ``other`` as a single parenthesized node.

        The nodes and values are copied; ``other`` is left untouched.  An
        empty ``other`` adds nothing.
        """
        if not other.nodes:
            return None
        group = ConditionGroup(tuple(other.nodes), _check_bool_op(bool_op))
        self.nodes.append(group)
        self.params.extend(other.params)
        return group

    def copy(self) -> PredicateTree:
        return PredicateTree(list(self.nodes), list(self.params))

    @property
    def placeholder_count(self) -> int:
        """Number of leaves (and therefore placeholders) in the tree."""
        return _count_leaves(self.nodes)


def normalize_comparison(constraint: Any) -> tuple[str, str, Any]:
    """Expand a 2- or 3-element comparison tuple to ``(column, op, value)``.

    ``(col, value)`` is shorthand for ``(col, "=", value)``.

    Raises:
        MalformedConstraintError: If the tuple has fewer than 2 or more than
            3 elements.
    """
    try:
        if isinstance(constraint, (str, bytes)):
            raise TypeError
        size = len(constraint)
    except TypeError:
        raise MalformedConstraintError(
            f"Comparison must be a 2- or 3-element sequence, got {constraint!r}.",
            constraint=constraint,
        ) from None
    if size == 2:
        column, value = constraint
        return column, "=", value
    if size == 3:
        column, operator, value = constraint
        return column, operator, value
    raise MalformedConstraintError(
        f"Invalid comparison element count {size} (must be 2-3).",
        constraint=constraint,
    )


def _check_bool_op(bool_op: str) -> BoolOp:
    op = bool_op.upper()
    if op not in BOOL_OPERATORS:
        raise MalformedConstraintError(
            f"Unsupported boolean operator: {bool_op!r}.", constraint=bool_op
        )
    return op  # type: ignore[return-value]


def _count_leaves(nodes: list[PredicateNode] | tuple[PredicateNode, ...]) -> int:
    count = 0
    for node in nodes:
        if isinstance(node, ConditionGroup):
            count += _count_leaves(node.children)
        else:
            count += 1
    return count
