"""reefQL query layer: predicate trees and query plans.

The fluent builder lives in :mod:`reefql.query.builder`; it is not imported
here because the dialect layer depends on this package.
"""
from reefql.query.plan import QueryKind, QueryPlan
from reefql.query.predicate import (
    COMPARISON_OPERATORS,
    Condition,
    ConditionGroup,
    PredicateTree,
)

__all__ = [
    "COMPARISON_OPERATORS",
    "Condition",
    "ConditionGroup",
    "PredicateTree",
    "QueryKind",
    "QueryPlan",
]
