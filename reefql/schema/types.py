"""Engine-independent column types and their per-dialect rendering specs."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SemanticType(str, Enum):
    """Closed set of column types a migration may declare."""

    INTEGER = "integer"
    SMALLINT = "smallint"
    DECIMAL = "decimal"
    FLOAT = "float"
    BIT = "bit"
    CHARACTER = "character"
    VARCHAR = "varchar"
    TEXT = "text"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class TypeSpec:
    """How one dialect spells a :class:`SemanticType`.

    Attributes:
        keyword: SQL type keyword (e.g. ``'VARCHAR'``).
        default_length: Length used when a column leaves it unset (``-1``),
            or ``None`` when the type is rendered without parentheses.
    """

    keyword: str
    default_length: float | None = None


#: Sentinel length meaning "use the dialect default".
DEFAULT_LENGTH: float = -1


def format_length(length: float) -> str:
    """Render a column length for a type's parentheses.

    Integral lengths render as integers; a fractional part is read as the
    scale of a precision/scale pair, so ``10.2`` renders as ``10,2``.
    """
    if float(length).is_integer():
        return str(int(length))
    precision, scale = repr(float(length)).split(".", 1)
    return f"{precision},{scale}"
