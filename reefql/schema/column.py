"""Pydantic model for a declared table column."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from reefql.schema.types import DEFAULT_LENGTH, SemanticType


class Column(BaseModel):
    """Declarative description of a single column.

    Attributes:
        name: Column name, unique within its table.
        type: Semantic type, or ``None`` for a stub that only records a drop.
        length: Type length/size; ``-1`` uses the dialect default.
        modifiers: Ordered SQL flags (e.g. ``'NOT NULL'``, ``'AUTO_INCREMENT'``).
        is_primary: Whether the column is part of the primary key.
        is_new: ``True`` until the column has been applied to the live schema.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    type: SemanticType | None = None
    length: float = DEFAULT_LENGTH
    modifiers: list[str] = Field(default_factory=list)
    is_primary: bool = False
    is_new: bool = True

    def resize(self, length: float) -> Column:
        """Set the column length and return the column for chaining."""
        self.length = length
        return self

    def modify(self, *modifiers: str) -> Column:
        """Append modifier flags and return the column for chaining."""
        self.modifiers.extend(modifiers)
        return self

    def not_null(self) -> Column:
        return self.modify("NOT NULL")
