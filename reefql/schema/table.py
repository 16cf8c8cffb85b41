"""Pydantic model for a table declared by migrations.

A ``Table`` holds two views of its columns: the live ``columns`` (declared
and not dropped) and the ``dropped_columns`` recorded during the current
migration step.  A column name is present in at most one of them.  Columns
added during a step carry ``is_new=True`` until :meth:`Table.mark_applied`
is called after the step's SQL has been executed successfully.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from reefql.schema.column import Column
from reefql.schema.types import DEFAULT_LENGTH, SemanticType

#: Modifier understood by every dialect as "auto-incrementing key".
AUTO_INCREMENT = "AUTO_INCREMENT"


class Table(BaseModel):
    """Declared structure of one table.

    Attributes:
        name: Table name.
        is_new: ``True`` until the table has been created in the live schema.
        columns: Live columns keyed by name, in declaration order.
        dropped_columns: Columns dropped during the current step, keyed by name.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    is_new: bool = False
    columns: dict[str, Column] = Field(default_factory=dict)
    dropped_columns: dict[str, Column] = Field(default_factory=dict)

    # ------------------------------------------------------------------
    # Column declaration
    # ------------------------------------------------------------------

    def add_column(
        self,
        name: str,
        type: SemanticType,
        length: float = DEFAULT_LENGTH,
        modifiers: list[str] | None = None,
        primary: bool = False,
    ) -> Column:
        """Declare a column and return it.

        Re-declaring a live column replaces its definition but keeps it
        live, so the next diff reports it as altered rather than added.
        Re-declaring a column dropped earlier in the step cancels the drop.
        """
        existing = self.columns.get(name)
        self.dropped_columns.pop(name, None)
        column = Column(
            name=name,
            type=type,
            length=length,
            modifiers=list(modifiers or []),
            is_primary=primary,
            is_new=existing.is_new if existing is not None else True,
        )
        self.columns[name] = column
        return column

    def add_primary(self, name: str, auto_increment: bool = True) -> Column:
        """Declare an integer primary key, auto-incremented by default."""
        return self.add_column(
            name,
            SemanticType.INTEGER,
            modifiers=[AUTO_INCREMENT] if auto_increment else [],
            primary=True,
        )

    def add_integer(self, name: str) -> Column:
        return self.add_column(name, SemanticType.INTEGER)

    def add_small_integer(self, name: str) -> Column:
        return self.add_column(name, SemanticType.SMALLINT)

    def add_decimal(self, name: str, length: float = DEFAULT_LENGTH) -> Column:
        """Declare a fixed-point column; ``length=10.2`` means ``DECIMAL(10,2)``."""
        return self.add_column(name, SemanticType.DECIMAL, length)

    def add_float(self, name: str) -> Column:
        return self.add_column(name, SemanticType.FLOAT)

    def add_bit(self, name: str, length: float = DEFAULT_LENGTH) -> Column:
        return self.add_column(name, SemanticType.BIT, length)

    def add_char(self, name: str, length: float = DEFAULT_LENGTH) -> Column:
        return self.add_column(name, SemanticType.CHARACTER, length)

    def add_string(self, name: str, length: float = DEFAULT_LENGTH) -> Column:
        """Declare a ``VARCHAR`` column."""
        return self.add_column(name, SemanticType.VARCHAR, length)

    def add_text(self, name: str) -> Column:
        return self.add_column(name, SemanticType.TEXT)

    def add_date(self, name: str) -> Column:
        return self.add_column(name, SemanticType.DATE)

    def add_time(self, name: str) -> Column:
        return self.add_column(name, SemanticType.TIME)

    def add_timestamp(self, name: str) -> Column:
        return self.add_column(name, SemanticType.TIMESTAMP)

    def add_boolean(self, name: str) -> Column:
        return self.add_column(name, SemanticType.BOOLEAN)

    # ------------------------------------------------------------------
    # Lookup / removal
    # ------------------------------------------------------------------

    def get_column(self, name: str) -> Column | None:
        """Returns the live column named ``name``, or ``None``."""
        return self.columns.get(name)

    def drop_column(self, name: str) -> None:
        """Record ``name`` as dropped.

        A column the table never declared is still recorded (as a stub with
        no type) so that the drop reaches the live schema.
        """
        column = self.columns.pop(name, None)
        if column is None:
            column = Column(name=name, is_new=False)
        self.dropped_columns[name] = column

    @property
    def column_names(self) -> list[str]:
        """Returns all live column names for this table."""
        return list(self.columns)

    @property
    def primary_keys(self) -> list[str]:
        return [c.name for c in self.columns.values() if c.is_primary]

    # ------------------------------------------------------------------
    # Migration bookkeeping
    # ------------------------------------------------------------------

    def mark_applied(self) -> None:
        """Record that the declared structure now matches the live schema."""
        self.is_new = False
        for column in self.columns.values():
            column.is_new = False
        self.dropped_columns.clear()
