"""Minimal active-record layer on top of the query builder.

Example::

    class Article(Model):
        pass                      # table "article", primary key "id"

    Model.connection = SQLiteConnection("feed.db")
    article = Article(title="Hello", content="...").save()
    article.title = "Hello again"
    article.save()
    Article.find(article.id)

When :attr:`Model.schema` is set and declares the model's table, attribute
names are checked against the declared columns.
"""
from __future__ import annotations

from typing import Any, ClassVar

from reefql.connections.base import DatabaseConnection, Row
from reefql.errors import ExecutionError
from reefql.query.builder import Query
from reefql.schema.context import SchemaContext
from reefql.utils import to_snake_case


class Model:
    """Base class for table-backed records.

    Attributes:
        __table__: Table name; defaults to the snake_case class name.
        primary_key: Name of the primary key column.
        connection: Connection shared by all models unless overridden.
        schema: Optional schema context used to validate attribute names.
    """

    __table__: ClassVar[str | None] = None
    primary_key: ClassVar[str] = "id"
    connection: ClassVar[DatabaseConnection | None] = None
    schema: ClassVar[SchemaContext | None] = None

    def __init__(self, **attributes: Any) -> None:
        object.__setattr__(self, "_attributes", {})
        object.__setattr__(self, "_dirty", False)
        object.__setattr__(self, "_attached", False)
        self.assign(**attributes)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    @classmethod
    def table_name(cls) -> str:
        return cls.__table__ or to_snake_case(cls.__name__)

    def assign(self, **attributes: Any) -> None:
        """Merge ``attributes`` into the model and mark it dirty."""
        for name in attributes:
            self._check_column(name)
        self._attributes.update(attributes)
        object.__setattr__(self, "_dirty", True)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._attributes[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} has no attribute {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self._check_column(name)
        self._attributes[name] = value
        object.__setattr__(self, "_dirty", True)

    @classmethod
    def _check_column(cls, name: str) -> None:
        if cls.schema is None or cls.table_name() not in cls.schema:
            return
        if cls.schema.get(cls.table_name()).get_column(name) is None:
            raise AttributeError(
                f"Table '{cls.table_name()}' has no column '{name}'."
            )

    @property
    def is_dirty(self) -> bool:
        """Whether the model differs from its database record."""
        return self._dirty

    @property
    def is_attached(self) -> bool:
        """Whether the model was loaded from or saved to the database."""
        return self._attached

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def _connection(cls) -> DatabaseConnection:
        if cls.connection is None:
            raise ExecutionError(f"{cls.__name__} has no connection.")
        return cls.connection

    @classmethod
    def query(cls) -> Query:
        """Start a query against the model's table."""
        return cls._connection().table(cls.table_name())

    def save(self) -> Model:
        """Insert the model, or update it by primary key once attached."""
        key = self._attributes.get(self.primary_key)
        if self._attached and key is not None:
            changes = {k: v for k, v in self._attributes.items() if k != self.primary_key}
            if changes:
                self.query().update(changes).where(self.primary_key, key).execute()
        else:
            self.query().insert(self._attributes).execute()
            new_id = self._connection().last_insert_id
            if key is None and new_id is not None:
                self._attributes[self.primary_key] = new_id
        object.__setattr__(self, "_attached", True)
        object.__setattr__(self, "_dirty", False)
        return self

    def delete(self) -> None:
        """Delete the model's record by primary key."""
        key = self._attributes.get(self.primary_key)
        if key is None:
            raise ExecutionError(f"Cannot delete an unsaved {type(self).__name__}.")
        self.query().delete(self.primary_key, key).execute()
        object.__setattr__(self, "_attached", False)

    @classmethod
    def find(cls, key: Any) -> Model | None:
        """Return the record whose primary key is ``key``, or ``None``."""
        rows = cls.query().select().where(cls.primary_key, key).limit(1).execute()
        return cls._hydrate(rows[0]) if rows else None

    @classmethod
    def find_where(
        cls,
        column: Any,
        operator: Any = None,
        value: Any = None,
    ) -> list[Model]:
        """Return every record matching one ``where`` constraint."""
        rows = cls.query().select().where(column, operator, value).execute()
        return [cls._hydrate(row) for row in rows]

    @classmethod
    def _hydrate(cls, row: Row) -> Model:
        instance = cls(**row)
        object.__setattr__(instance, "_attached", True)
        object.__setattr__(instance, "_dirty", False)
        return instance

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"
