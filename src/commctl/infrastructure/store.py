"""EntityStore — ordered persistent map over one ledger table.

A store binds a table to a pydantic model class and to the connection of
the surrounding transaction. It never opens or commits a transaction of
its own: atomicity comes from the caller's ``Marketplace.transaction()``
or ``Marketplace.snapshot()`` block.

Values go in and come out as fresh model instances, so nothing the caller
holds is shared with what the store persisted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, insert, select, update

if TYPE_CHECKING:
    from sqlalchemy import Connection, Table

M = TypeVar("M", bound=BaseModel)


class EntityStore(Generic[M]):
    """Ordered key-value map backed by *table*, keyed by its ``id`` column.

    Column names must match the model's field names one-to-one.
    """

    def __init__(self, conn: Connection, table: Table, model: type[M]) -> None:
        self._conn = conn
        self._table = table
        self._model = model

    @property
    def name(self) -> str:
        """The table (namespace) name."""
        return self._table.name

    def put(self, key: str, value: M) -> M | None:
        """Insert or overwrite *key*. Returns the previous value, if any.

        Raises:
            ValueError: If ``value.id`` does not match *key*.
        """
        value_id = getattr(value, "id", None)
        if value_id != key:
            msg = f"Key {key!r} does not match {self._model.__name__}.id {value_id!r}"
            raise ValueError(msg)

        previous = self.get(key)
        row = self._encode(value)
        if previous is None:
            self._conn.execute(insert(self._table).values(**row))
        else:
            self._conn.execute(
                update(self._table).where(self._table.c.id == key).values(**row)
            )
        return previous

    def get(self, key: str) -> M | None:
        """Return the value stored under *key*, or None."""
        row = self._conn.execute(select(self._table).where(self._table.c.id == key)).first()
        if row is None:
            return None
        return self._decode(row._mapping)

    def values(self, **filters: Any) -> list[M]:
        """Snapshot of all values in key order.

        Keyword *filters* restrict results to rows whose column equals the
        given value; None values are ignored.
        """
        stmt = select(self._table)
        for column, wanted in filters.items():
            if wanted is not None:
                stmt = stmt.where(self._table.c[column] == wanted)
        stmt = stmt.order_by(self._table.c.id)
        return [self._decode(row._mapping) for row in self._conn.execute(stmt)]

    def count(self) -> int:
        """Number of stored values."""
        return int(
            self._conn.execute(select(func.count()).select_from(self._table)).scalar_one()
        )

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        row = self._conn.execute(
            select(self._table.c.id).where(self._table.c.id == key)
        ).first()
        return row is not None

    # ------------------------------------------------------------------
    # Row codec
    # ------------------------------------------------------------------

    def _encode(self, value: M) -> dict[str, Any]:
        return value.model_dump(mode="json")

    def _decode(self, mapping: Any) -> M:
        return self._model.model_validate(dict(mapping))
