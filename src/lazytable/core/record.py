"""
Record kernel – one row's round trip between memory and the store.

* `set_value` stages a value locally (dirty, nothing written)
* `save`      writes the staged value; the store assigns an id if needed
* `load`      fetches the confirmed row unless already loaded

Records are only ever built by their Table (see `Table._get`), which keeps
at most one per id.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, PrivateAttr

from ..events import emit_insert, emit_update
from ..persistence.models import ID_COLUMN

if TYPE_CHECKING:
    from .table import Table

logger = logging.getLogger(__name__)


class Record(BaseModel):
    """In-memory representative of one row of its Table."""

    id: Optional[str] = None
    value: Optional[Dict[str, Any]] = None
    loaded: bool = False

    _table: Any = PrivateAttr()
    _key: str = PrivateAttr()  # identity-map key; differs from id until first save

    def __init__(self, table: "Table", key: str, rec_id: Optional[str] = None):
        super().__init__(id=rec_id)
        self._table = table
        self._key = key

    @property
    def table(self) -> "Table":
        return self._table

    @property
    def dirty(self) -> bool:
        return self.value is not None and not self.loaded

    # local staging
    def set_value(self, value: Dict[str, Any]) -> None:
        self.value = dict(value)
        self.loaded = False

    # hydration
    async def load(self) -> "Record":
        if self.loaded or self.id is None:
            return self

        table = self._table
        await table.ensure_table()
        row = await table.db.fetch_by_id(table.physical, self.id)
        if row is not None:
            self.id = str(row.pop(ID_COLUMN))
            table._rekey(self)
            self.value = {**(self.value or {}), **row}
            self.loaded = True
        return self

    # persistence
    async def save(self) -> "Record":
        table = self._table
        await table.ensure_table()

        value = dict(self.value or {})
        table.validate(value)

        row = {k: v for k, v in value.items() if k in table.columns}
        dropped = sorted(set(value) - set(row))
        if dropped:
            logger.debug("%s: no column for %s, not persisted", table.name, dropped)

        if self.id is None:
            new_id = await table.db.insert(table.physical, row)
            inserted = True
        elif await table.db.update(table.physical, self.id, row):
            new_id = self.id
            inserted = False
        else:
            new_id = await table.db.insert(table.physical, {**row, ID_COLUMN: self.id})
            inserted = True

        self.id = str(new_id)
        table._rekey(self)
        self.value = value
        self.loaded = True

        if inserted:
            emit_insert(self)
        else:
            emit_update(self)
        return self
