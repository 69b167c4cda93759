"""
Table – identity-map owner for one named collection.

* `_get` guarantees at most one Record per id for the Table's lifetime
* the physical table is created lazily, exactly once, on first store access
* create / insert / insert_many / find_by_id / find_all are the whole API
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy import select

from ..persistence.models import ID_COLUMN, create_statement, data_columns, physical_table
from ..persistence.store import Database
from .record import Record
from .schema import DEFAULT_JSON_SCHEMA, as_schema

logger = logging.getLogger(__name__)

T_Model = TypeVar("T_Model", bound=BaseModel)

ID_KEY = "$id"


class TableState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class Table(Generic[T_Model]):
    """Per-collection coordinator between the identity-map and the store."""

    def __init__(self, db: Database, name: str, schema: Any = None):
        self.db = db
        self.name = name
        self.schema = as_schema(schema)
        self.physical = physical_table(name)
        self.columns = data_columns(self.physical)

        self._records: Dict[str, Record] = {}
        self.state = TableState.UNINITIALIZED
        self._init_task: Optional[asyncio.Task] = None

    def __repr__(self) -> str:
        return f"<Table {self.name} records={len(self._records)} {self.state.value}>"

    # ---- schema ---------------------------------------------------------
    def json_schema(self) -> Dict[str, Any]:
        if self.schema is not None and hasattr(self.schema, "json_schema"):
            return self.schema.json_schema()
        return dict(DEFAULT_JSON_SCHEMA)

    def validate(self, value: Mapping[str, Any]) -> None:
        validator = getattr(self.schema, "validate", None)
        if validator is not None:
            validator(value)

    # ---- identity-map ---------------------------------------------------
    def _get(self, rec_id: Optional[str]) -> Record:
        if rec_id is None:
            key = f"new:{uuid.uuid4().hex}"
        else:
            rec_id = str(rec_id)
            # same form the store binds: "01" and "1" name one row
            if rec_id.isdecimal():
                rec_id = str(int(rec_id))
            key = rec_id

        record = self._records.get(key)
        if record is None:
            record = Record(self, key, rec_id)
            self._records[key] = record
        return record

    def _rekey(self, record: Record) -> None:
        """Move `record` under its (possibly just assigned) id."""
        if record._key == record.id:
            return
        previous = self._records.get(record.id)
        if previous is not None and previous is not record:
            logger.debug("%s: id %s now held by a saved record", self.name, record.id)
        self._records.pop(record._key, None)
        self._records[record.id] = record
        record._key = record.id

    # ---- lazy initialisation --------------------------------------------
    async def ensure_table(self) -> None:
        if self.state is TableState.READY:
            return
        if self._init_task is None:
            self.state = TableState.INITIALIZING
            self._init_task = asyncio.ensure_future(self._create_table())
        await self._init_task

    async def _create_table(self) -> None:
        try:
            await self.db.execute(create_statement(self.physical))
        except Exception:
            # let the next caller retry
            self.state = TableState.UNINITIALIZED
            self._init_task = None
            raise
        self.state = TableState.READY
        logger.debug("table %s ready", self.name)

    # ---- records ----------------------------------------------------------
    def create(self, value: Mapping[str, Any] | BaseModel) -> Record:
        """Stage `value` on its Record without touching the store."""
        if isinstance(value, BaseModel):
            value = value.model_dump()
        value = dict(value)
        record = self._get(value.pop(ID_KEY, None))
        record.set_value(value)
        return record

    async def insert(self, value: Mapping[str, Any] | BaseModel) -> Record:
        return await self.create(value).save()

    async def insert_many(
        self,
        items: Iterable[Mapping[str, Any] | BaseModel],
        return_exceptions: bool = False,
    ) -> List[Record | BaseException]:
        """
        Insert every item concurrently and wait for all of them.

        No rollback: a failed item leaves the others persisted. The first
        failure is re-raised once everything has finished, unless
        `return_exceptions` is set, in which case it takes the failed item's
        place in the result list.
        """
        # TODO: a single multi-row INSERT instead of one statement per item
        results = await asyncio.gather(
            *(self.insert(item) for item in items), return_exceptions=True
        )
        if not return_exceptions:
            for result in results:
                if isinstance(result, BaseException):
                    raise result
        return results

    async def find_by_id(self, rec_id: str) -> Optional[Record]:
        record = await self._get(rec_id).load()
        if record.value is None:
            return None
        return record

    async def find_all(self) -> List[Record]:
        await self.ensure_table()
        rows = await self.db.fetch_all(select(self.physical))

        records = []
        for row in rows:
            record = self._get(str(row.pop(ID_COLUMN)))
            record.set_value(row)
            records.append(record)

        await asyncio.gather(*(record.load() for record in records))
        return records
