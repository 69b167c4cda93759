"""
Thin async data-access layer around one SQLAlchemy `AsyncEngine`.
Every store call lives here; Table and Record never touch the engine.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import Table, insert, select, text, update
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql import Executable

from .models import ID_COLUMN

logger = logging.getLogger(__name__)


def _as_executable(statement: str | Executable) -> Executable:
    return text(statement) if isinstance(statement, str) else statement


def _pk(rec_id: Any) -> Any:
    """Integer-looking ids are bound as ints; anything else goes through as is."""
    if isinstance(rec_id, str) and rec_id.isdecimal():
        return int(rec_id)
    return rec_id


class Database:
    """Backing-store capability shared by every Table and Record built on it."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    # ---- statements -----------------------------------------------------
    async def execute(self, statement: str | Executable) -> None:
        """Run a non-query statement (DDL, bulk DML) in its own transaction."""
        logger.debug("execute: %s", statement)
        async with self.engine.begin() as conn:
            await conn.execute(_as_executable(statement))

    # ---- reads ----------------------------------------------------------
    async def fetch_all(
        self,
        statement: str | Executable,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Prepare and run a query; rows come back as plain dicts."""
        logger.debug("fetch_all: %s", statement)
        async with self.engine.connect() as conn:
            result = await conn.execute(_as_executable(statement), params or {})
            return [dict(row) for row in result.mappings()]

    async def fetch_one(
        self,
        statement: str | Executable,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        async with self.engine.connect() as conn:
            result = await conn.execute(_as_executable(statement), params or {})
            row = result.mappings().first()
            return dict(row) if row is not None else None

    async def fetch_by_id(self, table: Table, rec_id: Any) -> Optional[Dict[str, Any]]:
        """Return the row whose primary key is `rec_id`, or None."""
        q = select(table).where(table.c[ID_COLUMN] == _pk(rec_id)).limit(1)
        return await self.fetch_one(q)

    # ---- writes ---------------------------------------------------------
    async def insert(self, table: Table, values: Mapping[str, Any]) -> Any:
        """
        Insert one row and return its primary key.

        • `values` without `id` → the store autogenerates one
        • `values` with `id`    → that id is written explicitly
        """
        row_vals = dict(values)
        if ID_COLUMN in row_vals:
            row_vals[ID_COLUMN] = _pk(row_vals[ID_COLUMN])
        async with self.engine.begin() as conn:
            result = await conn.execute(insert(table).values(**row_vals))
            new_id = result.inserted_primary_key[0]
        logger.debug("insert into %s -> id=%s", table.name, new_id)
        return new_id

    async def update(self, table: Table, rec_id: Any, values: Mapping[str, Any]) -> int:
        """Update the row with primary key `rec_id`; returns affected row count."""
        q = update(table).where(table.c[ID_COLUMN] == _pk(rec_id))
        # an UPDATE needs at least one SET clause; touching the pk is a no-op
        q = q.values(**values) if values else q.values({ID_COLUMN: table.c[ID_COLUMN]})
        async with self.engine.begin() as conn:
            result = await conn.execute(q)
            return result.rowcount

    async def dispose(self) -> None:
        await self.engine.dispose()
