"""
lazytable.runtime  ──  A thin façade so callers don't juggle engine,
Database and Table objects across modules.

Usage pattern in user code
--------------------------
    from lazytable import LazyTable

    async with LazyTable.connect("sqlite+aiosqlite:///app.db") as orm:
        stories = orm.table("stories", Story)
        story = await stories.insert({"title": "Hello"})
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .bootstrap import init_lazytable
from .config import Settings
from .core.table import Table
from .persistence.store import Database


class LazyTableError(Exception):
    """Base class for errors raised by lazytable itself."""


class NotConnectedError(LazyTableError):
    pass


class LazyTable:
    """Owns one Database and at most one Table per name."""

    def __init__(self, db: Database):
        self._db: Optional[Database] = db
        self._tables: Dict[str, Table] = {}

    # ---------- construction ----------
    @classmethod
    def connect(
        cls, database_url: Optional[str] = None, *, settings: Optional[Settings] = None
    ) -> "LazyTable":
        return cls(init_lazytable(database_url, settings=settings))

    # ---------- convenience helpers ----------
    @property
    def db(self) -> Database:
        if self._db is None:
            raise NotConnectedError("LazyTable is closed")
        return self._db

    def table(self, name: str, schema: Any = None) -> Table:
        """Return the Table for `name`, creating it on first request."""
        table = self._tables.get(name)
        if table is None:
            table = self._tables[name] = Table(self.db, name, schema)
        return table

    async def close(self) -> None:
        if self._db is not None:
            await self._db.dispose()
            self._db = None

    async def __aenter__(self) -> "LazyTable":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
