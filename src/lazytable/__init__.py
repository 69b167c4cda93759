"""
Public surface for lazytable.
Importing this module does **not** touch the database; tables are created
lazily on first use.
"""

from .bootstrap import init_lazytable
from .core.record import Record
from .core.schema import Schema
from .core.table import Table, TableState
from .events import on
from .persistence.store import Database
from .runtime import LazyTable, LazyTableError, NotConnectedError

__all__ = [
    "Database",
    "LazyTable",
    "LazyTableError",
    "NotConnectedError",
    "Record",
    "Schema",
    "Table",
    "TableState",
    "init_lazytable",
    "on",
]
