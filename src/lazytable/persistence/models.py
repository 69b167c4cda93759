"""
Physical layout for every lazytable table: `id` + `title`, nothing else.

The logical schema of a Table is *not* reflected into columns here.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text
from sqlalchemy.schema import CreateTable

ID_COLUMN = "id"


def physical_table(name: str) -> Table:
    """Build the fixed two-column table named `name` (own MetaData each)."""
    return Table(
        name,
        MetaData(),
        Column(ID_COLUMN, Integer, primary_key=True, autoincrement=True),
        Column("title", Text, nullable=True),
        sqlite_autoincrement=True,
    )


def create_statement(table: Table) -> CreateTable:
    """`CREATE TABLE IF NOT EXISTS` for `table`."""
    return CreateTable(table, if_not_exists=True)


def data_columns(table: Table) -> tuple[str, ...]:
    """Writable column names, i.e. everything except the primary key."""
    return tuple(c.name for c in table.columns if c.name != ID_COLUMN)
