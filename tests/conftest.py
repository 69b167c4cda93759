"""
Shared fixtures: a file-backed SQLite Database per test, plus a recording
variant that remembers every non-query statement it was asked to run.
"""

from pathlib import Path

import pytest
import pytest_asyncio

from lazytable import Database, Table
from lazytable.bootstrap import create_engine
from lazytable.events import clear_handlers


class RecordingDatabase(Database):
    """Database that logs each `execute` call and can be told to fail it."""

    def __init__(self, engine):
        super().__init__(engine)
        self.statements = []
        self.fail_next_execute = False

    async def execute(self, statement):
        self.statements.append(str(statement))
        if self.fail_next_execute:
            self.fail_next_execute = False
            raise ConnectionError("store unavailable")
        await super().execute(statement)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def db(db_url):
    database = RecordingDatabase(create_engine(db_url))
    yield database
    await database.dispose()


@pytest.fixture
def stories(db) -> Table:
    return Table(db, "stories")


@pytest.fixture(autouse=True)
def _reset_hooks():
    yield
    clear_handlers()
