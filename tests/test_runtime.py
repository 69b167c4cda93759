"""
Tests for the LazyTable façade, bootstrap and Settings.
"""

import pytest
from sqlalchemy.pool import AsyncAdaptedQueuePool

from lazytable import LazyTable, NotConnectedError, Table
from lazytable.bootstrap import create_engine
from lazytable.config import DEFAULT_DATABASE_URL, Settings


def settings_for(url: str) -> Settings:
    return Settings(environment="test", database_url=url, echo_sql=False, log_level="DEBUG")


# =============================================================================
# Settings
# =============================================================================


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LAZYTABLE_ENV", "test")
    monkeypatch.setenv("LAZYTABLE_DATABASE_URL", "sqlite+aiosqlite:///other.db")
    monkeypatch.setenv("LAZYTABLE_ECHO_SQL", "true")
    monkeypatch.setenv("LAZYTABLE_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.environment == "test"
    assert settings.database_url == "sqlite+aiosqlite:///other.db"
    assert settings.echo_sql is True
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("LAZYTABLE_ENV", "LAZYTABLE_DATABASE_URL", "LAZYTABLE_ECHO_SQL", "LAZYTABLE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.environment == "development"
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.echo_sql is False
    assert settings.log_level == "INFO"


def test_env_file_is_read(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LAZYTABLE_ENV", "staging")
    # setenv first so the value load_dotenv writes is undone after the test
    monkeypatch.setenv("LAZYTABLE_DATABASE_URL", "unset")
    monkeypatch.delenv("LAZYTABLE_DATABASE_URL")
    (tmp_path / ".env.staging").write_text("LAZYTABLE_DATABASE_URL=sqlite+aiosqlite:///staging.db\n")

    assert Settings.from_env().database_url == "sqlite+aiosqlite:///staging.db"


# =============================================================================
# Engine
# =============================================================================


@pytest.mark.asyncio
async def test_file_sqlite_gets_single_connection_pool(db_url):
    engine = create_engine(db_url)
    try:
        assert isinstance(engine.pool, AsyncAdaptedQueuePool)
        assert engine.pool.size() == 1
    finally:
        await engine.dispose()


# =============================================================================
# Façade
# =============================================================================


@pytest.mark.asyncio
async def test_one_table_per_name(db_url):
    async with LazyTable.connect(db_url, settings=settings_for(db_url)) as orm:
        stories = orm.table("stories")

        assert isinstance(stories, Table)
        assert orm.table("stories") is stories
        assert orm.table("drafts") is not stories


@pytest.mark.asyncio
async def test_round_trip_through_facade(db_url):
    async with LazyTable.connect(settings=settings_for(db_url)) as orm:
        record = await orm.table("stories").insert({"title": "Hello"})

    async with LazyTable.connect(db_url, settings=settings_for(db_url)) as orm:
        found = await orm.table("stories").find_by_id(record.id)

    assert found.value == {"title": "Hello"}


@pytest.mark.asyncio
async def test_closed_facade_refuses_work(db_url):
    orm = LazyTable.connect(db_url, settings=settings_for(db_url))
    await orm.close()

    with pytest.raises(NotConnectedError):
        orm.table("stories")

    await orm.close()
