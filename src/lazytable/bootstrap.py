"""
Single entry-point that wires an async SQLAlchemy engine into lazytable.
Call once at application start-up; hand the returned Database to Tables.
"""

import logging
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from .config import Settings
from .persistence.store import Database

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Apply `level` to the lazytable loggers (root handler only if none yet)."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("lazytable").setLevel(level)


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """
    Build the AsyncEngine behind a Database.

    File-backed SQLite gets a single pooled connection: concurrent store calls
    then queue on the pool instead of fighting over the SQLite write lock.
    """
    url = make_url(database_url)
    kwargs = {"echo": echo}
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        kwargs.update(poolclass=AsyncAdaptedQueuePool, pool_size=1, max_overflow=0)
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(url, **kwargs)
    logger.info("engine created for %s", url.render_as_string(hide_password=True))
    return engine


def init_lazytable(
    database_url: Optional[str] = None, *, settings: Optional[Settings] = None
) -> Database:
    """
    Read settings (env / .env) unless a URL is given, configure logging
    and return the shared Database.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    engine = create_engine(database_url or settings.database_url, echo=settings.echo_sql)
    return Database(engine)
