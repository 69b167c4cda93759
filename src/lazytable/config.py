"""
Environment-driven settings. `.env.<LAZYTABLE_ENV>` wins over `.env`;
variables already set in the process are never overridden.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///lazytable.db"


def _load_env() -> str:
    """Load `.env.<LAZYTABLE_ENV>` if present, else the default `.env`."""
    env = os.environ.get("LAZYTABLE_ENV", "development").lower()
    env_file = f".env.{env}"
    if os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        load_dotenv()
    return env


def _flag(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    environment: str
    database_url: str
    echo_sql: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        env = _load_env()
        return cls(
            environment=env,
            database_url=os.environ.get("LAZYTABLE_DATABASE_URL", DEFAULT_DATABASE_URL),
            echo_sql=_flag(os.environ.get("LAZYTABLE_ECHO_SQL", "")),
            log_level=os.environ.get("LAZYTABLE_LOG_LEVEL", "INFO").upper(),
        )
