"""
Configuration helpers for the LocalFix backend.

Routers, services and storage backends read settings through get_settings()
so that nothing else fetches os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

TEST_ENV = "test"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    log_level: str
    sql_echo: bool

    @property
    def is_test(self) -> bool:
        return self.app_env == TEST_ENV


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").strip().lower(),
        database_url=(os.getenv("DATABASE_URL") or "").strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        sql_echo=_bool(os.getenv("SQL_ECHO"), False),
    )
