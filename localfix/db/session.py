"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from localfix.core.config import get_settings
from localfix.core.errors import ConfigurationError

Base = declarative_base()


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    url = (url or "").strip()
    if not url:
        raise ConfigurationError("DATABASE_URL must be configured to use the SQL backend.")
    return create_engine(url, future=True, pool_pre_ping=True, echo=echo)


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return create_db_engine(settings.database_url, echo=settings.sql_echo)


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
