"""Backend selection and startup bootstrap for the storage layer.

There is no module-level storage instance: the application's startup
routine calls open_storage() once and hands the result to whoever needs it.
"""
from __future__ import annotations

import logging

from localfix.core.config import Settings
from localfix.core.errors import ConfigurationError
from localfix.db.session import create_db_engine

from .base import Storage
from .memory_repository import MemoryStorage
from .sql_repository import SQLStorage

logger = logging.getLogger(__name__)


def select_backend(settings: Settings) -> Storage:
    """Build the backend for the current run mode (test -> memory, else SQL)."""
    if settings.is_test:
        logger.info("Using in-memory storage", extra={"app_env": settings.app_env})
        return MemoryStorage()
    if not settings.database_url:
        raise ConfigurationError("DATABASE_URL must be set unless APP_ENV=test.")
    logger.info("Using SQL storage", extra={"app_env": settings.app_env})
    return SQLStorage(create_db_engine(settings.database_url, echo=settings.sql_echo))


async def open_storage(settings: Settings) -> Storage:
    """Select the backend, check it is reachable and prepare it for use."""
    storage = select_backend(settings)
    if isinstance(storage, SQLStorage):
        await storage.connect()
    await storage.initialize()
    return storage
