"""One-off script: create tables and seed reference data in DATABASE_URL."""
from __future__ import annotations

import asyncio
from pathlib import Path
import sys

# Make the localfix package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from localfix.core.config import get_settings
from localfix.core.errors import StorageError
from localfix.core.logging import configure_logging
from localfix.db.session import create_db_engine
from localfix.repositories import SQLStorage


async def seed() -> tuple[int, int]:
    settings = get_settings()
    storage = SQLStorage(create_db_engine(settings.database_url, echo=settings.sql_echo))
    try:
        await storage.connect()
        await storage.initialize()
        categories = await storage.list_service_categories()
        users = await storage.list_users()
        return len(categories), len(users)
    finally:
        await storage.close()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    try:
        categories, users = asyncio.run(seed())
    except StorageError as exc:
        raise SystemExit(f"Seeding failed: {exc}") from exc
    print(f"Database ready: {categories} categories, {users} users.")
