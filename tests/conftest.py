"""Shared fixtures: temporary SQLite database and both storage backends."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the localfix package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from localfix.core import config as core_config  # noqa: E402
from localfix.db import models  # noqa: E402
from localfix.db import session as db_session  # noqa: E402
from localfix.repositories import MemoryStorage, SQLStorage  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.delenv("APP_ENV", raising=False)
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield engine

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()


@pytest.fixture()
def memory_storage():
    return MemoryStorage()


@pytest.fixture()
def sql_storage(temp_db):
    return SQLStorage(temp_db)


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    """Unseeded storage; every test using it runs once per backend."""
    if request.param == "memory":
        return MemoryStorage()
    return SQLStorage(request.getfixturevalue("temp_db"))
