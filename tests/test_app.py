"""Tests for the FastAPI application lifecycle."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from localfix.app import create_app, lifespan
from localfix.core import config as core_config
from localfix.repositories import MemoryStorage


@pytest.fixture()
def env(monkeypatch):
    def _apply(**values):
        for key in ("APP_ENV", "DATABASE_URL"):
            monkeypatch.delenv(key, raising=False)
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        core_config.get_settings.cache_clear()

    yield _apply
    core_config.get_settings.cache_clear()


def test_health_reports_memory_backend_in_test_mode(env):
    env(APP_ENV="test")
    app = create_app()

    with TestClient(app) as client:
        response = client.get("/health")
        storage = app.state.storage

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "backend": "memory"}
    assert isinstance(storage, MemoryStorage)


@pytest.mark.asyncio
async def test_startup_without_database_url_exits(env):
    env(APP_ENV="prod")
    app = create_app()

    with pytest.raises(SystemExit) as excinfo:
        async with lifespan(app):
            pass

    assert excinfo.value.code == 1
    assert not hasattr(app.state, "storage")


@pytest.mark.asyncio
async def test_startup_with_unreachable_database_exits(env, tmp_path):
    env(APP_ENV="prod", DATABASE_URL=f"sqlite:///{tmp_path / 'missing' / 'app.db'}")

    with pytest.raises(SystemExit):
        async with lifespan(create_app()):
            pass


@pytest.mark.asyncio
async def test_lifespan_exposes_sql_storage(env, tmp_path):
    env(APP_ENV="dev", DATABASE_URL=f"sqlite:///{tmp_path / 'app.db'}")
    app = create_app()

    async with lifespan(app):
        storage = app.state.storage
        assert storage.name == "sql"
        assert len(await storage.list_service_categories()) == 8
