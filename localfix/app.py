"""FastAPI application factory.

The application owns the storage lifecycle: the lifespan handler opens the
backend once at startup, exposes it through ``get_storage`` and closes it at
shutdown.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request

from localfix.core.config import get_settings
from localfix.core.errors import ConfigurationError, ConnectivityError
from localfix.core.logging import configure_logging
from localfix.repositories import Storage, open_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        storage = await open_storage(settings)
    except (ConfigurationError, ConnectivityError) as exc:
        logger.critical("Storage startup failed: %s", exc)
        raise SystemExit(1) from exc
    app.state.storage = storage
    try:
        yield
    finally:
        await storage.close()


def get_storage(request: Request) -> Storage:
    """Dependency returning the storage opened at startup."""
    return request.app.state.storage


def create_app() -> FastAPI:
    app = FastAPI(title="LocalFix API", lifespan=lifespan)

    @app.get("/health")
    async def health(storage: Storage = Depends(get_storage)) -> dict:
        return {"status": "ok", "backend": storage.name}

    return app
