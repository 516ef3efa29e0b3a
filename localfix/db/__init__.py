"""Database helpers (engine/session export)."""

from .session import Base, create_db_engine, get_engine, session_factory

__all__ = ["Base", "create_db_engine", "get_engine", "session_factory"]
