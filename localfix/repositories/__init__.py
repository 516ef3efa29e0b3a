"""
Persistence adapters.

Services depend on the Storage contract; MemoryStorage and SQLStorage are the
two interchangeable implementations, picked by open_storage().
"""

from .base import Storage
from .factory import open_storage, select_backend
from .memory_repository import MemoryStorage
from .sql_repository import SQLStorage

__all__ = ["Storage", "MemoryStorage", "SQLStorage", "open_storage", "select_backend"]
