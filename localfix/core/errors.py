"""Error hierarchy for the persistence layer.

Missing records are never errors: lookups return ``None`` and deletes return
``False``. The exceptions below cover misconfiguration, an unreachable
database and malformed updates.
"""


class StorageError(Exception):
    """Base class for storage-related exceptions."""


class ConfigurationError(StorageError):
    """Required configuration (e.g. DATABASE_URL) is missing."""


class ConnectivityError(StorageError):
    """The durable backend could not be reached."""


class InvalidUpdateError(StorageError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
