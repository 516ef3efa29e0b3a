"""LocalFix marketplace persistence layer."""

__version__ = "0.1.0"
