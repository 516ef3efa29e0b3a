"""
Core utilities shared across the LocalFix backend.

This package hosts configuration helpers (env vars), the error hierarchy,
logging setup and password hashing. Storage backends and services depend on
these primitives instead of reading os.environ directly.
"""
