"""
Database capability package for schemalog.
"""

from .capabilities import (
    BUILTIN_PROFILES,
    Database,
    DatabaseProfile,
    available_dialects,
    trim_to_empty,
)

__all__ = [
    "BUILTIN_PROFILES",
    "Database",
    "DatabaseProfile",
    "available_dialects",
    "trim_to_empty",
]
