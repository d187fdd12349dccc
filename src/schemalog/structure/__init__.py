"""
Database structure model for schemalog.
"""

from .objects import (
    Catalog,
    Column,
    ForeignKey,
    ForeignKeyRule,
    Index,
    ObjectKind,
    PrimaryKey,
    Schema,
    SchemaObject,
    Table,
    UniqueConstraint,
)

__all__ = [
    "Catalog",
    "Column",
    "ForeignKey",
    "ForeignKeyRule",
    "Index",
    "ObjectKind",
    "PrimaryKey",
    "Schema",
    "SchemaObject",
    "Table",
    "UniqueConstraint",
]
