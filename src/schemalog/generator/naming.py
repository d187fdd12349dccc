"""
Naming scope resolution.

Decides whether a generated change names an object with its catalog and/or
schema. Qualification is elided when a name is only the implicit default,
so the generated changes stay portable between databases.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ..database import Database, trim_to_empty
from ..diff.output import DiffOutputControl
from ..structure import Column, ObjectKind, Schema


@dataclass(frozen=True)
class NamingScope:
    """Catalog and schema names to put on a change, if any."""

    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    included_catalog: bool = False
    included_schema: bool = False


def differs_from_defaults(name: Optional[str], *defaults: str) -> bool:
    """True when ``name`` matches none of ``defaults``, ignoring case."""
    trimmed = trim_to_empty(name).lower()
    return all(trimmed != trim_to_empty(default).lower() for default in defaults)


def resolve_referenced_scope(
    schema: Optional[Schema],
    control: DiffOutputControl,
    reference_database: Database,
    comparison_database: Database,
) -> NamingScope:
    """Scope for an object referenced from another table.

    The catalog is included when the reference database has catalogs and
    either inclusion is forced or the name differs from both databases'
    defaults. The schema follows the same rule, and is always included once
    the catalog is.
    """
    if schema is None:
        return NamingScope()

    included_catalog = False
    if reference_database.supports(ObjectKind.CATALOG):
        if control.include_catalog or control.consider_catalogs_as_schemas:
            included_catalog = True
        elif differs_from_defaults(
            schema.catalog_name,
            reference_database.get_default_catalog_name(),
            comparison_database.get_default_catalog_name(),
        ):
            included_catalog = True

    included_schema = False
    if reference_database.supports(ObjectKind.SCHEMA):
        if included_catalog or control.include_schema:
            included_schema = True
        elif differs_from_defaults(
            schema.name,
            reference_database.get_default_schema_name(),
            comparison_database.get_default_schema_name(),
        ):
            included_schema = True

    return NamingScope(
        catalog_name=schema.catalog_name if included_catalog else None,
        schema_name=schema.name if included_schema else None,
        included_catalog=included_catalog,
        included_schema=included_schema,
    )


def resolve_owner_scope(
    schema: Optional[Schema], control: DiffOutputControl
) -> NamingScope:
    """Scope for the table a change operates on: explicit flags only."""
    if schema is None:
        return NamingScope()
    return NamingScope(
        catalog_name=schema.catalog_name if control.include_catalog else None,
        schema_name=schema.name if control.include_schema else None,
        included_catalog=control.include_catalog,
        included_schema=control.include_schema,
    )


def join_names(columns: Optional[Iterable[Column]], separator: str = ",") -> str:
    """Join column names in order; ``None`` or empty yields ``""``."""
    if not columns:
        return ""
    return separator.join(column.name or "" for column in columns)
