"""
Database capability catalog for schemalog.

Describes what a database dialect supports (catalogs, schemas, automatic
foreign key indexes) and what it assumes when names are left unqualified.
"""

import logging
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..exceptions import ConfigurationError
from ..structure import ObjectKind


logger = logging.getLogger(__name__)


def trim_to_empty(value: Optional[str]) -> str:
    """Return ``value`` stripped, with ``None`` treated as the empty string."""
    if value is None:
        return ""
    return value.strip()


class DatabaseProfile(BaseModel):
    """Capability description of a single database dialect."""

    dialect: str = Field(..., description="Dialect short name")
    supports_catalogs: bool = Field(True, description="Dialect has catalogs")
    supports_schemas: bool = Field(True, description="Dialect has schemas")
    creates_indexes_for_foreign_keys: bool = Field(
        False, description="Dialect creates an index to back every foreign key"
    )
    default_catalog_name: Optional[str] = Field(
        None, description="Catalog assumed when none is specified"
    )
    default_schema_name: Optional[str] = Field(
        None, description="Schema assumed when none is specified"
    )


BUILTIN_PROFILES: Dict[str, DatabaseProfile] = {
    "generic": DatabaseProfile(dialect="generic"),
    "postgresql": DatabaseProfile(
        dialect="postgresql",
        supports_catalogs=False,
        default_schema_name="public",
    ),
    "mysql": DatabaseProfile(
        dialect="mysql",
        supports_schemas=False,
        creates_indexes_for_foreign_keys=True,
    ),
    "mssql": DatabaseProfile(
        dialect="mssql",
        default_schema_name="dbo",
    ),
    "oracle": DatabaseProfile(
        dialect="oracle",
        supports_catalogs=False,
    ),
    "h2": DatabaseProfile(
        dialect="h2",
        default_schema_name="PUBLIC",
    ),
    "sqlite": DatabaseProfile(
        dialect="sqlite",
        supports_catalogs=False,
        supports_schemas=False,
    ),
}


class Database:
    """Capability query object consulted by change generators."""

    def __init__(
        self,
        profile: DatabaseProfile,
        default_catalog_name: Optional[str] = None,
        default_schema_name: Optional[str] = None,
    ):
        self.profile = profile
        self._default_catalog_name = (
            default_catalog_name
            if default_catalog_name is not None
            else profile.default_catalog_name
        )
        self._default_schema_name = (
            default_schema_name
            if default_schema_name is not None
            else profile.default_schema_name
        )

    @classmethod
    def for_dialect(
        cls,
        dialect: Union[str, DatabaseProfile],
        default_catalog_name: Optional[str] = None,
        default_schema_name: Optional[str] = None,
    ) -> "Database":
        """Create a database from a built-in dialect name or an explicit profile."""
        if isinstance(dialect, DatabaseProfile):
            profile = dialect
        else:
            profile = BUILTIN_PROFILES.get(dialect.lower())
            if profile is None:
                raise ConfigurationError(
                    f"Unknown dialect '{dialect}'. "
                    f"Available dialects: {available_dialects()}"
                )
        return cls(profile, default_catalog_name, default_schema_name)

    @property
    def dialect(self) -> str:
        return self.profile.dialect

    def supports(self, kind: ObjectKind) -> bool:
        if kind == ObjectKind.CATALOG:
            return self.profile.supports_catalogs
        if kind == ObjectKind.SCHEMA:
            return self.profile.supports_schemas
        return True

    def creates_indexes_for_foreign_keys(self) -> bool:
        return self.profile.creates_indexes_for_foreign_keys

    def get_default_catalog_name(self) -> str:
        return trim_to_empty(self._default_catalog_name)

    def get_default_schema_name(self) -> str:
        return trim_to_empty(self._default_schema_name)

    def __repr__(self) -> str:
        return (
            f"Database(dialect={self.dialect!r}, "
            f"default_catalog={self.get_default_catalog_name()!r}, "
            f"default_schema={self.get_default_schema_name()!r})"
        )


def available_dialects() -> List[str]:
    """List the names of the built-in dialect profiles."""
    return sorted(BUILTIN_PROFILES.keys())
