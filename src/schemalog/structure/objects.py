"""
Database structure objects for schemalog.

Plain read-only descriptions of catalogs, schemas, tables and the objects
hanging off them, as delivered by the snapshot/diff layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ObjectKind(str, Enum):
    """Closed set of schema object kinds.

    Declaration order is the tie-break when two kinds have no ordering
    constraint between them.
    """

    CATALOG = "catalog"
    SCHEMA = "schema"
    TABLE = "table"
    COLUMN = "column"
    PRIMARY_KEY = "primary_key"
    UNIQUE_CONSTRAINT = "unique_constraint"
    INDEX = "index"
    FOREIGN_KEY = "foreign_key"

    @property
    def declaration_index(self) -> int:
        return list(ObjectKind).index(self)


class ForeignKeyRule(str, Enum):
    """Referential actions for ON UPDATE / ON DELETE."""

    CASCADE = "cascade"
    SET_NULL = "set_null"
    SET_DEFAULT = "set_default"
    RESTRICT = "restrict"
    NO_ACTION = "no_action"


class SchemaObject:
    """Base for all structure objects.

    Identity is structural: kind plus owner path plus name, with column
    names added for unnamed objects that have them. Subclasses provide
    ``owner_path``; equality and hashing never walk back-references.
    """

    kind: ObjectKind
    name: Optional[str]

    @property
    def owner_path(self) -> Tuple[Optional[str], ...]:
        return ()

    @property
    def unnamed_identity(self) -> Tuple[Optional[str], ...]:
        """Extra key parts telling apart unnamed siblings of the same kind."""
        return ()

    @property
    def key(self) -> Tuple[Optional[str], ...]:
        key = (self.kind.value,) + self.owner_path + (self.name,)
        if self.name is None:
            key += self.unnamed_identity
        return key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaObject):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        path = ".".join(part for part in self.owner_path if part)
        name = self.name or "<unnamed>"
        return f"{self.__class__.__name__}({path + '.' if path else ''}{name})"


@dataclass(eq=False, repr=False)
class Catalog(SchemaObject):
    """A database catalog."""

    name: Optional[str]
    kind = ObjectKind.CATALOG


@dataclass(eq=False, repr=False)
class Schema(SchemaObject):
    """A schema inside an optional catalog."""

    name: Optional[str]
    catalog_name: Optional[str] = None
    kind = ObjectKind.SCHEMA

    @property
    def owner_path(self) -> Tuple[Optional[str], ...]:
        return (self.catalog_name,)


@dataclass(eq=False, repr=False)
class Table(SchemaObject):
    """A table and the back-references to what hangs off it."""

    name: Optional[str]
    schema: Schema = field(default_factory=lambda: Schema(None))
    remarks: Optional[str] = None
    columns: List["Column"] = field(default_factory=list)
    primary_key: Optional["PrimaryKey"] = None
    indexes: List["Index"] = field(default_factory=list)
    unique_constraints: List["UniqueConstraint"] = field(default_factory=list)
    outgoing_foreign_keys: List["ForeignKey"] = field(default_factory=list)
    kind = ObjectKind.TABLE

    @property
    def owner_path(self) -> Tuple[Optional[str], ...]:
        return (self.schema.catalog_name, self.schema.name)

    @property
    def full_name(self) -> str:
        parts = [self.schema.catalog_name, self.schema.name, self.name]
        return ".".join(part for part in parts if part)

    def get_column(self, column_name: str) -> Optional["Column"]:
        for column in self.columns:
            if column.name == column_name:
                return column
        return None


class _TableChild(SchemaObject):
    table: Table

    @property
    def owner_path(self) -> Tuple[Optional[str], ...]:
        return self.table.owner_path + (self.table.name,)


@dataclass(eq=False, repr=False)
class Column(_TableChild):
    """A table column."""

    name: Optional[str]
    table: Table
    data_type: Optional[str] = None
    nullable: bool = True
    default_value: Optional[str] = None
    auto_increment: bool = False
    remarks: Optional[str] = None
    kind = ObjectKind.COLUMN


@dataclass(eq=False, repr=False)
class Index(_TableChild):
    """An index over one or more columns of a table."""

    name: Optional[str]
    table: Table
    columns: List[Column] = field(default_factory=list)
    unique: bool = False
    kind = ObjectKind.INDEX

    @property
    def unnamed_identity(self) -> Tuple[Optional[str], ...]:
        return tuple(column.name for column in self.columns)


@dataclass(eq=False, repr=False)
class PrimaryKey(_TableChild):
    """A primary key constraint."""

    name: Optional[str]
    table: Table
    columns: List[Column] = field(default_factory=list)
    backing_index: Optional[Index] = None
    kind = ObjectKind.PRIMARY_KEY


@dataclass(eq=False, repr=False)
class UniqueConstraint(_TableChild):
    """A unique constraint."""

    name: Optional[str]
    table: Table
    columns: List[Column] = field(default_factory=list)
    deferrable: bool = False
    initially_deferred: bool = False
    backing_index: Optional[Index] = None
    kind = ObjectKind.UNIQUE_CONSTRAINT

    @property
    def unnamed_identity(self) -> Tuple[Optional[str], ...]:
        return tuple(column.name for column in self.columns)


@dataclass(eq=False, repr=False)
class ForeignKey(SchemaObject):
    """A foreign key from ``foreign_key_table`` to ``primary_key_table``.

    ``backing_index`` is only a relation; the index owns its own lifecycle.
    """

    name: Optional[str]
    foreign_key_table: Optional[Table] = None
    foreign_key_columns: List[Column] = field(default_factory=list)
    primary_key_table: Optional[Table] = None
    primary_key_columns: Optional[List[Column]] = field(default_factory=list)
    deferrable: bool = False
    initially_deferred: bool = False
    validate: bool = True
    update_rule: Optional[ForeignKeyRule] = None
    delete_rule: Optional[ForeignKeyRule] = None
    backing_index: Optional[Index] = None
    kind = ObjectKind.FOREIGN_KEY

    @property
    def owner_path(self) -> Tuple[Optional[str], ...]:
        if self.foreign_key_table is None:
            return (None, None, None)
        return self.foreign_key_table.owner_path + (self.foreign_key_table.name,)

    @property
    def unnamed_identity(self) -> Tuple[Optional[str], ...]:
        return tuple(column.name for column in self.foreign_key_columns)
