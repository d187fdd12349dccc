"""
Change records emitted by the generators.

Each change describes the parameters of one DDL operation. Changes are
immutable once built; rendering them to SQL or a changelog format is done
elsewhere.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from ..structure import ForeignKeyRule


@dataclass(frozen=True)
class Change:
    """Base class for all changes."""

    change_type: ClassVar[str] = "change"

    def to_dict(self) -> Dict[str, Any]:
        """Return the populated fields keyed by name, skipping ``None``."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.name] = _plain(value)
        return result


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ColumnConfig):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class ColumnConfig:
    """Column definition carried by table and column changes."""

    name: str
    type: Optional[str] = None
    nullable: Optional[bool] = None
    default_value: Optional[str] = None
    auto_increment: Optional[bool] = None
    primary_key: Optional[bool] = None
    remarks: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


# Additive changes


@dataclass(frozen=True)
class CreateTableChange(Change):
    table_name: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    columns: Tuple[ColumnConfig, ...] = ()
    primary_key_name: Optional[str] = None
    remarks: Optional[str] = None

    change_type: ClassVar[str] = "createTable"


@dataclass(frozen=True)
class AddColumnChange(Change):
    table_name: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    columns: Tuple[ColumnConfig, ...] = ()

    change_type: ClassVar[str] = "addColumn"


@dataclass(frozen=True)
class AddPrimaryKeyChange(Change):
    table_name: str
    column_names: str
    constraint_name: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "addPrimaryKey"


@dataclass(frozen=True)
class AddUniqueConstraintChange(Change):
    table_name: str
    column_names: str
    constraint_name: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    deferrable: Optional[bool] = None
    initially_deferred: Optional[bool] = None

    change_type: ClassVar[str] = "addUniqueConstraint"


@dataclass(frozen=True)
class CreateIndexChange(Change):
    table_name: str
    index_name: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    columns: Tuple[str, ...] = ()
    unique: Optional[bool] = None

    change_type: ClassVar[str] = "createIndex"


@dataclass(frozen=True)
class AddForeignKeyConstraintChange(Change):
    constraint_name: Optional[str]
    base_table_name: Optional[str]
    base_column_names: str
    referenced_table_name: Optional[str]
    referenced_column_names: str
    base_table_catalog_name: Optional[str] = None
    base_table_schema_name: Optional[str] = None
    referenced_table_catalog_name: Optional[str] = None
    referenced_table_schema_name: Optional[str] = None
    deferrable: Optional[bool] = None
    initially_deferred: Optional[bool] = None
    validate: Optional[bool] = None
    on_update: Optional[ForeignKeyRule] = None
    on_delete: Optional[ForeignKeyRule] = None

    change_type: ClassVar[str] = "addForeignKeyConstraint"


# Destructive changes


@dataclass(frozen=True)
class DropTableChange(Change):
    table_name: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None
    cascade_constraints: Optional[bool] = None

    change_type: ClassVar[str] = "dropTable"


@dataclass(frozen=True)
class DropColumnChange(Change):
    table_name: str
    column_name: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropColumn"


@dataclass(frozen=True)
class DropPrimaryKeyChange(Change):
    table_name: str
    constraint_name: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropPrimaryKey"


@dataclass(frozen=True)
class DropUniqueConstraintChange(Change):
    table_name: str
    constraint_name: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropUniqueConstraint"


@dataclass(frozen=True)
class DropIndexChange(Change):
    index_name: Optional[str]
    table_name: str
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropIndex"


@dataclass(frozen=True)
class DropForeignKeyConstraintChange(Change):
    constraint_name: Optional[str]
    base_table_name: Optional[str]
    base_table_catalog_name: Optional[str] = None
    base_table_schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropForeignKeyConstraint"


# Alterations


@dataclass(frozen=True)
class ModifyDataTypeChange(Change):
    table_name: str
    column_name: str
    new_data_type: Optional[str]
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "modifyDataType"


@dataclass(frozen=True)
class AddNotNullConstraintChange(Change):
    table_name: str
    column_name: str
    column_data_type: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "addNotNullConstraint"


@dataclass(frozen=True)
class DropNotNullConstraintChange(Change):
    table_name: str
    column_name: str
    column_data_type: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropNotNullConstraint"


@dataclass(frozen=True)
class AddDefaultValueChange(Change):
    table_name: str
    column_name: str
    default_value: str
    column_data_type: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "addDefaultValue"


@dataclass(frozen=True)
class DropDefaultValueChange(Change):
    table_name: str
    column_name: str
    column_data_type: Optional[str] = None
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "dropDefaultValue"


@dataclass(frozen=True)
class SetTableRemarksChange(Change):
    table_name: str
    remarks: Optional[str]
    catalog_name: Optional[str] = None
    schema_name: Optional[str] = None

    change_type: ClassVar[str] = "setTableRemarks"
