"""
Change records produced by schemalog generators.
"""

from .core import (
    AddColumnChange,
    AddDefaultValueChange,
    AddForeignKeyConstraintChange,
    AddNotNullConstraintChange,
    AddPrimaryKeyChange,
    AddUniqueConstraintChange,
    Change,
    ColumnConfig,
    CreateIndexChange,
    CreateTableChange,
    DropColumnChange,
    DropDefaultValueChange,
    DropForeignKeyConstraintChange,
    DropIndexChange,
    DropNotNullConstraintChange,
    DropPrimaryKeyChange,
    DropTableChange,
    DropUniqueConstraintChange,
    ModifyDataTypeChange,
    SetTableRemarksChange,
)

__all__ = [
    "AddColumnChange",
    "AddDefaultValueChange",
    "AddForeignKeyConstraintChange",
    "AddNotNullConstraintChange",
    "AddPrimaryKeyChange",
    "AddUniqueConstraintChange",
    "Change",
    "ColumnConfig",
    "CreateIndexChange",
    "CreateTableChange",
    "DropColumnChange",
    "DropDefaultValueChange",
    "DropForeignKeyConstraintChange",
    "DropIndexChange",
    "DropNotNullConstraintChange",
    "DropPrimaryKeyChange",
    "DropTableChange",
    "DropUniqueConstraintChange",
    "ModifyDataTypeChange",
    "SetTableRemarksChange",
]
