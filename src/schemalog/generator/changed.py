"""
Generators for objects present on both sides whose definitions differ.

Columns and tables are altered in place. Keys, constraints and indexes
cannot be altered portably, so they are dropped and recreated from the
reference definition.
"""

import logging

from ..changes import (
    AddDefaultValueChange,
    AddNotNullConstraintChange,
    AddPrimaryKeyChange,
    AddUniqueConstraintChange,
    CreateIndexChange,
    DropDefaultValueChange,
    DropForeignKeyConstraintChange,
    DropIndexChange,
    DropNotNullConstraintChange,
    DropPrimaryKeyChange,
    DropUniqueConstraintChange,
    ModifyDataTypeChange,
    SetTableRemarksChange,
)
from ..diff.result import DiffKind
from ..structure import (
    Column,
    ForeignKey,
    Index,
    ObjectKind,
    PrimaryKey,
    Table,
    UniqueConstraint,
)
from .base import ChangedObjectChangeGenerator
from .missing import build_add_foreign_key
from .naming import join_names, resolve_owner_scope


logger = logging.getLogger(__name__)


class ChangedTableChangeGenerator(ChangedObjectChangeGenerator):
    object_kind = ObjectKind.TABLE
    run_after = frozenset({ObjectKind.CATALOG, ObjectKind.SCHEMA})

    def fix_changed(self, changed_object, differences, context):
        table: Table = changed_object
        if not differences.is_different("remarks"):
            return []
        scope = resolve_owner_scope(table.schema, context.control)
        return [
            SetTableRemarksChange(
                table_name=table.name,
                remarks=table.remarks,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            )
        ]


class ChangedColumnChangeGenerator(ChangedObjectChangeGenerator):
    """Alters type, nullability and default of an existing column."""

    object_kind = ObjectKind.COLUMN
    run_after = frozenset({ObjectKind.TABLE})

    def fix_changed(self, changed_object, differences, context):
        column: Column = changed_object
        scope = resolve_owner_scope(column.table.schema, context.control)
        target = dict(
            table_name=column.table.name,
            column_name=column.name,
            catalog_name=scope.catalog_name,
            schema_name=scope.schema_name,
        )
        changes = []

        if differences.is_different("data_type"):
            changes.append(
                ModifyDataTypeChange(new_data_type=column.data_type, **target)
            )

        if differences.is_different("nullable"):
            if column.nullable:
                changes.append(
                    DropNotNullConstraintChange(
                        column_data_type=column.data_type, **target
                    )
                )
            else:
                changes.append(
                    AddNotNullConstraintChange(
                        column_data_type=column.data_type, **target
                    )
                )

        if differences.is_different("default_value"):
            if column.default_value is None:
                changes.append(
                    DropDefaultValueChange(column_data_type=column.data_type, **target)
                )
            else:
                changes.append(
                    AddDefaultValueChange(
                        default_value=column.default_value,
                        column_data_type=column.data_type,
                        **target,
                    )
                )

        if not changes:
            logger.debug(
                f"Column {column!r} differs only in "
                f"{', '.join(differences.differences)}, nothing to alter"
            )
        return changes


class ChangedPrimaryKeyChangeGenerator(ChangedObjectChangeGenerator):
    object_kind = ObjectKind.PRIMARY_KEY
    run_after = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})
    run_before = frozenset({ObjectKind.INDEX})

    def claims(self, obj, context):
        return [obj.backing_index]

    def fix_changed(self, changed_object, differences, context):
        pk: PrimaryKey = changed_object
        scope = resolve_owner_scope(pk.table.schema, context.control)
        context.control.mark_handled(pk.backing_index, DiffKind.CHANGED)
        return [
            DropPrimaryKeyChange(
                table_name=pk.table.name,
                constraint_name=pk.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            ),
            AddPrimaryKeyChange(
                table_name=pk.table.name,
                column_names=join_names(pk.columns),
                constraint_name=pk.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            ),
        ]


class ChangedUniqueConstraintChangeGenerator(ChangedObjectChangeGenerator):
    object_kind = ObjectKind.UNIQUE_CONSTRAINT
    run_after = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})
    run_before = frozenset({ObjectKind.INDEX})

    def claims(self, obj, context):
        return [obj.backing_index]

    def fix_changed(self, changed_object, differences, context):
        uc: UniqueConstraint = changed_object
        scope = resolve_owner_scope(uc.table.schema, context.control)
        context.control.mark_handled(uc.backing_index, DiffKind.CHANGED)
        return [
            DropUniqueConstraintChange(
                table_name=uc.table.name,
                constraint_name=uc.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            ),
            AddUniqueConstraintChange(
                table_name=uc.table.name,
                column_names=join_names(uc.columns),
                constraint_name=uc.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
                deferrable=uc.deferrable or None,
                initially_deferred=uc.initially_deferred or None,
            ),
        ]


class ChangedIndexChangeGenerator(ChangedObjectChangeGenerator):
    object_kind = ObjectKind.INDEX
    run_after = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})

    def fix_changed(self, changed_object, differences, context):
        index: Index = changed_object
        scope = resolve_owner_scope(index.table.schema, context.control)
        return [
            DropIndexChange(
                index_name=index.name,
                table_name=index.table.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            ),
            CreateIndexChange(
                table_name=index.table.name,
                index_name=index.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
                columns=tuple(column.name for column in index.columns),
                unique=True if index.unique else None,
            ),
        ]


class ChangedForeignKeyChangeGenerator(ChangedObjectChangeGenerator):
    object_kind = ObjectKind.FOREIGN_KEY
    run_after = frozenset(
        {
            ObjectKind.TABLE,
            ObjectKind.COLUMN,
            ObjectKind.PRIMARY_KEY,
            ObjectKind.UNIQUE_CONSTRAINT,
            ObjectKind.INDEX,
        }
    )

    def claims(self, obj, context):
        fk: ForeignKey = obj
        if fk.backing_index is not None and (
            context.comparison_database.creates_indexes_for_foreign_keys()
        ):
            return [fk.backing_index]
        return []

    def fix_changed(self, changed_object, differences, context):
        fk: ForeignKey = changed_object
        table = fk.foreign_key_table
        scope = resolve_owner_scope(
            table.schema if table is not None else None, context.control
        )
        return [
            DropForeignKeyConstraintChange(
                constraint_name=fk.name,
                base_table_name=table.name if table is not None else None,
                base_table_catalog_name=scope.catalog_name,
                base_table_schema_name=scope.schema_name,
            ),
            build_add_foreign_key(fk, context),
        ]
