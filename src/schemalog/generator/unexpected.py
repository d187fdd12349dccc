"""
Generators for objects present in the comparison database but absent from
the reference. Dependents are dropped before what they depend on.
"""

from ..changes import (
    DropColumnChange,
    DropForeignKeyConstraintChange,
    DropIndexChange,
    DropPrimaryKeyChange,
    DropTableChange,
    DropUniqueConstraintChange,
)
from ..structure import (
    Column,
    ForeignKey,
    Index,
    ObjectKind,
    PrimaryKey,
    Table,
    UniqueConstraint,
)
from .base import UnexpectedObjectChangeGenerator
from .naming import resolve_owner_scope


class UnexpectedForeignKeyChangeGenerator(UnexpectedObjectChangeGenerator):
    object_kind = ObjectKind.FOREIGN_KEY
    run_before = frozenset(
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

    def fix_unexpected(self, unexpected_object, context):
        fk: ForeignKey = unexpected_object
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
            )
        ]


class UnexpectedPrimaryKeyChangeGenerator(UnexpectedObjectChangeGenerator):
    object_kind = ObjectKind.PRIMARY_KEY
    run_before = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN, ObjectKind.INDEX})

    def claims(self, obj, context):
        return [obj.backing_index]

    def fix_unexpected(self, unexpected_object, context):
        pk: PrimaryKey = unexpected_object
        scope = resolve_owner_scope(pk.table.schema, context.control)
        return [
            DropPrimaryKeyChange(
                table_name=pk.table.name,
                constraint_name=pk.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            )
        ]


class UnexpectedUniqueConstraintChangeGenerator(UnexpectedObjectChangeGenerator):
    object_kind = ObjectKind.UNIQUE_CONSTRAINT
    run_before = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN, ObjectKind.INDEX})

    def claims(self, obj, context):
        return [obj.backing_index]

    def fix_unexpected(self, unexpected_object, context):
        uc: UniqueConstraint = unexpected_object
        scope = resolve_owner_scope(uc.table.schema, context.control)
        return [
            DropUniqueConstraintChange(
                table_name=uc.table.name,
                constraint_name=uc.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            )
        ]


class UnexpectedIndexChangeGenerator(UnexpectedObjectChangeGenerator):
    object_kind = ObjectKind.INDEX
    run_before = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})

    def fix_unexpected(self, unexpected_object, context):
        index: Index = unexpected_object
        scope = resolve_owner_scope(index.table.schema, context.control)
        return [
            DropIndexChange(
                index_name=index.name,
                table_name=index.table.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            )
        ]


class UnexpectedColumnChangeGenerator(UnexpectedObjectChangeGenerator):
    object_kind = ObjectKind.COLUMN
    run_before = frozenset({ObjectKind.TABLE})

    def fix_unexpected(self, unexpected_object, context):
        column: Column = unexpected_object
        scope = resolve_owner_scope(column.table.schema, context.control)
        return [
            DropColumnChange(
                table_name=column.table.name,
                column_name=column.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            )
        ]


class UnexpectedTableChangeGenerator(UnexpectedObjectChangeGenerator):
    """Drops tables; whatever lives inside a dropped table goes with it."""

    object_kind = ObjectKind.TABLE

    def claims(self, obj, context):
        table: Table = obj
        claimed = list(table.columns) + list(table.indexes)
        if table.primary_key is not None:
            claimed += [table.primary_key, table.primary_key.backing_index]
        for uc in table.unique_constraints:
            claimed += [uc, uc.backing_index]
        return claimed

    def fix_unexpected(self, unexpected_object, context):
        table: Table = unexpected_object
        scope = resolve_owner_scope(table.schema, context.control)
        return [
            DropTableChange(
                table_name=table.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
            )
        ]
