"""
Generators for objects present in the reference but missing from the
comparison database.
"""

from typing import List, Optional

from ..changes import (
    AddColumnChange,
    AddForeignKeyConstraintChange,
    AddPrimaryKeyChange,
    AddUniqueConstraintChange,
    Change,
    ColumnConfig,
    CreateIndexChange,
    CreateTableChange,
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
from .base import GenerationContext, MissingObjectChangeGenerator
from .naming import join_names, resolve_owner_scope, resolve_referenced_scope

UNNAMED = "<unnamed>"
UNKNOWN = "<unknown>"


def column_config(column: Column, primary_key: bool = False) -> ColumnConfig:
    """Describe ``column`` as it should be created."""
    return ColumnConfig(
        name=column.name,
        type=column.data_type,
        nullable=None if column.nullable else False,
        default_value=column.default_value,
        auto_increment=True if column.auto_increment else None,
        primary_key=True if primary_key else None,
        remarks=column.remarks,
    )


class MissingTableChangeGenerator(MissingObjectChangeGenerator):
    """Creates missing tables with their columns and primary key inline."""

    object_kind = ObjectKind.TABLE
    run_after = frozenset({ObjectKind.CATALOG, ObjectKind.SCHEMA})

    def claims(self, obj, context):
        table: Table = obj
        claimed = list(table.columns)
        if table.primary_key is not None:
            claimed.append(table.primary_key)
            claimed.append(table.primary_key.backing_index)
        return claimed

    def fix_missing(self, missing_object, context):
        table: Table = missing_object
        scope = resolve_owner_scope(table.schema, context.control)

        pk = table.primary_key
        pk_column_names = {c.name for c in pk.columns} if pk is not None else set()

        change = CreateTableChange(
            table_name=table.name,
            catalog_name=scope.catalog_name,
            schema_name=scope.schema_name,
            columns=tuple(
                column_config(column, primary_key=column.name in pk_column_names)
                for column in table.columns
            ),
            primary_key_name=pk.name if pk is not None else None,
            remarks=table.remarks,
        )

        context.control.mark_all_handled(self.claims(table, context), DiffKind.MISSING)
        return [change]


class MissingColumnChangeGenerator(MissingObjectChangeGenerator):
    object_kind = ObjectKind.COLUMN
    run_after = frozenset({ObjectKind.TABLE})

    def fix_missing(self, missing_object, context):
        column: Column = missing_object
        scope = resolve_owner_scope(column.table.schema, context.control)
        return [
            AddColumnChange(
                table_name=column.table.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
                columns=(column_config(column),),
            )
        ]


class MissingPrimaryKeyChangeGenerator(MissingObjectChangeGenerator):
    object_kind = ObjectKind.PRIMARY_KEY
    run_after = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})
    run_before = frozenset({ObjectKind.INDEX})

    def claims(self, obj, context):
        return [obj.backing_index]

    def fix_missing(self, missing_object, context):
        pk: PrimaryKey = missing_object
        scope = resolve_owner_scope(pk.table.schema, context.control)
        change = AddPrimaryKeyChange(
            table_name=pk.table.name,
            column_names=join_names(pk.columns),
            constraint_name=pk.name,
            catalog_name=scope.catalog_name,
            schema_name=scope.schema_name,
        )
        context.control.mark_handled(pk.backing_index, DiffKind.MISSING)
        return [change]


class MissingUniqueConstraintChangeGenerator(MissingObjectChangeGenerator):
    object_kind = ObjectKind.UNIQUE_CONSTRAINT
    run_after = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})
    run_before = frozenset({ObjectKind.INDEX})

    def claims(self, obj, context):
        return [obj.backing_index]

    def fix_missing(self, missing_object, context):
        uc: UniqueConstraint = missing_object
        scope = resolve_owner_scope(uc.table.schema, context.control)
        change = AddUniqueConstraintChange(
            table_name=uc.table.name,
            column_names=join_names(uc.columns),
            constraint_name=uc.name,
            catalog_name=scope.catalog_name,
            schema_name=scope.schema_name,
            deferrable=uc.deferrable or None,
            initially_deferred=uc.initially_deferred or None,
        )
        context.control.mark_handled(uc.backing_index, DiffKind.MISSING)
        return [change]


class MissingIndexChangeGenerator(MissingObjectChangeGenerator):
    object_kind = ObjectKind.INDEX
    run_after = frozenset({ObjectKind.TABLE, ObjectKind.COLUMN})

    def fix_missing(self, missing_object, context):
        index: Index = missing_object
        scope = resolve_owner_scope(index.table.schema, context.control)
        return [
            CreateIndexChange(
                table_name=index.table.name,
                index_name=index.name,
                catalog_name=scope.catalog_name,
                schema_name=scope.schema_name,
                columns=tuple(column.name for column in index.columns),
                unique=True if index.unique else None,
            )
        ]


def build_add_foreign_key(
    fk: ForeignKey, context: GenerationContext
) -> AddForeignKeyConstraintChange:
    """Build the add-constraint change for ``fk``.

    The referenced table is qualified only where its catalog/schema is not
    a default on either side; the base table only when explicitly asked.
    """
    control = context.control
    referenced_table = fk.primary_key_table
    base_table = fk.foreign_key_table

    referenced = resolve_referenced_scope(
        referenced_table.schema if referenced_table is not None else None,
        control,
        context.reference_database,
        context.comparison_database,
    )

    if not fk.primary_key_columns:
        context.log.warning(
            f"Foreign key '{fk.name if fk.name is not None else UNNAMED}' on table "
            f"'{_table_name(base_table)}' references table "
            f"'{_table_name(referenced_table)}' which may not exist or has no "
            f"primary key columns. This will result in empty referenced column "
            f"names in the generated changelog. Please verify that the "
            f"referenced table exists and has a primary key defined."
        )

    base = resolve_owner_scope(
        base_table.schema if base_table is not None else None, control
    )

    return AddForeignKeyConstraintChange(
        constraint_name=fk.name,
        base_table_name=base_table.name if base_table is not None else None,
        base_column_names=join_names(fk.foreign_key_columns),
        referenced_table_name=(
            referenced_table.name if referenced_table is not None else None
        ),
        referenced_column_names=join_names(fk.primary_key_columns),
        base_table_catalog_name=base.catalog_name,
        base_table_schema_name=base.schema_name,
        referenced_table_catalog_name=referenced.catalog_name,
        referenced_table_schema_name=referenced.schema_name,
        deferrable=fk.deferrable,
        initially_deferred=fk.initially_deferred,
        validate=fk.validate,
        on_update=fk.update_rule,
        on_delete=fk.delete_rule,
    )


def _table_name(table: Optional[Table]) -> str:
    if table is None or table.name is None:
        return UNKNOWN
    return table.name


class MissingForeignKeyChangeGenerator(MissingObjectChangeGenerator):
    """Adds missing foreign keys once everything they depend on exists."""

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

    def fix_missing(self, missing_object, context) -> List[Change]:
        fk: ForeignKey = missing_object
        change = build_add_foreign_key(fk, context)

        # the comparison database will create this index along with the constraint
        context.control.mark_all_handled(self.claims(fk, context), DiffKind.MISSING)

        return [change]
