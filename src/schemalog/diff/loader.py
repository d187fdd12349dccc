"""
Loading of diff documents.

A diff document is a YAML file holding both snapshots (reference and
comparison) and the classification of objects into missing, unexpected and
changed. Object references in the classification are resolved against the
snapshot of the side they come from.

Example::

    reference:
      database: {dialect: postgresql}
      tables:
        - name: orders
          columns:
            - {name: id, type: bigint, nullable: false}
            - {name: customer_id, type: bigint}
          primary_key: {name: pk_orders, columns: [id]}
          foreign_keys:
            - name: fk_order_customer
              columns: [customer_id]
              references: {table: customers, catalog: analytics, columns: [id]}
    comparison:
      database: {dialect: postgresql}
    diff:
      missing:
        - {kind: foreign_key, table: orders, name: fk_order_customer}
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..config import DatabaseSettings
from ..exceptions import ConfigurationError, DiffLoadError
from ..structure import (
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
from .result import Difference, DiffResult, ObjectDifferences


logger = logging.getLogger(__name__)


class ColumnSpec(BaseModel):
    name: str
    type: Optional[str] = None
    nullable: bool = True
    default_value: Optional[str] = None
    auto_increment: bool = False
    remarks: Optional[str] = None


class IndexSpec(BaseModel):
    name: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    unique: bool = False


class PrimaryKeySpec(BaseModel):
    name: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    backing_index: Optional[str] = None


class UniqueConstraintSpec(BaseModel):
    name: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    deferrable: bool = False
    initially_deferred: bool = False
    backing_index: Optional[str] = None


class TableRefSpec(BaseModel):
    table: str
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None
    columns: Optional[List[str]] = None


class ForeignKeySpec(BaseModel):
    name: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    references: TableRefSpec
    deferrable: bool = False
    initially_deferred: bool = False
    validate_constraint: bool = Field(True, alias="validate")
    on_update: Optional[ForeignKeyRule] = None
    on_delete: Optional[ForeignKeyRule] = None
    backing_index: Optional[str] = None


class TableSpec(BaseModel):
    name: str
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None
    remarks: Optional[str] = None
    columns: List[ColumnSpec] = Field(default_factory=list)
    primary_key: Optional[PrimaryKeySpec] = None
    indexes: List[IndexSpec] = Field(default_factory=list)
    unique_constraints: List[UniqueConstraintSpec] = Field(default_factory=list)
    foreign_keys: List[ForeignKeySpec] = Field(default_factory=list)


class SnapshotSpec(BaseModel):
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    tables: List[TableSpec] = Field(default_factory=list)


class ObjectRefSpec(BaseModel):
    kind: ObjectKind
    table: str
    name: Optional[str] = None
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None
    differences: Dict[str, Tuple[Any, Any]] = Field(default_factory=dict)


class ClassificationSpec(BaseModel):
    missing: List[ObjectRefSpec] = Field(default_factory=list)
    unexpected: List[ObjectRefSpec] = Field(default_factory=list)
    changed: List[ObjectRefSpec] = Field(default_factory=list)


class DiffDocument(BaseModel):
    reference: SnapshotSpec = Field(default_factory=SnapshotSpec)
    comparison: SnapshotSpec = Field(default_factory=SnapshotSpec)
    diff: ClassificationSpec = Field(default_factory=ClassificationSpec)


class Snapshot:
    """Structure objects of one side, built from a snapshot spec."""

    def __init__(self, spec: SnapshotSpec):
        self.tables: List[Table] = []
        for table_spec in spec.tables:
            self.tables.append(self._build_table(table_spec))
        # foreign keys may point at tables declared later
        for table, table_spec in zip(self.tables, spec.tables):
            for fk_spec in table_spec.foreign_keys:
                table.outgoing_foreign_keys.append(self._build_foreign_key(table, fk_spec))

    def find_table(
        self, name: str, schema: Optional[str] = None, catalog: Optional[str] = None
    ) -> Optional[Table]:
        for table in self.tables:
            if table.name != name:
                continue
            if schema is not None and table.schema.name != schema:
                continue
            if catalog is not None and table.schema.catalog_name != catalog:
                continue
            return table
        return None

    def find(self, ref: ObjectRefSpec) -> SchemaObject:
        """Resolve an object reference, raising DiffLoadError if absent."""
        table = self.find_table(ref.table, ref.schema_name, ref.catalog)
        if table is None:
            raise DiffLoadError(
                f"Unknown table '{ref.table}'",
                {"kind": ref.kind.value, "schema": ref.schema_name},
            )

        found: Optional[SchemaObject] = None
        if ref.kind == ObjectKind.TABLE:
            found = table
        elif ref.kind == ObjectKind.COLUMN:
            found = table.get_column(ref.name) if ref.name else None
        elif ref.kind == ObjectKind.PRIMARY_KEY:
            found = table.primary_key
        elif ref.kind == ObjectKind.INDEX:
            found = _by_name(table.indexes, ref.name)
        elif ref.kind == ObjectKind.UNIQUE_CONSTRAINT:
            found = _by_name(table.unique_constraints, ref.name)
        elif ref.kind == ObjectKind.FOREIGN_KEY:
            found = _by_name(table.outgoing_foreign_keys, ref.name)
        else:
            raise DiffLoadError(f"Diff entries of kind '{ref.kind.value}' are not supported")

        if found is None:
            raise DiffLoadError(
                f"Unknown {ref.kind.value} '{ref.name}' on table '{ref.table}'"
            )
        return found

    def _build_table(self, spec: TableSpec) -> Table:
        table = Table(
            name=spec.name,
            schema=Schema(spec.schema_name, spec.catalog),
            remarks=spec.remarks,
        )
        for column_spec in spec.columns:
            table.columns.append(
                Column(
                    name=column_spec.name,
                    table=table,
                    data_type=column_spec.type,
                    nullable=column_spec.nullable,
                    default_value=column_spec.default_value,
                    auto_increment=column_spec.auto_increment,
                    remarks=column_spec.remarks,
                )
            )
        for index_spec in spec.indexes:
            table.indexes.append(
                Index(
                    name=index_spec.name,
                    table=table,
                    columns=self._columns(table, index_spec.columns),
                    unique=index_spec.unique,
                )
            )
        if spec.primary_key is not None:
            table.primary_key = PrimaryKey(
                name=spec.primary_key.name,
                table=table,
                columns=self._columns(table, spec.primary_key.columns),
                backing_index=self._index(table, spec.primary_key.backing_index),
            )
        for uc_spec in spec.unique_constraints:
            table.unique_constraints.append(
                UniqueConstraint(
                    name=uc_spec.name,
                    table=table,
                    columns=self._columns(table, uc_spec.columns),
                    deferrable=uc_spec.deferrable,
                    initially_deferred=uc_spec.initially_deferred,
                    backing_index=self._index(table, uc_spec.backing_index),
                )
            )
        return table

    def _build_foreign_key(self, table: Table, spec: ForeignKeySpec) -> ForeignKey:
        ref = spec.references
        referenced = self.find_table(ref.table, ref.schema_name, ref.catalog)
        if referenced is None:
            logger.debug(f"Referenced table '{ref.table}' not in snapshot, using a stub")
            referenced = Table(name=ref.table, schema=Schema(ref.schema_name, ref.catalog))

        if ref.columns is not None:
            pk_columns = self._columns(referenced, ref.columns, create=True)
        elif referenced.primary_key is not None:
            pk_columns = list(referenced.primary_key.columns)
        else:
            pk_columns = []

        return ForeignKey(
            name=spec.name,
            foreign_key_table=table,
            foreign_key_columns=self._columns(table, spec.columns),
            primary_key_table=referenced,
            primary_key_columns=pk_columns,
            deferrable=spec.deferrable,
            initially_deferred=spec.initially_deferred,
            validate=spec.validate_constraint,
            update_rule=spec.on_update,
            delete_rule=spec.on_delete,
            backing_index=self._index(table, spec.backing_index),
        )

    @staticmethod
    def _columns(table: Table, names: List[str], create: bool = False) -> List[Column]:
        columns = []
        for name in names:
            column = table.get_column(name)
            if column is None:
                if not create:
                    raise DiffLoadError(f"Unknown column '{name}' on table '{table.name}'")
                column = Column(name=name, table=table)
            columns.append(column)
        return columns

    @staticmethod
    def _index(table: Table, name: Optional[str]) -> Optional[Index]:
        if name is None:
            return None
        index = _by_name(table.indexes, name)
        if index is None:
            raise DiffLoadError(f"Unknown backing index '{name}' on table '{table.name}'")
        return index


def _by_name(objects, name):
    for obj in objects:
        if obj.name == name:
            return obj
    return None


class DiffDocumentLoader:
    """Builds a DiffResult from a parsed diff document."""

    def __init__(self, document: DiffDocument):
        self.document = document

    @classmethod
    def from_data(cls, data: Any) -> "DiffDocumentLoader":
        try:
            return cls(DiffDocument.model_validate(data or {}))
        except ValidationError as e:
            raise DiffLoadError(f"Invalid diff document: {e}") from e

    def load(
        self,
        reference: Optional[DatabaseSettings] = None,
        comparison: Optional[DatabaseSettings] = None,
    ) -> DiffResult:
        """Build the diff; explicit settings override the document's databases."""
        doc = self.document
        try:
            reference_database = (reference or doc.reference.database).to_database()
            comparison_database = (comparison or doc.comparison.database).to_database()
        except ConfigurationError as e:
            raise DiffLoadError(f"Invalid database in diff document: {e.message}") from e

        reference_snapshot = Snapshot(doc.reference)
        comparison_snapshot = Snapshot(doc.comparison)

        result = DiffResult(reference_database, comparison_database)
        for ref in doc.diff.missing:
            result.add_missing(reference_snapshot.find(ref))
        for ref in doc.diff.unexpected:
            result.add_unexpected(comparison_snapshot.find(ref))
        for ref in doc.diff.changed:
            differences = ObjectDifferences.of(
                *(
                    Difference(name, values[0], values[1])
                    for name, values in ref.differences.items()
                )
            )
            result.add_changed(reference_snapshot.find(ref), differences)

        logger.info(f"Loaded diff: {result.summary()}")
        return result


def load_diff(
    path: Union[str, Path],
    reference: Optional[DatabaseSettings] = None,
    comparison: Optional[DatabaseSettings] = None,
) -> DiffResult:
    """Load a diff document from a YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise DiffLoadError(f"Diff document not found: {path}")
    except yaml.YAMLError as e:
        raise DiffLoadError(f"Invalid YAML in diff document: {e}")

    return DiffDocumentLoader.from_data(data).load(reference, comparison)
