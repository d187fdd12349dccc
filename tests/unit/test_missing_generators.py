"""
Unit tests for missing-object change generators.

The foreign key generator is covered in depth: name qualification of the
referenced and owning tables, the empty primary key warning and backing
index suppression.
"""

import logging

import pytest

from schemalog.changes import (
    AddColumnChange,
    AddForeignKeyConstraintChange,
    AddPrimaryKeyChange,
    AddUniqueConstraintChange,
    CreateIndexChange,
    CreateTableChange,
)
from schemalog.database import Database
from schemalog.diff import DiffKind, DiffOutputControl
from schemalog.generator import GenerationContext, Priority
from schemalog.generator.missing import (
    MissingColumnChangeGenerator,
    MissingForeignKeyChangeGenerator,
    MissingIndexChangeGenerator,
    MissingPrimaryKeyChangeGenerator,
    MissingTableChangeGenerator,
    MissingUniqueConstraintChangeGenerator,
)
from schemalog.structure import (
    Column,
    ForeignKey,
    ForeignKeyRule,
    Index,
    ObjectKind,
    Table,
    UniqueConstraint,
)


def _context(control, comparison="generic", log_name="schemalog.tests") -> GenerationContext:
    reference = Database.for_dialect(
        "generic", default_catalog_name="main", default_schema_name="public"
    )
    return GenerationContext(
        control=control,
        reference_database=reference,
        comparison_database=Database.for_dialect(
            comparison, default_catalog_name="main", default_schema_name="public"
        ),
        log=logging.getLogger(log_name),
    )


class TestMissingForeignKeyDeclarations:
    """Test priority and ordering declarations."""

    def test_priority(self, comparison_database):
        """Applies to foreign keys only."""
        generator = MissingForeignKeyChangeGenerator()
        assert generator.get_priority(ObjectKind.FOREIGN_KEY, comparison_database) == Priority.DEFAULT
        assert generator.get_priority(ObjectKind.INDEX, comparison_database) == Priority.NONE

    def test_runs_after_dependencies(self):
        """Runs after every structure a foreign key can depend on."""
        generator = MissingForeignKeyChangeGenerator()
        assert generator.run_after_kinds() == {
            ObjectKind.TABLE,
            ObjectKind.COLUMN,
            ObjectKind.PRIMARY_KEY,
            ObjectKind.UNIQUE_CONSTRAINT,
            ObjectKind.INDEX,
        }
        assert generator.run_before_kinds() == frozenset()


class TestMissingForeignKeyGenerator:
    """Test generation of add-foreign-key changes."""

    def test_non_default_referenced_catalog(self, order_customer_fk, context):
        """Referenced catalog is qualified, base catalog is not."""
        changes = MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)

        assert len(changes) == 1
        change = changes[0]
        assert isinstance(change, AddForeignKeyConstraintChange)
        assert change.constraint_name == "fk_order_customer"
        assert change.referenced_table_name == "customers"
        assert change.referenced_table_catalog_name == "analytics"
        assert change.referenced_table_schema_name == "public"
        assert change.base_table_name == "orders"
        assert change.base_table_catalog_name is None
        assert change.base_table_schema_name is None

    def test_columns_and_rules(self, order_customer_fk, context):
        """Columns are joined in order and flags/rules are copied verbatim."""
        customers = order_customer_fk.primary_key_table
        order_customer_fk.primary_key_columns = [
            customers.get_column("id"),
            customers.get_column("email"),
        ]
        order_customer_fk.deferrable = True
        order_customer_fk.initially_deferred = True
        order_customer_fk.validate = False

        change = MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)[0]

        assert change.referenced_column_names == "id,email"
        assert change.base_column_names == "customer_id"
        assert change.deferrable == True
        assert change.initially_deferred == True
        assert change.validate == False
        assert change.on_update == ForeignKeyRule.NO_ACTION
        assert change.on_delete == ForeignKeyRule.CASCADE

    def test_default_referenced_table_not_qualified(self, orders, make_table, context):
        """A referenced table in the default catalog and schema is unqualified."""
        regions = make_table("regions")
        fk = ForeignKey(
            name="fk_order_region",
            foreign_key_table=orders,
            foreign_key_columns=[orders.get_column("id")],
            primary_key_table=regions,
            primary_key_columns=[regions.get_column("id")],
        )
        change = MissingForeignKeyChangeGenerator().fix_missing(fk, context)[0]
        assert change.referenced_table_catalog_name is None
        assert change.referenced_table_schema_name is None

    def test_explicit_inclusion_qualifies_both_tables(self, order_customer_fk):
        """Explicit flags qualify the base table too."""
        context = _context(DiffOutputControl(include_catalog=True, include_schema=True))
        change = MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)[0]

        assert change.base_table_catalog_name == "main"
        assert change.base_table_schema_name == "public"
        assert change.referenced_table_catalog_name == "analytics"
        assert change.referenced_table_schema_name == "public"

    def test_no_warning_with_primary_key_columns(self, order_customer_fk, context, caplog):
        """No warning is logged when referenced columns are known."""
        with caplog.at_level(logging.WARNING):
            MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)
        assert caplog.records == []

    @pytest.mark.parametrize("pk_columns", [[], None])
    def test_empty_primary_key_columns_warns(
        self, order_customer_fk, context, caplog, pk_columns
    ):
        """Empty referenced columns log exactly one warning and still emit."""
        order_customer_fk.primary_key_columns = pk_columns

        with caplog.at_level(logging.WARNING):
            changes = MissingForeignKeyChangeGenerator().fix_missing(
                order_customer_fk, context
            )

        assert len(changes) == 1
        assert changes[0].referenced_column_names == ""

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        message = warnings[0].getMessage()
        assert "fk_order_customer" in message
        assert "orders" in message
        assert "customers" in message

    def test_warning_uses_placeholders(self, context, caplog):
        """Absent names are replaced by placeholders in the warning."""
        fk = ForeignKey(
            name=None,
            foreign_key_table=Table(None),
            primary_key_table=None,
            primary_key_columns=[],
        )
        with caplog.at_level(logging.WARNING):
            changes = MissingForeignKeyChangeGenerator().fix_missing(fk, context)

        assert changes[0].referenced_table_name is None
        message = caplog.records[0].getMessage()
        assert "<unnamed>" in message
        assert message.count("<unknown>") == 2

    def test_warning_goes_to_injected_logger(self, order_customer_fk, caplog):
        """The warning is logged through the context's logger."""
        order_customer_fk.primary_key_columns = []
        context = _context(DiffOutputControl(), log_name="schemalog.injected")

        with caplog.at_level(logging.WARNING, logger="schemalog.injected"):
            MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)

        assert [r.name for r in caplog.records] == ["schemalog.injected"]

    def test_backing_index_marked_when_comparison_creates_indexes(self, order_customer_fk):
        """Backing index is handled when the comparison auto-creates FK indexes."""
        control = DiffOutputControl()
        context = _context(control, comparison="mysql")

        MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)

        assert control.is_handled(order_customer_fk.backing_index, DiffKind.MISSING)

    def test_backing_index_not_marked_otherwise(self, order_customer_fk, context):
        """Backing index is left alone when the comparison needs it created."""
        MissingForeignKeyChangeGenerator().fix_missing(order_customer_fk, context)
        assert not context.control.is_handled(
            order_customer_fk.backing_index, DiffKind.MISSING
        )

    def test_without_backing_index(self, order_customer_fk):
        """No backing index means nothing is marked."""
        order_customer_fk.backing_index = None
        control = DiffOutputControl()
        MissingForeignKeyChangeGenerator().fix_missing(
            order_customer_fk, _context(control, comparison="mysql")
        )
        assert control.handled_count(DiffKind.MISSING) == 0


class TestMissingTableGenerator:
    """Test create-table generation."""

    def test_create_table_with_inline_primary_key(self, orders, context):
        """Columns are inline and primary key columns are flagged."""
        orders.remarks = "Customer orders"
        changes = MissingTableChangeGenerator().fix_missing(orders, context)

        assert len(changes) == 1
        change = changes[0]
        assert isinstance(change, CreateTableChange)
        assert change.table_name == "orders"
        assert change.primary_key_name == "pk_orders"
        assert change.remarks == "Customer orders"
        assert [c.name for c in change.columns] == ["id", "customer_id", "status"]
        assert change.columns[0].primary_key == True
        assert change.columns[0].nullable == False
        assert change.columns[1].primary_key is None

    def test_marks_columns_and_primary_key(self, orders, context):
        """Columns and primary key are handled by the create-table change."""
        MissingTableChangeGenerator().fix_missing(orders, context)
        control = context.control
        for column in orders.columns:
            assert control.is_handled(column, DiffKind.MISSING)
        assert control.is_handled(orders.primary_key, DiffKind.MISSING)

    def test_owner_qualification(self, orders):
        """Catalog and schema follow the explicit flags."""
        context = _context(DiffOutputControl(include_schema=True))
        change = MissingTableChangeGenerator().fix_missing(orders, context)[0]
        assert change.catalog_name is None
        assert change.schema_name == "public"


class TestOtherMissingGenerators:
    """Test column, key, constraint and index generators."""

    def test_add_column(self, orders, context):
        """A missing column becomes an add-column change."""
        column = Column("note", orders, data_type="text", default_value="''")
        change = MissingColumnChangeGenerator().fix_missing(column, context)[0]

        assert isinstance(change, AddColumnChange)
        assert change.table_name == "orders"
        assert change.columns[0].name == "note"
        assert change.columns[0].type == "text"
        assert change.columns[0].default_value == "''"

    def test_add_primary_key_marks_backing_index(self, orders, context):
        """The primary key's backing index is handled by the constraint."""
        backing = Index("pk_orders_idx", orders, [orders.get_column("id")], unique=True)
        orders.primary_key.backing_index = backing

        change = MissingPrimaryKeyChangeGenerator().fix_missing(orders.primary_key, context)[0]

        assert isinstance(change, AddPrimaryKeyChange)
        assert change.column_names == "id"
        assert change.constraint_name == "pk_orders"
        assert context.control.is_handled(backing, DiffKind.MISSING)

    def test_add_unique_constraint(self, customers, context):
        """Unique constraints carry their deferrable flags."""
        uc = UniqueConstraint(
            "uq_customers_email",
            customers,
            [customers.get_column("email")],
            deferrable=True,
        )
        change = MissingUniqueConstraintChangeGenerator().fix_missing(uc, context)[0]

        assert isinstance(change, AddUniqueConstraintChange)
        assert change.column_names == "email"
        assert change.deferrable == True
        assert change.initially_deferred is None

    def test_create_index(self, orders, context):
        """Indexes list their column names in order."""
        index = Index(
            "idx_orders_status_customer",
            orders,
            [orders.get_column("status"), orders.get_column("customer_id")],
            unique=True,
        )
        change = MissingIndexChangeGenerator().fix_missing(index, context)[0]

        assert isinstance(change, CreateIndexChange)
        assert change.columns == ("status", "customer_id")
        assert change.unique == True
