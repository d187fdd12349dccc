"""
Pytest configuration and shared fixtures for schemalog tests.

This module provides shared fixtures for building schema structures,
databases and generation contexts.
"""

import logging
from typing import Callable, Iterable, Optional

import pytest
import yaml

from schemalog.database import Database
from schemalog.diff import DiffOutputControl
from schemalog.generator import GenerationContext
from schemalog.structure import (
    Column,
    ForeignKey,
    ForeignKeyRule,
    Index,
    PrimaryKey,
    Schema,
    Table,
)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def reference_database() -> Database:
    """Reference database with catalogs and schemas, defaults main/public."""
    return Database.for_dialect(
        "generic", default_catalog_name="main", default_schema_name="public"
    )


@pytest.fixture
def comparison_database() -> Database:
    """Comparison database with the same defaults as the reference."""
    return Database.for_dialect(
        "generic", default_catalog_name="main", default_schema_name="public"
    )


@pytest.fixture
def control() -> DiffOutputControl:
    """Output control with no forced qualification."""
    return DiffOutputControl()


@pytest.fixture
def context(control, reference_database, comparison_database) -> GenerationContext:
    """Generation context over the default databases."""
    return GenerationContext(
        control=control,
        reference_database=reference_database,
        comparison_database=comparison_database,
        log=logging.getLogger("schemalog.tests"),
    )


# ============================================================================
# Structure Fixtures
# ============================================================================

@pytest.fixture
def make_table() -> Callable[..., Table]:
    """Factory building a table whose first column is its primary key."""

    def _make(
        name: str,
        columns: Iterable[str] = ("id",),
        schema: Optional[str] = "public",
        catalog: Optional[str] = "main",
        primary_key: bool = True,
    ) -> Table:
        table = Table(name=name, schema=Schema(schema, catalog))
        for column_name in columns:
            table.columns.append(
                Column(
                    name=column_name,
                    table=table,
                    data_type="bigint",
                    nullable=column_name != "id",
                )
            )
        if primary_key and table.columns:
            table.primary_key = PrimaryKey(
                name=f"pk_{name}", table=table, columns=[table.columns[0]]
            )
        return table

    return _make


@pytest.fixture
def customers(make_table) -> Table:
    """Referenced table living in the non-default catalog 'analytics'."""
    return make_table("customers", ("id", "email"), catalog="analytics")


@pytest.fixture
def orders(make_table) -> Table:
    """Owning table in the default catalog and schema."""
    return make_table("orders", ("id", "customer_id", "status"))


@pytest.fixture
def order_customer_fk(orders, customers) -> ForeignKey:
    """Foreign key orders.customer_id -> customers.id with a backing index."""
    backing_index = Index(
        name="idx_orders_customer_id",
        table=orders,
        columns=[orders.get_column("customer_id")],
    )
    orders.indexes.append(backing_index)

    fk = ForeignKey(
        name="fk_order_customer",
        foreign_key_table=orders,
        foreign_key_columns=[orders.get_column("customer_id")],
        primary_key_table=customers,
        primary_key_columns=[customers.get_column("id")],
        deferrable=False,
        initially_deferred=False,
        validate=True,
        update_rule=ForeignKeyRule.NO_ACTION,
        delete_rule=ForeignKeyRule.CASCADE,
        backing_index=backing_index,
    )
    orders.outgoing_foreign_keys.append(fk)
    return fk


# ============================================================================
# Diff Document Fixtures
# ============================================================================

@pytest.fixture
def sample_diff_document() -> dict:
    """Diff document: customers and its FK from orders are missing."""
    return {
        "reference": {
            "database": {
                "dialect": "generic",
                "default_catalog_name": "main",
                "default_schema_name": "public",
            },
            "tables": [
                {
                    "name": "customers",
                    "catalog": "analytics",
                    "schema": "public",
                    "columns": [
                        {"name": "id", "type": "bigint", "nullable": False},
                        {"name": "email", "type": "varchar(255)"},
                    ],
                    "primary_key": {"name": "pk_customers", "columns": ["id"]},
                },
                {
                    "name": "orders",
                    "catalog": "main",
                    "schema": "public",
                    "columns": [
                        {"name": "id", "type": "bigint", "nullable": False},
                        {"name": "customer_id", "type": "bigint"},
                        {"name": "status", "type": "varchar(20)", "default_value": "'new'"},
                    ],
                    "primary_key": {"name": "pk_orders", "columns": ["id"]},
                    "indexes": [
                        {"name": "idx_orders_customer_id", "columns": ["customer_id"]},
                        {"name": "idx_orders_status", "columns": ["status"]},
                    ],
                    "foreign_keys": [
                        {
                            "name": "fk_order_customer",
                            "columns": ["customer_id"],
                            "references": {
                                "table": "customers",
                                "catalog": "analytics",
                                "schema": "public",
                            },
                            "on_delete": "cascade",
                            "backing_index": "idx_orders_customer_id",
                        }
                    ],
                },
            ],
        },
        "comparison": {
            "database": {
                "dialect": "generic",
                "default_catalog_name": "main",
                "default_schema_name": "public",
            },
            "tables": [
                {
                    "name": "legacy_audit",
                    "catalog": "main",
                    "schema": "public",
                    "columns": [{"name": "id", "type": "bigint"}],
                }
            ],
        },
        "diff": {
            "missing": [
                {"kind": "table", "table": "customers"},
                {"kind": "column", "table": "customers", "name": "id"},
                {"kind": "column", "table": "customers", "name": "email"},
                {"kind": "primary_key", "table": "customers", "name": "pk_customers"},
                {"kind": "foreign_key", "table": "orders", "name": "fk_order_customer"},
                {"kind": "index", "table": "orders", "name": "idx_orders_customer_id"},
                {"kind": "index", "table": "orders", "name": "idx_orders_status"},
            ],
            "unexpected": [
                {"kind": "table", "table": "legacy_audit"},
                {"kind": "column", "table": "legacy_audit", "name": "id"},
            ],
            "changed": [
                {
                    "kind": "column",
                    "table": "orders",
                    "name": "status",
                    "differences": {"data_type": ["varchar(20)", "varchar(10)"]},
                }
            ],
        },
    }


@pytest.fixture
def diff_file(tmp_path, sample_diff_document) -> str:
    """Sample diff document written to a YAML file."""
    path = tmp_path / "diff.yaml"
    path.write_text(yaml.safe_dump(sample_diff_document), encoding="utf-8")
    return str(path)


@pytest.fixture
def config_file(tmp_path) -> str:
    """Minimal schemalog configuration file."""
    path = tmp_path / "schemalog.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "output": {"include_schema": True},
                "reference": {"dialect": "generic", "default_catalog_name": "main"},
                "comparison": {"dialect": "generic", "default_catalog_name": "main"},
                "logging": {"level": "WARNING"},
            }
        ),
        encoding="utf-8",
    )
    return str(path)
