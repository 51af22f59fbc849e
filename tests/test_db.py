import sqlite3

import pymysql
import pytest

from db import (
    DUPLICATE,
    REFERENCE,
    Database,
    DuplicateRecordError,
    ReferencedRecordError,
    classify_integrity_error,
)


def test_placeholders_follow_driver_paramstyle():
    query = "SELECT id FROM products WHERE sku = ? AND quantity >= ?"
    assert Database("sqlite").sql(query) == query
    assert Database("mysql").sql(query) == "SELECT id FROM products WHERE sku = %s AND quantity >= %s"
    assert Database("postgres").paramstyle == "format"


def test_unknown_driver_is_rejected():
    with pytest.raises(ValueError):
        Database("oracle")


@pytest.mark.parametrize(
    "exc, expected",
    [
        (sqlite3.IntegrityError("UNIQUE constraint failed: products.sku"), DUPLICATE),
        (sqlite3.IntegrityError("FOREIGN KEY constraint failed"), REFERENCE),
        (pymysql.err.IntegrityError(1062, "Duplicate entry 'A' for key 'sku'"), DUPLICATE),
        (pymysql.err.IntegrityError(1451, "Cannot delete or update a parent row"), REFERENCE),
        (pymysql.err.IntegrityError(1452, "Cannot add or update a child row"), REFERENCE),
        (sqlite3.IntegrityError("NOT NULL constraint failed: products.name"), None),
        (RuntimeError("boom"), None),
    ],
)
def test_classify_integrity_error(exc, expected):
    assert classify_integrity_error(exc) == expected


def test_create_tables_is_idempotent(db):
    db.create_tables()
    assert db.table_counts() == {"products": 0, "customers": 0, "orders": 0}


def test_transaction_translates_constraint_violations(db):
    insert = (
        "INSERT INTO products (id, name, sku, price, quantity, created_at, updated_at) "
        "VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)"
    )
    db.execute(insert, ("p1", "Widget", "W-1", 1.5, 3))

    with pytest.raises(DuplicateRecordError):
        db.execute(insert, ("p2", "Widget copy", "W-1", 1.5, 3))

    with pytest.raises(ReferencedRecordError):
        db.execute(
            "INSERT INTO product_suppliers (id, product_id, supplier_id, cost_price, created_at) "
            "VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)",
            ("ps1", "p1", "missing-supplier", 1.0),
        )


def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        with db.transaction() as cur:
            cur.execute(
                "INSERT INTO customers (id, name, email, created_at, updated_at) "
                "VALUES (?, ?, ?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)",
                ("c1", "Jane", "jane@example.com"),
            )
            raise RuntimeError("abort")

    assert db.table_counts()["customers"] == 0


def test_in_memory_database_is_shared_between_connections():
    database = Database("sqlite", in_memory=True)
    try:
        database.init()
        database.execute(
            "INSERT INTO customers (id, name, email, created_at, updated_at) "
            "VALUES (?, ?, ?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)",
            ("c1", "Jane", "jane@example.com"),
        )
        assert database.table_counts()["customers"] == 1
        assert database.describe() == "SQLite (in-memory)"
    finally:
        database.close()
