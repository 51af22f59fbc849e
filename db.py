# db.py
"""Database access shared by every repository.

Supports SQLite (local development and tests), MySQL through pymysql and
PostgreSQL through psycopg2. Repository SQL is written once with `?`
placeholders; `Database.sql` rewrites them for drivers that use the
`%s` paramstyle. Queries must therefore never contain a literal `?` or `%`:
LIKE patterns are always passed as parameters.
"""

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterator, Optional, Sequence
from urllib.parse import unquote, urlsplit

import psycopg2
import psycopg2.extras
import pymysql

from config import SUPPORTED_DRIVERS, settings
from utils.logger import get_logger

logger = get_logger(__name__)

sqlite3.register_adapter(Decimal, float)
sqlite3.register_adapter(datetime, lambda value: value.isoformat(sep=" "))

DUPLICATE = "duplicate"
REFERENCE = "reference"


class DuplicateRecordError(Exception):
    """A unique constraint rejected the write."""


class ReferencedRecordError(Exception):
    """A foreign key constraint rejected the write."""


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every supported column type accepts."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


def classify_integrity_error(exc: Exception) -> Optional[str]:
    """Return DUPLICATE, REFERENCE or None for a driver integrity error."""
    if isinstance(exc, sqlite3.IntegrityError):
        message = str(exc)
        if "UNIQUE constraint failed" in message:
            return DUPLICATE
        if "FOREIGN KEY constraint failed" in message:
            return REFERENCE
    elif isinstance(exc, pymysql.err.IntegrityError):
        errno = exc.args[0] if exc.args else None
        if errno == 1062:
            return DUPLICATE
        if errno in (1451, 1452):
            return REFERENCE
    elif isinstance(exc, psycopg2.IntegrityError):
        if exc.pgcode == "23505":
            return DUPLICATE
        if exc.pgcode == "23503":
            return REFERENCE
    return None


def _dict_factory(cursor, row):
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class Cursor:
    """Wraps a driver cursor and applies the placeholder dialect to every query."""

    def __init__(self, raw, database: "Database"):
        self._raw = raw
        self._database = database

    def execute(self, query: str, params: Sequence[Any] = ()) -> "Cursor":
        sql = self._database.sql(query)
        if params:
            self._raw.execute(sql, tuple(params))
        else:
            self._raw.execute(sql)
        return self

    def fetchone(self) -> Optional[dict]:
        row = self._raw.fetchone()
        return dict(row) if row is not None else None

    def fetchall(self) -> list[dict]:
        return [dict(row) for row in self._raw.fetchall()]

    @property
    def rowcount(self) -> int:
        return self._raw.rowcount

    def close(self) -> None:
        self._raw.close()


_COLUMN_TYPES = {
    "sqlite": {"id": "TEXT", "str": "TEXT", "money": "REAL", "bool": "INTEGER", "ts": "TIMESTAMP", "now": "CURRENT_TIMESTAMP"},
    "mysql": {"id": "VARCHAR(36)", "str": "VARCHAR(255)", "money": "DECIMAL(10,2)", "bool": "BOOLEAN", "ts": "DATETIME(6)", "now": "CURRENT_TIMESTAMP(6)"},
    "postgres": {"id": "VARCHAR(36)", "str": "VARCHAR(255)", "money": "DECIMAL(10,2)", "bool": "BOOLEAN", "ts": "TIMESTAMP", "now": "CURRENT_TIMESTAMP"},
}

SCHEMA_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS products (
        id {id} PRIMARY KEY,
        name {str} NOT NULL,
        description TEXT,
        sku {str} NOT NULL UNIQUE,
        price {money} NOT NULL,
        quantity INTEGER NOT NULL,
        category {str},
        created_at {ts} DEFAULT {now},
        updated_at {ts} DEFAULT {now}
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS customers (
        id {id} PRIMARY KEY,
        name {str} NOT NULL,
        email {str} NOT NULL UNIQUE,
        phone {str},
        address TEXT,
        created_at {ts} DEFAULT {now},
        updated_at {ts} DEFAULT {now}
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        id {id} PRIMARY KEY,
        customer_id {id} NOT NULL,
        total_amount {money} NOT NULL,
        status {str} DEFAULT 'pending',
        order_date {ts} DEFAULT {now},
        FOREIGN KEY (customer_id) REFERENCES customers(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_items (
        id {id} PRIMARY KEY,
        order_id {id} NOT NULL,
        product_id {id} NOT NULL,
        quantity INTEGER NOT NULL,
        unit_price {money} NOT NULL,
        total_price {money} NOT NULL,
        FOREIGN KEY (order_id) REFERENCES orders(id) ON DELETE CASCADE,
        FOREIGN KEY (product_id) REFERENCES products(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS suppliers (
        id {id} PRIMARY KEY,
        name {str} NOT NULL,
        code {str} NOT NULL UNIQUE,
        contact_person {str},
        email {str},
        phone {str},
        address TEXT,
        tax_id {str},
        payment_terms TEXT,
        status {str} DEFAULT 'active',
        created_at {ts} DEFAULT {now},
        updated_at {ts} DEFAULT {now}
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_suppliers (
        id {id} PRIMARY KEY,
        product_id {id} NOT NULL,
        supplier_id {id} NOT NULL,
        supplier_sku {str},
        cost_price {money},
        lead_time_days INTEGER,
        is_primary {bool} DEFAULT FALSE,
        created_at {ts} DEFAULT {now},
        updated_at {ts} DEFAULT {now},
        FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE,
        FOREIGN KEY (supplier_id) REFERENCES suppliers(id) ON DELETE CASCADE,
        UNIQUE (product_id, supplier_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS warehouses (
        id {id} PRIMARY KEY,
        code {str} NOT NULL UNIQUE,
        name {str} NOT NULL,
        location TEXT,
        manager_name {str},
        phone {str},
        email {str},
        capacity INTEGER,
        status {str} DEFAULT 'active',
        created_at {ts} DEFAULT {now},
        updated_at {ts} DEFAULT {now}
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS warehouse_locations (
        id {id} PRIMARY KEY,
        warehouse_id {id} NOT NULL,
        location_code {str} NOT NULL,
        location_name {str},
        zone {str},
        row_no INTEGER,
        shelf_no INTEGER,
        max_capacity INTEGER,
        current_quantity INTEGER DEFAULT 0,
        status {str} DEFAULT 'available',
        created_at {ts} DEFAULT {now},
        FOREIGN KEY (warehouse_id) REFERENCES warehouses(id) ON DELETE CASCADE,
        UNIQUE (warehouse_id, location_code)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS inventory (
        id {id} PRIMARY KEY,
        product_id {id} NOT NULL,
        warehouse_id {id} NOT NULL,
        location_id {id},
        quantity INTEGER NOT NULL DEFAULT 0,
        reserved_quantity INTEGER DEFAULT 0,
        min_quantity INTEGER DEFAULT 0,
        max_quantity INTEGER,
        last_restocked {ts} NULL,
        last_checked {ts} NULL,
        created_at {ts} DEFAULT {now},
        updated_at {ts} DEFAULT {now},
        FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE,
        FOREIGN KEY (warehouse_id) REFERENCES warehouses(id) ON DELETE CASCADE,
        FOREIGN KEY (location_id) REFERENCES warehouse_locations(id) ON DELETE SET NULL,
        UNIQUE (product_id, warehouse_id, location_id)
    )
    """,
)


class Database:
    """Connection factory plus the SQL dialect of the configured driver."""

    def __init__(
        self,
        driver: str = "sqlite",
        *,
        sqlite_path: str = "erp.db",
        in_memory: bool = False,
        url: str = "",
        host: str = "localhost",
        port: Optional[int] = None,
        user: str = "",
        password: str = "",
        name: str = "",
    ):
        if driver not in SUPPORTED_DRIVERS:
            raise ValueError(f"Unsupported database driver: {driver}")
        self.driver = driver
        self.sqlite_path = sqlite_path
        self.url = url
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.name = name
        self._uri = False
        self._keeper = None

        if driver == "sqlite" and in_memory:
            # a shared-cache memory database lives as long as one connection to it is open
            self.sqlite_path = f"file:erp-{uuid.uuid4().hex}?mode=memory&cache=shared"
            self._uri = True
            self._keeper = self.connect()

    @classmethod
    def from_settings(cls, cfg=settings) -> "Database":
        return cls(
            cfg.DATABASE_DRIVER,
            sqlite_path=cfg.SQLITE_PATH,
            in_memory=cfg.IN_MEMORY_DB,
            url=cfg.DATABASE_URL,
            host=cfg.DATABASE_HOST,
            port=cfg.DATABASE_PORT,
            user=cfg.DATABASE_USER,
            password=cfg.DATABASE_PASSWORD,
            name=cfg.DATABASE_NAME,
        )

    @property
    def paramstyle(self) -> str:
        return "qmark" if self.driver == "sqlite" else "format"

    def sql(self, query: str) -> str:
        if self.paramstyle == "qmark":
            return query
        return query.replace("?", "%s")

    def describe(self) -> str:
        if self.driver == "sqlite":
            return "SQLite (in-memory)" if self._uri else f"SQLite file: {self.sqlite_path}"
        return "MySQL" if self.driver == "mysql" else "PostgreSQL"

    def connect(self):
        """Open a new DB-API connection whose cursors return dict rows."""
        if self.driver == "sqlite":
            conn = sqlite3.connect(self.sqlite_path, uri=self._uri, check_same_thread=False)
            conn.row_factory = _dict_factory
            conn.execute("PRAGMA foreign_keys = ON")
            return conn

        if self.driver == "mysql":
            params = {
                "host": self.host,
                "port": self.port or 3306,
                "user": self.user,
                "password": self.password,
                "database": self.name,
            }
            if self.url:
                parts = urlsplit(self.url)
                params.update(
                    host=parts.hostname or self.host,
                    port=parts.port or 3306,
                    user=unquote(parts.username or ""),
                    password=unquote(parts.password or ""),
                    database=parts.path.lstrip("/") or self.name,
                )
            return pymysql.connect(
                **params,
                charset="utf8mb4",
                cursorclass=pymysql.cursors.DictCursor,
            )

        if self.url:
            return psycopg2.connect(self.url, cursor_factory=psycopg2.extras.RealDictCursor)
        return psycopg2.connect(
            host=self.host,
            port=self.port or 5432,
            user=self.user,
            password=self.password,
            dbname=self.name,
            cursor_factory=psycopg2.extras.RealDictCursor,
        )

    @contextmanager
    def connection(self) -> Iterator[Any]:
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[Cursor]:
        """Yield a cursor; commit on success, roll back and re-raise on any error.

        Unique and foreign key violations are re-raised as DuplicateRecordError
        and ReferencedRecordError.
        """
        with self.connection() as conn:
            cur = Cursor(conn.cursor(), self)
            try:
                yield cur
                conn.commit()
            except Exception as exc:
                conn.rollback()
                kind = classify_integrity_error(exc)
                if kind == DUPLICATE:
                    raise DuplicateRecordError(str(exc)) from exc
                if kind == REFERENCE:
                    raise ReferencedRecordError(str(exc)) from exc
                raise
            finally:
                cur.close()

    def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[dict]:
        with self.transaction() as cur:
            return cur.execute(query, params).fetchone()

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> list[dict]:
        with self.transaction() as cur:
            return cur.execute(query, params).fetchall()

    def execute(self, query: str, params: Sequence[Any] = ()) -> int:
        """Run a write statement and return the affected row count."""
        with self.transaction() as cur:
            return cur.execute(query, params).rowcount

    def ping(self) -> bool:
        try:
            self.fetch_one("SELECT 1 AS ok")
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def create_tables(self) -> None:
        """Create every table if it does not exist yet. Safe to call repeatedly."""
        types = _COLUMN_TYPES[self.driver]
        with self.transaction() as cur:
            for ddl in SCHEMA_TABLES:
                cur.execute(ddl.format(**types))
        logger.info("Tables created successfully")

    def table_counts(self) -> dict:
        counts = {}
        for table in ("products", "customers", "orders"):
            row = self.fetch_one(f"SELECT COUNT(*) AS total FROM {table}")
            counts[table] = int(row["total"])
        return counts

    def init(self) -> None:
        """Check connectivity and create the schema; raise if the database is unreachable."""
        logger.info(f"Using {self.describe()}")
        if not self.ping():
            raise RuntimeError("failed to ping database")
        logger.info("Database connected successfully")
        self.create_tables()

    def close(self) -> None:
        if self._keeper is not None:
            self._keeper.close()
            self._keeper = None


database = Database.from_settings(settings)


def get_database() -> Database:
    """FastAPI dependency returning the configured database."""
    return database


if __name__ == "__main__":
    try:
        database.init()
        print("Connection successful!")
        print("Row counts:", database.table_counts())
    except Exception as e:
        print("Connection failed:", e)
    finally:
        database.close()
