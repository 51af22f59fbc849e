"""
repositories/customer_repo.py
-----------------------------
Data access layer for customers.
"""

from typing import Optional

from db import new_id, utcnow
from models.customer import CustomerCreate, CustomerRead
from repositories.base import BaseRepository, like_pattern
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, name, email, phone, address, created_at, updated_at"


class CustomerRepository(BaseRepository):
    """Repository for CRUD operations on the customers table."""

    table = "customers"
    updatable = {"name": "name", "email": "email", "phone": "phone", "address": "address"}

    # ── CREATE ────────────────────────────────────────────

    def create(self, data: CustomerCreate) -> CustomerRead:
        now = utcnow()
        customer = CustomerRead(id=new_id(), **data.model_dump(), created_at=now, updated_at=now)
        self.db.execute(
            f"INSERT INTO customers ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                customer.id, customer.name, customer.email, customer.phone,
                customer.address, customer.created_at, customer.updated_at,
            ),
        )
        logger.info(f"Created customer {customer.id}")
        return customer

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, customer_id: str, cur=None) -> Optional[CustomerRead]:
        query = f"SELECT {_COLUMNS} FROM customers WHERE id = ?"
        if cur is not None:
            row = cur.execute(query, (customer_id,)).fetchone()
        else:
            row = self.db.fetch_one(query, (customer_id,))
        return CustomerRead.model_validate(row) if row else None

    def list_all(self) -> list[CustomerRead]:
        rows = self.db.fetch_all(f"SELECT {_COLUMNS} FROM customers ORDER BY created_at DESC")
        return [CustomerRead.model_validate(r) for r in rows]

    def list_page(
        self,
        limit: int,
        offset: int,
        search: Optional[str] = None,
        email: Optional[str] = None,
    ) -> tuple[list[CustomerRead], int]:
        clauses, params = [], []
        if search:
            pattern = like_pattern(search)
            clauses.append("(LOWER(name) LIKE ? OR LOWER(email) LIKE ? OR LOWER(phone) LIKE ?)")
            params.extend([pattern, pattern, pattern])
        if email:
            clauses.append("email = ?")
            params.append(email)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        total = self._count(where, tuple(params))
        rows = self.db.fetch_all(
            f"SELECT {_COLUMNS} FROM customers {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        return [CustomerRead.model_validate(r) for r in rows], total

    # ── UPDATE ────────────────────────────────────────────

    def update(self, customer_id: str, changes: dict) -> bool:
        return self._update(customer_id, changes)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, customer_id: str) -> bool:
        return self._delete(customer_id)
