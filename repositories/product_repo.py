"""
repositories/product_repo.py
----------------------------
Data access layer for products.
"""

from typing import Optional

from db import new_id, utcnow
from models.product import ProductCreate, ProductRead
from repositories.base import BaseRepository, like_pattern
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, name, description, sku, price, quantity, category, created_at, updated_at"


class ProductRepository(BaseRepository):
    """Repository for CRUD operations on the products table."""

    table = "products"
    updatable = {
        "name": "name",
        "description": "description",
        "sku": "sku",
        "price": "price",
        "quantity": "quantity",
        "category": "category",
    }

    # ── CREATE ────────────────────────────────────────────

    def create(self, data: ProductCreate) -> ProductRead:
        now = utcnow()
        product = ProductRead(id=new_id(), **data.model_dump(), created_at=now, updated_at=now)
        self.db.execute(
            f"INSERT INTO products ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                product.id, product.name, product.description, product.sku,
                product.price, product.quantity, product.category,
                product.created_at, product.updated_at,
            ),
        )
        logger.info(f"Created product {product.id} ({product.sku})")
        return product

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, product_id: str, cur=None) -> Optional[ProductRead]:
        query = f"SELECT {_COLUMNS} FROM products WHERE id = ?"
        if cur is not None:
            row = cur.execute(query, (product_id,)).fetchone()
        else:
            row = self.db.fetch_one(query, (product_id,))
        return ProductRead.model_validate(row) if row else None

    def list_all(self) -> list[ProductRead]:
        rows = self.db.fetch_all(f"SELECT {_COLUMNS} FROM products ORDER BY created_at DESC")
        return [ProductRead.model_validate(r) for r in rows]

    def list_page(
        self,
        limit: int,
        offset: int,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> tuple[list[ProductRead], int]:
        """One page of products plus the total number of matches."""
        clauses, params = [], []
        if search:
            pattern = like_pattern(search)
            clauses.append("(LOWER(name) LIKE ? OR LOWER(description) LIKE ? OR LOWER(sku) LIKE ?)")
            params.extend([pattern, pattern, pattern])
        if category:
            clauses.append("category = ?")
            params.append(category)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        total = self._count(where, tuple(params))
        rows = self.db.fetch_all(
            f"SELECT {_COLUMNS} FROM products {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        return [ProductRead.model_validate(r) for r in rows], total

    # ── UPDATE ────────────────────────────────────────────

    def update(self, product_id: str, changes: dict) -> bool:
        return self._update(product_id, changes)

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        return self._update(product_id, {"quantity": quantity})

    def decrement_quantity(self, cur, product_id: str, quantity: int) -> bool:
        """Take `quantity` units out of stock inside the caller's transaction.

        The update only matches while enough stock remains, so concurrent
        orders can never drive the quantity below zero. Returns False when
        the guard rejected the decrement.
        """
        cur.execute(
            "UPDATE products SET quantity = quantity - ?, updated_at = ? WHERE id = ? AND quantity >= ?",
            (quantity, utcnow(), product_id, quantity),
        )
        return cur.rowcount > 0

    # ── DELETE ────────────────────────────────────────────

    def delete(self, product_id: str) -> bool:
        deleted = self._delete(product_id)
        if deleted:
            logger.info(f"Deleted product {product_id}")
        return deleted
