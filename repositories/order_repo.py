"""
repositories/order_repo.py
--------------------------
Data access layer for orders and their line items.

Inserts take the caller's cursor so that the order header, its items and
the stock decrements commit or roll back together (see services/order_service.py).
"""

from typing import Optional

from models.order import OrderItemRead, OrderRead
from repositories.base import BaseRepository

_ORDER_SELECT = """
    SELECT o.id, o.customer_id, o.total_amount, o.status, o.order_date,
           c.name AS customer_name
    FROM orders o
    LEFT JOIN customers c ON c.id = o.customer_id
"""

_ITEM_SELECT = """
    SELECT oi.id, oi.order_id, oi.product_id, oi.quantity, oi.unit_price, oi.total_price,
           p.name AS product_name
    FROM order_items oi
    LEFT JOIN products p ON p.id = oi.product_id
"""


class OrderRepository(BaseRepository):
    """Repository for the orders and order_items tables."""

    table = "orders"

    # ── CREATE ────────────────────────────────────────────

    def insert_order(self, cur, order: OrderRead) -> None:
        cur.execute(
            "INSERT INTO orders (id, customer_id, total_amount, status, order_date) VALUES (?, ?, ?, ?, ?)",
            (order.id, order.customer_id, order.total_amount, order.status, order.order_date),
        )

    def insert_item(self, cur, item: OrderItemRead) -> None:
        cur.execute(
            "INSERT INTO order_items (id, order_id, product_id, quantity, unit_price, total_price) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (item.id, item.order_id, item.product_id, item.quantity, item.unit_price, item.total_price),
        )

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, order_id: str) -> Optional[OrderRead]:
        row = self.db.fetch_one(f"{_ORDER_SELECT} WHERE o.id = ?", (order_id,))
        return OrderRead.model_validate(row) if row else None

    def list_all(self) -> list[OrderRead]:
        rows = self.db.fetch_all(f"{_ORDER_SELECT} ORDER BY o.order_date DESC")
        return [OrderRead.model_validate(r) for r in rows]

    def get_items(self, order_id: str) -> list[OrderItemRead]:
        rows = self.db.fetch_all(f"{_ITEM_SELECT} WHERE oi.order_id = ? ORDER BY p.name", (order_id,))
        return [OrderItemRead.model_validate(r) for r in rows]
