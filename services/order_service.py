"""
services/order_service.py
-------------------------
Order placement: validates the customer and every line, prices the order
from current product prices and persists header, items and stock
decrements in one transaction.
"""

from decimal import Decimal
from typing import Optional

from db import Database, new_id, utcnow
from models.order import OrderCreate, OrderDetail, OrderItemRead, OrderRead, OrderSummary
from repositories.customer_repo import CustomerRepository
from repositories.order_repo import OrderRepository
from repositories.product_repo import ProductRepository
from utils.logger import get_logger
from utils.validators import CENTS

logger = get_logger(__name__)


class OrderError(Exception):
    """Base class for order placement failures caused by the request."""

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class CustomerNotFoundError(OrderError):
    def __init__(self, customer_id: str):
        super().__init__("Invalid customer ID", "Customer not found")
        self.customer_id = customer_id


class ProductNotFoundError(OrderError):
    def __init__(self, product_id: str):
        super().__init__("Invalid product ID", {"product_id": product_id, "message": "Product not found"})
        self.product_id = product_id


class InsufficientStockError(OrderError):
    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        super().__init__(
            "Insufficient stock",
            {
                "product_id": product_id,
                "product_name": product_name,
                "available": available,
                "requested": requested,
            },
        )
        self.product_id = product_id


class OrderService:
    """Places orders atomically."""

    def __init__(self, db: Database):
        self.db = db
        self.order_repo = OrderRepository(db)
        self.product_repo = ProductRepository(db)
        self.customer_repo = CustomerRepository(db)

    def place_order(self, request: OrderCreate) -> OrderDetail:
        """
        Create an order with its items and take the ordered units out of stock.

        Lines for the same product are checked against stock by their summed
        quantity. Nothing is written unless every line can be fulfilled.

        Raises:
            CustomerNotFoundError, ProductNotFoundError, InsufficientStockError:
                the request cannot be fulfilled; nothing was written.
            Exception: any database failure; the transaction was rolled back.
        """
        requested: dict[str, int] = {}
        for line in request.items:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        order_id = new_id()
        order_date = utcnow()

        with self.db.transaction() as cur:
            customer = self.customer_repo.get_by_id(request.customer_id, cur=cur)
            if customer is None:
                raise CustomerNotFoundError(request.customer_id)

            products = {}
            for product_id, quantity in requested.items():
                product = self.product_repo.get_by_id(product_id, cur=cur)
                if product is None:
                    raise ProductNotFoundError(product_id)
                if product.quantity < quantity:
                    raise InsufficientStockError(product.id, product.name, product.quantity, quantity)
                products[product_id] = product

            items = []
            for line in request.items:
                product = products[line.product_id]
                unit_price = Decimal(product.price).quantize(CENTS)
                items.append(
                    OrderItemRead(
                        id=new_id(),
                        order_id=order_id,
                        product_id=product.id,
                        product_name=product.name,
                        quantity=line.quantity,
                        unit_price=unit_price,
                        total_price=(unit_price * line.quantity).quantize(CENTS),
                    )
                )
            total_amount = sum((item.total_price for item in items), Decimal("0.00"))

            order = OrderRead(
                id=order_id,
                customer_id=customer.id,
                customer_name=customer.name,
                total_amount=total_amount,
                status="pending",
                order_date=order_date,
            )
            self.order_repo.insert_order(cur, order)
            for item in items:
                self.order_repo.insert_item(cur, item)

            for product_id, quantity in requested.items():
                if not self.product_repo.decrement_quantity(cur, product_id, quantity):
                    # stock moved between the check and the update
                    current = self.product_repo.get_by_id(product_id, cur=cur)
                    available = current.quantity if current else 0
                    raise InsufficientStockError(product_id, products[product_id].name, available, quantity)

        logger.info(f"Created order {order.id} for customer {customer.id}: {len(items)} items, total {total_amount}")
        return OrderDetail(
            order=order,
            items=items,
            summary=OrderSummary(total_items=len(items), total_amount=total_amount),
        )

    def get_order(self, order_id: str) -> Optional[OrderDetail]:
        order = self.order_repo.get_by_id(order_id)
        if order is None:
            return None
        items = self.order_repo.get_items(order_id)
        return OrderDetail(
            order=order,
            items=items,
            summary=OrderSummary(total_items=len(items), total_amount=order.total_amount),
        )
