from fastapi import APIRouter, Depends, Request

from db import Database, get_database
from models.gen_response import ApiResponse
from models.order import OrderCreate, OrderDetail, OrderItemRead, OrderRead
from repositories.order_repo import OrderRepository
from services.order_service import OrderError, OrderService
from utils.errors import bad_request, internal_on_failure, not_found
from utils.logger import get_logger
from utils.response import created_response, success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_order_service(db: Database = Depends(get_database)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=ApiResponse[OrderDetail], status_code=201)
def create_order(payload: OrderCreate, request: Request, service: OrderService = Depends(get_order_service)):
    """
    Place an order.

    The customer and every product are validated, stock is checked and the
    order header, its items and the stock decrements are written in a single
    transaction. Any failure leaves the database untouched.
    """
    with internal_on_failure("Failed to create order"):
        try:
            detail = service.place_order(payload)
        except OrderError as e:
            logger.warning(f"Order rejected: {e.message} {e.details}")
            raise bad_request(e.message, e.details)

    response = created_response("Order created successfully", detail)
    response.headers["Location"] = str(request.url_for("get_order", order_id=detail.order.id))
    return response


@router.get("", response_model=ApiResponse[list[OrderRead]])
def list_orders(db: Database = Depends(get_database)):
    """All orders, newest first, with the customer name."""
    with internal_on_failure("Failed to fetch orders"):
        orders = OrderRepository(db).list_all()
    return success_response("Orders retrieved successfully", orders)


@router.get("/{order_id}", response_model=ApiResponse[OrderDetail], name="get_order")
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    with internal_on_failure("Failed to retrieve order"):
        detail = service.get_order(order_id)
    if detail is None:
        raise not_found("Order not found")
    return success_response("Order retrieved successfully", detail)


@router.get("/{order_id}/items", response_model=ApiResponse[list[OrderItemRead]])
def get_order_items(order_id: str, db: Database = Depends(get_database)):
    repo = OrderRepository(db)
    with internal_on_failure("Failed to fetch order items"):
        order = repo.get_by_id(order_id)
        if order is None:
            raise not_found("Order not found")
        items = repo.get_items(order_id)
    return success_response("Order items retrieved successfully", items)
