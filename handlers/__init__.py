"""
handlers/ - HTTP Layer
======================
One APIRouter per resource. Handlers validate input through the pydantic
models, call repositories or services and answer with the response envelope.
"""

from handlers.customer_handler import router as customer_router
from handlers.order_handler import router as order_router
from handlers.product_handler import router as product_router
from handlers.supplier_handler import router as supplier_router
from handlers.warehouse_handler import inventory_router, router as warehouse_router

ROUTERS = (
    product_router,
    customer_router,
    order_router,
    supplier_router,
    warehouse_router,
    inventory_router,
)
