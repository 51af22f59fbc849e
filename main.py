from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from db import Database, get_database
from handlers import ROUTERS
from middleware import register_middleware
from models.gen_response import ApiResponse, ValidationErrorResponse
from models.health import DatabaseStats, Health
from utils.errors import ApiError, internal
from utils.logger import get_logger
from utils.response import CODE_VALIDATION, api_response, code_for_status, success_response
from utils.validators import format_validation_errors

logger = get_logger(__name__)

VERSION = "1.0.0"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


@asynccontextmanager
async def lifespan(app: FastAPI):
    db: Database = app.dependency_overrides.get(get_database, get_database)()
    db.init()
    logger.info(f"ERP API {VERSION} ready ({settings.APP_ENV})")
    yield
    db.close()


app = FastAPI(
    title="ERP Records API",
    description="CRUD API over products, customers, orders, suppliers, warehouses and inventory",
    version=VERSION,
    lifespan=lifespan,
    responses={400: {"model": ValidationErrorResponse}},
)

register_middleware(app)

# ============================================================================
# CORS Middleware Configuration (registered last: outermost)
# ============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
)

# ============================================================================
# Error handlers
# ============================================================================


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return api_response(exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return api_response(CODE_VALIDATION, "Validation failed", format_validation_errors(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return api_response(code_for_status(exc.status_code), str(exc.detail))


for router in ROUTERS:
    app.include_router(router)

# ============================================================================
# Service endpoints
# ============================================================================


@app.get("/", response_model=ApiResponse[dict])
def root():
    """Service banner with a map of the main endpoints."""
    return success_response(
        "ERP API is running",
        {
            "name": app.title,
            "version": VERSION,
            "timestamp": _timestamp(),
            "endpoints": {
                "products": {
                    "create": "POST /api/products",
                    "get_all": "GET /api/products",
                    "get_list": "GET /api/products/list",
                    "get_one": "GET /api/products/:id",
                    "update": "PUT /api/products/:id",
                    "delete": "DELETE /api/products/:id",
                },
                "customers": {
                    "create": "POST /api/customers",
                    "get_all": "GET /api/customers",
                    "get_list": "GET /api/customers/list",
                    "get_one": "GET /api/customers/:id",
                    "update": "PUT /api/customers/:id",
                    "delete": "DELETE /api/customers/:id",
                },
                "orders": {
                    "create": "POST /api/orders",
                    "get_all": "GET /api/orders",
                    "get_one": "GET /api/orders/:id",
                    "get_items": "GET /api/orders/:id/items",
                },
                "suppliers": "/api/suppliers",
                "warehouses": "/api/warehouses",
                "inventory": "/api/inventory/:inventory_id",
                "health": "GET /health",
                "debug_db": "GET /debug/db",
            },
        },
    )


@app.get("/health", response_model=ApiResponse[Health])
def health(db: Database = Depends(get_database)):
    connected = db.ping()
    return success_response(
        "System is healthy" if connected else "System is degraded",
        Health(
            status="OK" if connected else "DEGRADED",
            database="connected" if connected else "disconnected",
            version=VERSION,
            timestamp=_timestamp(),
        ),
    )


@app.get("/debug/db", response_model=ApiResponse[DatabaseStats])
def debug_db(db: Database = Depends(get_database)):
    """Row counts of the main tables."""
    try:
        counts = db.table_counts()
    except Exception as e:
        logger.error(f"Database statistics error: {e}")
        raise internal("Database statistics error", str(e))

    return success_response(
        "Database statistics",
        DatabaseStats(
            products_count=counts["products"],
            customers_count=counts["customers"],
            orders_count=counts["orders"],
            total_records=sum(counts.values()),
            timestamp=_timestamp(),
        ),
    )


if __name__ == "__main__":
    logger.info(f"Starting ERP server on :{settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
