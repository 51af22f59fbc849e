"""HTTP middleware: per-request logging and recovery from unhandled errors."""

import time
import traceback
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from config import settings
from utils.logger import get_logger
from utils.response import CODE_INTERNAL, envelope, status_for_code

logger = get_logger("app.http")

SKIP_LOG_PATHS = ("/health",)


async def request_logger_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()

    response = await call_next(request)

    response.headers["X-Request-ID"] = req_id
    if request.url.path in SKIP_LOG_PATHS:
        return response

    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    client = request.client.host if request.client else "unknown"
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms}ms "
        f"client={client} request_id={req_id}"
    )

    if response.status_code >= 400:
        # the body iterator can only be consumed once, so rebuild the response
        body = b"".join([chunk async for chunk in response.body_iterator])
        logger.warning(f"Error response body request_id={req_id}: {body.decode('utf-8', errors='replace')}")
        response = Response(
            content=body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
    return response


async def recovery_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        client = request.client.host if request.client else "unknown"
        logger.error(
            f"Unhandled error {request.method} {request.url.path} client={client}: {e}\n"
            f"{traceback.format_exc()}"
        )
        if settings.is_development:
            details = {
                "error": str(e),
                "path": request.url.path,
                "method": request.method,
                "message": "An unexpected error occurred",
            }
        else:
            details = "An unexpected error occurred"
        return JSONResponse(
            status_code=status_for_code(CODE_INTERNAL),
            content=envelope(CODE_INTERNAL, "Internal Server Error", details),
        )


def register_middleware(app: FastAPI) -> None:
    # the last one registered runs first
    app.middleware("http")(recovery_middleware)
    app.middleware("http")(request_logger_middleware)
