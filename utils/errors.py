"""API error type raised by handlers and rendered by the app's exception handler."""

from contextlib import contextmanager
from typing import Any, Optional

from utils.logger import get_logger
from utils.response import (
    CODE_BAD_REQUEST,
    CODE_DUPLICATE,
    CODE_INTERNAL,
    CODE_NOT_FOUND,
    CODE_VALIDATION,
    status_for_code,
)

logger = get_logger(__name__)


class ApiError(Exception):
    """An error with an envelope code, a short message and optional details."""

    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return status_for_code(self.code)


def bad_request(message: str, details: Any = None) -> ApiError:
    return ApiError(CODE_BAD_REQUEST, message, details)


def validation_error(message: str, details: Any = None) -> ApiError:
    return ApiError(CODE_VALIDATION, message, details)


def not_found(message: str) -> ApiError:
    return ApiError(CODE_NOT_FOUND, message)


def duplicate(message: str, details: Any = None) -> ApiError:
    return ApiError(CODE_DUPLICATE, message, details)


def internal(message: str, details: Any = "Database error") -> ApiError:
    return ApiError(CODE_INTERNAL, message, details)


@contextmanager
def internal_on_failure(message: str):
    """Re-raise anything but an ApiError from the block as a 99 `message` error."""
    try:
        yield
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"{message}: {e}")
        raise internal(message) from e
