"""Response envelope helpers.

Every endpoint answers with `{"responseCode", "responseDesc", "responseData"}`.
Two-character codes describe the outcome; `status_for_code` maps them to the
HTTP status that is actually sent.
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

# success codes
CODE_SUCCESS = "00"
CODE_CREATED = "01"
CODE_NO_CONTENT = "02"
CODE_PARTIAL = "03"

# error codes
CODE_BAD_REQUEST = "10"
CODE_UNAUTHORIZED = "11"
CODE_FORBIDDEN = "12"
CODE_NOT_FOUND = "13"
CODE_VALIDATION = "14"
CODE_DUPLICATE = "15"
CODE_INTERNAL = "99"

_STATUS_BY_CODE = {
    CODE_SUCCESS: status.HTTP_200_OK,
    CODE_CREATED: status.HTTP_201_CREATED,
    CODE_NO_CONTENT: status.HTTP_200_OK,
    CODE_PARTIAL: status.HTTP_200_OK,
    CODE_BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    CODE_VALIDATION: status.HTTP_400_BAD_REQUEST,
    CODE_DUPLICATE: status.HTTP_400_BAD_REQUEST,
    CODE_UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    CODE_FORBIDDEN: status.HTTP_403_FORBIDDEN,
    CODE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

_CODE_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: CODE_BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: CODE_UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: CODE_FORBIDDEN,
    status.HTTP_404_NOT_FOUND: CODE_NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: CODE_BAD_REQUEST,
    422: CODE_VALIDATION,
}


def status_for_code(code: str) -> int:
    return _STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def code_for_status(status_code: int) -> str:
    return _CODE_BY_STATUS.get(status_code, CODE_INTERNAL)


def envelope(code: str, message: str, data: Any = None) -> dict:
    """Build the envelope body; `responseData` is omitted when there is none."""
    body = {"responseCode": code, "responseDesc": message}
    if data is not None:
        body["responseData"] = jsonable_encoder(data)
    return body


def api_response(code: str, message: str, data: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_for_code(code), content=envelope(code, message, data))


def success_response(message: str, data: Any = None) -> JSONResponse:
    return api_response(CODE_SUCCESS, message, data)


def created_response(message: str, data: Any = None) -> JSONResponse:
    return api_response(CODE_CREATED, message, data)
