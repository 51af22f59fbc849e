from __future__ import annotations

from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class FieldError(BaseModel):
    field: str = Field(
        ...,
        description="Request field that failed validation.",
        json_schema_extra={"example": "sku"},
    )
    message: str = Field(
        ...,
        description="Human readable reason.",
        json_schema_extra={"example": "SKU must be alphanumeric with hyphens, 3-50 characters"},
    )


class Pagination(BaseModel):
    page: int = Field(..., description="Current page (1-based).", json_schema_extra={"example": 1})
    page_size: int = Field(..., description="Records per page.", json_schema_extra={"example": 10})
    total: int = Field(..., description="Total matching records.", json_schema_extra={"example": 42})
    pages: int = Field(..., description="Total pages; 1 when there are no records.", json_schema_extra={"example": 5})


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every response body."""
    responseCode: str = Field(
        ...,
        description="Two character outcome code (00 success, 01 created, 1x client error, 99 internal).",
        json_schema_extra={"example": "00"},
    )
    responseDesc: str = Field(
        ...,
        description="Short outcome description.",
        json_schema_extra={"example": "Success"},
    )
    responseData: Optional[T] = Field(
        None,
        description="Payload; omitted when there is nothing to return.",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"responseCode": "00", "responseDesc": "Success", "responseData": {}},
                {
                    "responseCode": "14",
                    "responseDesc": "Validation failed",
                    "responseData": [{"field": "email", "message": "Invalid email format"}],
                },
            ]
        }
    }


class ValidationErrorResponse(ApiResponse[List[FieldError]]):
    pass
