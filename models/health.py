from __future__ import annotations

from pydantic import BaseModel, Field


class Health(BaseModel):
    status: str = Field(..., description="OK when the database answers, DEGRADED otherwise.", json_schema_extra={"example": "OK"})
    database: str = Field(..., json_schema_extra={"example": "connected"})
    version: str = Field(..., json_schema_extra={"example": "1.0.0"})
    timestamp: str = Field(..., description="Server time (UTC, ISO 8601).", json_schema_extra={"example": "2025-09-30T10:20:30Z"})


class DatabaseStats(BaseModel):
    database: str = "connected"
    products_count: int
    customers_count: int
    orders_count: int
    total_records: int
    timestamp: str
