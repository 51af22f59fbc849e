from __future__ import annotations

from typing import Literal, Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from utils.validators import MAX_INT, blank_to_none

WarehouseStatus = Literal["active", "inactive"]
LocationStatus = Literal["available", "occupied", "reserved", "maintenance", "full", "inactive"]


class WarehouseCreate(BaseModel):
    """Creation payload for a Warehouse."""
    code: str = Field(
        ...,
        min_length=2,
        max_length=50,
        description="Unique warehouse code.",
        json_schema_extra={"example": "WH-EAST"},
    )
    name: str = Field(..., min_length=2, max_length=255, json_schema_extra={"example": "East Coast Fulfillment"})
    location: Optional[str] = Field(None, max_length=500, json_schema_extra={"example": "Newark, NJ"})
    manager_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    capacity: Optional[int] = Field(None, ge=0, le=MAX_INT, description="Total storage units.", json_schema_extra={"example": 5000})

    @field_validator("email", mode="before")
    @classmethod
    def _skip_blank_email(cls, value):
        return blank_to_none(value)


class WarehouseUpdate(BaseModel):
    """Partial update for a Warehouse; supply only fields to change."""
    code: Optional[str] = Field(None, min_length=2, max_length=50)
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    location: Optional[str] = Field(None, max_length=500)
    manager_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    capacity: Optional[int] = Field(None, ge=0, le=MAX_INT)
    status: Optional[WarehouseStatus] = None

    @field_validator("*", mode="before")
    @classmethod
    def _skip_blank(cls, value):
        return blank_to_none(value)


class WarehouseRead(BaseModel):
    id: str
    code: str
    name: str
    location: Optional[str] = None
    manager_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    capacity: Optional[int] = None
    status: str = "active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WarehouseUpdateResult(BaseModel):
    warehouse: WarehouseRead
    updated_fields: List[str] = Field(default_factory=list)


class LocationCreate(BaseModel):
    """A storage slot inside a warehouse (zone / row / shelf)."""
    location_code: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "A-01-03"})
    location_name: Optional[str] = Field(None, max_length=255)
    zone: Optional[str] = Field(None, max_length=50, json_schema_extra={"example": "A"})
    row_number: Optional[int] = Field(None, ge=0, le=MAX_INT, json_schema_extra={"example": 1})
    shelf_number: Optional[int] = Field(None, ge=0, le=MAX_INT, json_schema_extra={"example": 3})
    max_capacity: Optional[int] = Field(None, ge=0, le=MAX_INT, json_schema_extra={"example": 200})


class LocationUpdate(BaseModel):
    location_code: Optional[str] = Field(None, min_length=1, max_length=50)
    location_name: Optional[str] = Field(None, max_length=255)
    zone: Optional[str] = Field(None, max_length=50)
    row_number: Optional[int] = Field(None, ge=0, le=MAX_INT)
    shelf_number: Optional[int] = Field(None, ge=0, le=MAX_INT)
    max_capacity: Optional[int] = Field(None, ge=0, le=MAX_INT)
    status: Optional[LocationStatus] = None

    @field_validator("*", mode="before")
    @classmethod
    def _skip_blank(cls, value):
        return blank_to_none(value)


class LocationRead(BaseModel):
    id: str
    warehouse_id: str
    location_code: str
    location_name: Optional[str] = None
    zone: Optional[str] = None
    row_number: Optional[int] = None
    shelf_number: Optional[int] = None
    max_capacity: Optional[int] = None
    current_quantity: int = 0
    status: str = "available"
    created_at: Optional[datetime] = None
    warehouse_name: Optional[str] = None


class LocationUpdateResult(BaseModel):
    location: LocationRead
    updated_fields: List[str] = Field(default_factory=list)


class WarehouseLocations(BaseModel):
    warehouse: WarehouseRead
    locations: List[LocationRead]
    count: int
