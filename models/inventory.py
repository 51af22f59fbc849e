from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from models.warehouse import WarehouseRead
from utils.validators import MAX_INT, blank_to_none

DEFAULT_MIN_QUANTITY = 10


class InventoryCreate(BaseModel):
    """Stock of one product in a warehouse, optionally pinned to a location."""
    product_id: str = Field(
        ...,
        min_length=1,
        description="Reference to the Product ID.",
        json_schema_extra={"example": "11111111-1111-4111-8111-111111111111"},
    )
    location_id: Optional[str] = Field(
        None,
        description="Location inside the warehouse; omit for warehouse-level stock.",
        json_schema_extra={"example": "44444444-4444-4444-8444-444444444444"},
    )
    quantity: int = Field(
        ...,
        description="Current stock quantity.",
        ge=0,
        le=MAX_INT,
        json_schema_extra={"example": 150},
    )
    reserved_quantity: int = Field(
        default=0,
        description="Quantity reserved for pending orders (not available for sale).",
        ge=0,
        le=MAX_INT,
        json_schema_extra={"example": 10},
    )
    min_quantity: Optional[int] = Field(
        None,
        description=f"Reorder threshold; defaults to {DEFAULT_MIN_QUANTITY} when omitted.",
        ge=0,
        le=MAX_INT,
        json_schema_extra={"example": 20},
    )
    max_quantity: Optional[int] = Field(
        None,
        ge=0,
        le=MAX_INT,
        json_schema_extra={"example": 500},
    )

    @field_validator("location_id", mode="before")
    @classmethod
    def _skip_blank_location(cls, value):
        return blank_to_none(value)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "22222222-2222-4222-8222-222222222222",
                    "location_id": "44444444-4444-4444-8444-444444444444",
                    "quantity": 200,
                    "min_quantity": 30,
                },
                {
                    "product_id": "33333333-3333-4333-8333-333333333333",
                    "quantity": 5000,
                },
            ]
        }
    }


class InventoryUpdate(BaseModel):
    """Partial update for an Inventory record; supply only fields to change."""
    quantity: Optional[int] = Field(None, ge=0, le=MAX_INT, json_schema_extra={"example": 180})
    reserved_quantity: Optional[int] = Field(None, ge=0, le=MAX_INT, json_schema_extra={"example": 5})
    min_quantity: Optional[int] = Field(None, ge=0, le=MAX_INT)
    max_quantity: Optional[int] = Field(None, ge=0, le=MAX_INT)


class InventoryRead(BaseModel):
    id: str = Field(..., description="Server-generated Inventory record ID.")
    product_id: str
    warehouse_id: str
    location_id: Optional[str] = None
    quantity: int
    reserved_quantity: int = 0
    available_quantity: int = Field(
        ...,
        description="Calculated available quantity (quantity - reserved_quantity).",
    )
    min_quantity: int = 0
    max_quantity: Optional[int] = None
    needs_reorder: bool = Field(
        False,
        description="True if current quantity is at or below min_quantity.",
    )
    last_restocked: Optional[datetime] = Field(None, description="Last time inventory was restocked (UTC).")
    last_checked: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product_name: Optional[str] = None
    sku: Optional[str] = None
    warehouse_name: Optional[str] = None
    location_code: Optional[str] = None


class InventoryUpdateResult(BaseModel):
    inventory: InventoryRead
    updated_fields: List[str] = Field(default_factory=list)


class InventorySummary(BaseModel):
    total_items: int
    total_quantity: int
    total_reserved: int
    total_available: int


class WarehouseInventory(BaseModel):
    warehouse: WarehouseRead
    inventory: List[InventoryRead]
    summary: InventorySummary
