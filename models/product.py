from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from models.gen_response import Pagination
from utils.validators import MAX_INT, MONEY_DIGITS, Money, SKUType, blank_to_none


class ProductBase(BaseModel):
    name: str = Field(
        ...,
        description="Product name.",
        min_length=2,
        max_length=100,
        json_schema_extra={"example": "Steel Shelving Unit"},
    )
    description: Optional[str] = Field(
        None,
        description="Free-text description.",
        max_length=500,
        json_schema_extra={"example": "Five-tier galvanised shelving, 180 cm"},
    )
    sku: SKUType = Field(
        ...,
        description="Stock Keeping Unit - unique product identifier (alphanumeric with hyphens).",
        json_schema_extra={"example": "SHELF-180"},
    )
    price: Decimal = Field(
        ...,
        description="Unit price.",
        gt=0,
        max_digits=MONEY_DIGITS,
        decimal_places=2,
        json_schema_extra={"example": "149.00"},
    )
    quantity: int = Field(
        ...,
        description="Units in stock.",
        ge=0,
        le=MAX_INT,
        json_schema_extra={"example": 150},
    )
    category: Optional[str] = Field(
        None,
        description="Category used for filtering.",
        max_length=50,
        json_schema_extra={"example": "Warehouse Equipment"},
    )


class ProductCreate(ProductBase):
    """Payload for POST /api/products."""
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Pallet Jack",
                    "description": "Manual pallet jack, 2500 kg capacity",
                    "sku": "PJ-2500",
                    "price": "329.50",
                    "quantity": 40,
                    "category": "Warehouse Equipment",
                }
            ]
        }
    }


class ProductUpdate(BaseModel):
    """Body of PUT /api/products/{id}; omitted or blank fields are left unchanged."""
    name: Optional[str] = Field(
        None,
        min_length=2,
        max_length=100,
        json_schema_extra={"example": "Heavy Duty Shelving Unit"},
    )
    description: Optional[str] = Field(
        None,
        max_length=500,
        json_schema_extra={"example": "Six-tier shelving, 200 cm"},
    )
    sku: Optional[SKUType] = Field(
        None,
        description="Stock Keeping Unit.",
        json_schema_extra={"example": "SHELF-200"},
    )
    price: Optional[Decimal] = Field(
        None,
        gt=0,
        max_digits=MONEY_DIGITS,
        decimal_places=2,
        json_schema_extra={"example": "189.00"},
    )
    quantity: Optional[int] = Field(
        None,
        ge=0,
        le=MAX_INT,
        json_schema_extra={"example": 75},
    )
    category: Optional[str] = Field(
        None,
        max_length=50,
        json_schema_extra={"example": "Storage"},
    )

    @field_validator("*", mode="before")
    @classmethod
    def _skip_blank(cls, value):
        return blank_to_none(value)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"price": "159.00"},
                {"quantity": 0, "category": "Discontinued"},
            ]
        }
    }


class ProductRead(BaseModel):
    """A stored product as returned by the API."""
    id: str = Field(
        ...,
        description="Server-generated Product ID.",
        json_schema_extra={"example": "11111111-1111-4111-8111-111111111111"},
    )
    name: str
    description: Optional[str] = None
    sku: str
    price: Money
    quantity: int
    category: Optional[str] = None
    created_at: Optional[datetime] = Field(
        None,
        description="When the product was created (UTC).",
        json_schema_extra={"example": "2025-09-30T10:20:30"},
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="When the product was last changed (UTC).",
        json_schema_extra={"example": "2025-09-30T12:00:00"},
    )


class ProductPage(BaseModel):
    products: List[ProductRead]
    pagination: Pagination


class ProductUpdateResult(BaseModel):
    product: ProductRead
    updated_fields: List[str] = Field(
        default_factory=list,
        description="Names of the fields that changed.",
        json_schema_extra={"example": ["price", "quantity"]},
    )
