from __future__ import annotations

from typing import Literal, Optional, List
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field, field_validator

from utils.validators import MAX_INT, MONEY_DIGITS, Money, blank_to_none

SupplierStatus = Literal["active", "inactive"]


class SupplierCreate(BaseModel):
    """Creation payload for a Supplier."""
    name: str = Field(..., min_length=2, max_length=255, json_schema_extra={"example": "Acme Components"})
    code: str = Field(
        ...,
        min_length=2,
        max_length=50,
        description="Unique supplier code.",
        json_schema_extra={"example": "SUP-ACME"},
    )
    contact_person: Optional[str] = Field(None, max_length=255, json_schema_extra={"example": "Wile E. Coyote"})
    email: Optional[EmailStr] = Field(None, json_schema_extra={"example": "orders@acme.example"})
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    tax_id: Optional[str] = Field(None, max_length=100)
    payment_terms: Optional[str] = Field(None, max_length=500, json_schema_extra={"example": "Net 30"})

    @field_validator("email", mode="before")
    @classmethod
    def _skip_blank_email(cls, value):
        return blank_to_none(value)


class SupplierUpdate(BaseModel):
    """Partial update for a Supplier; supply only fields to change."""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    code: Optional[str] = Field(None, min_length=2, max_length=50)
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    tax_id: Optional[str] = Field(None, max_length=100)
    payment_terms: Optional[str] = Field(None, max_length=500)
    status: Optional[SupplierStatus] = None

    @field_validator("*", mode="before")
    @classmethod
    def _skip_blank(cls, value):
        return blank_to_none(value)


class SupplierRead(BaseModel):
    id: str
    name: str
    code: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    payment_terms: Optional[str] = None
    status: str = "active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SupplierUpdateResult(BaseModel):
    supplier: SupplierRead
    updated_fields: List[str] = Field(default_factory=list)


class ProductSupplierCreate(BaseModel):
    """Links a product to the supplier in the path."""
    product_id: str = Field(..., min_length=1)
    supplier_sku: Optional[str] = Field(None, max_length=100, json_schema_extra={"example": "ACME-MOUSE-01"})
    cost_price: Decimal = Field(..., gt=0, max_digits=MONEY_DIGITS, decimal_places=2, json_schema_extra={"example": "12.50"})
    lead_time_days: Optional[int] = Field(None, ge=0, le=MAX_INT, json_schema_extra={"example": 7})
    is_primary: bool = Field(False, description="Preferred supplier for this product.")


class ProductSupplierRead(BaseModel):
    id: str
    product_id: str
    supplier_id: str
    supplier_sku: Optional[str] = None
    cost_price: Optional[Money] = None
    lead_time_days: Optional[int] = None
    is_primary: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product_name: Optional[str] = None
    supplier_name: Optional[str] = None


class SupplierProducts(BaseModel):
    supplier: SupplierRead
    products: List[ProductSupplierRead]
    count: int

