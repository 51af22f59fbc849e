from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from models.gen_response import Pagination
from utils.validators import PhoneType, blank_to_none


class CustomerCreate(BaseModel):
    """Creation payload for a Customer."""
    name: str = Field(
        ...,
        description="Customer full name.",
        min_length=2,
        max_length=100,
        json_schema_extra={"example": "Jane Doe"},
    )
    email: EmailStr = Field(
        ...,
        description="Unique contact email.",
        json_schema_extra={"example": "jane.doe@example.com"},
    )
    phone: Optional[PhoneType] = Field(
        None,
        description="Phone number; digits, spaces and + - ( ).",
        json_schema_extra={"example": "+1 (555) 123-4567"},
    )
    address: Optional[str] = Field(
        None,
        max_length=200,
        json_schema_extra={"example": "42 Main Street, Springfield"},
    )

    @field_validator("phone", mode="before")
    @classmethod
    def _skip_blank_phone(cls, value):
        return blank_to_none(value)


class CustomerUpdate(BaseModel):
    """Partial update for a Customer; supply only fields to change."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[PhoneType] = None
    address: Optional[str] = Field(None, max_length=200)

    @field_validator("*", mode="before")
    @classmethod
    def _skip_blank(cls, value):
        return blank_to_none(value)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"phone": "555-987-6543"},
                {"name": "Jane Smith", "email": "jane.smith@example.com"},
            ]
        }
    }


class CustomerRead(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomerPage(BaseModel):
    customers: List[CustomerRead]
    pagination: Pagination


class CustomerUpdateResult(BaseModel):
    customer: CustomerRead
    updated_fields: List[str] = Field(default_factory=list)
