from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from utils.validators import MAX_INT, Money


class OrderItemRequest(BaseModel):
    product_id: str = Field(
        ...,
        min_length=1,
        description="Product being ordered.",
        json_schema_extra={"example": "11111111-1111-4111-8111-111111111111"},
    )
    quantity: int = Field(
        ...,
        gt=0,
        le=MAX_INT,
        description="Units requested.",
        json_schema_extra={"example": 2},
    )


class OrderCreate(BaseModel):
    """Order placement payload; the whole order succeeds or fails together."""
    customer_id: str = Field(
        ...,
        min_length=1,
        description="Customer placing the order.",
        json_schema_extra={"example": "22222222-2222-4222-8222-222222222222"},
    )
    items: List[OrderItemRequest] = Field(
        ...,
        min_length=1,
        description="Order lines; at least one.",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "22222222-2222-4222-8222-222222222222",
                    "items": [
                        {"product_id": "11111111-1111-4111-8111-111111111111", "quantity": 2},
                        {"product_id": "33333333-3333-4333-8333-333333333333", "quantity": 1},
                    ],
                }
            ]
        }
    }


class OrderRead(BaseModel):
    id: str
    customer_id: str
    customer_name: Optional[str] = Field(None, description="Joined from customers.")
    total_amount: Money
    status: str = Field(..., json_schema_extra={"example": "pending"})
    order_date: Optional[datetime] = None


class OrderItemRead(BaseModel):
    id: str
    order_id: str
    product_id: str
    product_name: Optional[str] = Field(None, description="Joined from products.")
    quantity: int
    unit_price: Money
    total_price: Money = Field(..., description="quantity x unit_price")


class OrderSummary(BaseModel):
    total_items: int = Field(..., description="Number of order lines.")
    total_amount: Money


class OrderDetail(BaseModel):
    order: OrderRead
    items: List[OrderItemRead]
    summary: OrderSummary
