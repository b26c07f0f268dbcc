from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field

OrderStatusName = Literal["received", "processing", "ready", "enroute", "delivered"]


class OrderCreate(BaseModel):
    customer_id: str = Field(min_length=1)
    service_type: str = Field(min_length=1)
    material: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    pickup_address: str = Field(min_length=1)
    notes: str | None = None
    pickup_lat: float | None = None
    pickup_lng: float | None = None


class RiderAssign(BaseModel):
    rider_id: str = Field(min_length=1)


class OrderRead(BaseModel):
    id: str
    order_number: int | None = None
    customer_id: str | None = None
    rider_id: str | None = None
    service_type: str
    material: str | None = None
    quantity: int
    notes: str | None = None
    pickup_address: str | None = None
    pickup_lat: float | None = None
    pickup_lng: float | None = None
    status: OrderStatusName
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrderListItem(OrderRead):
    customer_name: str | None = None
    customer_phone: str | None = None
    rider_name: str | None = None
