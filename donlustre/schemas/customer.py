from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    whatsapp_id: str | None = None


class CustomerRead(BaseModel):
    id: str
    name: str
    phone: str
    whatsapp_id: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
