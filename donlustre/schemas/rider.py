from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class RiderCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    zone: str | None = None


class RiderRead(BaseModel):
    id: str
    name: str
    phone: str
    zone: str | None = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
