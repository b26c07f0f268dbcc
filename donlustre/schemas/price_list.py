from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class PriceListUpsert(BaseModel):
    service_type: str = Field(min_length=1)
    material: str = Field(min_length=1)
    base_price: float = Field(ge=0)
    express_price: float | None = Field(default=None, ge=0)


class PriceListRead(BaseModel):
    id: str
    service_type: str
    material: str
    base_price: float
    express_price: float | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
