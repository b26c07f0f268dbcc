from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class ReceiptRead(BaseModel):
    id: str
    order_id: str
    receipt_url: str | None = None
    total_amount: float | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReceiptListItem(ReceiptRead):
    order_number: int | None = None
    customer_name: str | None = None


class ReceiptIssued(BaseModel):
    receipt: ReceiptRead
    subtotal: float | None = None
    tax: float | None = None
    total: float | None = None
    upload_error: str | None = None
    download_url: str
