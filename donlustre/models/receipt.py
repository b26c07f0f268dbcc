"""Receipt model — storage URL and computed total of an order's PDF receipt."""

from __future__ import annotations

from sqlalchemy import String, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from donlustre.models.base import Base, ULIDMixin, TimestampMixin


class Receipt(Base, ULIDMixin, TimestampMixin):
    __tablename__ = "receipts"

    order_id: Mapped[str] = mapped_column(String(26), ForeignKey("orders.id"), unique=True, index=True)
    receipt_url: Mapped[str | None] = mapped_column(String(1000), nullable=True, default=None)
    total_amount: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True, default=None)
