"""Price list model — one price per (service_type, material) pair."""

from __future__ import annotations

from sqlalchemy import String, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from donlustre.models.base import Base, ULIDMixin


class PriceListItem(Base, ULIDMixin):
    __tablename__ = "price_list"
    __table_args__ = (
        UniqueConstraint("service_type", "material", name="uq_price_list_service_material"),
    )

    service_type: Mapped[str] = mapped_column(String(100))
    material: Mapped[str] = mapped_column(String(100))
    base_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    express_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True, default=None)
