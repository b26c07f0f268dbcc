"""Order model — one pickup/cleaning/delivery job for a customer."""

from __future__ import annotations

from sqlalchemy import String, Integer, Float, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from donlustre.models.base import Base, ULIDMixin, TimestampMixin


class Order(Base, ULIDMixin, TimestampMixin):
    __tablename__ = "orders"

    order_number: Mapped[int | None] = mapped_column(Integer, unique=True, nullable=True, default=None)
    customer_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("customers.id"), nullable=True)
    rider_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("riders.id"), nullable=True, default=None)
    service_type: Mapped[str] = mapped_column(String(100))
    material: Mapped[str | None] = mapped_column(String(100), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    pickup_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    pickup_lat: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    pickup_lng: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    status: Mapped[str] = mapped_column(String(20), default="received")  # received | processing | ready | enroute | delivered

    customer = relationship("Customer", lazy="selectin")
    rider = relationship("Rider", lazy="selectin")
