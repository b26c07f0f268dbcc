"""Customer model — created from the admin form, never edited in-app."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from donlustre.models.base import Base, ULIDMixin


class Customer(Base, ULIDMixin):
    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str] = mapped_column(String(50))
    whatsapp_id: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
