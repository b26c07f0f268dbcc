"""Rider model — delivery staff assigned to orders."""

from __future__ import annotations

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from donlustre.models.base import Base, ULIDMixin


class Rider(Base, ULIDMixin):
    __tablename__ = "riders"

    name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str] = mapped_column(String(50))
    zone: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
