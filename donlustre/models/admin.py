"""Admin accounts, login sessions and named counters."""

from __future__ import annotations

from sqlalchemy import String, Boolean, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from donlustre.models.base import Base, ULIDMixin


class Admin(Base, ULIDMixin):
    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class AdminSession(Base, ULIDMixin):
    __tablename__ = "admin_sessions"

    admin_id: Mapped[str] = mapped_column(String(26), ForeignKey("admins.id"))
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)


class Sequence(Base):
    __tablename__ = "sequences"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, default=0)
