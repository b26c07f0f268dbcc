"""FastAPI dependency providers for settings, the admin gate and session state."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.config import Settings, get_settings
from donlustre.db.engine import get_db
from donlustre.services.auth import AuthContext, SessionState, get_current_admin, session_states
from donlustre.services.storage import ObjectStore, get_object_store


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


async def require_admin(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Require a logged-in admin. Returns AuthContext."""
    return await get_current_admin(request, db)


def get_session_state(auth: AuthContext = Depends(require_admin)) -> SessionState:
    return session_states.get(auth.session_id)


def get_store() -> ObjectStore:
    return get_object_store()


def require_store_key(
    apikey: str = Header(default=""),
    settings: Settings = Depends(get_settings_dep),
) -> None:
    """Check the store key on procedure calls when one is configured."""
    if settings.store_key and apikey != settings.store_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
