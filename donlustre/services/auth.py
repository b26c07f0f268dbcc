"""Admin login gate: bcrypt credential check, DB-backed sessions, per-session state."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass, field

import bcrypt
from fastapi import Request, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.config import get_settings
from donlustre.models import Admin, AdminSession
from donlustre.services.assignment import RoundRobinAssigner
from donlustre.services.branding import BrandingAssets, load_branding


@dataclass
class AuthContext:
    admin_id: str
    username: str
    session_id: str


@dataclass
class SessionState:
    """State that lives from login to logout."""

    assigner: RoundRobinAssigner = field(default_factory=RoundRobinAssigner)
    branding: BrandingAssets | None = None

    def get_branding(self) -> BrandingAssets:
        if self.branding is None:
            cfg = get_settings().receipts
            self.branding = load_branding(cfg.logo_path, cfg.watermark_opacity)
        return self.branding


class SessionStateRegistry:
    def __init__(self):
        self._states: dict[str, SessionState] = {}

    def start(self, session_id: str) -> SessionState:
        state = SessionState()
        self._states[session_id] = state
        return state

    def get(self, session_id: str) -> SessionState:
        """Return the session's state, recreating it after a process restart."""
        state = self._states.get(session_id)
        if state is None:
            state = self.start(session_id)
        return state

    def end(self, session_id: str) -> None:
        self._states.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._states


session_states = SessionStateRegistry()


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _hash_token(token: str) -> str:
    """SHA-256 hash of a session token for DB storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def check_admin_login(db: AsyncSession, username: str, password: str) -> dict:
    """Credential check procedure. Returns ``{"success": bool}``."""
    result = await db.execute(select(Admin).where(Admin.username == username))
    admin = result.scalars().first()
    ok = bool(admin and admin.is_active and verify_password(password, admin.password_hash))
    return {"success": ok}


async def get_admin_by_username(db: AsyncSession, username: str) -> Admin | None:
    result = await db.execute(select(Admin).where(Admin.username == username))
    return result.scalars().first()


async def create_admin(db: AsyncSession, username: str, password: str) -> Admin:
    admin = Admin(username=username, password_hash=hash_password(password))
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def create_session(admin: Admin, db: AsyncSession) -> tuple[str, AdminSession]:
    """Create a login session. Returns the raw token (not the hash) and the row."""
    token = secrets.token_urlsafe(48)
    session = AdminSession(admin_id=admin.id, token_hash=_hash_token(token))
    db.add(session)
    await db.commit()
    await db.refresh(session)
    session_states.start(session.id)
    return token, session


async def validate_session(token: str, db: AsyncSession) -> tuple[Admin, AdminSession] | None:
    result = await db.execute(
        select(AdminSession).where(AdminSession.token_hash == _hash_token(token))
    )
    session = result.scalars().first()
    if not session:
        return None
    admin = await db.get(Admin, session.admin_id)
    if not admin or not admin.is_active:
        return None
    return admin, session


async def remove_session(token: str, db: AsyncSession) -> None:
    result = await db.execute(
        select(AdminSession).where(AdminSession.token_hash == _hash_token(token))
    )
    session = result.scalars().first()
    if session:
        session_states.end(session.id)
        await db.delete(session)
        await db.commit()


async def get_current_admin(request: Request, db: AsyncSession) -> AuthContext:
    """Read the session cookie, validate, return AuthContext or raise 401."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    found = await validate_session(token, db)
    if not found:
        raise HTTPException(status_code=401, detail="Session not found")

    admin, session = found
    return AuthContext(admin_id=admin.id, username=admin.username, session_id=session.id)
