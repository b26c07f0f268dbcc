"""Auth API: login gate, logout, and the credential-check procedure."""

from __future__ import annotations

import logging

from pydantic import BaseModel
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.config import Settings
from donlustre.db.engine import get_db
from donlustre.dependencies import get_settings_dep, require_admin, require_store_key
from donlustre.services.auth import (
    AuthContext, check_admin_login, create_session, get_admin_by_username, remove_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


@router.post("/api/rpc/check_admin_login", dependencies=[Depends(require_store_key)])
async def rpc_check_admin_login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await check_admin_login(db, body.username, body.password)


@router.post("/api/auth/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    result = await check_admin_login(db, body.username, body.password)
    if not result["success"]:
        logger.info("Rejected admin login for %s", body.username)
        return JSONResponse(status_code=401, content={"success": False, "detail": "Invalid credentials"})

    admin = await get_admin_by_username(db, body.username)
    token, _ = await create_session(admin, db)

    response = JSONResponse(content={"success": True, "username": admin.username})
    response.set_cookie(settings.session_cookie_name, token, httponly=True, samesite="lax")
    return response


@router.post("/api/auth/logout")
async def logout(
    request: Request,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await remove_session(token, db)
    response = JSONResponse(content={"ok": True})
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/api/auth/me")
async def get_me(auth: AuthContext = Depends(require_admin)):
    return {"admin_id": auth.admin_id, "username": auth.username}
