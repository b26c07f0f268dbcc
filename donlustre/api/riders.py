"""Rider management API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.db import crud
from donlustre.db.engine import get_db
from donlustre.dependencies import require_admin
from donlustre.schemas import RiderCreate, RiderRead

router = APIRouter(prefix="/api/riders", tags=["riders"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[RiderRead])
async def list_riders(
    active_only: bool = False,
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_riders(db, active_only=active_only)


@router.post("", response_model=RiderRead, status_code=201)
async def create_rider(
    body: RiderCreate,
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_rider(db, body.name, body.phone, body.zone)


@router.post("/{rider_id}/toggle", response_model=RiderRead)
async def toggle_rider(
    rider_id: str,
    db: AsyncSession = Depends(get_db),
):
    rider = await crud.get_rider(db, rider_id)
    if not rider:
        raise HTTPException(404, "Rider not found")
    return await crud.toggle_rider_active(db, rider)
