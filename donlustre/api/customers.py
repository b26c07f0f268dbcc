from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.db import crud
from donlustre.db.engine import get_db
from donlustre.dependencies import require_admin
from donlustre.schemas import CustomerCreate, CustomerRead

router = APIRouter(prefix="/api/customers", tags=["customers"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[CustomerRead])
async def list_customers(
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_customers(db, search.strip() or None)


@router.post("", response_model=CustomerRead, status_code=201)
async def create_customer(
    body: CustomerCreate,
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_customer(db, body.name, body.phone, body.whatsapp_id)
