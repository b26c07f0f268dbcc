from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.db import crud
from donlustre.db.engine import get_db
from donlustre.dependencies import require_admin
from donlustre.schemas import PriceListRead, PriceListUpsert

router = APIRouter(prefix="/api/price-list", tags=["price-list"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[PriceListRead])
async def list_price_items(db: AsyncSession = Depends(get_db)):
    return await crud.list_price_items(db)


@router.put("", response_model=PriceListRead)
async def upsert_price_item(
    body: PriceListUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Create or replace the price of a (service_type, material) pair."""
    return await crud.upsert_price_item(
        db, body.service_type.strip(), body.material.strip(),
        body.base_price, body.express_price,
    )
