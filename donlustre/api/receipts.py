"""Receipts API: list, issue (render + upload + upsert), local download, retry."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.db import crud
from donlustre.db.engine import get_db
from donlustre.dependencies import get_session_state, get_store, require_admin
from donlustre.schemas import ReceiptIssued, ReceiptListItem, ReceiptRead
from donlustre.services.auth import SessionState
from donlustre.services.receipt_generator import build_receipt, issue_receipt, retry_pending_uploads
from donlustre.services.storage import ObjectStore

router = APIRouter(prefix="/api/receipts", tags=["receipts"], dependencies=[Depends(require_admin)])


def _issued(result) -> ReceiptIssued:
    totals = result.rendered.totals
    priced = result.rendered.priced
    return ReceiptIssued(
        receipt=ReceiptRead.model_validate(result.receipt),
        subtotal=float(totals.subtotal) if priced else None,
        tax=float(totals.tax) if priced else None,
        total=float(totals.total) if priced else None,
        upload_error=result.upload_error,
        download_url=f"/api/receipts/{result.receipt.order_id}/pdf",
    )


@router.get("", response_model=list[ReceiptListItem])
async def list_receipts(db: AsyncSession = Depends(get_db)):
    receipts = await crud.list_receipts(db)
    orders = await crud.get_orders_by_ids(db, [r.order_id for r in receipts])
    items = []
    for r in receipts:
        item = ReceiptListItem.model_validate(r)
        order = orders.get(r.order_id)
        if order:
            item.order_number = order.order_number
            item.customer_name = order.customer.name if order.customer else None
        items.append(item)
    return items


@router.post("/retry", response_model=list[ReceiptIssued])
async def retry_uploads(
    db: AsyncSession = Depends(get_db),
    store: ObjectStore = Depends(get_store),
    state: SessionState = Depends(get_session_state),
):
    results = await retry_pending_uploads(db, store, state.get_branding())
    return [_issued(r) for r in results]


@router.post("/{order_id}", response_model=ReceiptIssued)
async def generate_receipt(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    store: ObjectStore = Depends(get_store),
    state: SessionState = Depends(get_session_state),
):
    """Issue the order's receipt. An upload failure is reported, not raised."""
    try:
        result = await issue_receipt(db, store, order_id, state.get_branding())
    except ValueError:
        raise HTTPException(404, "Order not found")
    return _issued(result)


@router.get("/{order_id}/pdf")
async def download_receipt(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    state: SessionState = Depends(get_session_state),
):
    try:
        rendered = await build_receipt(db, order_id, state.get_branding())
    except ValueError:
        raise HTTPException(404, "Order not found")
    filename = f"receipt_{rendered.display_number:05d}.pdf"
    return Response(
        content=rendered.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
