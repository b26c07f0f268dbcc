"""Receipt PDF generation (xhtml2pdf) and the issue/upload pipeline.

The pipeline always writes the receipt row, even when the upload fails, so a
later retry can fill in the URL.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.config import get_settings
from donlustre.db import crud
from donlustre.models import Order, Receipt
from donlustre.services.branding import BrandingAssets
from donlustre.services.pricing import ReceiptTotals, compute_totals, is_express, resolve_unit_price
from donlustre.services.storage import ObjectStore, StorageError, describe_storage_error, receipt_key

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
)


@dataclass
class RenderedReceipt:
    order: Order
    display_number: int
    totals: ReceiptTotals
    pdf: bytes
    priced: bool = True


@dataclass
class IssuedReceipt:
    receipt: Receipt
    rendered: RenderedReceipt
    upload_error: str | None = None


async def display_order_number(db: AsyncSession, order: Order) -> int:
    """Persisted order number; orders without one are numbered by creation rank."""
    if order.order_number is not None:
        return order.order_number
    return await crud.count_orders_created_through(db, order.created_at)


def _fmt(amount, currency: str) -> str:
    return f"{currency}{amount:,.2f}"


def render_receipt_pdf(context: dict) -> bytes:
    """Render the receipt template to PDF bytes."""
    from xhtml2pdf import pisa

    html = _env.get_template("receipt.html.j2").render(**context)
    pdf_buffer = io.BytesIO()
    pisa_status = pisa.CreatePDF(io.StringIO(html), dest=pdf_buffer)
    if pisa_status.err:
        raise RuntimeError(f"Receipt PDF generation failed with {pisa_status.err} errors")
    return pdf_buffer.getvalue()


async def build_receipt(
    db: AsyncSession, order_id: str, branding: BrandingAssets | None = None,
) -> RenderedReceipt:
    """Load an order and its price, compute totals, and render the PDF."""
    cfg = get_settings().receipts

    order = await crud.get_order(db, order_id)
    if not order:
        raise ValueError("Order not found")

    price_item = await crud.get_price_item(db, order.service_type, order.material)
    priced = price_item is not None
    if not priced:
        logger.warning(
            "No price list entry for %s / %s; receipt for order %s issued without amounts",
            order.service_type, order.material, order.id,
        )
    unit_price = resolve_unit_price(price_item, order.service_type)
    totals = compute_totals(unit_price, order.quantity, cfg.tax_rate)
    number = await display_order_number(db, order)

    branding = branding or BrandingAssets()
    cur = cfg.currency

    def fmt(amount) -> str:
        return _fmt(amount, cur) if priced else "—"

    pdf = render_receipt_pdf({
        "business_name": cfg.business_name,
        "business_tagline": cfg.business_tagline,
        "footer_text": cfg.footer_text,
        "logo_b64": branding.logo_b64,
        "watermark_b64": branding.watermark_b64,
        "order": order,
        "order_number": f"{number:05d}",
        "customer": order.customer,
        "rider": order.rider,
        "is_express": is_express(order.service_type),
        "unit_price": fmt(totals.unit_price),
        "subtotal": fmt(totals.subtotal),
        "tax_percent": f"{totals.tax_rate * 100:.1f}",
        "show_tax": totals.tax_rate > 0,
        "tax": fmt(totals.tax),
        "total": fmt(totals.total),
        "priced": priced,
        "order_date": order.created_at.strftime("%B %d, %Y %H:%M"),
        "issued_at": datetime.now(timezone.utc).strftime("%B %d, %Y"),
    })
    return RenderedReceipt(order=order, display_number=number, totals=totals, pdf=pdf, priced=priced)


async def issue_receipt(
    db: AsyncSession, store: ObjectStore, order_id: str,
    branding: BrandingAssets | None = None,
) -> IssuedReceipt:
    """Render, upload (overwriting any prior file) and upsert the receipt row."""
    rendered = await build_receipt(db, order_id, branding)
    key = receipt_key(order_id)

    url: str | None = None
    upload_error: str | None = None
    try:
        await store.upload(key, rendered.pdf, upsert=True)
        url = store.public_url(key)
    except StorageError as e:
        upload_error = describe_storage_error(e, store.bucket)
        logger.warning("Receipt upload failed for order %s: %s", order_id, e)

    total = float(rendered.totals.total) if rendered.priced else None
    receipt = await crud.upsert_receipt(db, order_id, url, total)
    return IssuedReceipt(receipt=receipt, rendered=rendered, upload_error=upload_error)


async def retry_pending_uploads(
    db: AsyncSession, store: ObjectStore, branding: BrandingAssets | None = None,
) -> list[IssuedReceipt]:
    """Re-issue every receipt whose upload never succeeded."""
    pending = await crud.list_receipts(db, pending_upload_only=True)
    results = []
    for receipt in pending:
        try:
            results.append(await issue_receipt(db, store, receipt.order_id, branding))
        except ValueError:
            logger.warning("Receipt %s points at missing order %s", receipt.id, receipt.order_id)
    return results
