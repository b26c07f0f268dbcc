"""Unit-price resolution and receipt totals."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol

_CENTS = Decimal("0.01")


class PricedItem(Protocol):
    base_price: float
    express_price: float | None


@dataclass(frozen=True)
class ReceiptTotals:
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def is_express(service_type: str | None) -> bool:
    return (service_type or "").strip().lower() == "express"


def resolve_unit_price(item: PricedItem | None, service_type: str | None) -> Decimal:
    """Express orders use express_price when it is set, otherwise base_price."""
    if item is None:
        return Decimal("0.00")
    if is_express(service_type) and item.express_price is not None:
        return _money(item.express_price)
    return _money(item.base_price)


def compute_totals(unit_price, quantity: int, tax_rate=Decimal("0")) -> ReceiptTotals:
    unit = _money(unit_price)
    rate = Decimal(str(tax_rate))
    subtotal = _money(unit * quantity)
    tax = _money(subtotal * rate)
    return ReceiptTotals(
        unit_price=unit,
        quantity=quantity,
        subtotal=subtotal,
        tax_rate=rate,
        tax=tax,
        total=subtotal + tax,
    )
