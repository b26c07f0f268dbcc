"""Pydantic request/response schemas."""

from donlustre.schemas.customer import CustomerCreate, CustomerRead
from donlustre.schemas.rider import RiderCreate, RiderRead
from donlustre.schemas.price_list import PriceListUpsert, PriceListRead
from donlustre.schemas.order import OrderCreate, OrderRead, OrderListItem, RiderAssign
from donlustre.schemas.receipt import ReceiptRead, ReceiptListItem, ReceiptIssued
from donlustre.schemas.feed import FeedEvent, RecordShapeError

__all__ = [
    "CustomerCreate", "CustomerRead",
    "RiderCreate", "RiderRead",
    "PriceListUpsert", "PriceListRead",
    "OrderCreate", "OrderRead", "OrderListItem", "RiderAssign",
    "ReceiptRead", "ReceiptListItem", "ReceiptIssued",
    "FeedEvent", "RecordShapeError",
]
