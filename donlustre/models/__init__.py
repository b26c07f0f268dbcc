"""SQLAlchemy ORM models for the admin store."""

from donlustre.models.base import Base
from donlustre.models.customer import Customer
from donlustre.models.rider import Rider
from donlustre.models.order import Order
from donlustre.models.price_list import PriceListItem
from donlustre.models.receipt import Receipt
from donlustre.models.admin import Admin, AdminSession, Sequence

__all__ = [
    "Base", "Customer", "Rider", "Order", "PriceListItem", "Receipt",
    "Admin", "AdminSession", "Sequence",
]
