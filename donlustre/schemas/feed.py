from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, ValidationError

from donlustre.schemas.order import OrderRead


class RecordShapeError(ValueError):
    """A store payload did not match the expected row shape."""

    def __init__(self, table: str, errors: ValidationError):
        self.table = table
        self.errors = errors
        super().__init__(f"Malformed {table} record: {errors.error_count()} validation error(s)")


class FeedEvent(BaseModel):
    table: Literal["orders"] = "orders"
    event: Literal["INSERT", "UPDATE"]
    record: OrderRead

    @classmethod
    def parse(cls, payload: dict) -> "FeedEvent":
        """Validate a raw change-feed payload, raising RecordShapeError on bad shape."""
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise RecordShapeError(payload.get("table", "orders"), e) from e
