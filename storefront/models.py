# storefront/models.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


def coerce_status(raw: Any) -> OrderStatus:
    """Unknown or missing values silently become pending."""
    try:
        return OrderStatus(raw)
    except ValueError:
        return OrderStatus.PENDING


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 with milliseconds and a Z suffix, e.g. 2026-10-17T12:00:00.000Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> float:
    """Epoch seconds for a stored createdAt; anything unparseable sorts as 0."""
    if not isinstance(raw, str) or not raw:
        return 0.0
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _compact_number(v: float) -> Any:
    return int(v) if float(v).is_integer() else v


class OrderItem(BaseModel):
    name: str
    qty: int = Field(default=1, ge=1)
    price: float = Field(default=0, ge=0)


class Order(BaseModel):
    """Stored and served with the storefront's camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str
    customer_name: str = Field(alias="customerName")
    email: str = ""
    phone: str = ""
    address: Any = Field(default_factory=lambda: {"street": "", "city": ""})
    items: List[OrderItem] = Field(default_factory=list)
    total: float = Field(default=0, ge=0)
    notes: str = ""
    status: OrderStatus = OrderStatus.PENDING
    created_at: str = Field(alias="createdAt")

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True)
        # whole-number amounts stay ints in the JSON document
        doc["total"] = _compact_number(doc["total"])
        for item in doc["items"]:
            item["price"] = _compact_number(item["price"])
        return doc
