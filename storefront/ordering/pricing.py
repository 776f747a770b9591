# storefront/ordering/pricing.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from .shipping import shipping_fee
from .validation import MinimalOrderInput

BASE_PRICE = 2990
PRODUCT_NAME = "Premium Hoodie"


@dataclass(frozen=True)
class Quote:
    subtotal: int
    shipping: int
    total: int
    items: List[Dict[str, Any]]


def is_number(v: Any) -> bool:
    """Finite int or float; bools, NaN and overflowed literals like 1e400 are not."""
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    try:
        return math.isfinite(v)
    except OverflowError:
        return False


def item_display_name(color: str, size: str) -> str:
    return f"{PRODUCT_NAME} ({color}, {size})"


def line_total(item: Dict[str, Any]) -> float:
    price = item.get("price") or 0
    qty = item.get("qty") or 1
    if not is_number(price):
        price = 0
    if not is_number(qty):
        qty = 1
    return price * qty


def full_order_total(items: List[Dict[str, Any]], supplied_total: Any = None) -> float:
    """Caller total wins when it is a number; otherwise sum price x qty."""
    if is_number(supplied_total):
        total = supplied_total
    else:
        total = sum(line_total(i) for i in items)
    return max(0, total)


def price_minimal_order(data: MinimalOrderInput) -> Quote:
    subtotal = BASE_PRICE * data.qty
    ship = shipping_fee(data.wilaya)
    items = [{"name": item_display_name(data.color, data.size), "qty": data.qty, "price": BASE_PRICE}]
    return Quote(subtotal=subtotal, shipping=ship, total=max(0, subtotal + ship), items=items)
