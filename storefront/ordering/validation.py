# storefront/ordering/validation.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

COLORS = frozenset({"Black", "White", "Red", "Blue", "Green"})
SIZES = frozenset({"S", "M", "L", "XL", "XXL"})

MAX_NAME = 120
MAX_ADDRESS = 200
MAX_NOTES = 400
MIN_QTY = 1
MAX_QTY = 20

# Local "05/06/07 + 8 digits" or the +213 international form
_PHONE_RE = re.compile(r"^(0[567]\d{8}|(\+?213)[567]\d{8})$")
_WS_RE = re.compile(r"\s+")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class MinimalOrderInput:
    name: str
    phone: str
    wilaya: str
    address: str
    color: str
    size: str
    qty: int
    notes: str


@dataclass
class ValidationResult:
    ok: bool
    errors: List[str] = field(default_factory=list)
    data: Optional[MinimalOrderInput] = None


def _clean(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def phone_ok(phone: str) -> bool:
    return bool(_PHONE_RE.match(_WS_RE.sub("", phone or "")))


def parse_qty(raw: Any) -> int:
    """
    Leading-integer parse of a form quantity.
    Missing, empty or unparseable input becomes 1; numbers are kept as-is so the
    range check can still reject 0 or 25.
    """
    if isinstance(raw, bool) or raw is None:
        return MIN_QTY
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else MIN_QTY
    if isinstance(raw, str):
        m = _LEADING_INT_RE.match(raw)
        return int(m.group(1)) if m else MIN_QTY
    return MIN_QTY


def validate_order_payload(body: Dict[str, Any]) -> ValidationResult:
    body = body or {}
    errors: List[str] = []

    name = _clean(body.get("name"))
    phone = _clean(body.get("phone"))
    wilaya = _clean(body.get("wilaya"))
    address = _clean(body.get("address"))
    color = _clean(body.get("color"))
    size = _clean(body.get("size"))
    qty = parse_qty(body.get("qty"))
    notes = _clean(body.get("notes"))

    if not name:
        errors.append("name required")
    if not phone or not phone_ok(phone):
        errors.append("invalid phone")
    if not wilaya:
        errors.append("wilaya required")
    if not address:
        errors.append("address required")
    if color not in COLORS:
        errors.append("invalid color")
    if size not in SIZES:
        errors.append("invalid size")
    if not (MIN_QTY <= qty <= MAX_QTY):
        errors.append("invalid qty")
    if len(name) > MAX_NAME:
        errors.append("name too long")
    if len(address) > MAX_ADDRESS:
        errors.append("address too long")
    if len(notes) > MAX_NOTES:
        errors.append("notes too long")

    if errors:
        return ValidationResult(ok=False, errors=errors)

    return ValidationResult(
        ok=True,
        data=MinimalOrderInput(
            name=name,
            phone=phone,
            wilaya=wilaya,
            address=address,
            color=color,
            size=size,
            qty=qty,
            notes=notes,
        ),
    )
