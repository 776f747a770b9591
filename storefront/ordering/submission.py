# storefront/ordering/submission.py
"""
Order submissions come in two shapes:

  - full: a pre-assembled order carrying an ``items`` list (admin tools, imports)
  - minimal: the storefront form (name/phone/wilaya/address/color/size/qty/notes)

The shape is decided once, here, and both are turned into one OrderDraft.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Union

from ..errors import ValidationFailed
from .pricing import full_order_total, is_number, price_minimal_order
from .shipping import city_from_wilaya
from .validation import MAX_NAME, MAX_NOTES, parse_qty, validate_order_payload

PLACEHOLDER_NAME = "—"


@dataclass(frozen=True)
class FullOrderSubmission:
    body: Dict[str, Any]
    kind: Literal["full"] = "full"


@dataclass(frozen=True)
class MinimalSubmission:
    body: Dict[str, Any]
    kind: Literal["minimal"] = "minimal"


Submission = Union[FullOrderSubmission, MinimalSubmission]


@dataclass
class OrderDraft:
    customer_name: str
    email: str
    phone: str
    address: Any
    items: List[Dict[str, Any]]
    total: float
    notes: str = ""
    status: Any = "pending"
    extras: Dict[str, Any] = field(default_factory=dict)


def classify_submission(body: Any) -> Submission:
    body = body if isinstance(body, dict) else {}
    if isinstance(body.get("items"), list):
        return FullOrderSubmission(body)
    return MinimalSubmission(body)


def _text(v: Any) -> str:
    return v if isinstance(v, str) else ""


def _normalize_item(raw: Dict[str, Any]) -> Dict[str, Any]:
    price = raw.get("price")
    if not is_number(price) or price < 0:
        price = 0
    return {
        "name": _text(raw.get("name")) or "Item",
        "qty": max(1, parse_qty(raw.get("qty"))),
        "price": price,
    }


def _draft_from_full(body: Dict[str, Any]) -> OrderDraft:
    errors: List[str] = []
    items: List[Dict[str, Any]] = []
    for i, raw in enumerate(body["items"]):
        if not isinstance(raw, dict):
            errors.append(f"invalid item at position {i}")
            continue
        items.append(_normalize_item(raw))

    name = _text(body.get("customerName")) or _text(body.get("name")) or PLACEHOLDER_NAME
    total = full_order_total(items, body.get("total"))
    notes = _text(body.get("notes"))
    if not is_number(total):
        errors.append("invalid total")
    if len(name) > MAX_NAME:
        errors.append("name too long")
    if len(notes) > MAX_NOTES:
        errors.append("notes too long")
    if errors:
        raise ValidationFailed(errors)

    return OrderDraft(
        customer_name=name,
        email=_text(body.get("email")),
        phone=_text(body.get("phone")),
        address=body.get("address") or {"street": "", "city": ""},
        items=items,
        total=total,
        notes=notes,
        status=body.get("status") or "pending",
    )


def _draft_from_minimal(body: Dict[str, Any]) -> OrderDraft:
    check = validate_order_payload(body)
    if not check.ok:
        raise ValidationFailed(check.errors)

    d = check.data
    quote = price_minimal_order(d)
    return OrderDraft(
        customer_name=d.name or PLACEHOLDER_NAME,
        email=_text(body.get("email")),
        phone=d.phone,
        address={"street": d.address, "city": city_from_wilaya(d.wilaya)},
        items=quote.items,
        total=quote.total,
        notes=d.notes,
        extras={"subtotal": quote.subtotal, "shipping": quote.shipping},
    )


def draft_from_submission(submission: Submission) -> OrderDraft:
    """Raises ValidationFailed; nothing is written in that case."""
    if isinstance(submission, FullOrderSubmission):
        return _draft_from_full(submission.body)
    return _draft_from_minimal(submission.body)
