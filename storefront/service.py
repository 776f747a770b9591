# storefront/service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .errors import OrderNotFound, RateLimited
from .models import Order, OrderItem, coerce_status, parse_timestamp, utc_timestamp
from .ordering.ids import generate_order_id
from .ordering.submission import classify_submission, draft_from_submission
from .ratelimit import SlidingWindowRateLimiter
from .repository import LoadResult, OrderDoc, OrderRepository

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def newest_first(orders: List[OrderDoc]) -> List[OrderDoc]:
    return sorted(orders, key=lambda o: parse_timestamp(o.get("createdAt")), reverse=True)


def _find_index(orders: List[OrderDoc], order_id: str) -> int:
    for i, o in enumerate(orders):
        if o.get("id") == order_id:
            return i
    return -1


class OrderService:
    """
    create / list / get / update_status / delete over the order collection.

    Every mutation is one repository transaction: load, change in memory, save.
    A collection that fails to load is treated as empty (logged, not raised).
    """

    def __init__(
        self,
        repository: OrderRepository,
        rate_limiter: SlidingWindowRateLimiter,
        clock: Callable[[], datetime] = _now,
        id_factory: Callable[[], str] = generate_order_id,
    ) -> None:
        self.repository = repository
        self.rate_limiter = rate_limiter
        self._clock = clock
        self._new_id = id_factory

    def _recover(self, loaded: LoadResult) -> List[OrderDoc]:
        if loaded.failed:
            logger.warning("order store unreadable, treating as empty: %s", loaded.error)
            loaded.orders = []
        return loaded.orders

    def _load(self) -> List[OrderDoc]:
        return self._recover(self.repository.load())

    # -------------------
    # Public
    # -------------------
    def create(self, body: Any, client: str = "unknown") -> OrderDoc:
        if not self.rate_limiter.hit(client):
            raise RateLimited()

        submission = classify_submission(body)
        draft = draft_from_submission(submission)

        order = Order(
            id=self._new_id(),
            customer_name=draft.customer_name,
            email=draft.email,
            phone=draft.phone,
            address=draft.address,
            items=[OrderItem(**i) for i in draft.items],
            total=draft.total,
            notes=draft.notes,
            status=coerce_status(draft.status).value,
            created_at=utc_timestamp(self._clock()),
        )
        doc = order.to_document()

        with self.repository.transaction() as uow:
            orders = self._recover(uow.loaded)
            orders.append(doc)
            uow.mark_dirty()

        logger.info(
            "order %s created (%s submission, total=%s%s)",
            doc["id"],
            submission.kind,
            doc["total"],
            f", shipping={draft.extras['shipping']}" if "shipping" in draft.extras else "",
        )
        return doc

    def get(self, order_id: str) -> OrderDoc:
        orders = self._load()
        i = _find_index(orders, order_id)
        if i < 0:
            raise OrderNotFound(order_id)
        return orders[i]

    # -------------------
    # Admin
    # -------------------
    def list_orders(self) -> List[OrderDoc]:
        return newest_first(self._load())

    def update_status(self, order_id: str, status: Optional[Any]) -> OrderDoc:
        with self.repository.transaction() as uow:
            orders = self._recover(uow.loaded)
            i = _find_index(orders, order_id)
            if i < 0:
                raise OrderNotFound(order_id)
            orders[i]["status"] = coerce_status(status).value
            uow.mark_dirty()
            updated = orders[i]

        logger.info("order %s status -> %s", order_id, updated["status"])
        return updated

    def delete(self, order_id: str) -> Dict[str, Any]:
        with self.repository.transaction() as uow:
            orders = self._recover(uow.loaded)
            i = _find_index(orders, order_id)
            if i < 0:
                raise OrderNotFound(order_id)
            removed = orders.pop(i)
            uow.mark_dirty()

        logger.info("order %s deleted", removed.get("id"))
        return {"ok": True, "id": removed.get("id")}
