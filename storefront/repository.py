# storefront/repository.py
from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Protocol

OrderDoc = Dict[str, Any]


@dataclass
class LoadResult:
    """
    orders is always a list. error is set when the store existed but could not
    be read or was not a JSON array; a missing store is just empty.
    """

    orders: List[OrderDoc] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class UnitOfWork:
    loaded: LoadResult
    dirty: bool = False

    @property
    def orders(self) -> List[OrderDoc]:
        return self.loaded.orders

    def mark_dirty(self) -> None:
        self.dirty = True


class OrderRepository(Protocol):
    def load(self) -> LoadResult: ...

    def save(self, orders: List[OrderDoc]) -> None: ...

    def transaction(self) -> Iterator[UnitOfWork]: ...


def _orders_from_raw(raw: str) -> LoadResult:
    try:
        v = json.loads(raw)
    except json.JSONDecodeError as e:
        return LoadResult(error=f"invalid JSON: {e}")
    if not isinstance(v, list):
        return LoadResult(error=f"expected a JSON array, got {type(v).__name__}")
    return LoadResult(orders=[o for o in v if isinstance(o, dict)])


class _LockedRepository:
    """load / save plus one lock so a load-mutate-save runs alone."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def load(self) -> LoadResult:
        raise NotImplementedError

    def save(self, orders: List[OrderDoc]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    @contextmanager
    def transaction(self) -> Iterator[UnitOfWork]:
        with self._lock:
            uow = UnitOfWork(self.load())
            yield uow
            if uow.dirty:
                self.save(uow.orders)


class JsonOrderRepository(_LockedRepository):
    """All orders in one pretty-printed JSON array at `path`."""

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)

    def load(self) -> LoadResult:
        with self._lock:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return LoadResult()
            except (OSError, UnicodeDecodeError) as e:
                return LoadResult(error=f"unreadable: {e}")
            return _orders_from_raw(raw)

    def save(self, orders: List[OrderDoc]) -> None:
        payload = json.dumps(orders, indent=2, ensure_ascii=False, allow_nan=False)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".orders-", suffix=".tmp", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
