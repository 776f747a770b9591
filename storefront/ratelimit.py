# storefront/ratelimit.py
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 60 * 60
DEFAULT_LIMIT = 100


@dataclass
class RateLimitEntry:
    window_start: float
    count: int


def client_key(forwarded_for: Optional[str], remote_addr: Optional[str]) -> str:
    """First X-Forwarded-For hop if present, else the socket address."""
    first = (forwarded_for or "").split(",")[0].strip()
    return first or (remote_addr or "").strip() or "unknown"


class SlidingWindowRateLimiter:
    """
    Per-client counter: the window opens on the first accepted hit and lasts
    `window` seconds; at most `limit` hits are accepted inside it.

    Clients behind the same forwarded address share one budget.
    """

    def __init__(
        self,
        window: float = DEFAULT_WINDOW_SECONDS,
        limit: int = DEFAULT_LIMIT,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window = window
        self.limit = limit
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: RateLimitEntry, now: float) -> bool:
        return (now - entry.window_start) > self.window

    def hit(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._expired(entry, now):
                self._entries[key] = RateLimitEntry(window_start=now, count=1)
                if len(self._entries) > self.max_entries:
                    self._evict_expired_locked(now)
                return True
            if entry.count >= self.limit:
                logger.warning("rate limit exceeded for %s (%d in window)", key, entry.count)
                return False
            entry.count += 1
            return True

    def get(self, key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            entry = self._entries.get(key)
            return RateLimitEntry(entry.window_start, entry.count) if entry else None

    def _evict_expired_locked(self, now: float) -> int:
        stale = [k for k, e in self._entries.items() if self._expired(e, now)]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def evict_expired(self) -> int:
        with self._lock:
            return self._evict_expired_locked(self._clock())

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
