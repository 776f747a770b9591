# storefront/auth.py
from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Callable, Dict, Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

ADMIN_COOKIE = "admin_token"

pwd = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(p: str) -> str:
    return pwd.hash(p)


def verify_password(p: str, h: str) -> bool:
    if not p or not h:
        return False
    return pwd.verify(p, h)


def token_from_headers(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    """Bearer header first, then the admin_token cookie."""
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        if token:
            return token
    return cookie_token or None


class AdminTokenStore:
    """
    Opaque admin session tokens, in memory only.

    ttl=None keeps a token until revoke() or process restart; a number of
    seconds makes tokens lapse after that long.
    """

    def __init__(self, ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl if ttl and ttl > 0 else None
        self._clock = clock
        self._issued: Dict[str, float] = {}
        self._lock = threading.Lock()

    def issue(self) -> str:
        token = secrets.token_urlsafe(24) + "-adm"
        with self._lock:
            self._issued[token] = self._clock()
        return token

    def _alive(self, issued_at: float, now: float) -> bool:
        return self.ttl is None or (now - issued_at) <= self.ttl

    def is_valid(self, token: Optional[str]) -> bool:
        if not token:
            return False
        now = self._clock()
        with self._lock:
            issued_at = self._issued.get(token)
            if issued_at is None:
                return False
            if not self._alive(issued_at, now):
                del self._issued[token]
                return False
            return True

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._issued.pop(token, None) is not None

    def evict_expired(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [t for t, at in self._issued.items() if not self._alive(at, now)]
            for t in stale:
                del self._issued[t]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._issued.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._issued)
