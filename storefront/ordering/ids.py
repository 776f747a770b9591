# storefront/ordering/ids.py
from __future__ import annotations

import secrets
import time
from typing import Callable, Optional

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(n: int) -> str:
    if n < 0:
        return "-" + to_base36(-n)
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_ALPHABET[r])
    return "".join(reversed(out))


def generate_order_id(clock: Optional[Callable[[], float]] = None, suffix_len: int = 4) -> str:
    """
    "<unix seconds in base36>-<random base36>", e.g. "t3m9k0-a7q2".
    Not checked against existing orders; collisions need the same second and suffix.
    """
    seconds = int((clock or time.time)())
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(suffix_len))
    return f"{to_base36(seconds)}-{suffix}"
